#!/usr/bin/env python3

from setuptools import setup, find_packages


def readme():
    with open("README.md") as f:
        return f.read()


setup(
    name="model1-align",
    version="0.1",
    description=("IBM Model 1 word alignment trained with EM"),
    long_description=readme(),
    long_description_content_type="text/markdown",
    license="BSD",
    packages=find_packages(include=["model1_align", "model1_align.*"]),
    python_requires=">=3.6",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    test_suite="model1_align",
)
