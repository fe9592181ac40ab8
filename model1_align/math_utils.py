#!/usr/bin/env python3

import math
from typing import Dict

import numpy as np


# Log of probability zero; the identity element of log_add.
NEG_INF = float("-inf")


def log_add(a: float, b: float) -> float:
    """
    Computes log(exp(a) + exp(b)) without leaving the log domain. If either
    operand is NEG_INF the other one is returned unchanged.
    """
    if a == NEG_INF:
        return b
    if b == NEG_INF:
        return a
    return float(np.logaddexp(a, b))


def safe_log(prob: float) -> float:
    if prob < 0:
        raise ValueError(f"Cannot take the log of a negative probability: {prob}")
    if prob == 0:
        return NEG_INF
    return math.log(prob)


def lookup(
    table: Dict[int, Dict[int, float]], s: int, t: int, default: float = NEG_INF
) -> float:
    """
    Reads table[s][t] from a nested sparse table. Missing entries are not
    materialized.
    """
    row = table.get(s)
    if row is None:
        return default
    return row.get(t, default)
