#!/usr/bin/env python3

from model1_align.parallel_corpus import ParallelCorpus


def get_toy_corpus():
    documents = [
        ([["das", "haus"]], [["the", "house"]]),
        ([["das", "buch"]], [["the", "book"]]),
        ([["ein", "buch"]], [["a", "book"]]),
    ]
    return ParallelCorpus.from_tokens(documents)


def get_multi_sentence_corpus(weights=None):
    documents = [
        (
            [["das", "haus", "ist", "klein"], ["das", "buch"]],
            [["the", "house", "is", "small"], ["the", "book"]],
        ),
        ([["ein", "buch"], ["ein", "haus"]], [["a", "book"], ["a", "house"]]),
        ([["das", "haus", "ist", "gross"]], [["the", "house", "is", "big"]]),
        ([["klein", "ist", "das", "buch"]], [["the", "book", "is", "small"]]),
    ]
    return ParallelCorpus.from_tokens(documents, weights=weights)
