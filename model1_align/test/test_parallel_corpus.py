#!/usr/bin/env python3

import unittest

from model1_align.parallel_corpus import ParallelCorpus, Vocabulary
from model1_align.test import alignment_test_utils as align_utils


class TestVocabulary(unittest.TestCase):
    def test_str2int(self):
        vocab = Vocabulary()
        # Calling multiple times to make sure we get the same value.
        assert vocab.str2int("hello") == 1
        assert vocab.str2int("bye") == 2
        assert vocab.str2int("hello") == 1
        assert vocab.str2int("bye") == 2
        assert len(vocab) == 3
        assert vocab._int2str == [vocab.null_str, "hello", "bye"]
        assert vocab.int2str(2) == "bye"
        assert vocab.int2str(0) == "<null>"
        assert "hello" in vocab
        assert "world" not in vocab

    def test_encode(self):
        vocab = Vocabulary()
        assert vocab.encode(["a", "b", "a", "c"]) == [1, 2, 1, 3]
        assert vocab.encode([]) == []


class TestParallelCorpus(unittest.TestCase):
    def test_from_tokens(self):
        corpus, src_vocab, dst_vocab = align_utils.get_toy_corpus()
        assert corpus.size() == 3
        assert len(corpus) == 3
        assert corpus.source_vocab_size() == 5
        assert corpus.target_vocab_size() == 5
        source_sentences, target_sentences = corpus.get_doc_pair(1)
        assert source_sentences == [[src_vocab.str2int("das"), src_vocab.str2int("buch")]]
        assert target_sentences == [[dst_vocab.str2int("the"), dst_vocab.str2int("book")]]
        assert corpus.weight_at(2) == 1.0

    def test_vocab_size_from_ids(self):
        corpus = ParallelCorpus()
        assert corpus.source_vocab_size() == 1
        corpus.add_doc_pair([[1, 4], [2]], [[3], [1]])
        assert corpus.source_vocab_size() == 5
        assert corpus.target_vocab_size() == 4

        corpus = ParallelCorpus(source_vocab_size=10, target_vocab_size=7)
        corpus.add_doc_pair([[1]], [[1]])
        assert corpus.source_vocab_size() == 10
        assert corpus.target_vocab_size() == 7

    def test_sentence_pairs(self):
        corpus, _, _ = align_utils.get_multi_sentence_corpus()
        pairs = list(corpus.sentence_pairs())
        assert len(pairs) == 6
        for source, target, weight in pairs:
            assert len(source) == len(target)
            assert weight == 1.0

    def test_sentence_count_mismatch(self):
        corpus = ParallelCorpus()
        with self.assertRaises(ValueError):
            corpus.add_doc_pair([[1], [2]], [[1]])
        assert corpus.size() == 0
        with self.assertRaises(ValueError):
            ParallelCorpus.from_tokens([([["a"]], [["b"], ["c"]])])

    def test_weights(self):
        corpus = ParallelCorpus()
        corpus.add_doc_pair([[1]], [[1]], weight=0.25)
        assert list(corpus.sentence_pairs()) == [([1], [1], 0.25)]
        with self.assertRaises(ValueError):
            corpus.add_doc_pair([[1]], [[1]], weight=1.5)
        with self.assertRaises(ValueError):
            corpus.add_doc_pair([[1]], [[1]], weight=-0.5)
        assert corpus.size() == 1

    def test_from_tokens_weights(self):
        corpus, _, _ = align_utils.get_multi_sentence_corpus(
            weights=[0.5, 0.05, 1.0, 0.3]
        )
        assert corpus.weight_at(1) == 0.05
        assert [w for _, _, w in corpus.sentence_pairs()] == [
            0.5,
            0.5,
            0.05,
            0.05,
            1.0,
            0.3,
        ]
        with self.assertRaises(ValueError):
            align_utils.get_multi_sentence_corpus(weights=[0.5])
