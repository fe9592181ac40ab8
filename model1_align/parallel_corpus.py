#!/usr/bin/env python3

from typing import Dict, Iterator, List, Optional, Sequence, Tuple


Sentence = List[int]
DocumentPair = Tuple[List[Sentence], List[Sentence]]


class Vocabulary(object):
    """A mapping from word strings to consecutive integers. Id 0 is the null word."""

    def __init__(self, null_str: str = "<null>"):
        self.null_str = null_str
        self._str2int: Dict[str, int] = {self.null_str: 0}
        self._int2str: List[str] = [self.null_str]  # Reverse of str2int

    def str2int(self, word: str) -> int:
        if word in self._str2int:
            return self._str2int[word]
        else:
            self._str2int[word] = len(self._str2int)
            self._int2str.append(word)
            return self._str2int[word]

    def int2str(self, idx: int) -> str:
        assert idx < len(self._int2str)
        return self._int2str[idx]

    def encode(self, words: Sequence[str]) -> Sentence:
        return [self.str2int(w) for w in words]

    def __contains__(self, word: str) -> bool:
        return word in self._str2int

    def __len__(self) -> int:
        return len(self._int2str)


class ParallelCorpus(object):
    def __init__(
        self,
        source_vocab_size: Optional[int] = None,
        target_vocab_size: Optional[int] = None,
    ):
        """
        An in-memory collection of document pairs. Each document pair is a list
        of source sentences and a list of target sentences, where a sentence is a
        list of word ids. Both lists must have the same length: the i-th source
        sentence is a translation of the i-th target sentence.
        Args:
            source_vocab_size, target_vocab_size: vocabulary sizes including the
                null placeholder at id 0. If not given, they are derived from the
                largest id seen in the added documents.
        """
        self.doc_pairs: List[DocumentPair] = []
        self.weights: List[float] = []
        self._source_vocab_size = source_vocab_size
        self._target_vocab_size = target_vocab_size
        self._max_source_id = 0
        self._max_target_id = 0

    @classmethod
    def from_tokens(
        cls,
        documents: Sequence[Tuple[Sequence[Sequence[str]], Sequence[Sequence[str]]]],
        source_vocab: Optional[Vocabulary] = None,
        target_vocab: Optional[Vocabulary] = None,
        weights: Optional[Sequence[float]] = None,
    ) -> Tuple["ParallelCorpus", Vocabulary, Vocabulary]:
        """
        Builds a corpus from already tokenized documents, e.g.
        [([["das", "haus"]], [["the", "house"]])].
        Args:
            weights: optional document weights in [0, 1], one per document.
        """
        if weights is not None and len(weights) != len(documents):
            raise ValueError(
                f"Got {len(weights)} weights for {len(documents)} documents"
            )
        source_vocab = source_vocab if source_vocab is not None else Vocabulary()
        target_vocab = target_vocab if target_vocab is not None else Vocabulary()
        corpus = cls()
        for i, (source_sentences, target_sentences) in enumerate(documents):
            corpus.add_doc_pair(
                [source_vocab.encode(sentence) for sentence in source_sentences],
                [target_vocab.encode(sentence) for sentence in target_sentences],
                weight=weights[i] if weights is not None else 1.0,
            )
        corpus._source_vocab_size = len(source_vocab)
        corpus._target_vocab_size = len(target_vocab)
        return corpus, source_vocab, target_vocab

    def add_doc_pair(
        self,
        source_sentences: Sequence[Sentence],
        target_sentences: Sequence[Sentence],
        weight: float = 1.0,
    ) -> None:
        if not 0.0 <= weight <= 1.0:
            raise ValueError(f"Document weight must be in [0, 1], got {weight}")
        if len(source_sentences) != len(target_sentences):
            raise ValueError(
                f"Document pair has {len(source_sentences)} source "
                f"and {len(target_sentences)} target sentences"
            )
        doc_pair = (
            [list(sentence) for sentence in source_sentences],
            [list(sentence) for sentence in target_sentences],
        )
        for sentence in doc_pair[0]:
            self._max_source_id = max([self._max_source_id] + sentence)
        for sentence in doc_pair[1]:
            self._max_target_id = max([self._max_target_id] + sentence)
        self.doc_pairs.append(doc_pair)
        self.weights.append(weight)

    def size(self) -> int:
        return len(self.doc_pairs)

    def __len__(self) -> int:
        return self.size()

    def source_vocab_size(self) -> int:
        if self._source_vocab_size is not None:
            return self._source_vocab_size
        return self._max_source_id + 1

    def target_vocab_size(self) -> int:
        if self._target_vocab_size is not None:
            return self._target_vocab_size
        return self._max_target_id + 1

    def get_doc_pair(self, i: int) -> DocumentPair:
        return self.doc_pairs[i]

    def weight_at(self, i: int) -> float:
        return self.weights[i]

    def sentence_pairs(self) -> Iterator[Tuple[Sentence, Sentence, float]]:
        """
        Yields (source, target, weight) for the aligned sentences of every
        document pair. The weight is the probability-domain document weight.
        """
        for i, (source_sentences, target_sentences) in enumerate(self.doc_pairs):
            for source, target in zip(source_sentences, target_sentences):
                yield source, target, self.weights[i]
