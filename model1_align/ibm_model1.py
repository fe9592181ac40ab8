#!/usr/bin/env python3

import logging
import math
import pickle
from collections import defaultdict
from itertools import chain
from typing import Dict, List, Sequence, Set

from model1_align.math_utils import NEG_INF, log_add, lookup, safe_log
from model1_align.parallel_corpus import ParallelCorpus


logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
logger = logging.getLogger(__name__)

# Id of the null source word. As a target id it is the denominator slot of the
# expected count table.
NULL = 0


class IBMModel1(object):
    DENOMINATOR_MODES = ("expected", "occurrence")

    def __init__(self, denominator: str = "expected", log_interval: int = 1000):
        """
        translation_prob holds log t(dst|src) for every (src, dst) pair that
        co-occurred in a training document pair, plus (null, dst) for every real
        target word. expected_counts holds the log-domain expected counts of the
        current E step; expected_counts[src][0] is the normalizer of src.
        Args:
            denominator: "expected" fills expected_counts[src][0] with the total
                expected count of src over all target words, which is the
                maximum likelihood update. "occurrence" adds the sentence weight
                once per occurrence of src instead.
            log_interval: number of sentence pairs between progress messages.
        """
        if denominator not in self.DENOMINATOR_MODES:
            raise ValueError(
                f"Unknown denominator mode {denominator!r}, "
                f"expected one of {self.DENOMINATOR_MODES}"
            )
        if log_interval < 1:
            raise ValueError(f"log_interval must be at least 1, got {log_interval}")
        self.denominator = denominator
        self.log_interval = log_interval
        self.source_vocab_size = 0
        self.target_vocab_size = 0
        self.translation_prob: Dict[int, Dict[int, float]] = {}
        self.expected_counts: Dict[int, Dict[int, float]] = {}

    def initialize(self, corpus: ParallelCorpus) -> None:
        """
        Sets a uniform distribution over the target words that each source word
        co-occurs with in some document pair. The null word can generate every
        target word.
        """
        self.source_vocab_size = corpus.source_vocab_size()
        self.target_vocab_size = corpus.target_vocab_size()

        targets_per_source: Dict[int, Set[int]] = defaultdict(set)
        for i in range(corpus.size()):
            source_sentences, target_sentences = corpus.get_doc_pair(i)
            src_words = set(chain(*source_sentences))
            dst_words = set(chain(*target_sentences))
            dst_words.discard(NULL)
            for src_word in src_words:
                targets_per_source[src_word].update(dst_words)
            if (i + 1) % 100000 == 0:
                logger.info(f"Read document pair {str(i + 1)}")

        self.translation_prob = {}
        self.expected_counts = {}
        if self.target_vocab_size > 1:
            null_prob = math.log(1.0 / (self.target_vocab_size - 1))
            self.translation_prob[NULL] = {
                dst_word: null_prob for dst_word in range(1, self.target_vocab_size)
            }
        for src_word, dst_words in targets_per_source.items():
            # Source words without any co-occurring target get no parameters.
            if src_word == NULL or len(dst_words) == 0:
                continue
            uniform_prob = math.log(1.0 / len(dst_words))
            self.translation_prob[src_word] = {
                dst_word: uniform_prob for dst_word in dst_words
            }

    def translation_log_prob(self, src_word: int, dst_word: int) -> float:
        return lookup(self.translation_prob, src_word, dst_word)

    def translation_prob_of(self, src_word: int, dst_word: int) -> float:
        return math.exp(self.translation_log_prob(src_word, dst_word))

    def num_params(self) -> int:
        return sum(len(row) for row in self.translation_prob.values())

    @staticmethod
    def _alignment_log_prob(target: Sequence[int]) -> float:
        # Uniform alignment probability, normalized by the target length.
        if len(target) == 0:
            raise ValueError("Cannot score a sentence pair with an empty target")
        return math.log(1.0 / len(target))

    def _word_log_prob(self, source: Sequence[int], dst_word: int) -> float:
        """
        Log probability of generating dst_word from the null word or any of the
        source words.
        """
        t_prob = lookup(self.translation_prob, NULL, dst_word)
        for src_word in source:
            t_prob = log_add(t_prob, lookup(self.translation_prob, src_word, dst_word))
        return t_prob

    def score_pair(self, source: Sequence[int], target: Sequence[int]) -> float:
        """
        Log likelihood of target given source under the current parameters.
        """
        alignment_prob = self._alignment_log_prob(target)
        result = 0.0
        for dst_word in target:
            result += self._word_log_prob(source, dst_word) + alignment_prob
        return result

    def clear_expected_counts(self) -> None:
        """
        Resets the expected counts of every parameter and every normalizer to
        log(0). Has to be called before each E step.
        """
        self.expected_counts = {}
        for src_word, row in self.translation_prob.items():
            counts = {dst_word: NEG_INF for dst_word in row}
            counts[NULL] = NEG_INF
            self.expected_counts[src_word] = counts
        self.expected_counts.setdefault(NULL, {})[NULL] = NEG_INF

    def _add_count(self, src_word: int, dst_word: int, value: float) -> None:
        counts = self.expected_counts.setdefault(src_word, {})
        counts[dst_word] = log_add(counts.get(dst_word, NEG_INF), value)

    def accumulate(
        self, source: Sequence[int], target: Sequence[int], weight: float = 0.0
    ) -> float:
        """
        E step for one sentence pair. Every target word distributes one unit of
        expected count over the null word and the source words, proportionally to
        their translation probabilities.
        Args:
            weight: log-domain weight of the sentence pair.
        Returns:
            The same log likelihood as score_pair.
        """
        alignment_prob = self._alignment_log_prob(target)
        if self.denominator == "occurrence":
            self._add_count(NULL, NULL, weight)
            for src_word in source:
                self._add_count(src_word, NULL, weight)

        result = 0.0
        for dst_word in target:
            t_prob = self._word_log_prob(source, dst_word)
            result += t_prob + alignment_prob
            for src_word in chain([NULL], source):
                prob = lookup(self.translation_prob, src_word, dst_word)
                if prob == NEG_INF:
                    continue
                delta = prob - t_prob + weight
                self._add_count(src_word, dst_word, delta)
                if self.denominator == "expected":
                    self._add_count(src_word, NULL, delta)
        return result

    def reestimate(self) -> None:
        """
        M step: t(dst|src) = c(src, dst) / c(src) in the log domain. Only valid
        after a full E step; rows of source words that received no expected
        count since clear_expected_counts become NaN.
        """
        for src_word, row in self.translation_prob.items():
            counts = self.expected_counts.get(src_word, {})
            denom = counts.get(NULL, NEG_INF)
            for dst_word in row.keys():
                row[dst_word] = counts.get(dst_word, NEG_INF) - denom

    @staticmethod
    def _is_trainable(target: Sequence[int], weight: float) -> bool:
        return len(target) > 0 and weight > 0

    def corpus_log_likelihood(self, corpus: ParallelCorpus) -> float:
        """
        Weighted log likelihood of the corpus, the objective that em_step
        increases. Pairs with an empty target or zero weight are left out.
        """
        return sum(
            weight * self.score_pair(source, target)
            for source, target, weight in corpus.sentence_pairs()
            if self._is_trainable(target, weight)
        )

    def em_step(self, corpus: ParallelCorpus) -> float:
        """
        One EM iteration over the sentence pairs of the corpus. Source words
        that receive no expected count in this pass, e.g. because they only
        occur in zero weight documents or next to empty targets, keep their
        previous translation probabilities.
        Returns:
            The weighted corpus log likelihood under the parameters before the
            M step.
        """
        logger.info("E step")
        self.clear_expected_counts()
        log_likelihood = 0.0
        num_skipped = 0
        for i, (source, target, weight) in enumerate(corpus.sentence_pairs()):
            if not self._is_trainable(target, weight):
                num_skipped += 1
                continue
            log_likelihood += weight * self.accumulate(
                source, target, safe_log(weight)
            )
            if (i + 1) % self.log_interval == 0:
                logger.info(f"E step on sentence {str(i + 1)}")
        if num_skipped > 0:
            logger.debug(
                f"Skipped {num_skipped} sentence pairs with empty target or zero weight"
            )

        unobserved_rows = {
            src_word: dict(row)
            for src_word, row in self.translation_prob.items()
            if lookup(self.expected_counts, src_word, NULL) == NEG_INF
        }
        logger.info("M step")
        self.reestimate()
        self.translation_prob.update(unobserved_rows)
        return log_likelihood

    def learn_ibm_parameters(
        self, corpus: ParallelCorpus, num_iters: int
    ) -> List[float]:
        """
        Runs the EM algorithm for IBM model 1.
        Args:
            num_iters: Number of EM iterations.
        Returns:
            The log likelihood computed in each E step.
        """
        if num_iters < 0:
            raise ValueError(f"Number of iterations must be non-negative: {num_iters}")
        logger.info("Initializing model parameters")
        self.initialize(corpus)
        logger.info(f"Number of parameters: {self.num_params()}")
        log_likelihoods = []
        for iter in range(num_iters):
            logger.info(f"Iteration of IBM model: {str(iter + 1)}")
            log_likelihoods.append(self.em_step(corpus))
            logger.info(f"Log likelihood: {log_likelihoods[-1]:.4f}")
        return log_likelihoods

    def save(self, file_path: str) -> None:
        with open(file_path, "wb") as f:
            pickle.dump(
                (
                    self.translation_prob,
                    self.source_vocab_size,
                    self.target_vocab_size,
                    self.denominator,
                ),
                f,
            )

    def load(self, file_path: str) -> None:
        with open(file_path, "rb") as f:
            translation_prob, source_vocab_size, target_vocab_size, denominator = (
                pickle.load(f)
            )
        self.translation_prob = translation_prob
        self.source_vocab_size = source_vocab_size
        self.target_vocab_size = target_vocab_size
        self.denominator = denominator
        self.expected_counts = {}
