"""Tests for the corpus merger and corpus construction."""

import numpy as np
import pytest

from bigvector.config import VectorConfig
from bigvector.engine.corpus import (
    CorpusModel,
    build_corpus,
    collect_results,
    merge_results,
)
from bigvector.engine.parallel import TaskResult
from bigvector.engine.processor import process_source
from bigvector.errors import CorpusBuildError, DocumentReadError
from bigvector.sources import DocumentSource

DIM = 64
TEXTS = {
    "A": "the sun rises the sun sets\n",
    "B": "the moon rises over the sea\n",
    "C": "a dog runs in the park\n",
}


def process(identifier, window_size=3):
    return process_source(DocumentSource.from_text(identifier, TEXTS[identifier]), DIM, window_size)


def config(**kwargs):
    kwargs.setdefault("dimension", DIM)
    kwargs.setdefault("window_size", 3)
    kwargs.setdefault("use_processes", False)
    return VectorConfig(**kwargs)


class TestCorpusModel:

    def test_merge_sums_word_vectors(self):
        a, b = process("A"), process("B")
        corpus = merge_results([a, b], DIM)

        expected = a.words["the"].astype(np.int64) + b.words["the"]
        np.testing.assert_array_equal(corpus.words["the"], expected)
        # words seen only in one document keep that document's vector
        np.testing.assert_array_equal(corpus.words["sun"], a.words["sun"])
        assert set(corpus.documents) == {"A", "B"}

    def test_merge_order_does_not_matter(self):
        results = [process(k) for k in TEXTS]
        forward = merge_results(results, DIM)
        backward = merge_results(list(reversed(results)), DIM)
        assert forward.words.keys() == backward.words.keys()
        for word in forward.words:
            np.testing.assert_array_equal(forward.words[word], backward.words[word])

    def test_disjoint_sets_add_up(self):
        """Merging two separately built corpora equals building the union."""
        left = merge_results([process("A")], DIM)
        right = merge_results([process("C")], DIM)
        union = merge_results([process("A"), process("C")], DIM)

        for word, vector in union.words.items():
            expected = np.zeros(DIM, dtype=np.int64)
            for part in (left, right):
                if word in part.words:
                    expected += part.words[word]
            np.testing.assert_array_equal(vector, expected)

    def test_results_not_mutated(self):
        a = process("A")
        before = a.words["the"].copy()
        merge_results([a, process("B")], DIM)
        np.testing.assert_array_equal(a.words["the"], before)

    def test_frozen(self):
        corpus = merge_results([process("A")], DIM)
        assert corpus.frozen
        with pytest.raises(RuntimeError):
            corpus.merge(process("B"))
        with pytest.raises(ValueError):
            corpus.words["sun"][0] = 1

    def test_dimension_mismatch(self):
        corpus = CorpusModel(DIM * 2)
        with pytest.raises(ValueError):
            corpus.merge(process("A"))

    def test_duplicate_identifier_rejected(self):
        a = process("A")
        corpus = CorpusModel(DIM)
        corpus.merge(a)
        with pytest.raises(ValueError):
            corpus.merge(a)
        # the first copy's word statistics are left untouched
        np.testing.assert_array_equal(corpus.words["sun"], a.words["sun"])
        assert list(corpus.documents) == ["A"]

    def test_stats(self):
        stats = merge_results([process("A"), process("C")], DIM).get_stats()
        assert stats["documents"] == 2
        assert stats["dimension"] == DIM
        assert stats["failed_documents"] == 0


class TestErrorPolicy:

    def failing_tasks(self):
        error = DocumentReadError("cannot read X", identifier="X", reason="OSError")
        return [
            TaskResult("A", process("A"), None, 0.0, is_query=True),
            TaskResult("X", None, error, 0.0),
        ]

    def test_abort(self):
        with pytest.raises(CorpusBuildError) as exc_info:
            collect_results(self.failing_tasks(), "abort", DIM)
        assert [f.task_id for f in exc_info.value.failures] == ["X"]
        assert exc_info.value.details["failed_documents"] == ["X"]

    def test_skip(self):
        corpus = collect_results(self.failing_tasks(), "skip", DIM)
        assert set(corpus.documents) == {"A"}
        assert [f.task_id for f in corpus.failures] == ["X"]
        assert corpus.query_document == "A"

    def test_defects_always_propagate(self):
        tasks = [TaskResult("A", None, ZeroDivisionError("bug"), 0.0)]
        with pytest.raises(ZeroDivisionError):
            collect_results(tasks, "skip", DIM)

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            collect_results([], "retry", DIM)


class TestBuildCorpus:

    def test_from_text_sources(self):
        sources = [DocumentSource.from_text(k, v) for k, v in TEXTS.items()]
        corpus = build_corpus(sources, config(query_document="B"))
        assert set(corpus.documents) == set(TEXTS)
        assert corpus.query_document == "B"
        assert "sun" in corpus.words

    def test_missing_file_aborts(self, tmp_path):
        sources = [DocumentSource.from_text("A", TEXTS["A"]),
                   DocumentSource.from_path(tmp_path / "gone.txt")]
        with pytest.raises(CorpusBuildError):
            build_corpus(sources, config())

    def test_missing_file_skipped(self, tmp_path):
        sources = [DocumentSource.from_text("A", TEXTS["A"]),
                   DocumentSource.from_path(tmp_path / "gone.txt")]
        corpus = build_corpus(sources, config(on_error="skip"))
        assert set(corpus.documents) == {"A"}
        assert len(corpus.failures) == 1

    def test_duplicate_identifiers_abort(self):
        sources = [DocumentSource.from_text("A", TEXTS["A"]),
                   DocumentSource.from_text("B", TEXTS["B"]),
                   DocumentSource.from_text("A", TEXTS["C"])]
        with pytest.raises(CorpusBuildError) as exc_info:
            build_corpus(sources, config(on_error="skip"))
        assert exc_info.value.details["duplicate_identifiers"] == ["A"]
