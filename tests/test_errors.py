"""Tests for the error hierarchy."""

import pickle

from bigvector.engine.parallel import TaskResult
from bigvector.errors import (
    BigVectorError,
    ConfigurationError,
    CorpusBuildError,
    DocumentReadError,
    MissingKeyError,
)


class TestErrors:

    def test_hierarchy(self):
        for cls in (DocumentReadError, MissingKeyError, CorpusBuildError, ConfigurationError):
            assert issubclass(cls, BigVectorError)
        assert issubclass(MissingKeyError, KeyError)
        assert issubclass(ConfigurationError, ValueError)

    def test_document_read_error_pickles(self):
        """Errors keep their context when crossing a process boundary."""
        error = DocumentReadError("cannot read a.txt", identifier="a.txt", reason="OSError")
        restored = pickle.loads(pickle.dumps(error))
        assert type(restored) is DocumentReadError
        assert restored.message == "cannot read a.txt"
        assert restored.identifier == "a.txt"
        assert restored.reason == "OSError"
        assert restored.details["identifier"] == "a.txt"

    def test_missing_key_message(self):
        error = MissingKeyError("word 'sea' is not in the corpus", kind="word", key="sea")
        assert str(error) == "word 'sea' is not in the corpus"
        assert error.details == {"kind": "word", "key": "sea"}

    def test_corpus_build_error_lists_failures(self):
        failure = TaskResult("b.txt", None, DocumentReadError("x", identifier="b.txt"), 0.0)
        error = CorpusBuildError("1 document failed", failures=[failure])
        assert error.failures == [failure]
        assert error.details["failed_documents"] == ["b.txt"]
