"""
Corpus merger.

Collects per-document vectors and sums per-document word vectors into
corpus-wide word vectors. Addition over int64 is commutative and
associative, so the merge order of documents does not change the result.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Any
import numpy as np

from ..errors import CorpusBuildError, DocumentReadError
from .accumulator import ACCUMULATOR_DTYPE
from .parallel import ParallelDriver, TaskResult
from .processor import DocumentResult

logger = logging.getLogger(__name__)

ON_ERROR_ABORT = "abort"
ON_ERROR_SKIP = "skip"


class CorpusModel:
    """
    Document vectors keyed by identifier and merged word vectors keyed by token.

    Built once after every processor has finished, then frozen.
    """

    def __init__(self, dim: int = 1024):
        self.dim = dim
        self.documents: Dict[str, np.ndarray] = {}
        self.words: Dict[str, np.ndarray] = {}
        self.query_document: Optional[str] = None
        self.failures: List[TaskResult] = []
        self._frozen = False

    def merge(self, result: DocumentResult) -> None:
        """Add one document's vectors to the corpus."""
        if self._frozen:
            raise RuntimeError("CorpusModel is frozen")
        if result.vector.shape != (self.dim,):
            raise ValueError(
                f"document {result.identifier} has dimension {result.vector.shape[0]}, "
                f"expected {self.dim}"
            )
        if result.identifier in self.documents:
            raise ValueError(f"document {result.identifier} is already merged")
        self.documents[result.identifier] = result.vector

        for word, vector in result.words.items():
            word_vector = self.words.get(word)
            if word_vector is None:
                self.words[word] = np.array(vector, dtype=ACCUMULATOR_DTYPE, copy=True)
            else:
                word_vector += vector

    def freeze(self) -> "CorpusModel":
        """Make the model read-only."""
        for table in (self.documents, self.words):
            for vector in table.values():
                vector.setflags(write=False)
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get_stats(self) -> Dict[str, Any]:
        """Get corpus statistics."""
        return {
            "dimension": self.dim,
            "documents": len(self.documents),
            "words": len(self.words),
            "failed_documents": len(self.failures),
            "query_document": self.query_document,
        }

    def __repr__(self) -> str:
        return (f"CorpusModel(dim={self.dim}, documents={len(self.documents)}, "
                f"words={len(self.words)})")


def merge_results(results: Iterable[DocumentResult], dim: int = 1024) -> CorpusModel:
    """Merge finished document results into a frozen corpus."""
    corpus = CorpusModel(dim)
    for result in results:
        corpus.merge(result)
    return corpus.freeze()


def collect_results(tasks: List[TaskResult], on_error: str = ON_ERROR_ABORT,
                    dim: int = 1024) -> CorpusModel:
    """
    Apply the error policy to joined task results and merge the successes.

    Input errors abort the build under ``abort`` and are recorded under
    ``skip``. Any other exception is a defect and is re-raised either way.

    Raises:
        CorpusBuildError: If a document failed under the abort policy
    """
    if on_error not in (ON_ERROR_ABORT, ON_ERROR_SKIP):
        raise ValueError(f"on_error must be '{ON_ERROR_ABORT}' or '{ON_ERROR_SKIP}', got {on_error!r}")

    failures = [t for t in tasks if not t.success]
    for task in failures:
        if not isinstance(task.error, DocumentReadError):
            raise task.error

    if failures and on_error == ON_ERROR_ABORT:
        names = ", ".join(t.task_id for t in failures)
        raise CorpusBuildError(
            f"{len(failures)} of {len(tasks)} documents could not be read: {names}",
            failures=failures
        )

    corpus = CorpusModel(dim)
    for task in tasks:
        if not task.success:
            logger.warning(f"Skipping unreadable document {task.task_id}: {task.error}")
            continue
        corpus.merge(task.result)
        if task.is_query:
            corpus.query_document = task.task_id
    corpus.failures = failures
    return corpus.freeze()


def build_corpus(sources: List[Any], config=None,
                 driver: Optional[ParallelDriver] = None) -> CorpusModel:
    """
    Process every document in parallel and merge the results.

    Args:
        sources: Document sources
        config: VectorConfig (defaults used when None)
        driver: Pre-built driver, overriding the config's execution settings

    Returns:
        Frozen CorpusModel

    Raises:
        CorpusBuildError: If identifiers repeat, or a document failed under
            the abort policy
    """
    if config is None:
        from ..config import VectorConfig
        config = VectorConfig()

    duplicates = sorted(i for i, n in Counter(s.identifier for s in sources).items() if n > 1)
    if duplicates:
        raise CorpusBuildError(
            f"Duplicate document identifiers: {', '.join(duplicates)}",
            details={"duplicate_identifiers": duplicates}
        )

    if driver is None:
        driver = ParallelDriver(
            dim=config.dimension,
            window_size=config.window_size,
            max_workers=config.max_workers,
            use_processes=config.use_processes,
            encoding=config.encoding,
        )

    tasks = driver.run(sources, query_identifier=config.query_document)
    corpus = collect_results(tasks, config.on_error, driver.dim)
    logger.info(f"Built corpus: {len(corpus.documents)} documents, {len(corpus.words)} words")
    return corpus
