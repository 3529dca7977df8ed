"""
Parallel driver: one document processor per document.

Every document is submitted as its own task. The driver waits for all of
them (the only synchronization point) and returns a value-or-error result
per task, so a failing document is observable instead of aborting the
process. There is no timeout and no cancellation: a slow document holds up
the join.
"""

import multiprocessing as mp
from concurrent.futures import ThreadPoolExecutor, ProcessPoolExecutor, as_completed, Future
from typing import List, Dict, Any, Optional, Callable, Generic, TypeVar
from dataclasses import dataclass
import logging
import time

from .processor import DocumentResult, process_source

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class TaskResult(Generic[T]):
    """Result of one document task."""

    task_id: str
    result: Optional[T]
    error: Optional[BaseException]
    duration: float
    is_query: bool = False

    @property
    def success(self) -> bool:
        """Check if task succeeded."""
        return self.error is None


class ParallelDriver:
    """
    Runs one document processor per source and joins on all of them.
    """

    def __init__(
        self,
        dim: int = 1024,
        window_size: int = 17,
        max_workers: Optional[int] = None,
        use_processes: bool = True,
        encoding: Optional[str] = None,
        progress_callback: Optional[Callable[[TaskResult], None]] = None
    ):
        """
        Initialize parallel driver.

        Args:
            dim: Vector dimensionality
            window_size: Context window capacity
            max_workers: Number of execution units (default: CPU count)
            use_processes: Use processes instead of threads
            encoding: Text encoding of the documents
            progress_callback: Called with each TaskResult as it completes
        """
        self.dim = dim
        self.window_size = window_size
        self.max_workers = max_workers or mp.cpu_count()
        self.use_processes = use_processes
        self.encoding = encoding
        self.progress_callback = progress_callback

    def _create_executor(self, task_count: int):
        workers = max(1, min(self.max_workers, task_count))
        if self.use_processes:
            return ProcessPoolExecutor(max_workers=workers)
        return ThreadPoolExecutor(max_workers=workers)

    def run(self, sources: List[Any],
            query_identifier: Optional[str] = None) -> List[TaskResult[DocumentResult]]:
        """
        Process every source concurrently.

        Args:
            sources: Document sources to process
            query_identifier: Identifier of the distinguished query document

        Returns:
            One TaskResult per source, in input order
        """
        if not sources:
            return []

        logger.info(
            f"Processing {len(sources)} documents with {self.max_workers} "
            f"{'processes' if self.use_processes else 'threads'}"
        )

        results: List[Optional[TaskResult[DocumentResult]]] = [None] * len(sources)
        with self._create_executor(len(sources)) as executor:
            futures: Dict[Future, int] = {}
            started: Dict[Future, float] = {}
            for i, source in enumerate(sources):
                future = executor.submit(
                    process_source, source, self.dim, self.window_size, self.encoding
                )
                futures[future] = i
                started[future] = time.perf_counter()

            for future in as_completed(futures):
                idx = futures[future]
                source = sources[idx]
                duration = time.perf_counter() - started[future]
                try:
                    task = TaskResult(source.identifier, future.result(), None, duration)
                except Exception as e:
                    logger.error(f"Document {source.identifier} failed: {e}")
                    task = TaskResult(source.identifier, None, e, duration)
                task.is_query = source.identifier == query_identifier
                results[idx] = task
                if self.progress_callback:
                    self.progress_callback(task)

        failed = sum(1 for r in results if not r.success)
        logger.info(f"Joined {len(results)} document tasks, {failed} failed")
        return results
