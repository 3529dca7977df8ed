"""
Document processor.

Runs the tokenizer, context window and accumulator over one input stream.
Each call owns all of its state, including the projection cache, so
processors never interfere with each other.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, TextIO, Optional
import numpy as np

from ..errors import DocumentReadError
from .accumulator import VectorAccumulator
from .projection import ProjectionGenerator
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass
class DocumentResult:
    """Vectors produced by processing one document."""
    identifier: str
    vector: np.ndarray
    words: Dict[str, np.ndarray] = field(default_factory=dict)
    token_count: int = 0
    duration: float = 0.0

    def freeze(self) -> "DocumentResult":
        """Mark every vector read-only."""
        self.vector.setflags(write=False)
        for vector in self.words.values():
            vector.setflags(write=False)
        return self


def process_stream(identifier: str,
                   stream: TextIO,
                   dim: int = 1024,
                   window_size: int = 17) -> DocumentResult:
    """
    Compute the document vector and word vectors of a stream.

    Args:
        identifier: Document identifier
        stream: Text stream holding the document
        dim: Vector dimensionality
        window_size: Context window capacity

    Returns:
        Frozen DocumentResult
    """
    start = time.perf_counter()
    accumulator = VectorAccumulator(dim, window_size, ProjectionGenerator(dim))

    for token in tokenize(stream):
        accumulator.add(token)

    duration = time.perf_counter() - start
    stats = accumulator.projections.get_stats()
    logger.debug(
        f"Processed {identifier}: {accumulator.token_count} tokens, "
        f"{len(accumulator.word_vectors)} word vectors, "
        f"cache hit rate {stats['hit_rate']:.2%} in {duration:.2f}s"
    )

    return DocumentResult(
        identifier=identifier,
        vector=accumulator.document_vector,
        words=accumulator.word_vectors,
        token_count=accumulator.token_count,
        duration=duration,
    ).freeze()


def process_source(source, dim: int = 1024, window_size: int = 17,
                   encoding: Optional[str] = None) -> DocumentResult:
    """
    Open a document source and process it.

    Raises:
        DocumentReadError: If the source cannot be opened or read
    """
    try:
        with source.open(encoding=encoding) as stream:
            return process_stream(source.identifier, stream, dim, window_size)
    except DocumentReadError:
        raise
    except (OSError, EOFError, UnicodeError) as e:
        raise DocumentReadError(
            f"Cannot read document {source.identifier}: {e}",
            identifier=source.identifier,
            reason=type(e).__name__
        ) from e
