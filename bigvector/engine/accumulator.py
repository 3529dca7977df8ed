"""
Per-document vector accumulation.

The document vector is the sum of the projections of every adjacent token
pair (an order 1 Markov model of the document). A word vector is the sum of
the projections of the adjacent pairs found in the window around each
occurrence of the word as the window's center token.
"""

from typing import Dict, Optional
import numpy as np

from .projection import ProjectionGenerator
from .window import ContextWindow

ACCUMULATOR_DTYPE = np.int64


class VectorAccumulator:
    """
    Builds one document vector and the word vectors of one document.

    Owned by a single document processor; nothing here is shared.
    """

    def __init__(self,
                 dim: int = 1024,
                 window_size: int = 17,
                 projections: Optional[ProjectionGenerator] = None):
        """
        Initialize accumulator.

        Args:
            dim: Vector dimensionality
            window_size: Context window capacity, odd so a center exists
            projections: Projection generator to draw transforms from
        """
        if window_size % 2 == 0:
            raise ValueError(f"window_size must be odd, got {window_size}")
        self.dim = dim
        self.window = ContextWindow(window_size)
        self.projections = projections or ProjectionGenerator(dim)
        if self.projections.dim != dim:
            raise ValueError(
                f"projection dimension {self.projections.dim} does not match {dim}"
            )
        self.document_vector = np.zeros(dim, dtype=ACCUMULATOR_DTYPE)
        self.word_vectors: Dict[str, np.ndarray] = {}
        self.token_count = 0

    def add(self, token: str) -> None:
        """Fold one token into the vectors, then push it into the window."""
        window = self.window
        lookup = self.projections.project

        self.document_vector += lookup(window.previous() + token)

        center = window.center()
        word_vector = self.word_vectors.get(center)
        if word_vector is None:
            word_vector = np.zeros(self.dim, dtype=ACCUMULATOR_DTYPE)
            self.word_vectors[center] = word_vector

        last = window.item(0)
        for i in range(1, window.capacity):
            current = window.item(i)
            if current == center:
                continue
            word_vector += lookup(last + current)
            last = current

        window.push(token)
        self.token_count += 1
