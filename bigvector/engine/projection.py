"""
Deterministic sparse ternary random projections.

Each string key is hashed to 64 bits and the hash seeds a pseudo-random
generator that fills a vector of D entries drawn from {+1, -1, 0} with
probabilities {1/6, 1/6, 4/6} (Achlioptas projection). Identical keys always
produce identical vectors, which is what makes additive accumulation of the
projections meaningful.
"""

from typing import Dict, Any
import numpy as np

FNV64_OFFSET_BASIS = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF

# uniform draw over 0..5: 0 -> +1, 1 -> -1, 2..5 -> 0
_DRAW_RANGE = 6
_DRAW_POSITIVE = 0
_DRAW_NEGATIVE = 1

PROJECTION_DTYPE = np.int8


def fnv1_64(data: bytes) -> int:
    """64-bit FNV-1 hash of a byte string."""
    h = FNV64_OFFSET_BASIS
    for byte in data:
        h = (h * FNV64_PRIME) & _MASK64
        h ^= byte
    return h


def key_hash(key: str) -> int:
    """Hash the UTF-8 encoding of a key."""
    return fnv1_64(key.encode("utf-8"))


def generate_projection(seed: int, dim: int) -> np.ndarray:
    """
    Materialize the ternary projection vector for a seed.

    Args:
        seed: 64-bit hash of the key
        dim: Vector dimensionality

    Returns:
        int8 array of length dim with entries in {-1, 0, +1}
    """
    rng = np.random.default_rng(seed)
    draws = rng.integers(0, _DRAW_RANGE, size=dim)
    transform = np.zeros(dim, dtype=PROJECTION_DTYPE)
    transform[draws == _DRAW_POSITIVE] = 1
    transform[draws == _DRAW_NEGATIVE] = -1
    return transform


class ProjectionGenerator:
    """
    Memoizing projection generator owned by a single document processor.

    The cache is keyed by hash and is never shared between processors; since
    projections are a pure function of the key there is nothing to
    synchronize.
    """

    def __init__(self, dim: int = 1024):
        """
        Initialize generator.

        Args:
            dim: Dimensionality of generated vectors
        """
        if dim <= 0:
            raise ValueError(f"dim must be positive, got {dim}")
        self.dim = dim
        self._cache: Dict[int, np.ndarray] = {}
        self.hits = 0
        self.misses = 0

    def project(self, key: str) -> np.ndarray:
        """Get or create the projection vector for a key."""
        h = key_hash(key)
        transform = self._cache.get(h)
        if transform is not None:
            self.hits += 1
            return transform

        self.misses += 1
        transform = generate_projection(h, self.dim)
        # cached vectors are shared by every caller
        transform.setflags(write=False)
        self._cache[h] = transform
        return transform

    def __len__(self) -> int:
        return len(self._cache)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache usage statistics."""
        lookups = self.hits + self.misses
        return {
            "dimension": self.dim,
            "cached_projections": len(self._cache),
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hits / lookups if lookups else 0.0,
            "memory_bytes": len(self._cache) * self.dim,
        }

    def clear_cache(self):
        """Drop all cached projections."""
        self._cache.clear()
        self.hits = 0
        self.misses = 0
