"""
Similarity ranking over document and word vectors.

Cosine similarity is undefined when either vector is all zeros; that case
yields NaN, which ranks after every real score and never enters a top-K
list. Equal scores are ordered by key so rankings are reproducible.
"""

import bisect
import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple
import numpy as np

from ..errors import MissingKeyError


@dataclass(frozen=True)
class SimilarityScore:
    """A cosine similarity paired with the document identifier or word it belongs to."""
    score: float
    key: str

    @property
    def defined(self) -> bool:
        return not math.isnan(self.score)


def cosine_similarity(u: np.ndarray, v: np.ndarray) -> float:
    """
    Cosine similarity of two integer vectors, computed in float64.

    Returns NaN when either vector is all zeros.
    """
    if u.shape != v.shape:
        raise ValueError(f"shape mismatch: {u.shape} vs {v.shape}")
    x = u.astype(np.float64)
    y = v.astype(np.float64)
    xx = float(np.dot(x, x))
    yy = float(np.dot(y, y))
    if xx == 0.0 or yy == 0.0:
        return float("nan")
    return float(np.dot(x, y)) / math.sqrt(xx * yy)


def _sort_key(item: SimilarityScore) -> Tuple[bool, float, str]:
    # descending score, NaN last, then key ascending
    if math.isnan(item.score):
        return (True, 0.0, item.key)
    return (False, -item.score, item.key)


def rank_documents(query: np.ndarray, documents: Mapping[str, np.ndarray]) -> List[SimilarityScore]:
    """Score every document against the query and sort best first."""
    scores = [SimilarityScore(cosine_similarity(query, vector), key)
              for key, vector in documents.items()]
    scores.sort(key=_sort_key)
    return scores


def top_k_words(query: np.ndarray, words: Mapping[str, np.ndarray], k: int = 20) -> List[SimilarityScore]:
    """
    Exact top-K selection over the word vectors.

    Keeps a sorted list of at most ``k`` entries; a candidate that beats the
    current worst entry is inserted in place and the worst is evicted.
    Every word is scored exactly once.
    """
    if k <= 0:
        return []

    keys: List[Tuple[bool, float, str]] = []
    best: List[SimilarityScore] = []
    for word, vector in words.items():
        candidate = SimilarityScore(cosine_similarity(query, vector), word)
        if not candidate.defined:
            continue
        key = _sort_key(candidate)
        if len(best) == k:
            if key >= keys[-1]:
                continue
            keys.pop()
            best.pop()
        pos = bisect.bisect_left(keys, key)
        keys.insert(pos, key)
        best.insert(pos, candidate)
    return best


def _lookup(table: Dict[str, np.ndarray], key: str, kind: str) -> np.ndarray:
    vector = table.get(key)
    if vector is None:
        raise MissingKeyError(f"{kind} {key!r} is not in the corpus", kind=kind, key=key)
    return vector


def rank_documents_by_similarity(corpus, query_document: str) -> List[SimilarityScore]:
    """
    Rank every document of the corpus by similarity to one of its documents.

    Raises:
        MissingKeyError: If the query document is not in the corpus
    """
    query = _lookup(corpus.documents, query_document, "document")
    return rank_documents(query, corpus.documents)


def top_words_by_similarity(corpus, query_word: str, k: int = 20) -> List[SimilarityScore]:
    """
    The ``k`` words whose vectors are closest to the query word's vector.

    The query word itself is a candidate.

    Raises:
        MissingKeyError: If the query word has no vector
    """
    query = _lookup(corpus.words, query_word, "word")
    return top_k_words(query, corpus.words, k)


def rank_documents_by_word(corpus, query_word: str) -> List[SimilarityScore]:
    """
    Rank documents by similarity to a word vector.

    Raises:
        MissingKeyError: If the query word has no vector
    """
    query = _lookup(corpus.words, query_word, "word")
    return rank_documents(query, corpus.documents)
