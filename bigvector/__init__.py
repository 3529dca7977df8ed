"""bigvector - random-indexing document and word vectors.

Builds fixed-dimension fingerprints for documents and words from raw text by
projecting hashed word pairs into a low-dimensional space, and ranks them by
cosine similarity.
"""

__version__ = "0.1.0"

from .config import VectorConfig
from .errors import (
    BigVectorError,
    ConfigurationError,
    CorpusBuildError,
    DocumentReadError,
    MissingKeyError,
)
from .engine import (
    CorpusModel,
    SimilarityScore,
    build_corpus,
    cosine_similarity,
    rank_documents_by_similarity,
    rank_documents_by_word,
    top_words_by_similarity,
)
from .sources import DocumentSource, list_directory

__all__ = [
    'VectorConfig',
    'BigVectorError',
    'ConfigurationError',
    'CorpusBuildError',
    'DocumentReadError',
    'MissingKeyError',
    'CorpusModel',
    'SimilarityScore',
    'build_corpus',
    'cosine_similarity',
    'rank_documents_by_similarity',
    'rank_documents_by_word',
    'top_words_by_similarity',
    'DocumentSource',
    'list_directory',
]
