"""
Vector construction engine.

Builds document and word vectors from raw text with sparse ternary random
projections of adjacent word pairs, and ranks them by cosine similarity.
"""

from .tokenizer import tokenize, tokenize_text
from .projection import ProjectionGenerator, generate_projection, key_hash
from .window import ContextWindow
from .accumulator import VectorAccumulator
from .processor import DocumentResult, process_stream, process_source
from .parallel import ParallelDriver, TaskResult
from .corpus import CorpusModel, build_corpus, collect_results, merge_results
from .ranking import (
    SimilarityScore,
    cosine_similarity,
    rank_documents,
    top_k_words,
    rank_documents_by_similarity,
    top_words_by_similarity,
    rank_documents_by_word,
)

__all__ = [
    'tokenize',
    'tokenize_text',
    'ProjectionGenerator',
    'generate_projection',
    'key_hash',
    'ContextWindow',
    'VectorAccumulator',
    'DocumentResult',
    'process_stream',
    'process_source',
    'ParallelDriver',
    'TaskResult',
    'CorpusModel',
    'build_corpus',
    'collect_results',
    'merge_results',
    'SimilarityScore',
    'cosine_similarity',
    'rank_documents',
    'top_k_words',
    'rank_documents_by_similarity',
    'top_words_by_similarity',
    'rank_documents_by_word',
]
