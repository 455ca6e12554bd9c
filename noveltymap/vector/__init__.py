"""
Vector layer: embeddings, similarity math and the read-only corpus index.
"""

# Package initialization for vector module
from .index import CorpusIndex
from .types import Point2D, CorpusEntry, Assessment, QueryResult, ProgressEvent, IngestionReport
from .vector_math import cosine_similarity, project_to_plane, novelty_score
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SentenceTransformerEmbedding

__all__ = [
    'CorpusIndex',
    'Point2D',
    'CorpusEntry',
    'Assessment',
    'QueryResult',
    'ProgressEvent',
    'IngestionReport',
    'cosine_similarity',
    'project_to_plane',
    'novelty_score',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding'
]
