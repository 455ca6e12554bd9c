"""
Shared fixtures: a scripted embedder with known vectors and a hash embedder.
"""

import pytest
import numpy as np

from noveltymap.core.errors import EmbeddingFailure
from noveltymap.vector.embeddings import DeterministicHashEmbedding, IEmbeddingProvider


class ScriptedEmbedding(IEmbeddingProvider):
    """Returns preset vectors per text and records every call."""

    model_version = "scripted-v1"

    def __init__(self, vectors, dimension=4, fail_on=()):
        self.vectors = {text: np.asarray(v, dtype=np.float32) for text, v in vectors.items()}
        self.dimension = dimension
        self.fail_on = set(fail_on)
        self.calls = []

    async def embed(self, text, normalize=True):
        self.calls.append(text)
        if text in self.fail_on:
            raise EmbeddingFailure("scripted failure", text=text)
        vector = self.vectors.get(text, np.zeros(self.dimension, dtype=np.float32))
        if normalize:
            norm = np.linalg.norm(vector)
            if norm > 0:
                vector = vector / norm
        return vector

    def get_dimension(self):
        return self.dimension


@pytest.fixture
def hash_embedder():
    return DeterministicHashEmbedding(dimension=384)


@pytest.fixture
def scripted_embedder():
    """Two-entry registry where the dog-walking query sits next to the first entry."""
    return ScriptedEmbedding({
        "Uber for dog walking": [1.0, 0.0, 0.0, 0.0],
        "Airbnb for photography studios": [0.0, 1.0, 0.0, 0.0],
        "A ride-sharing app for walking dogs in cities": [0.8, 0.2, 0.1, 0.1],
    })
