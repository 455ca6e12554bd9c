"""
Embedding providers for pitch texts.
Providers are asynchronous: model calls run off the event loop so progress
can still be reported while a slow model is working.
"""

from abc import ABC, abstractmethod
import asyncio
import hashlib
import re
import numpy as np
from sentence_transformers import SentenceTransformer

from ..core.errors import EmbeddingFailure
from .vector_math import normalize as unit_normalize

_TOKEN_RE = re.compile(r"[a-z0-9]+")


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    model_version = "unknown"

    async def load(self, progress=None) -> None:
        """Load model weights. Providers without a model report completion immediately."""
        if progress is not None:
            progress.publish("model", 1.0, "Model ready")

    @abstractmethod
    async def embed(self, text: str, normalize: bool = True) -> np.ndarray:
        """Generate embedding vector for given text."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic feature-hashing embedding provider.

    Each lower-cased word token is hashed into one of `dimension` buckets
    with a hash-derived sign. Identical texts produce identical vectors and
    texts sharing words produce positive similarity. Similarity is purely
    lexical: paraphrases with different words score low. Use it for tests,
    not for meaningful novelty scores.
    """

    model_version = "hash-v1"

    def __init__(self, dimension: int = 384):
        self.dimension = dimension

    def _tokens(self, text: str) -> list[str]:
        return _TOKEN_RE.findall(text.lower())

    def embed_text(self, text: str, normalize: bool = True) -> np.ndarray:
        """Synchronous embedding, for callers outside an event loop."""
        vector = np.zeros(self.dimension, dtype=np.float32)
        for token in self._tokens(text):
            digest = hashlib.md5(token.encode()).digest()
            bucket = int.from_bytes(digest[:4], "big") % self.dimension
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[bucket] += sign

        if normalize:
            vector = unit_normalize(vector).astype(np.float32)
        return vector

    async def embed(self, text: str, normalize: bool = True) -> np.ndarray:
        return self.embed_text(text, normalize=normalize)

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained models.

    Defaults to all-MiniLM-L6-v2 (384-D, mean pooling).
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        self.model_name = model_name
        self.model_version = model_name
        self._model = None
        self._dimension = None

    @property
    def model(self):
        if self._model is None:
            self._model = SentenceTransformer(self.model_name)
        return self._model

    async def load(self, progress=None) -> None:
        """Load the model in a worker thread, publishing start and end of loading."""
        if progress is not None:
            progress.publish("model", 0.0, f"Loading semantic model {self.model_name}")

        await asyncio.to_thread(lambda: self.model)

        if progress is not None:
            progress.publish("model", 1.0, "Model ready")

    def _encode(self, text: str, normalize: bool) -> np.ndarray:
        return self.model.encode(
            text,
            convert_to_numpy=True,
            normalize_embeddings=normalize,
        )

    async def embed(self, text: str, normalize: bool = True) -> np.ndarray:
        """Generate embedding vector using sentence transformers."""
        try:
            embedding = await asyncio.to_thread(self._encode, text, normalize)
        except Exception as e:
            raise EmbeddingFailure(f"Embedding failed: {e}", text=text) from e
        return np.asarray(embedding, dtype=np.float32)

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        if self._dimension is None:
            self._dimension = self.model.get_sentence_embedding_dimension()
        return self._dimension

