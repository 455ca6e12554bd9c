"""
Read-only corpus index with exhaustive cosine search.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
import numpy as np

from .types import CorpusEntry
from .vector_math import cosine_similarity


class CorpusIndex:
    """Ordered, immutable collection of corpus entries.

    An index is built once by the ingestion layer and then shared by every
    query. Nothing can be added or removed afterwards, so scans need no
    locking and parallel queries over the same index are safe.
    """

    def __init__(self, entries: Iterable[CorpusEntry] = (), ready: bool = True,
                 model_version: str = "unknown"):
        self._entries: Tuple[CorpusEntry, ...] = tuple(entries)
        self._ready = ready
        self.model_version = model_version

    @classmethod
    def pending(cls) -> "CorpusIndex":
        """Placeholder used while ingestion is still running."""
        return cls((), ready=False)

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def entries(self) -> Tuple[CorpusEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CorpusEntry]:
        return iter(self._entries)

    def best_match(self, query_vector: np.ndarray) -> Tuple[float, Optional[CorpusEntry]]:
        """
        Scan every entry and return the highest similarity.

        Starts from 0.0 and only replaces the current best on a strictly
        greater similarity, so ties keep the earliest entry and negative
        similarities never count as a match.

        Returns:
            Tuple of (best similarity, matching entry or None)
        """
        best_similarity = 0.0
        best_entry = None
        for entry in self._entries:
            similarity = cosine_similarity(query_vector, entry.embedding)
            if similarity > best_similarity:
                best_similarity = similarity
                best_entry = entry
        return best_similarity, best_entry

    def points(self) -> List[Dict[str, Any]]:
        """Scatter points for the map, one per entry in index order."""
        return [
            {
                "id": f"item-{i}",
                "x": entry.position.x,
                "y": entry.position.y,
                "isUser": False,
            }
            for i, entry in enumerate(self._entries)
        ]
