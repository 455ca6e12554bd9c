"""
Data records shared by the vector layer, the query engine and the API.
Every record here is created once and never mutated afterwards.
"""

from typing import Any, Dict, Optional
from dataclasses import dataclass, field
import numpy as np


@dataclass(frozen=True)
class Point2D:
    """A projected map coordinate, each axis within [-100, 100]."""

    x: float
    """Horizontal position derived from the first half of the embedding"""

    y: float
    """Vertical position derived from the second half of the embedding"""

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True, eq=False)
class CorpusEntry:
    """A reference pitch held by the corpus index."""

    text: str
    """The reference text as it was embedded"""

    embedding: np.ndarray
    """Unit-normalized embedding of the text"""

    position: Point2D
    """Projected coordinate of the embedding"""

    def __post_init__(self):
        # Entries are shared by every query; lock the array against writes
        self.embedding.setflags(write=False)


@dataclass(frozen=True)
class Assessment:
    """Human readable verdict for a similarity score."""

    title: str
    description: str
    source: str = "fallback"  # "remote" or "fallback"


@dataclass(frozen=True)
class QueryResult:
    """Outcome of a single pitch analysis."""

    position: Point2D
    """Projected coordinate of the query embedding"""

    best_similarity: float
    """Highest cosine similarity against the corpus (0 when nothing matched)"""

    novelty_score: int
    """1..10, higher means less similar to anything in the corpus"""

    title: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        """Presentation contract consumed by the map view and the API."""
        return {
            "x": self.position.x,
            "y": self.position.y,
            "noveltyScore": self.novelty_score,
            "localSimilarityScore": self.best_similarity,
            "assessmentTitle": self.title,
            "assessmentDescription": self.description,
        }


@dataclass(frozen=True)
class ProgressEvent:
    """A single observation published on a progress stream."""

    phase: str
    """Which long-running step is reporting: "model" or "indexing" """

    fraction: float
    """Completion in [0, 1], non-decreasing within a phase"""

    message: str = ""
    completed: Optional[int] = None
    total: Optional[int] = None

    @property
    def percent(self) -> int:
        return int(round(self.fraction * 100))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase,
            "fraction": self.fraction,
            "percent": self.percent,
            "message": self.message,
            "completed": self.completed,
            "total": self.total,
        }


@dataclass
class IngestionReport:
    """Counters collected while building a corpus index."""

    attempted: int = 0
    indexed: int = 0
    failed: int = 0
    skipped_short: int = 0
    duration_ms: float = 0.0
    failures: Dict[int, str] = field(default_factory=dict)
