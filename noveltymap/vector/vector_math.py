"""
Pure vector helpers: cosine similarity, map projection and novelty scoring.
No I/O; callers are responsible for only comparing vectors from the same
embedding model.
"""

import math
from typing import Sequence, Union
import numpy as np

from .types import Point2D
from ..core.config import PROJECTION_GAIN, MAP_EXTENT

VectorLike = Union[np.ndarray, Sequence[float]]


def _as_array(vector: VectorLike) -> np.ndarray:
    return np.asarray(vector, dtype=np.float64).ravel()


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def normalize(vector: VectorLike) -> np.ndarray:
    """Return a unit-length copy; the zero vector is returned unchanged."""
    arr = _as_array(vector)
    norm = np.linalg.norm(arr)
    if norm == 0:
        return arr.copy()
    return arr / norm


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """
    Cosine of the angle between two vectors.

    Args:
        a: First vector
        b: Second vector, same length as a

    Returns:
        dot(a, b) / (|a| * |b|), or 0.0 when either magnitude is zero

    Raises:
        ValueError: if the vectors differ in length
    """
    a = _as_array(a)
    b = _as_array(b)
    if a.shape != b.shape:
        raise ValueError(f"Vector dimension mismatch: {a.shape[0]} != {b.shape[0]}")

    magnitude = np.linalg.norm(a) * np.linalg.norm(b)
    if magnitude == 0:
        return 0.0

    return float(np.dot(a, b) / magnitude)


def project_to_plane(vector: VectorLike, gain: float = PROJECTION_GAIN) -> Point2D:
    """
    Project an embedding onto the 2-D map.

    The first floor(D/2) components drive x and the remaining components
    drive y. Each half is summed, divided by the first half's length and
    scaled by gain, then clamped to the map extent. The result depends on
    the vector alone, never on the rest of the corpus.
    """
    arr = _as_array(vector)
    half = arr.shape[0] // 2
    if half == 0:
        return Point2D(0.0, 0.0)

    x_sum = float(np.sum(arr[:half]))
    y_sum = float(np.sum(arr[half:]))

    return Point2D(
        x=clamp((x_sum / half) * gain, -MAP_EXTENT, MAP_EXTENT),
        y=clamp((y_sum / half) * gain, -MAP_EXTENT, MAP_EXTENT),
    )


def novelty_score(similarity: float) -> int:
    """Map a best similarity onto 1..10, higher meaning more novel."""
    # Half-up rounding, round() would send 0.5 to 0
    raw = math.floor((1.0 - similarity) * 10 + 0.5)
    return int(clamp(raw, 1, 10))
