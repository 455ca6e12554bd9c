"""Local semantic novelty scoring for startup pitches."""

__version__ = "1.0.0"
