"""
Error kinds raised by ingestion, querying and assessment.
"""


class NoveltyMapError(Exception):
    """Base exception for novelty map operations."""
    pass


class InvalidInput(NoveltyMapError):
    """Query text is too short to analyze."""

    def __init__(self, message: str, min_length: int = None):
        super().__init__(message)
        self.min_length = min_length


class IndexNotReady(NoveltyMapError):
    """A query arrived before the corpus index finished building."""
    pass


class EmbeddingFailure(NoveltyMapError):
    """The embedding provider failed for a single text."""

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.text = text


class AssessmentUnavailable(NoveltyMapError):
    """The remote assessor could not produce a verdict."""
    pass


class IngestionCancelled(NoveltyMapError):
    """Index building was cancelled through its progress stream."""
    pass
