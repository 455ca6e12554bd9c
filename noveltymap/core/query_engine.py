"""
Query engine: scores a pitch against a ready corpus index.
"""

import time
from typing import Optional

from util.logging import logger
from .config import MIN_QUERY_LENGTH
from .errors import EmbeddingFailure, IndexNotReady, InvalidInput
from ..agents.assessor import IAssessor, TieredAssessor
from ..vector.embeddings import IEmbeddingProvider
from ..vector.index import CorpusIndex
from ..vector.types import QueryResult
from ..vector.vector_math import novelty_score, project_to_plane


class QueryEngine:
    """
    Answers novelty queries over a shared, read-only CorpusIndex.

    The numeric fields of a result depend only on the query text and the
    index contents; only the assessment text may vary between calls when a
    remote assessor is in use.
    """

    def __init__(self, index: Optional[CorpusIndex], embedder: IEmbeddingProvider,
                 assessor: Optional[IAssessor] = None, min_length: int = MIN_QUERY_LENGTH):
        self.index = index
        self.embedder = embedder
        self.assessor = assessor or TieredAssessor()
        self.min_length = min_length

    def _validate(self, text: str) -> str:
        if text is None or len(text.strip()) < self.min_length:
            raise InvalidInput(
                f"Please provide a more descriptive pitch (min {self.min_length} chars).",
                min_length=self.min_length,
            )
        if self.index is None or not self.index.ready:
            raise IndexNotReady("The corpus index is still being built, try again shortly.")
        return text.strip()

    async def query(self, text: str) -> QueryResult:
        """
        Analyze a pitch.

        Args:
            text: Pitch text, at least min_length characters after trimming

        Returns:
            QueryResult with position, best similarity, novelty and verdict

        Raises:
            InvalidInput: text too short; the embedder is not called
            IndexNotReady: ingestion has not finished
            EmbeddingFailure: the pitch could not be embedded
        """
        text = self._validate(text)
        start_time = time.time()

        try:
            query_vector = await self.embedder.embed(text, normalize=True)
        except EmbeddingFailure as e:
            logger.log_query(text, status="error", error=str(e))
            raise
        except Exception as e:
            logger.log_query(text, status="error", error=str(e))
            raise EmbeddingFailure(f"Analysis failed while embedding the pitch, try again: {e}", text=text) from e

        position = project_to_plane(query_vector)
        best_similarity, _ = self.index.best_match(query_vector)
        score = novelty_score(best_similarity)

        assessment = await self.assessor.summarize(text, best_similarity)

        duration_ms = round((time.time() - start_time) * 1000, 2)
        logger.log_query(
            text,
            best_similarity=round(best_similarity, 4),
            novelty_score=score,
            corpus_size=len(self.index),
            assessment_source=assessment.source,
            duration_ms=duration_ms,
        )

        return QueryResult(
            position=position,
            best_similarity=best_similarity,
            novelty_score=score,
            title=assessment.title,
            description=assessment.description,
        )
