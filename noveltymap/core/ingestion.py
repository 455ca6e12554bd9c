"""
Corpus ingestion: embeds reference texts one by one and produces a
ready CorpusIndex. Single failures are logged and skipped so a partial
corpus is still served.
"""

import time
from typing import List, Optional, Sequence, Tuple

import numpy as np

from util.logging import logger
from .config import MIN_CORPUS_TEXT_LENGTH
from .errors import EmbeddingFailure, IngestionCancelled
from .progress import ProgressStream
from ..vector.embeddings import IEmbeddingProvider
from ..vector.index import CorpusIndex
from ..vector.types import CorpusEntry, IngestionReport
from ..vector.vector_math import project_to_plane


class IndexBuilder:
    """
    Builds a CorpusIndex from raw reference texts.

    The builder owns the only write path to the entries it collects; the
    index it returns is frozen.
    """

    def __init__(self, embedder: IEmbeddingProvider, progress: Optional[ProgressStream] = None,
                 min_length: int = MIN_CORPUS_TEXT_LENGTH):
        self.embedder = embedder
        self.progress = progress
        self.min_length = min_length
        self.report = IngestionReport()

    async def _embed(self, text: str) -> np.ndarray:
        try:
            vector = await self.embedder.embed(text, normalize=True)
        except EmbeddingFailure:
            raise
        except Exception as e:
            raise EmbeddingFailure(f"Embedding failed: {e}", text=text) from e
        return np.array(vector, dtype=np.float32, copy=True)

    def _publish(self, completed: int, total: int) -> None:
        if self.progress is None:
            return
        fraction = completed / total if total else 1.0
        self.progress.publish(
            "indexing",
            fraction,
            f"Indexing: {int(round(fraction * 100))}%",
            completed=completed,
            total=total,
        )

    async def build(self, texts: Sequence[str]) -> CorpusIndex:
        """
        Embed and project every text, in input order.

        Args:
            texts: Raw reference texts; those shorter than min_length are
                discarded before any embedding call

        Returns:
            A ready CorpusIndex holding every successfully embedded text

        Raises:
            IngestionCancelled: if the progress stream was cancelled
        """
        start_time = time.time()
        self.report = IngestionReport()

        candidates: List[str] = []
        for text in texts:
            text = text.strip()
            if len(text) < self.min_length:
                self.report.skipped_short += 1
                continue
            candidates.append(text)

        total = len(candidates)
        entries: List[CorpusEntry] = []
        self._publish(0, total)

        for i, text in enumerate(candidates):
            if self.progress is not None and self.progress.cancelled:
                logger.log_operation("ingestion.build", "cancelled",
                                     details={"completed": i, "total": total})
                raise IngestionCancelled(f"Ingestion cancelled after {i} of {total} texts")

            self.report.attempted += 1
            try:
                embedding = await self._embed(text)
            except EmbeddingFailure as e:
                self.report.failed += 1
                self.report.failures[i] = str(e)
                logger.log_ingestion_item(i, text, status="skipped", error=str(e))
            else:
                entries.append(CorpusEntry(
                    text=text,
                    embedding=embedding,
                    position=project_to_plane(embedding),
                ))
                self.report.indexed += 1
                logger.log_ingestion_item(i, text)

            self._publish(i + 1, total)

        self.report.duration_ms = round((time.time() - start_time) * 1000, 2)
        logger.log_ingestion_summary(self.report)

        return CorpusIndex(entries, ready=True, model_version=self.embedder.model_version)


async def build_corpus_index(texts: Sequence[str], embedder: IEmbeddingProvider,
                             progress: Optional[ProgressStream] = None,
                             min_length: int = MIN_CORPUS_TEXT_LENGTH) -> Tuple[CorpusIndex, IngestionReport]:
    """Load the embedder, then build an index over texts.

    Returns:
        Tuple of (ready index, ingestion report)
    """
    await embedder.load(progress)
    builder = IndexBuilder(embedder, progress=progress, min_length=min_length)
    index = await builder.build(texts)
    return index, builder.report
