"""
HTTP API for the novelty map.

The corpus index is built in the background at startup; until it is
ready /analyze answers 503 and /progress reports how far indexing got.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from util.logging import logger
from .schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    CorpusPointsResponse,
    HealthResponse,
    ProgressResponse,
    ScatterPoint,
)
from ..agents.assessor import IAssessor
from ..core.config import (
    CORPUS_URL,
    VERSION,
    debug_enabled,
    get_assessor,
    get_corpus_path,
    get_embedding_provider,
)
from ..core.corpus_source import load_corpus_text, parse_corpus
from ..core.errors import EmbeddingFailure, IndexNotReady, InvalidInput
from ..core.ingestion import build_corpus_index
from ..core.progress import ProgressStream
from ..core.query_engine import QueryEngine
from ..vector.embeddings import IEmbeddingProvider
from ..vector.index import CorpusIndex


class AppState:
    """
    Everything one running app owns: the progress stream, the current
    index and the query engine bound to it. The index reference is
    replaced exactly once, when ingestion finishes.
    """

    def __init__(self, embedder: IEmbeddingProvider, assessor: IAssessor,
                 corpus_url: Optional[str] = None, corpus_path=None):
        self.embedder = embedder
        self.assessor = assessor
        self.corpus_url = corpus_url
        self.corpus_path = corpus_path
        self.progress = ProgressStream()
        self.index = CorpusIndex.pending()
        self.engine = QueryEngine(self.index, embedder, assessor)
        self.report = None
        self.origin = None
        self.error = None
        self._task: Optional[asyncio.Task] = None

    async def ingest(self) -> CorpusIndex:
        """Load the corpus and the model, then build and publish the index."""
        try:
            raw, self.origin = await asyncio.to_thread(
                load_corpus_text, self.corpus_url, self.corpus_path
            )
            texts = parse_corpus(raw)

            index, report = await build_corpus_index(texts, self.embedder, self.progress)
        except Exception as e:
            self.error = str(e)
            logger.log_operation("ingestion.startup", "error", details={"error": str(e)})
            raise

        self.report = report
        self.index = index
        self.engine = QueryEngine(index, self.embedder, self.assessor)
        return index

    def start(self) -> asyncio.Task:
        self._task = asyncio.create_task(self.ingest())
        # Exceptions are recorded on self.error
        self._task.add_done_callback(lambda t: t.cancelled() or t.exception())
        return self._task

    async def stop(self) -> None:
        self.progress.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except (asyncio.CancelledError, Exception):
                pass
        self.progress.close()


def create_app(embedder: IEmbeddingProvider = None, assessor: IAssessor = None,
               corpus_url: Optional[str] = CORPUS_URL, corpus_path=None,
               ingest_on_startup: bool = True, state: AppState = None) -> FastAPI:
    """Build the FastAPI application around its own AppState."""
    if state is None:
        state = AppState(
            embedder or get_embedding_provider(),
            assessor or get_assessor(),
            corpus_url=corpus_url,
            corpus_path=corpus_path or get_corpus_path(),
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if ingest_on_startup:
            state.start()
        yield
        await state.stop()

    app = FastAPI(
        title="Pitch Novelty Map API",
        version=VERSION,
        description="Local semantic novelty scoring for startup pitches",
        docs_url="/docs" if debug_enabled() else None,
        redoc_url="/redoc" if debug_enabled() else None,
        lifespan=lifespan,
    )
    app.state.novelty = state

    # Add CORS middleware to allow frontend connections
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173", "http://127.0.0.1:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_state(request: Request) -> AppState:
        return request.app.state.novelty

    @app.get("/health", response_model=HealthResponse)
    def health_check_endpoint(request: Request):
        """Check system health and index readiness."""
        current = get_state(request)
        if current.error:
            status = "error"
        elif current.index.ready:
            status = "ready"
        else:
            status = "indexing"

        return HealthResponse(
            status=status,
            version=VERSION,
            ready=current.index.ready,
            corpus_size=len(current.index),
            failed_items=current.report.failed if current.report else 0,
            corpus_origin=current.origin,
            embedding_version=current.index.model_version if current.index.ready else None,
            error=current.error,
        )

    @app.get("/progress", response_model=ProgressResponse)
    def progress_endpoint(request: Request):
        """Latest model-loading or indexing progress."""
        event = get_state(request).progress.latest()
        if event is None:
            return ProgressResponse(message="Initializing Engine...")
        return ProgressResponse(**event.to_dict())

    @app.get("/corpus/points", response_model=CorpusPointsResponse)
    def corpus_points_endpoint(request: Request):
        """Projected corpus positions for the scatter map."""
        index = get_state(request).index
        if not index.ready:
            raise HTTPException(status_code=409, detail="Corpus index is still being built")

        points = [ScatterPoint(**point) for point in index.points()]
        return CorpusPointsResponse(points=points, total=len(points))

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze_endpoint(req: AnalyzeRequest, request: Request):
        """Score a pitch against the corpus."""
        engine = get_state(request).engine
        try:
            result = await engine.query(req.pitch)
        except InvalidInput as e:
            raise HTTPException(status_code=400, detail=str(e))
        except IndexNotReady as e:
            raise HTTPException(status_code=503, detail=str(e))
        except EmbeddingFailure:
            raise HTTPException(status_code=502, detail="Analysis error. Please try again.")

        return AnalyzeResponse(**result.to_dict())

    return app


app = create_app()
