"""
Request and response models for the novelty map API.
"""

from pydantic import BaseModel, field_validator
from typing import List, Optional


class AnalyzeRequest(BaseModel):
    pitch: str

    @field_validator('pitch')
    @classmethod
    def pitch_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('pitch cannot be empty')
        return v


class AnalyzeResponse(BaseModel):
    x: float
    y: float
    noveltyScore: int
    localSimilarityScore: float
    assessmentTitle: str
    assessmentDescription: str


class ScatterPoint(BaseModel):
    id: str
    x: float
    y: float
    isUser: bool = False


class CorpusPointsResponse(BaseModel):
    points: List[ScatterPoint]
    total: int


class ProgressResponse(BaseModel):
    phase: Optional[str] = None
    fraction: float = 0.0
    percent: int = 0
    message: str = ""
    completed: Optional[int] = None
    total: Optional[int] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    ready: bool
    corpus_size: int
    failed_items: int
    corpus_origin: Optional[str] = None
    embedding_version: Optional[str] = None
    error: Optional[str] = None
