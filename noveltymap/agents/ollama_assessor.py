"""
Ollama-backed assessor that asks a local model for a novelty verdict.
"""

import json
from datetime import datetime
from typing import Any, Dict, List

import ollama

from .assessor import IAssessor
from ..core.errors import AssessmentUnavailable
from ..vector.types import Assessment

ROLE_CONTEXT = (
    "You are a venture analyst. Answer only with a JSON object containing "
    "the string fields \"title\" and \"description\"."
)


class OllamaAssessor(IAssessor):
    """
    Remote assessor using an Ollama model.
    Any client error or malformed answer is raised as AssessmentUnavailable.
    """

    name = "ollama"

    def __init__(self, model_name: str, host: str = None, client: ollama.AsyncClient = None):
        self.model_name = model_name
        self.client = client or ollama.AsyncClient(host=host)
        self.last_processing_time_ms = 0

    def _build_messages(self, pitch: str, similarity: float) -> List[Dict[str, str]]:
        prompt = (
            "Analyze this startup pitch for market novelty.\n"
            f"A local semantic comparison shows its highest similarity match is {similarity * 100:.1f}%.\n\n"
            f"Pitch: \"{pitch}\"\n\n"
            "Provide a professional assessment including:\n"
            "1. A short, punchy title (e.g. 'High Innovation' or 'Competitive Space').\n"
            "2. A one-sentence insightful description of why it's novel or why it overlaps with existing concepts."
        )
        return [
            {'role': 'system', 'content': ROLE_CONTEXT},
            {'role': 'user', 'content': prompt},
        ]

    def _parse(self, content: str) -> Assessment:
        try:
            data: Dict[str, Any] = json.loads(content)
        except json.JSONDecodeError as e:
            raise AssessmentUnavailable(f"Model returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise AssessmentUnavailable("Model returned a non-object JSON value")

        title = str(data.get('title', '')).strip()
        description = str(data.get('description', '')).strip()
        if not title or not description:
            raise AssessmentUnavailable("Model response is missing title or description")

        return Assessment(title=title, description=description, source="remote")

    async def is_available(self) -> bool:
        """Check that Ollama answers and serves the configured model."""
        try:
            models = await self.client.list()
        except Exception:
            return False

        names = []
        for model in models.get('models', []) or []:
            name = getattr(model, 'model', None)
            if name is None and isinstance(model, dict):
                name = model.get('model') or model.get('name')
            if name:
                names.append(name)
        return self.model_name in names

    async def summarize(self, pitch: str, similarity: float) -> Assessment:
        start_time = datetime.now()
        try:
            response = await self.client.chat(
                model=self.model_name,
                messages=self._build_messages(pitch, similarity),
                format='json',
                options={
                    'temperature': 0.4,
                    'top_p': 0.9
                }
            )
        except ollama.ResponseError as e:
            raise AssessmentUnavailable(f"Ollama model error: {e}") from e
        except Exception as e:
            raise AssessmentUnavailable(f"Ollama request failed: {e}") from e
        finally:
            self.last_processing_time_ms = int((datetime.now() - start_time).total_seconds() * 1000)

        content = (response.get('message', {}) or {}).get('content', '') or ''
        if not content.strip():
            raise AssessmentUnavailable("Ollama returned an empty response")

        return self._parse(content)
