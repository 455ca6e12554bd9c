"""
Observable, cancellable progress reporting for model loading and indexing.

Producers call `publish`; consumers either poll `latest()` or iterate
`subscribe()` from the event loop. Fractions never go backwards within a
phase.
"""

import asyncio
from typing import AsyncIterator, Dict, List, Optional

from ..vector.types import ProgressEvent
from ..vector.vector_math import clamp


class ProgressStream:
    """Progress channel shared between a long-running task and its observers."""

    def __init__(self):
        self._latest: Optional[ProgressEvent] = None
        self._phase_fraction: Dict[str, float] = {}
        self._subscribers: List[asyncio.Queue] = []
        self._closed = False
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, phase: str, fraction: float, message: str = "",
                completed: int = None, total: int = None) -> ProgressEvent:
        """Record a progress observation and fan it out to subscribers."""
        if self._closed:
            raise RuntimeError("Progress stream is closed")

        fraction = clamp(float(fraction), 0.0, 1.0)
        fraction = max(fraction, self._phase_fraction.get(phase, 0.0))
        self._phase_fraction[phase] = fraction

        event = ProgressEvent(
            phase=phase,
            fraction=fraction,
            message=message,
            completed=completed,
            total=total,
        )
        self._latest = event
        for queue in self._subscribers:
            queue.put_nowait(event)
        return event

    def latest(self) -> Optional[ProgressEvent]:
        """Polling handle: the most recent event, or None before any."""
        return self._latest

    def fraction(self, phase: str) -> float:
        return self._phase_fraction.get(phase, 0.0)

    async def subscribe(self) -> AsyncIterator[ProgressEvent]:
        """Yield events published after subscribing until the stream closes."""
        queue: asyncio.Queue = asyncio.Queue()
        if self._closed:
            return
        self._subscribers.append(queue)
        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event
        finally:
            if queue in self._subscribers:
                self._subscribers.remove(queue)

    def cancel(self) -> None:
        """Ask the producer to stop at its next checkpoint."""
        self._cancelled = True

    def close(self) -> None:
        """End all subscriptions. Further publishing is an error."""
        if self._closed:
            return
        self._closed = True
        for queue in self._subscribers:
            queue.put_nowait(None)
