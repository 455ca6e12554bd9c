"""
Assessment adapters: turn a pitch and its best similarity into a short
verdict. A remote assessor is optional enrichment; the rule table is the
always-available fallback tier.
"""

from abc import ABC, abstractmethod
from typing import Optional

from util.logging import logger
from ..vector.types import Assessment

SATURATED_THRESHOLD = 0.8
INNOVATION_THRESHOLD = 0.4


class IAssessor(ABC):
    """Abstract interface for assessment providers."""

    name = "assessor"

    async def is_available(self) -> bool:
        """Capability check used to pick a tier before calling it."""
        return True

    @abstractmethod
    async def summarize(self, pitch: str, similarity: float) -> Assessment:
        """Produce a title and one-sentence description for the pitch."""
        pass


class RuleBasedAssessor(IAssessor):
    """Deterministic similarity-banded verdicts, no I/O."""

    name = "rules"

    def assess(self, pitch: str, similarity: float) -> Assessment:
        if similarity > SATURATED_THRESHOLD:
            return Assessment(
                title="Highly Saturated",
                description="Extremely high similarity detected. This concept is very similar to existing market models.",
                source="fallback",
            )
        if similarity < INNOVATION_THRESHOLD:
            return Assessment(
                title="High Innovation Area",
                description="Your idea is semantically distinct from our registry, suggesting a strong unique value prop.",
                source="fallback",
            )
        return Assessment(
            title="Moderate Novelty",
            description="Your pitch shows some unique angles but overlaps with established semantic patterns.",
            source="fallback",
        )

    async def summarize(self, pitch: str, similarity: float) -> Assessment:
        return self.assess(pitch, similarity)


class TieredAssessor(IAssessor):
    """
    Two-tier assessment strategy.

    The primary tier is only called when it is configured and reports
    itself available. If the availability check or the call itself raises,
    the fallback answers, so summarize never raises.
    """

    name = "tiered"

    def __init__(self, primary: Optional[IAssessor] = None, fallback: Optional[IAssessor] = None):
        self.primary = primary
        self.fallback = fallback or RuleBasedAssessor()

    async def select(self) -> IAssessor:
        """Pick the tier to call for the next assessment."""
        if self.primary is None:
            return self.fallback
        try:
            available = await self.primary.is_available()
        except Exception as e:
            logger.log_assessment(self.primary.name, "error", error=str(e))
            return self.fallback
        if available:
            return self.primary
        logger.log_assessment(self.primary.name, "unavailable")
        return self.fallback

    async def summarize(self, pitch: str, similarity: float) -> Assessment:
        assessor = await self.select()
        if assessor is self.fallback:
            return await self.fallback.summarize(pitch, similarity)

        try:
            assessment = await assessor.summarize(pitch, similarity)
        except Exception as e:
            logger.log_assessment(assessor.name, "error", error=str(e))
            return await self.fallback.summarize(pitch, similarity)

        logger.log_assessment(assessor.name, "success")
        return assessment
