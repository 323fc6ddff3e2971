from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel, Field


# -----------------------------------------------------------------------------
# SCORING MODULE - where the accessibility "analysis" comes from
# The orchestrator only persists what an engine returns; a real engine
# (site crawler, review sentiment, compliance rules) plugs in here.
# -----------------------------------------------------------------------------


class FeatureFinding(BaseModel):
    name: str = Field(min_length=1)
    available: bool = True
    description: Optional[str] = None


class ScoringResult(BaseModel):
    accessibility_score: Optional[float] = Field(default=None, ge=0, le=10)
    features: List[FeatureFinding] = []
    compliance_notes: List[str] = []
    sentiment_insights: List[str] = []


class ScoringEngine(ABC):
    """Produces the score and findings for one hotel."""

    @abstractmethod
    async def analyze(self, url: str, name: str, location: str) -> ScoringResult:
        raise NotImplementedError


MOCK_SCORE = 7.5

MOCK_FEATURES = [
    FeatureFinding(
        name="Wheelchair Access",
        available=True,
        description="Ramps and elevator access throughout the property",
    ),
    FeatureFinding(
        name="Braille Signage",
        available=True,
        description="Available in elevators and room numbers",
    ),
    FeatureFinding(
        name="Hearing Loops",
        available=False,
        description="Not available in conference rooms",
    ),
    FeatureFinding(
        name="Accessible Bathrooms",
        available=True,
        description="Modified bathrooms in all public areas",
    ),
]

MOCK_COMPLIANCE_NOTES = [
    "Meets ADA requirements for entrance accessibility",
    "Emergency evacuation procedures need updating",
    "Staff training on accessibility assistance recommended",
]

MOCK_SENTIMENT_INSIGHTS = [
    "Positive feedback on wheelchair accessibility and staff assistance",
    "Some concerns about limited availability of accessible rooms",
    "High praise for clear signage and navigation",
]


class MockScoringEngine(ScoringEngine):
    """Same canned answer for every hotel. No network, no scraping."""

    async def analyze(self, url: str, name: str, location: str) -> ScoringResult:
        return ScoringResult(
            accessibility_score=MOCK_SCORE,
            features=[f.model_copy() for f in MOCK_FEATURES],
            compliance_notes=list(MOCK_COMPLIANCE_NOTES),
            sentiment_insights=list(MOCK_SENTIMENT_INSIGHTS),
        )


_default_engine = MockScoringEngine()


# FastAPI dependency; override it to plug in another engine
def get_scoring_engine() -> ScoringEngine:
    return _default_engine
