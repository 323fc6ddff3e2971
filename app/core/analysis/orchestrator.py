import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from app.core import models, schemas
from app.core.analysis.scoring import ScoringEngine
from app.core.analysis.store import HotelStore
from app.core.errors import (
    AnalysisError,
    PersistenceError,
    StoreError,
    Unauthenticated,
    UnexpectedError,
)


# -----------------------------------------------------------------------------
# ORCHESTRATOR MODULE
# Purpose: turn one submitted form into one persisted analysis:
# authenticate -> hotel row -> features -> compliance -> sentiment -> result
# Steps run one after another; the first failure stops the run and the
# whole transaction is rolled back, so no half-written hotel is left behind.
# -----------------------------------------------------------------------------

logger = logging.getLogger(__name__)


class AnalysisState(Enum):
    """Where a single analyze_hotel() call currently is."""

    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    CREATING_HOTEL = "creating_hotel"
    CREATING_FEATURES = "creating_features"
    CREATING_COMPLIANCE = "creating_compliance"
    CREATING_SENTIMENT = "creating_sentiment"
    DONE = "done"
    FAILED = "failed"


_NEXT_STATE = {
    AnalysisState.IDLE: AnalysisState.AUTHENTICATING,
    AnalysisState.AUTHENTICATING: AnalysisState.CREATING_HOTEL,
    AnalysisState.CREATING_HOTEL: AnalysisState.CREATING_FEATURES,
    AnalysisState.CREATING_FEATURES: AnalysisState.CREATING_COMPLIANCE,
    AnalysisState.CREATING_COMPLIANCE: AnalysisState.CREATING_SENTIMENT,
    AnalysisState.CREATING_SENTIMENT: AnalysisState.DONE,
}

_TERMINAL = {AnalysisState.DONE, AnalysisState.FAILED}


class AnalysisRun:
    """Tracks the state machine of one run and logs every transition."""

    def __init__(self):
        self.state = AnalysisState.IDLE
        self.user_id: Optional[uuid.UUID] = None
        self.start_time = datetime.now()
        self.logs: List[Dict[str, Any]] = []
        self.reason: Optional[str] = None

    def advance(self, state: AnalysisState) -> None:
        if _NEXT_STATE.get(self.state) is not state:
            raise RuntimeError(
                f"Illegal transition {self.state.value} -> {state.value}"
            )
        self._record(state, f"-> {state.value}")
        logger.info(f"[User {self.user_id}] analysis: {state.value}")

    def fail(self, reason: str) -> None:
        if self.state in _TERMINAL:
            raise RuntimeError(f"Run already finished ({self.state.value})")
        self.reason = reason
        self._record(AnalysisState.FAILED, f"{self.state.value} failed: {reason}")
        logger.error(f"[User {self.user_id}] analysis failed: {reason}")

    def _record(self, state: AnalysisState, message: str) -> None:
        self.state = state
        self.logs.append(
            {
                "timestamp": datetime.now().isoformat(),
                "state": state.value,
                "message": message,
                "elapsed_seconds": (datetime.now() - self.start_time).total_seconds(),
            }
        )


class HotelAnalysis:
    """The aggregate handed back to the caller: one hotel and its three lists."""

    def __init__(
        self,
        hotel: models.Hotel,
        features: List[models.AccessibilityFeature],
        compliance: List[models.ComplianceNote],
        sentiment: List[models.SentimentInsight],
    ):
        self.hotel = hotel
        self.features = features
        self.compliance = compliance
        self.sentiment = sentiment


async def analyze_hotel(
    form: schemas.HotelAnalysisRequest,
    resolve_user: Callable[[], Awaitable[Optional[models.User]]],
    store_factory: Callable[[uuid.UUID], HotelStore],
    engine: ScoringEngine,
    run: Optional[AnalysisRun] = None,
) -> HotelAnalysis:
    """
    Authenticate the caller, then write the hotel and its dependent records.

    Args:
        form: validated url / name / location
        resolve_user: auth collaborator, returns the current user or raises
            Unauthenticated
        store_factory: builds a HotelStore scoped to the resolved user
        engine: supplies the score and the findings to persist
        run: optional tracker, pass one in to inspect the state afterwards

    Returns:
        HotelAnalysis with every inserted row

    Raises:
        Unauthenticated: no valid session; nothing was written
        PersistenceError: a write was rejected; everything was rolled back
        UnexpectedError: anything else
    """
    run = run or AnalysisRun()

    # 1. Who is asking? Must happen before any write
    run.advance(AnalysisState.AUTHENTICATING)
    try:
        user = await resolve_user()
    except AnalysisError as error:
        run.fail(error.message)
        raise
    except Exception as error:
        run.fail(str(error))
        raise UnexpectedError() from error

    if user is None:
        error = Unauthenticated()
        run.fail(error.message)
        raise error

    run.user_id = user.id
    store = store_factory(user.id)

    try:
        # 2. Root record
        run.advance(AnalysisState.CREATING_HOTEL)
        scoring = await engine.analyze(form.url, form.name, form.location)
        hotel = await _write(
            "hotel",
            store.insert_hotel(
                {
                    "url": form.url,
                    "name": form.name,
                    "location": form.location,
                    "accessibility_score": scoring.accessibility_score,
                }
            ),
        )

        # 3. Features
        run.advance(AnalysisState.CREATING_FEATURES)
        features = await _write(
            "features",
            store.insert_features(
                [{"hotel_id": hotel.id, **f.model_dump()} for f in scoring.features]
            ),
        )

        # 4. Compliance notes
        run.advance(AnalysisState.CREATING_COMPLIANCE)
        compliance = await _write(
            "compliance",
            store.insert_compliance_notes(
                [{"hotel_id": hotel.id, "note": n} for n in scoring.compliance_notes]
            ),
        )

        # 5. Sentiment insights
        run.advance(AnalysisState.CREATING_SENTIMENT)
        sentiment = await _write(
            "sentiment",
            store.insert_sentiment_insights(
                [
                    {"hotel_id": hotel.id, "insight": i}
                    for i in scoring.sentiment_insights
                ]
            ),
        )

        await _write("analysis", store.commit())

    except AnalysisError as error:
        await _rollback(store, run)
        run.fail(error.message)
        raise
    except Exception as error:
        await _rollback(store, run)
        run.fail(str(error))
        raise UnexpectedError() from error

    # 6. Everything landed
    run.advance(AnalysisState.DONE)
    return HotelAnalysis(
        hotel=hotel, features=features, compliance=compliance, sentiment=sentiment
    )


async def _write(stage: str, operation: Awaitable[Any]) -> Any:
    """Await a store call and translate its failure into PersistenceError(stage)."""
    try:
        return await operation
    except StoreError as error:
        raise PersistenceError(stage) from error


async def _rollback(store: HotelStore, run: AnalysisRun) -> None:
    try:
        await store.rollback()
    except Exception as error:
        # Keep raising the error that caused the rollback
        logger.error(f"[User {run.user_id}] rollback failed: {error}")
