import logging
import uuid
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import models, schemas
from app.core.analysis import orchestrator
from app.core.analysis.scoring import ScoringEngine, get_scoring_engine
from app.core.analysis.store import HotelStore
from app.core.database import get_db
from app.core.errors import PersistenceError, Unauthenticated, UnexpectedError
from app.core.security import (
    get_current_user,
    optional_oauth2_scheme,
    resolve_current_user,
    settings_dep,
)

router = APIRouter(prefix="/hotels", tags=["Hotels"])

db_dep = Annotated[AsyncSession, Depends(get_db)]
user_dep = Annotated[models.User, Depends(get_current_user)]
engine_dep = Annotated[ScoringEngine, Depends(get_scoring_engine)]


@router.post(
    "/analyze",
    response_model=schemas.HotelAnalysisResponse,
    status_code=status.HTTP_201_CREATED,
)
async def analyze_hotel(
    form: schemas.HotelAnalysisRequest,
    db: db_dep,
    settings: settings_dep,
    engine: engine_dep,
    token: Annotated[Optional[str], Depends(optional_oauth2_scheme)],
):
    """
    Analyze one hotel and store the result.
    The token is checked inside the analysis run, before anything is written.
    """
    try:
        analysis = await orchestrator.analyze_hotel(
            form,
            resolve_user=lambda: resolve_current_user(token, db, settings),
            store_factory=lambda owner_id: HotelStore(db, owner_id),
            engine=engine,
        )
    except Unauthenticated as error:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    except (PersistenceError, UnexpectedError) as error:
        logging.error(f"Hotel analysis failed: {error.message}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error.message
        )

    return schemas.HotelAnalysisResponse.model_validate(analysis)


@router.get("", response_model=List[schemas.HotelResponse])
async def list_hotels(current_user: user_dep, db: db_dep, limit: int = 50):
    """Hotels the current user has analyzed, newest first."""
    store = HotelStore(db, current_user.id)
    return await store.select_hotels(limit=limit)


@router.get("/{hotel_id}", response_model=schemas.HotelAnalysisResponse)
async def get_hotel_analysis(hotel_id: uuid.UUID, current_user: user_dep, db: db_dep):
    """Read a stored analysis back from the database."""
    store = HotelStore(db, current_user.id)
    hotel = await store.select_hotel(hotel_id)

    if hotel is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Hotel not found")

    analysis = orchestrator.HotelAnalysis(
        hotel=hotel,
        features=await store.select_features(hotel_id),
        compliance=await store.select_compliance_notes(hotel_id),
        sentiment=await store.select_sentiment_insights(hotel_id),
    )
    return schemas.HotelAnalysisResponse.model_validate(analysis)
