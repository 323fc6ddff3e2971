# app/core/analysis/store.py
"""
STORE MODULE - Typed gateway to the four analysis tables

Purpose:
    1. Insert one hotel row and batches of its dependent rows
    2. Read them back, but only for the owner they belong to
    3. Leave the transaction boundary to the caller (commit / rollback)

Every write goes through flush() so ids and created_at are filled in,
nothing is committed until commit() is called.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence, Type

from sqlalchemy import desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import models
from app.core.errors import StoreError

logger = logging.getLogger(__name__)


class HotelStore:
    """Row-level scoped access to hotels and their dependent records."""

    def __init__(self, db: AsyncSession, owner_id: uuid.UUID):
        self.db = db
        self.owner_id = owner_id

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert_hotel(self, row: Dict[str, Any]) -> models.Hotel:
        hotel = models.Hotel(**row, user_id=self.owner_id)
        inserted = await self._insert(models.Hotel, [hotel])
        if not inserted or inserted[0].id is None:
            raise StoreError(models.Hotel.__tablename__, "insert returned no row")
        return inserted[0]

    async def insert_features(
        self, rows: Sequence[Dict[str, Any]]
    ) -> List[models.AccessibilityFeature]:
        return await self._insert_dependents(models.AccessibilityFeature, rows)

    async def insert_compliance_notes(
        self, rows: Sequence[Dict[str, Any]]
    ) -> List[models.ComplianceNote]:
        return await self._insert_dependents(models.ComplianceNote, rows)

    async def insert_sentiment_insights(
        self, rows: Sequence[Dict[str, Any]]
    ) -> List[models.SentimentInsight]:
        return await self._insert_dependents(models.SentimentInsight, rows)

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as error:
            logger.error(f"Commit failed for owner {self.owner_id}: {error}")
            raise StoreError("transaction", str(error)) from error

    async def rollback(self) -> None:
        await self.db.rollback()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def select_hotels(self, limit: int = 50) -> List[models.Hotel]:
        query = (
            select(models.Hotel)
            .where(models.Hotel.user_id == self.owner_id)
            .order_by(desc(models.Hotel.created_at))
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def select_hotel(self, hotel_id: uuid.UUID) -> Optional[models.Hotel]:
        query = select(models.Hotel).where(
            models.Hotel.id == hotel_id, models.Hotel.user_id == self.owner_id
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def select_features(
        self, hotel_id: uuid.UUID
    ) -> List[models.AccessibilityFeature]:
        return await self._select_dependents(models.AccessibilityFeature, hotel_id)

    async def select_compliance_notes(
        self, hotel_id: uuid.UUID
    ) -> List[models.ComplianceNote]:
        return await self._select_dependents(models.ComplianceNote, hotel_id)

    async def select_sentiment_insights(
        self, hotel_id: uuid.UUID
    ) -> List[models.SentimentInsight]:
        return await self._select_dependents(models.SentimentInsight, hotel_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _insert(self, model: Type[models.Base], objects: List[Any]) -> List[Any]:
        table = model.__tablename__
        try:
            self.db.add_all(objects)
            await self.db.flush()
            # Pick up server defaults (created_at)
            for obj in objects:
                await self.db.refresh(obj)
        except SQLAlchemyError as error:
            logger.error(f"Insert into {table} failed: {error}")
            raise StoreError(table, str(error)) from error

        logger.info(f"Inserted {len(objects)} row(s) into {table}")
        return objects

    async def _insert_dependents(
        self, model: Type[models.Base], rows: Sequence[Dict[str, Any]]
    ) -> List[Any]:
        if not rows:
            return []

        hotel_ids = {row.get("hotel_id") for row in rows}
        await self._ensure_owned(model.__tablename__, hotel_ids)

        # Batch index keeps the read-back order stable; created_at ties within a batch
        objects = [
            model(**{"position": index, **row}) for index, row in enumerate(rows)
        ]
        return await self._insert(model, objects)

    async def _ensure_owned(self, table: str, hotel_ids: set) -> None:
        """Every dependent row must point at a hotel this owner has."""
        if None in hotel_ids:
            raise StoreError(table, "hotel_id is required")

        query = select(func.count(models.Hotel.id)).where(
            models.Hotel.id.in_(list(hotel_ids)),
            models.Hotel.user_id == self.owner_id,
        )
        try:
            owned = (await self.db.execute(query)).scalar_one()
        except SQLAlchemyError as error:
            raise StoreError(table, str(error)) from error

        if owned != len(hotel_ids):
            raise StoreError(table, "hotel_id does not reference an owned hotel")

    async def _select_dependents(
        self, model: Type[models.Base], hotel_id: uuid.UUID
    ) -> List[Any]:
        query = (
            select(model)
            .join(models.Hotel, models.Hotel.id == model.hotel_id)
            .where(model.hotel_id == hotel_id, models.Hotel.user_id == self.owner_id)
            .order_by(model.created_at, model.position)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
