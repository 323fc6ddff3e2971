import uuid

from sqlalchemy import (
    Column,
    ForeignKey,
    String,
    Float,
    Integer,
    Boolean,
    TIMESTAMP,
    Text,
    Uuid,
    CheckConstraint,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.core.database import Base


# =========================
# User
# =========================
class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    email = Column(String, nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # Relationships
    hotels = relationship(
        "Hotel",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


# =========================
# Hotel (root of one analysis)
# =========================
class Hotel(Base):
    """
    One analyzed property.
    Created once per submitted form, never updated afterwards.
    """

    __tablename__ = "hotels"
    __table_args__ = (
        CheckConstraint(
            "accessibility_score IS NULL OR "
            "(accessibility_score >= 0 AND accessibility_score <= 10)",
            name="ck_hotels_accessibility_score_range",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    url = Column(Text, nullable=False)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)

    accessibility_score = Column(Float, nullable=True)  # 0..10

    user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # Relationships
    owner = relationship("User", back_populates="hotels")

    features = relationship(
        "AccessibilityFeature",
        back_populates="hotel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    compliance_notes = relationship(
        "ComplianceNote",
        back_populates="hotel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    sentiment_insights = relationship(
        "SentimentInsight",
        back_populates="hotel",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


# =========================
# Dependent records (fan-out of one analysis)
# =========================
class AccessibilityFeature(Base):
    __tablename__ = "accessibility_features"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    hotel_id = Column(
        Uuid,
        ForeignKey("hotels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String, nullable=False)  # "Wheelchair Access"
    available = Column(Boolean, nullable=False, default=True)
    description = Column(Text, nullable=True)
    position = Column(Integer, nullable=False, default=0)  # order within the batch

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    hotel = relationship("Hotel", back_populates="features")


class ComplianceNote(Base):
    __tablename__ = "compliance_notes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    hotel_id = Column(
        Uuid,
        ForeignKey("hotels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    note = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    hotel = relationship("Hotel", back_populates="compliance_notes")


class SentimentInsight(Base):
    __tablename__ = "sentiment_insights"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    hotel_id = Column(
        Uuid,
        ForeignKey("hotels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    insight = Column(Text, nullable=False)  # summary of guest feedback
    position = Column(Integer, nullable=False, default=0)

    created_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    hotel = relationship("Hotel", back_populates="sentiment_insights")
