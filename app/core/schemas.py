from datetime import datetime
from typing import Optional, List
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    EmailStr,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
)

_http_url = TypeAdapter(HttpUrl)


# =========================
# USER
# =========================
class UserBase(BaseModel):
    email: EmailStr


class CreateUser(UserBase):
    password: str = Field(min_length=8)
    model_config = ConfigDict(from_attributes=True)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(UserBase):
    id: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =========================
# HOTEL (form input)
# =========================
class HotelAnalysisRequest(BaseModel):
    """
    What the user types into the form.
    All three fields are mandatory; values are stored exactly as given.
    """

    url: str = Field(min_length=1, max_length=2048)
    name: str = Field(min_length=1, max_length=200)
    location: str = Field(min_length=1, max_length=200)

    @field_validator("url", "name", "location")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("url")
    @classmethod
    def http_url(cls, value: str) -> str:
        # Validate, but keep the user's spelling (HttpUrl would normalize it)
        try:
            _http_url.validate_python(value)
        except ValidationError:
            raise ValueError("must be an http(s) URL")
        return value


# =========================
# HOTEL (rows)
# =========================
class HotelResponse(BaseModel):
    id: UUID
    url: str
    name: str
    location: str
    accessibility_score: Optional[float] = Field(default=None, ge=0, le=10)
    user_id: UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FeatureResponse(BaseModel):
    id: UUID
    hotel_id: UUID
    name: str
    available: bool
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ComplianceNoteResponse(BaseModel):
    id: UUID
    hotel_id: UUID
    note: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SentimentInsightResponse(BaseModel):
    id: UUID
    hotel_id: UUID
    insight: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =========================
# ANALYSIS (aggregate)
# =========================
class HotelAnalysisResponse(BaseModel):
    hotel: HotelResponse
    features: List[FeatureResponse] = []
    compliance: List[ComplianceNoteResponse] = []
    sentiment: List[SentimentInsightResponse] = []

    model_config = ConfigDict(from_attributes=True)
