from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire and in MongoDB."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Itinerary & Day Schemas
# =============================================================================


class Coordinates(CamelModel):
    lat: float
    lng: float


class Activity(CamelModel):
    time: str = Field(..., description="Local time label, e.g., '09:00 AM'")
    activity: str = Field(..., description="Name of the place or activity")
    activity_number: int = Field(..., ge=1, description="1-based position within the day")
    address: str | None = None
    coordinates: Coordinates | None = None


class Day(CamelModel):
    id: str
    parent_itinerary_id: str
    day_number: int = Field(..., ge=1)
    date: date
    overview: str
    image_url: str | None = None
    activities: list[Activity] = Field(default_factory=list)


class Itinerary(CamelModel):
    id: str
    user_id: str | None = Field(
        None, description="Owner user ID; None marks a public (explore) itinerary"
    )
    name: str
    location: str
    start_date: date
    end_date: date
    image_url: str | None = None
    created_at: datetime


class ItineraryGenerateRequest(CamelModel):
    location: str = Field(..., min_length=1, max_length=200)
    start_date: date
    end_date: date
    name: str | None = Field(None, max_length=120)

    @model_validator(mode="after")
    def check_date_range(self) -> "ItineraryGenerateRequest":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self

    @property
    def day_count(self) -> int:
        return (self.end_date - self.start_date).days + 1


class ItineraryUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    image_url: str | None = None


class GeneratedItinerary(CamelModel):
    itinerary: Itinerary
    days: list[Day]


class DayGenerateRequest(CamelModel):
    itinerary_id: str = Field(..., min_length=1)


class DayReorderRequest(CamelModel):
    itinerary_id: str = Field(..., min_length=1)
    days: list[Day]


class ActivityReorderRequest(CamelModel):
    day_id: str = Field(..., min_length=1)
    activities: list[Activity]


# =============================================================================
# LLM Output Schemas
# =============================================================================


class PlannedActivity(BaseModel):
    time: str
    location: str


class DayPlan(BaseModel):
    activities: list[PlannedActivity] = Field(default_factory=list)


# =============================================================================
# User Schemas
# =============================================================================

YesNo = Literal["Yes", "No"]


class UserPreferences(CamelModel):
    """Answers to the personalization questionnaire. None means unanswered."""

    kids: YesNo | None = None
    pets: YesNo | None = None
    people_in_party: int | None = Field(None, ge=1, le=10)
    budget: int | None = Field(None, ge=100, le=5000, description="Budget per day (USD)")
    location_preference: Literal["City", "Countryside"] | None = None
    activity_preference: Literal["Adventure", "Relaxation"] | None = None
    culinary_preference: Literal["Fine Dining", "Local Cuisine"] | None = None
    exploration_preference: (
        Literal["Structured tours", "Independent exploration"] | None
    ) = None
    nightlife_importance: (
        Literal["Very important", "Somewhat important", "Not important"] | None
    ) = None
    cultural_interest: YesNo | None = None

    def answered(self) -> dict[str, str | int]:
        return self.model_dump(exclude_none=True)


class UserCreate(CamelModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=40, pattern="^[a-zA-Z0-9_.-]+$")
    password: str = Field(..., min_length=8, max_length=72)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"


class User(CamelModel):
    """Complete user model returned by API."""

    id: str
    email: EmailStr
    username: str
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    created_at: datetime


class PreferenceQuestion(CamelModel):
    field: str
    question: str
    kind: Literal["choice", "range"]
    options: list[str] | None = None
    min: int | None = None
    max: int | None = None
    step: int | None = None
    default: int | None = None
