import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from aitinerary.api.params import ITINERARY_ID
from aitinerary.core.day_planner import DayPlanner, get_planner_factory
from aitinerary.core.errors import GenerationError
from aitinerary.core.repository import MongoDBRepo, get_repo
from aitinerary.core.schemas import (
    GeneratedItinerary,
    Itinerary,
    ItineraryGenerateRequest,
    ItineraryUpdate,
    User,
)
from aitinerary.core.security import get_current_user, get_optional_user, get_owned_itinerary
from aitinerary.core.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/itineraries", tags=["itineraries"])


@router.post(
    "/generate", response_model=GeneratedItinerary, status_code=status.HTTP_201_CREATED
)
def generate_itinerary(
    payload: ItineraryGenerateRequest,
    current_user: Optional[User] = Depends(get_optional_user),
    repo: MongoDBRepo = Depends(get_repo),
    make_planner: Callable[[], DayPlanner] = Depends(get_planner_factory),
):
    """
    Generate a complete itinerary, one day at a time.

    Each day is planned to avoid the places of the days before it. Anonymous
    requests produce a public itinerary. Nothing is stored unless every day
    is generated.
    """
    max_days = get_settings().max_itinerary_days
    if payload.day_count > max_days:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Itineraries are limited to {max_days} days",
        )

    itinerary = Itinerary(
        id=uuid.uuid4().hex,
        user_id=current_user.id if current_user else None,
        name=payload.name or f"Trip to {payload.location}",
        location=payload.location,
        start_date=payload.start_date,
        end_date=payload.end_date,
        created_at=datetime.utcnow(),
    )
    preferences = current_user.preferences if current_user else None

    days = []
    planned_activities: list[str] = []
    try:
        planner = make_planner()
        for offset in range(payload.day_count):
            day = planner.build_day(
                itinerary,
                day_number=offset + 1,
                day_date=payload.start_date + timedelta(days=offset),
                current_activities=planned_activities,
                preferences=preferences,
            )
            days.append(day)
            planned_activities.extend(a.activity for a in day.activities)
    except GenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"error generating itinerary: {e}",
        )

    itinerary.image_url = days[0].image_url
    repo.save_itinerary(itinerary)
    for day in days:
        repo.save_day(day)
    logger.info(f"Generated itinerary {itinerary.id} for {itinerary.location} ({len(days)} days)")
    return GeneratedItinerary(itinerary=itinerary, days=days)


@router.get("", response_model=list[Itinerary])
def list_my_itineraries(
    current_user: User = Depends(get_current_user),
    repo: MongoDBRepo = Depends(get_repo),
):
    """Get all itineraries for the authenticated user."""
    return repo.list_user_itineraries(current_user.id)


@router.get("/explore", response_model=list[Itinerary])
def list_public_itineraries(repo: MongoDBRepo = Depends(get_repo)):
    return repo.list_public_itineraries()


@router.get("/{itinerary_id}", response_model=Itinerary)
def get_itinerary(
    itinerary_id: str = ITINERARY_ID,
    current_user: Optional[User] = Depends(get_optional_user),
    repo: MongoDBRepo = Depends(get_repo),
):
    itinerary = repo.get_itinerary(itinerary_id)
    if not itinerary:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Itinerary not found")
    if itinerary.user_id and (current_user is None or current_user.id != itinerary.user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return itinerary


@router.patch("/{itinerary_id}", response_model=Itinerary)
def update_itinerary(
    update: ItineraryUpdate,
    itinerary_id: str = ITINERARY_ID,
    current_user: User = Depends(get_current_user),
    repo: MongoDBRepo = Depends(get_repo),
):
    get_owned_itinerary(repo, itinerary_id, current_user)
    fields = update.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if fields.get("name", "") is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="name cannot be null"
        )
    itinerary = repo.update_itinerary(itinerary_id, fields)
    if not itinerary:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Itinerary not found")
    return itinerary


@router.delete("/{itinerary_id}")
def delete_itinerary(
    itinerary_id: str = ITINERARY_ID,
    current_user: User = Depends(get_current_user),
    repo: MongoDBRepo = Depends(get_repo),
):
    """Delete an itinerary by ID and cascade delete its days."""
    get_owned_itinerary(repo, itinerary_id, current_user)
    if not repo.delete_itinerary(itinerary_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Itinerary not found")
    return {"message": "Itinerary deleted successfully"}
