import logging
from datetime import timedelta
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, status

from aitinerary.api.params import DAY_ID, ITINERARY_ID
from aitinerary.core.day_planner import DayPlanner, get_planner_factory
from aitinerary.core.errors import GenerationError
from aitinerary.core.repository import MongoDBRepo, get_repo
from aitinerary.core.schemas import (
    ActivityReorderRequest,
    Day,
    DayGenerateRequest,
    DayReorderRequest,
    User,
)
from aitinerary.core.security import get_current_user, get_owned_itinerary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/days", tags=["days"])


@router.get("/{itinerary_id}", response_model=list[Day])
def get_days(
    itinerary_id: str = ITINERARY_ID,
    current_user: User = Depends(get_current_user),
    repo: MongoDBRepo = Depends(get_repo),
):
    """Get all days for an itinerary owned by the caller."""
    get_owned_itinerary(repo, itinerary_id, current_user)
    return repo.get_days(itinerary_id)


@router.get("/explore/{itinerary_id}", response_model=list[Day])
def get_public_days(
    itinerary_id: str = ITINERARY_ID,
    repo: MongoDBRepo = Depends(get_repo),
):
    """Days of a public itinerary; no authentication required."""
    itinerary = repo.get_itinerary(itinerary_id)
    if not itinerary:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Itinerary not found")
    if itinerary.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")
    return repo.get_days(itinerary_id)


@router.post("/reorder")
def reorder_days(
    payload: DayReorderRequest,
    current_user: User = Depends(get_current_user),
    repo: MongoDBRepo = Depends(get_repo),
):
    """Store new positions, dates and contents for the days of an itinerary."""
    get_owned_itinerary(repo, payload.itinerary_id, current_user)

    try:
        for day in payload.days:
            if not repo.update_day(payload.itinerary_id, day):
                raise ValueError(f"Day {day.id} does not belong to itinerary {payload.itinerary_id}")
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {
        "itineraryId": payload.itinerary_id,
        "days": [day.model_dump(mode="json", by_alias=True) for day in payload.days],
        "message": "Days reordered successfully",
    }


@router.post("/activities/reorder")
def reorder_activities(
    payload: ActivityReorderRequest,
    current_user: User = Depends(get_current_user),
    repo: MongoDBRepo = Depends(get_repo),
):
    """Replace the activity list of a day."""
    day = repo.get_day(payload.day_id)
    if not day:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Day not found")
    get_owned_itinerary(repo, day.parent_itinerary_id, current_user)

    try:
        repo.set_day_activities(payload.day_id, payload.activities)
    except Exception as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {
        "dayId": payload.day_id,
        "activities": [a.model_dump(mode="json", by_alias=True) for a in payload.activities],
        "message": "activities reordered successfully",
    }


@router.post("/generate", response_model=Day, status_code=status.HTTP_201_CREATED)
def generate_day(
    payload: DayGenerateRequest,
    current_user: User = Depends(get_current_user),
    repo: MongoDBRepo = Depends(get_repo),
    make_planner: Callable[[], DayPlanner] = Depends(get_planner_factory),
):
    """
    Append one AI-generated day to the end of an itinerary.

    The new day avoids every activity already in the itinerary and follows
    the owner's saved preferences. The itinerary end date moves forward by
    one day.
    """
    itinerary = get_owned_itinerary(repo, payload.itinerary_id, current_user)

    try:
        days = repo.get_days(itinerary.id)
        preferences = None
        if itinerary.user_id:
            owner = repo.get_user(itinerary.user_id)
            if owner:
                preferences = owner.preferences

        new_date = itinerary.end_date + timedelta(days=1)
        current_activities = [activity.activity for day in days for activity in day.activities]

        new_day = make_planner().build_day(
            itinerary,
            day_number=len(days) + 1,
            day_date=new_date,
            current_activities=current_activities,
            preferences=preferences,
        )

        repo.save_day(new_day)
        repo.set_itinerary_end_date(itinerary.id, new_date)
    except GenerationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"error generating new day: {e}"
        )
    except Exception as e:
        logger.error(f"Failed to generate day for {itinerary.id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"error generating new day: {e}"
        )
    return new_day


@router.delete("/{itinerary_id}/{day_id}")
def delete_day(
    itinerary_id: str = ITINERARY_ID,
    day_id: str = DAY_ID,
    current_user: User = Depends(get_current_user),
    repo: MongoDBRepo = Depends(get_repo),
):
    """Delete a day, then renumber and re-date the rest from the start date."""
    itinerary = get_owned_itinerary(repo, itinerary_id, current_user)

    try:
        deleted = repo.delete_day(itinerary_id, day_id)
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Day not found")

        day_date = itinerary.start_date
        for index, day in enumerate(repo.get_days(itinerary_id)):
            repo.set_day_position(day.id, index + 1, day_date)
            day_date += timedelta(days=1)

        repo.set_itinerary_end_date(itinerary_id, itinerary.end_date - timedelta(days=1))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete day {day_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return {"message": "Day deleted successfully"}
