"""
Day generation: ask the language model for a day of activities, then enrich
each activity with an address, coordinates and a cover image for the day.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import date
from typing import Callable, Protocol

from aitinerary.core.errors import GenerationError
from aitinerary.core.geo_service import GeoService
from aitinerary.core.image_search_service import ImageSearchService
from aitinerary.core.prompts import build_day_prompt, build_fix_json_prompt, parse_day_plan
from aitinerary.core.retry import retry
from aitinerary.core.schemas import Activity, Day, DayPlan, Itinerary, UserPreferences
from aitinerary.core.settings import get_settings

logger = logging.getLogger(__name__)


class ChatModel(Protocol):
    def chat(self, messages: list[dict], temperature: float = 1.0) -> str: ...


class DayPlanner:
    def __init__(
        self,
        llm: ChatModel,
        geo: GeoService,
        images: ImageSearchService,
        attempts: int = 2,
        temperature: float = 0.7,
    ) -> None:
        self.llm = llm
        self.geo = geo
        self.images = images
        self.attempts = attempts
        self.temperature = temperature

    def _generate_once(
        self,
        location: str,
        current_activities: list[str],
        preferences: UserPreferences | None,
    ) -> DayPlan:
        raw = self.llm.chat(
            build_day_prompt(location, current_activities, preferences),
            temperature=self.temperature,
        )
        try:
            return parse_day_plan(raw)
        except ValueError:
            logger.info("[DayPlanner] Model returned malformed JSON, asking it to fix the output")
            fixed = self.llm.chat(build_fix_json_prompt(raw), temperature=0)
            return parse_day_plan(fixed)

    def generate_plan(
        self,
        location: str,
        current_activities: list[str],
        preferences: UserPreferences | None = None,
    ) -> DayPlan:
        try:
            plan = retry(
                self.attempts,
                lambda: self._generate_once(location, current_activities, preferences),
            )
        except Exception as e:
            raise GenerationError(str(e)) from e

        if not plan.activities:
            raise GenerationError("model returned no activities")
        return plan

    def build_day(
        self,
        itinerary: Itinerary,
        day_number: int,
        day_date: date,
        current_activities: list[str],
        preferences: UserPreferences | None = None,
    ) -> Day:
        """Generate and enrich a new, unsaved day for an itinerary."""
        plan = self.generate_plan(itinerary.location, current_activities, preferences)

        image_url = self.images.search(f"{plan.activities[0].location}, {itinerary.location}")

        activities = []
        for index, planned in enumerate(plan.activities):
            query = f"{planned.location}, {itinerary.location}"
            address = self.geo.get_address(query)
            coordinates = self.geo.get_coordinates(query)
            activities.append(
                Activity(
                    time=planned.time,
                    activity=planned.location,
                    activity_number=index + 1,
                    address=address,
                    coordinates=coordinates,
                )
            )

        logger.info(
            f"[DayPlanner] Generated day {day_number} in {itinerary.location} "
            f"with {len(activities)} activities"
        )
        return Day(
            id=uuid.uuid4().hex,
            parent_itinerary_id=itinerary.id,
            day_number=day_number,
            date=day_date,
            overview=f"Day {day_number} in {itinerary.location}",
            image_url=image_url,
            activities=activities,
        )


_day_planner: DayPlanner | None = None
_day_planner_lock = threading.Lock()


def get_day_planner() -> DayPlanner:
    """
    Process-wide planner wired from settings.

    Raises GenerationError when the language model client cannot be created.
    """
    global _day_planner
    if _day_planner is None:
        with _day_planner_lock:
            if _day_planner is None:
                from aitinerary.core.llm_provider import LLMProvider

                settings = get_settings()
                try:
                    llm = LLMProvider(settings.aisuite_model)
                except RuntimeError as e:
                    raise GenerationError(str(e)) from e
                _day_planner = DayPlanner(
                    llm=llm,
                    geo=GeoService(settings.google_maps_api_key),
                    images=ImageSearchService(
                        settings.google_search_api_key, settings.google_search_engine_id
                    ),
                    attempts=settings.generation_attempts,
                    temperature=settings.llm_temperature,
                )
    return _day_planner


def get_planner_factory() -> Callable[[], DayPlanner]:
    """
    Dependency handing routes a planner factory.

    Routes build the planner inside their own error handling so a client
    that fails to initialize is reported like any other generation failure.
    """
    return get_day_planner
