"""
Prompt construction and parsing of language model output for day plans.
"""

import json
from typing import Any

from aitinerary.core.schemas import DayPlan, UserPreferences

SYSTEM_PROMPT = (
    "You are a travel planner. You answer with a single JSON object and nothing else: "
    "no Markdown, no commentary."
)

DAY_FORMAT = '{"activities": [{"time": "9:00 AM", "location": "Name of the place"}]}'

# Plain-language rendering of each questionnaire answer
_PREFERENCE_PHRASES = {
    "kids": {"Yes": "The group is traveling with kids.", "No": "No kids are traveling."},
    "pets": {"Yes": "A pet is coming along.", "No": "No pets are coming along."},
    "location_preference": {
        "City": "They prefer bustling city spots.",
        "Countryside": "They prefer tranquil countryside spots.",
    },
    "activity_preference": {
        "Adventure": "They enjoy adventurous activities.",
        "Relaxation": "They enjoy relaxing activities.",
    },
    "culinary_preference": {
        "Fine Dining": "They are interested in fine dining.",
        "Local Cuisine": "They are interested in local cuisine.",
    },
    "exploration_preference": {
        "Structured tours": "They prefer structured tours.",
        "Independent exploration": "They prefer exploring independently.",
    },
    "nightlife_importance": {
        "Very important": "Nightlife is very important to them.",
        "Somewhat important": "Nightlife is somewhat important to them.",
        "Not important": "Nightlife is not important to them.",
    },
    "cultural_interest": {
        "Yes": "They have a strong interest in local culture.",
        "No": "They have little interest in local culture.",
    },
}


def describe_preferences(preferences: UserPreferences | None) -> list[str]:
    if preferences is None:
        return []
    lines = []
    for field, value in preferences.answered().items():
        if field == "people_in_party":
            lines.append(f"The party has {value} people.")
        elif field == "budget":
            lines.append(f"The budget is about {value} USD per day.")
        elif field in _PREFERENCE_PHRASES:
            lines.append(_PREFERENCE_PHRASES[field][value])
    return lines


def build_day_prompt(
    location: str,
    current_activities: list[str],
    preferences: UserPreferences | None = None,
) -> list[dict[str, Any]]:
    """Chat messages asking for one day of activities in `location`."""
    parts = [
        f"Plan one day of travel in {location}.",
        "Suggest between 4 and 6 activities, in chronological order, each at a real, "
        "specific place that can be found on a map.",
        f"Respond with JSON in exactly this format: {DAY_FORMAT}",
    ]
    if current_activities:
        parts.append(
            "Do not include any of these places, they are already planned: "
            + ", ".join(current_activities)
        )
    traveler = describe_preferences(preferences)
    if traveler:
        parts.append("About the traveler: " + " ".join(traveler))
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "\n".join(parts)},
    ]


def build_fix_json_prompt(raw_text: str) -> list[dict[str, Any]]:
    """Chat messages asking the model to repair malformed JSON."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                "The following text was supposed to be valid JSON in the format "
                f"{DAY_FORMAT} but it cannot be parsed. Return only the corrected JSON.\n\n"
                f"{raw_text}"
            ),
        },
    ]


def parse_day_plan(raw_text: str) -> DayPlan:
    """Parse LLM output into a DayPlan, handling fenced and wrapped JSON."""
    text = (raw_text or "").strip()
    try:
        return DayPlan.model_validate_json(text)
    except ValueError:
        pass

    # Strip markdown code fences ```json ... ``` or ``` ... ```
    if text.startswith("```"):
        body = text.lstrip("`")
        if body.lower().startswith("json"):
            body = body[4:]
        body = body.strip()
        if body.endswith("```"):
            body = body[:-3]
        text = body.strip()
        try:
            return DayPlan.model_validate_json(text)
        except ValueError:
            pass

    # Extract content between first '{' and last '}'
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        try:
            data = json.loads(text[start : end + 1])
        except ValueError:
            data = None
        if isinstance(data, dict):
            return DayPlan.model_validate(data)

    raise ValueError(f"Could not parse day plan from model output: {raw_text[:200]!r}")
