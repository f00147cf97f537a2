from fastapi import Path

ID_PATTERN = "^[a-zA-Z0-9_-]+$"

ITINERARY_ID = Path(
    ...,
    min_length=1,
    max_length=50,
    pattern=ID_PATTERN,
    description="Itinerary ID",
)

DAY_ID = Path(
    ...,
    min_length=1,
    max_length=50,
    pattern=ID_PATTERN,
    description="Day ID",
)
