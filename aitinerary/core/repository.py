from __future__ import annotations

import logging
import threading
import uuid
from datetime import date, datetime
from typing import Any

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from aitinerary.core.errors import DuplicateUserError, RepositoryUnavailableError
from aitinerary.core.schemas import (
    Activity,
    Day,
    Itinerary,
    User,
    UserCreate,
    UserPreferences,
)
from aitinerary.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _dump(model: Any) -> dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


class MongoDBRepo:
    def __init__(self, client: MongoClient, database_name: str):
        self.client = client
        self.db = self.client[database_name]

        # Collections
        self.users_collection = self.db.users
        self.itineraries_collection = self.db.itineraries
        self.days_collection = self.db.days

        try:
            self.users_collection.create_index("id", unique=True)
            self.users_collection.create_index("email", unique=True)
            self.users_collection.create_index("username", unique=True)
            self.itineraries_collection.create_index("id", unique=True)
            self.itineraries_collection.create_index("userId")
            self.days_collection.create_index("id", unique=True)
            self.days_collection.create_index([("parentItineraryId", ASCENDING), ("dayNumber", ASCENDING)])
        except PyMongoError as index_error:
            logger.warning(f"Index creation failed (might already exist): {index_error}")

    @classmethod
    def from_settings(cls, settings: Settings) -> MongoDBRepo:
        """Open a repo using the database selected by ENVIRONMENT."""
        if settings.environment == "development":
            mongodb_uri = settings.mongodb_uri_test or settings.mongodb_uri
            database_name = settings.database_name_test
        else:
            mongodb_uri = settings.mongodb_uri
            database_name = settings.database_name
        if not mongodb_uri:
            raise RepositoryUnavailableError("MONGODB_URI environment variable is required")

        logger.info(f"Using database: {database_name} (ENVIRONMENT={settings.environment})")
        client = MongoClient(
            mongodb_uri,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=10000,
            socketTimeoutMS=20000,
            retryWrites=True,
            retryReads=True,
        )
        try:
            client.admin.command("ping")
            logger.info("MongoDB connection successful")
        except PyMongoError as e:
            logger.warning(f"MongoDB connection failed: {str(e)[:200]}")
        return cls(client, database_name)

    # Users
    def create_user(self, user_data: UserCreate, hashed_password: str) -> User:
        user = User(
            id=uuid.uuid4().hex,
            email=user_data.email,
            username=user_data.username,
            created_at=datetime.utcnow(),
        )
        user_doc = _dump(user)
        user_doc["hashedPassword"] = hashed_password
        try:
            self.users_collection.insert_one(user_doc)
        except DuplicateKeyError:
            # A concurrent registration won the unique index
            if self.users_collection.find_one({"email": user_doc["email"]}):
                raise DuplicateUserError("email")
            raise DuplicateUserError("username")
        return user

    def _find_user(self, query: dict[str, Any]) -> dict | None:
        user_doc = self.users_collection.find_one(query)
        if user_doc:
            user_doc.pop("_id", None)  # Remove MongoDB ObjectId
        return user_doc

    def get_user(self, user_id: str) -> User | None:
        user_doc = self._find_user({"id": user_id})
        if user_doc:
            user_doc.pop("hashedPassword", None)
            return User.model_validate(user_doc)
        return None

    def get_user_by_email(self, email: str) -> User | None:
        user_doc = self._find_user({"email": email})
        if user_doc:
            user_doc.pop("hashedPassword", None)
            return User.model_validate(user_doc)
        return None

    def get_user_by_username(self, username: str) -> User | None:
        user_doc = self._find_user({"username": username})
        if user_doc:
            user_doc.pop("hashedPassword", None)
            return User.model_validate(user_doc)
        return None

    def get_user_credentials(self, email: str) -> tuple[User, str] | None:
        """Return the user and its password hash, for login only."""
        user_doc = self._find_user({"email": email})
        if not user_doc or not user_doc.get("hashedPassword"):
            return None
        hashed_password = user_doc.pop("hashedPassword")
        return User.model_validate(user_doc), hashed_password

    def update_user_preferences(self, user_id: str, preferences: UserPreferences) -> User | None:
        result = self.users_collection.update_one(
            {"id": user_id}, {"$set": {"preferences": _dump(preferences)}}
        )
        if result.matched_count == 0:
            return None
        return self.get_user(user_id)

    # Itineraries
    def save_itinerary(self, itinerary: Itinerary) -> Itinerary:
        self.itineraries_collection.insert_one(_dump(itinerary))
        return itinerary

    def get_itinerary(self, itinerary_id: str) -> Itinerary | None:
        itinerary_doc = self.itineraries_collection.find_one({"id": itinerary_id})
        if itinerary_doc:
            itinerary_doc.pop("_id", None)
            return Itinerary.model_validate(itinerary_doc)
        return None

    def _list_itineraries(self, query: dict[str, Any]) -> list[Itinerary]:
        cursor = self.itineraries_collection.find(query).sort("createdAt", DESCENDING)
        itineraries = []
        for itn in cursor:
            itn.pop("_id", None)
            itineraries.append(Itinerary.model_validate(itn))
        return itineraries

    def list_user_itineraries(self, user_id: str) -> list[Itinerary]:
        """Get all itineraries owned by a user, newest first."""
        return self._list_itineraries({"userId": user_id})

    def list_public_itineraries(self) -> list[Itinerary]:
        """Itineraries without an owner are visible on the explore page."""
        return self._list_itineraries({"userId": None})

    def update_itinerary(self, itinerary_id: str, fields: dict[str, Any]) -> Itinerary | None:
        if fields:
            result = self.itineraries_collection.update_one({"id": itinerary_id}, {"$set": fields})
            if result.matched_count == 0:
                return None
        return self.get_itinerary(itinerary_id)

    def set_itinerary_end_date(self, itinerary_id: str, end_date: date) -> None:
        self.itineraries_collection.update_one(
            {"id": itinerary_id}, {"$set": {"endDate": end_date.isoformat()}}
        )

    def delete_itinerary(self, itinerary_id: str) -> bool:
        """Delete an itinerary and all of its days."""
        result = self.itineraries_collection.delete_one({"id": itinerary_id})
        if result.deleted_count == 0:
            return False
        self.days_collection.delete_many({"parentItineraryId": itinerary_id})
        return True

    # Days
    def save_day(self, day: Day) -> Day:
        self.days_collection.insert_one(_dump(day))
        return day

    def get_day(self, day_id: str) -> Day | None:
        day_doc = self.days_collection.find_one({"id": day_id})
        if day_doc:
            day_doc.pop("_id", None)
            return Day.model_validate(day_doc)
        return None

    def get_days(self, itinerary_id: str) -> list[Day]:
        """All days of an itinerary ordered by day number."""
        cursor = self.days_collection.find({"parentItineraryId": itinerary_id}).sort(
            "dayNumber", ASCENDING
        )
        days = []
        for day_doc in cursor:
            day_doc.pop("_id", None)
            days.append(Day.model_validate(day_doc))
        return days

    def update_day(self, itinerary_id: str, day: Day) -> bool:
        """Overwrite the mutable fields of a stored day. Returns False if it is not found."""
        doc = _dump(day)
        result = self.days_collection.update_one(
            {"parentItineraryId": itinerary_id, "id": day.id},
            {
                "$set": {
                    "dayNumber": doc["dayNumber"],
                    "date": doc["date"],
                    "overview": doc["overview"],
                    "imageUrl": doc["imageUrl"],
                    "activities": doc["activities"],
                }
            },
        )
        return result.matched_count > 0

    def set_day_activities(self, day_id: str, activities: list[Activity]) -> None:
        self.days_collection.update_one(
            {"id": day_id}, {"$set": {"activities": [_dump(a) for a in activities]}}
        )

    def set_day_position(self, day_id: str, day_number: int, day_date: date) -> None:
        self.days_collection.update_one(
            {"id": day_id},
            {"$set": {"dayNumber": day_number, "date": day_date.isoformat()}},
        )

    def delete_day(self, itinerary_id: str, day_id: str) -> bool:
        result = self.days_collection.delete_one({"parentItineraryId": itinerary_id, "id": day_id})
        return result.deleted_count > 0


_repo: MongoDBRepo | None = None
_repo_lock = threading.Lock()


def get_repo() -> MongoDBRepo:
    """Process-wide repository, opened on first use."""
    global _repo
    if _repo is None:
        with _repo_lock:
            if _repo is None:
                _repo = MongoDBRepo.from_settings(get_settings())
    return _repo
