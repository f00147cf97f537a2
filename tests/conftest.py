import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("GENERATION_ATTEMPTS", "2")
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("MONGODB_URI", None)

import json
from datetime import date, datetime

import mongomock
import pytest
from fastapi.testclient import TestClient

from aitinerary.core.day_planner import DayPlanner, get_planner_factory
from aitinerary.core.repository import MongoDBRepo, get_repo
from aitinerary.core.schemas import Activity, Coordinates, Day, Itinerary
from aitinerary.main import create_app


class FakeLLM:
    """Replays queued responses and records every prompt it receives."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def chat(self, messages, temperature=1.0):
        self.calls.append(messages)
        if not self.responses:
            raise RuntimeError("no more fake responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeGeo:
    def __init__(self):
        self.address_queries = []
        self.coordinate_queries = []

    def get_address(self, query):
        self.address_queries.append(query)
        return f"Address of {query}"

    def get_coordinates(self, query):
        self.coordinate_queries.append(query)
        return Coordinates(lat=48.85, lng=2.35)


class FakeImages:
    def __init__(self):
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        return f"https://images.example.com/{len(self.queries)}.jpg"


def day_plan_json(*places):
    hours = ["9:00 AM", "11:00 AM", "1:00 PM", "3:00 PM", "6:00 PM", "8:00 PM"]
    return json.dumps(
        {"activities": [{"time": hours[i % len(hours)], "location": p} for i, p in enumerate(places)]}
    )


@pytest.fixture
def repo():
    return MongoDBRepo(mongomock.MongoClient(), "aitinerary_test")


@pytest.fixture
def llm():
    return FakeLLM()


@pytest.fixture
def geo():
    return FakeGeo()


@pytest.fixture
def images():
    return FakeImages()


@pytest.fixture
def planner(llm, geo, images):
    return DayPlanner(llm, geo, images, attempts=2, temperature=0.5)


@pytest.fixture
def app(repo, planner):
    application = create_app()
    application.dependency_overrides[get_repo] = lambda: repo
    application.dependency_overrides[get_planner_factory] = lambda: lambda: planner
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def register_and_login(client, email="ada@example.com", username="ada", password="s3cret-pass"):
    response = client.post(
        "/users/register",
        json={"email": email, "username": username, "password": password},
    )
    assert response.status_code == 201, response.text
    token = client.post("/users/login", json={"email": email, "password": password}).json()[
        "accessToken"
    ]
    return response.json(), {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_and_headers(client):
    return register_and_login(client)


def make_itinerary(
    repo,
    user_id,
    itinerary_id="itn1",
    start=date(2026, 5, 1),
    end=date(2026, 5, 3),
    created_at=datetime(2026, 4, 1, 12, 0),
):
    itinerary = Itinerary(
        id=itinerary_id,
        user_id=user_id,
        name="Paris trip",
        location="Paris",
        start_date=start,
        end_date=end,
        created_at=created_at,
    )
    repo.save_itinerary(itinerary)
    return itinerary


def make_day(repo, itinerary_id, day_number, day_date, places):
    day = Day(
        id=f"{itinerary_id}-day{day_number}",
        parent_itinerary_id=itinerary_id,
        day_number=day_number,
        date=day_date,
        overview=f"Day {day_number} in Paris",
        activities=[
            Activity(time="9:00 AM", activity=place, activity_number=i + 1)
            for i, place in enumerate(places)
        ],
    )
    repo.save_day(day)
    return day
