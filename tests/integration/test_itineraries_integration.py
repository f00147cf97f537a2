from datetime import date, datetime

from conftest import day_plan_json, make_day, make_itinerary, register_and_login

from aitinerary.core.settings import get_settings


def _generate(client, headers=None, **overrides):
    body = {"location": "Paris", "startDate": "2026-05-01", "endDate": "2026-05-02"}
    body.update(overrides)
    return client.post("/itineraries/generate", json=body, headers=headers or {})


def test_generate_itinerary_for_user(client, llm, repo, user_and_headers):
    user, headers = user_and_headers
    client.put("/users/me/preferences", json={"pets": "Yes"}, headers=headers)
    llm.responses = [day_plan_json("Louvre", "Orsay"), day_plan_json("Eiffel Tower")]

    response = _generate(client, headers)

    assert response.status_code == 201, response.text
    body = response.json()
    itinerary = body["itinerary"]
    assert itinerary["userId"] == user["id"]
    assert itinerary["name"] == "Trip to Paris"
    assert itinerary["imageUrl"] == body["days"][0]["imageUrl"]
    assert [d["date"] for d in body["days"]] == ["2026-05-01", "2026-05-02"]
    assert [d["dayNumber"] for d in body["days"]] == [1, 2]

    # The second day avoids the first day's places and uses the owner's preferences
    second_prompt = llm.calls[1][1]["content"]
    assert "Louvre, Orsay" in second_prompt
    assert "pet" in second_prompt

    assert len(repo.get_days(itinerary["id"])) == 2


def test_anonymous_generation_is_public(client, llm):
    llm.responses = [day_plan_json("Louvre")]

    response = _generate(client, endDate="2026-05-01", name="Quick visit")

    assert response.status_code == 201
    itinerary = response.json()["itinerary"]
    assert itinerary["userId"] is None
    assert itinerary["name"] == "Quick visit"
    explore = client.get("/itineraries/explore").json()
    assert [i["id"] for i in explore] == [itinerary["id"]]


def test_generation_failure_stores_nothing(client, llm, repo):
    llm.responses = [day_plan_json("Louvre"), "bad", "bad", "bad", "bad"]

    response = _generate(client)

    assert response.status_code == 400
    assert "error generating itinerary" in response.json()["detail"]
    assert repo.list_public_itineraries() == []


def test_generation_validates_dates(client):
    assert _generate(client, endDate="2026-04-01").status_code == 422
    too_long = get_settings().max_itinerary_days + 1
    response = _generate(client, endDate=date.fromordinal(date(2026, 5, 1).toordinal() + too_long).isoformat())
    assert response.status_code == 422


def test_list_get_update_delete(client, repo, user_and_headers):
    user, headers = user_and_headers
    make_itinerary(repo, user["id"])
    make_day(repo, "itn1", 1, date(2026, 5, 1), ["Louvre"])

    listed = client.get("/itineraries", headers=headers).json()
    assert [i["id"] for i in listed] == ["itn1"]
    assert client.get("/itineraries/itn1", headers=headers).json()["location"] == "Paris"

    patched = client.patch("/itineraries/itn1", json={"name": "Spring in Paris"}, headers=headers)
    assert patched.status_code == 200
    assert patched.json()["name"] == "Spring in Paris"
    assert client.patch("/itineraries/itn1", json={"name": None}, headers=headers).status_code == 422

    deleted = client.delete("/itineraries/itn1", headers=headers)
    assert deleted.status_code == 200
    assert repo.get_days("itn1") == []
    assert client.get("/itineraries/itn1", headers=headers).status_code == 404


def test_private_itinerary_access(client, repo, user_and_headers):
    user, _ = user_and_headers
    make_itinerary(repo, user["id"])
    _, other_headers = register_and_login(client, "eve@example.com", "eve")

    assert client.get("/itineraries/itn1").status_code == 403
    assert client.get("/itineraries/itn1", headers=other_headers).status_code == 403
    assert client.delete("/itineraries/itn1", headers=other_headers).status_code == 403
    assert client.get("/itineraries/missing", headers=other_headers).status_code == 404


def test_list_requires_auth_and_is_newest_first(client, repo, user_and_headers):
    user, headers = user_and_headers
    make_itinerary(repo, user["id"], "older", created_at=datetime(2026, 1, 1))
    make_itinerary(repo, user["id"], "newest", created_at=datetime(2026, 3, 1))
    make_itinerary(repo, user["id"], "middle", created_at=datetime(2026, 2, 1))

    assert client.get("/itineraries").status_code == 401
    listed = client.get("/itineraries", headers=headers).json()
    assert [i["id"] for i in listed] == ["newest", "middle", "older"]


def test_patch_by_non_owner_is_forbidden(client, repo, user_and_headers):
    user, _ = user_and_headers
    make_itinerary(repo, user["id"])
    _, other_headers = register_and_login(client, "eve@example.com", "eve")

    response = client.patch("/itineraries/itn1", json={"name": "Mine now"}, headers=other_headers)

    assert response.status_code == 403
    assert repo.get_itinerary("itn1").name == "Paris trip"


def test_itinerary_generation_reports_client_init_failure(app, client, monkeypatch):
    from aitinerary.core import day_planner, llm_provider

    app.dependency_overrides.pop(day_planner.get_planner_factory)
    monkeypatch.setattr(day_planner, "_day_planner", None)

    def broken_client():
        raise ValueError("no provider configured")

    monkeypatch.setattr(llm_provider.ai, "Client", broken_client)

    response = _generate(client)

    assert response.status_code == 400
    assert "Failed to initialize aisuite client" in response.json()["detail"]
