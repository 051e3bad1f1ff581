"""Tests for the HTTP endpoints."""

import base64
import json

from fastapi.testclient import TestClient

from nutrition_planner.api.app import create_app
from nutrition_planner.domain.errors import RateLimited, Unauthenticated
from tests.conftest import as_model_text, estimate_payload, plan_payload, recipe_payload

_HEADERS = {"X-Api-Token": "api-token"}
_PROFILE = {
    "age": 40,
    "gender": "male",
    "weight_kg": 82,
    "height_cm": 180,
    "activity_level": "active",
    "goal": "gain_muscle",
}


def test_health(container) -> None:
    client = TestClient(create_app(container))

    assert client.get("/health").json() == {"status": "ok"}


def test_requests_without_token_are_rejected(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/analyze-food", json={"image": "aW1n", "mimeType": "image/png"}
    )

    assert response.status_code == 401
    assert container.gateway.calls == []


def test_analyze_food(container) -> None:
    container.gateway.script = [as_model_text(estimate_payload())]
    client = TestClient(create_app(container))
    image = base64.b64encode(b"jpeg-bytes").decode()

    response = client.post(
        "/analyze-food",
        json={"image": f"data:image/jpeg;base64,{image}", "mimeType": "image/jpeg"},
        headers=_HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Chicken rice bowl"
    _, attachment, _ = container.gateway.calls[0]
    assert attachment.data == b"jpeg-bytes"


def test_analyze_food_rejects_bad_base64(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/analyze-food",
        json={"image": "not base64!", "mimeType": "image/jpeg"},
        headers=_HEADERS,
    )

    assert response.status_code == 400


def test_analyze_food_requires_mime_type(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/analyze-food", json={"image": "aW1n"}, headers=_HEADERS)

    assert response.status_code == 422


def test_generate_meal_plan_defaults(container) -> None:
    container.gateway.script = [json.dumps(plan_payload([7, 6, 5, 4, 3, 2, 1]))]
    client = TestClient(create_app(container))

    response = client.post(
        "/generate-meal-plan",
        json={**_PROFILE, "dietary_restrictions": "Halal, nut-free"},
        headers=_HEADERS,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["day_count"] == 7
    assert data["target_calories"] == 2000
    assert [day["day_number"] for day in data["days"]] == [1, 2, 3, 4, 5, 6, 7]
    assert data["days"][0]["totals"]["calories"] == 2000
    assert data["calorie_flags"] == []
    prompt, _, _ = container.gateway.calls[0]
    assert "Dietary restrictions: halal, nut-free" in prompt.text


def test_generate_meal_plan_reports_flags(container) -> None:
    container.gateway.script = [json.dumps(plan_payload([1, 2], total_calories=3000))]
    client = TestClient(create_app(container))

    response = client.post(
        "/generate-meal-plan",
        json={**_PROFILE, "days": 2, "daily_calorie_target": 2500},
        headers=_HEADERS,
    )

    assert response.status_code == 200
    flags = response.json()["calorie_flags"]
    assert [flag["day_number"] for flag in flags] == [1, 2]
    assert flags[0]["direction"] == "over"


def test_generate_meal_plan_rejects_out_of_range_age(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/generate-meal-plan", json={**_PROFILE, "age": 200}, headers=_HEADERS
    )

    assert response.status_code == 422
    assert container.gateway.calls == []



def test_generate_meal_plan_rate_limited_maps_to_429(container) -> None:
    container.gateway.script = [RateLimited("a"), RateLimited("b"), RateLimited("c")]
    client = TestClient(create_app(container))

    response = client.post(
        "/generate-meal-plan", json={**_PROFILE, "days": 1}, headers=_HEADERS
    )

    assert response.status_code == 429
    assert response.json()["detail"]["stage"] == "inference"


def test_recipe_suggestions(container) -> None:
    container.gateway.script = [as_model_text({"recipes": [recipe_payload()]})]
    client = TestClient(create_app(container))

    response = client.post(
        "/recipe-suggestions",
        json={
            "ingredients": ["chickpeas", "onion"],
            "preferences": {"cuisine": "indian", "cooking_time": 30},
        },
        headers=_HEADERS,
    )

    assert response.status_code == 200
    assert response.json()["recipes"][0]["name"] == "Chickpea curry"
    prompt, _, _ = container.gateway.calls[0]
    assert "Max cooking time: 30 minutes" in prompt.text


def test_recipe_suggestions_unauthenticated_gateway_maps_to_502(container) -> None:
    container.gateway.script = [Unauthenticated("bad key")]
    client = TestClient(create_app(container))

    response = client.post(
        "/recipe-suggestions", json={"ingredients": ["rice"]}, headers=_HEADERS
    )

    assert response.status_code == 502
    assert len(container.gateway.calls) == 1


def test_recipe_suggestions_invalid_output_maps_to_502(container) -> None:
    container.gateway.script = ["no recipes today", "still none"]
    client = TestClient(create_app(container))

    response = client.post(
        "/recipe-suggestions", json={"ingredients": ["rice"]}, headers=_HEADERS
    )

    assert response.status_code == 502
    assert response.json()["detail"]["stage"] == "extraction"
