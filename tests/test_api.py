"""Tests for the planner API."""

from urllib.parse import quote
from uuid import uuid4

from fastapi.testclient import TestClient

from healer.api.app import create_app
from healer.containers import AppContainer
from tests.conftest import base_form, build_test_container, failing_client


def _start(client: TestClient) -> str:
    response = client.post("/sessions")
    assert response.status_code == 201
    return response.json()["id"]


def test_health_endpoint(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_form_options_endpoint(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    payload = client.get("/form-options").json()

    assert payload["genders"] == ["Male", "Female", "Other"]
    assert "Sulphites" in payload["allergies"]
    assert "Dehydration" in payload["healthIssues"]


def test_start_session_is_empty(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/sessions")

    payload = response.json()
    assert payload["status"] == "empty"
    assert payload["meals"] == []
    assert payload["actions"] == ["submit"]


def test_submit_returns_meals(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    session_id = _start(client)

    response = client.post(f"/sessions/{session_id}/submit", json=base_form())

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ready"
    assert payload["source"] == "generated"
    assert payload["total_meals"] == 5
    assert payload["profile"]["bmi"] == 22.8
    assert payload["profile"]["bmi_category"] == "Normal"
    assert payload["meals"][0]["cookingTime"] == "15-30min"


def test_submit_invalid_form_returns_422(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    session_id = _start(client)

    response = client.post(
        f"/sessions/{session_id}/submit",
        json=base_form(bpAdvancedMode=True, systolic="400", diastolic="80"),
    )

    assert response.status_code == 422
    assert "valid BP values" in response.json()["detail"]


def test_submit_unknown_session_returns_404(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(f"/sessions/{uuid4()}/submit", json=base_form())

    assert response.status_code == 404


def test_submit_falls_back_when_generation_fails(settings) -> None:
    container = build_test_container(settings, failing_client())
    client = TestClient(create_app(container))
    session_id = _start(client)

    payload = client.post(f"/sessions/{session_id}/submit", json=base_form()).json()

    assert payload["status"] == "ready"
    assert payload["source"] == "fallback"
    assert payload["total_meals"] == 5


def test_get_session_applies_filters(settings) -> None:
    container = build_test_container(settings, failing_client())
    client = TestClient(create_app(container))
    session_id = _start(client)
    client.post(f"/sessions/{session_id}/submit", json=base_form())

    vegan = client.get(f"/sessions/{session_id}", params={"dietary": "Vegan"}).json()
    quick = client.get(
        f"/sessions/{session_id}", params={"cooking_time": "15-30min"}
    ).json()

    assert vegan["total_meals"] == 5
    assert [meal["dietaryPreference"] for meal in vegan["meals"]] == ["Vegan"]
    assert {meal["cookingTime"] for meal in quick["meals"]} == {"15-30min"}


def test_get_session_rejects_unknown_filter(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    session_id = _start(client)

    response = client.get(f"/sessions/{session_id}", params={"dietary": "Keto"})

    assert response.status_code == 422


def test_retry_without_profile_returns_409(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    session_id = _start(client)

    response = client.post(f"/sessions/{session_id}/retry")

    assert response.status_code == 409


def test_retry_and_reset(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    session_id = _start(client)
    client.post(f"/sessions/{session_id}/submit", json=base_form())

    retried = client.post(f"/sessions/{session_id}/retry").json()
    cleared = client.post(f"/sessions/{session_id}/reset").json()

    assert retried["status"] == "ready"
    assert retried["generation"] == 2
    assert cleared["status"] == "empty"
    assert cleared["profile"] is None
    assert cleared["meals"] == []


def test_meal_charts(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    session_id = _start(client)
    client.post(f"/sessions/{session_id}/submit", json=base_form())

    payload = client.get(f"/sessions/{session_id}/meals/0/charts").json()

    assert payload["meal"] == "Meal 1"
    assert payload["ingredient_calories"]["labels"] == ["lentils", "spinach"]
    assert payload["nutrient_split"]["labels"][1] == "Carbohydrates"


def test_meal_charts_errors(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    session_id = _start(client)

    assert client.get(f"/sessions/{session_id}/meals/0/charts").status_code == 409

    client.post(f"/sessions/{session_id}/submit", json=base_form())

    assert client.get(f"/sessions/{session_id}/meals/9/charts").status_code == 404


def test_export_requires_ready_session(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    session_id = _start(client)

    response = client.get(f"/sessions/{session_id}/export")

    assert response.status_code == 409


def test_export_returns_pdf_attachment(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    session_id = _start(client)
    client.post(f"/sessions/{session_id}/submit", json=base_form())

    response = client.get(f"/sessions/{session_id}/export")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert quote("Jane_Doe_HEALER_Meal_Plan.pdf") in response.headers[
        "content-disposition"
    ]
    assert response.content.startswith(b"%PDF")


def test_lifespan_closes_resources(settings) -> None:
    container = build_test_container(settings)

    with TestClient(create_app(container)) as client:
        client.get("/health")

    assert container.generation_client.closed
