import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_client
from app.main import app
from app.routes import grids_routes
from app.services.grid_client import GridClient
from conftest import GRID_ADDRESS, json_response

GRID_ID = "665f1c2ab0e5d2a1c4f0a001"


@pytest.fixture
def api():
    def use(handler):
        app.dependency_overrides[get_client] = lambda: GridClient(GRID_ADDRESS, token="t", transport=httpx.MockTransport(handler))
        return TestClient(app)

    yield use
    app.dependency_overrides.clear()


def test_read_bucket(api):
    def handler(request: httpx.Request):
        if request.url.path.endswith("/region"):
            return json_response(200, {"data": {"region": "eu-west-1"}})
        return json_response(200, {"data": {"enabled": True, "defaultRetentionSetting": {"mode": "compliance", "years": "1"}}})

    response = api(handler).get(f"/buckets/{GRID_ID}/photos")

    assert response.status_code == 200
    assert response.json() == {
        "name": "photos",
        "region": "eu-west-1",
        "object_lock": {"mode": "compliance", "retention": {"unit": "years", "value": 1}},
    }


def test_read_missing_bucket_is_404(api):
    def handler(request: httpx.Request):
        if request.url.path.endswith("/region"):
            return json_response(404, {"message": "not found"})
        return json_response(500, {"message": "boom"})

    response = api(handler).get(f"/buckets/{GRID_ID}/photos")

    assert response.status_code == 404


def test_read_bucket_failures_are_listed(api):
    def handler(request: httpx.Request):
        if request.url.path.endswith("/region"):
            return json_response(503, {"message": "busy"})
        return json_response(200, {"data": {"enabled": "yes"}})

    response = api(handler).get(f"/buckets/{GRID_ID}/photos")

    assert response.status_code == 502
    assert len(response.json()["detail"]) == 2


def test_create_bucket_rejects_double_retention(api):
    response = api(lambda request: json_response(500)).post(
        f"/buckets/{GRID_ID}",
        json={"name": "photos", "object_lock": {"mode": "governance", "days": 1, "years": 1}},
    )
    assert response.status_code == 422


def test_put_bucket_policy(api):
    def handler(request: httpx.Request):
        return json_response(200, {"data": {"policy": {"Id": "p", "Version": "2012-10-17", "Statement": [
            {"Sid": "Public", "Effect": "Allow", "Action": ["s3:GetObject"], "Resource": ["arn:aws:s3:::photos/*"], "Principal": "*"},
        ]}}})

    response = api(handler).put(f"/bucket-policies/{GRID_ID}/photos", json={
        "id": "p",
        "version": "2012-10-17",
        "statements": [{
            "sid": "Public",
            "effect": "Allow",
            "actions": ["s3:GetObject"],
            "resources": ["arn:aws:s3:::photos/*"],
            "principal": {"type": "*"},
        }],
    })

    assert response.status_code == 200
    statement = response.json()["policy"]["statements"][0]
    assert statement["principal"] == {"type": "*"}
    assert statement["conditions"] is None


def test_invalid_bucket_policy_is_400(api):
    response = api(lambda request: json_response(400, {"message": "invalid"})).put(
        f"/bucket-policies/{GRID_ID}/photos",
        json={"id": "p", "version": "v", "statements": [{"effect": "Deny", "actions": ["s3:*"], "resources": ["*"]}]},
    )
    assert response.status_code == 400


def test_malformed_policy_response_is_502(api):
    response = api(lambda request: json_response(200, {"data": {"policy": {"Statement": [{"Effect": "Allow", "Action": 5}]}}})).get(
        f"/bucket-policies/{GRID_ID}/photos"
    )
    assert response.status_code == 502
    assert "Statement[0].Action" in response.json()["detail"]


def test_list_grids_hides_secrets(monkeypatch):
    async def fake_get_all_grids():
        return [{"id": GRID_ID, "name": "prod", "address": GRID_ADDRESS, "username": "root", "password": "secret", "insecure": False}]

    monkeypatch.setattr(grids_routes, "get_all_grids", fake_get_all_grids)

    response = TestClient(app).get("/grids")

    assert response.status_code == 200
    assert response.json()[0]["name"] == "prod"
    assert "password" not in response.json()[0]


def test_get_unknown_grid_is_404(monkeypatch):
    async def fake_get_grid_by_id(id):
        raise ValueError("Grid not found")

    monkeypatch.setattr(grids_routes, "get_grid_by_id", fake_get_grid_by_id)

    assert TestClient(app).get(f"/grids/{GRID_ID}").status_code == 404


def test_create_grid_requires_credentials():
    response = TestClient(app).post("/grids", json={"name": "prod", "address": GRID_ADDRESS})
    assert response.status_code == 422
