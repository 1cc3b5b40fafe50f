import json

import httpx
import pytest

from app.core.errors import TransportError
from app.services.grid_client import GridClient
from conftest import GRID_ADDRESS, json_response


@pytest.mark.asyncio
async def test_send_request_returns_body(make_client):
    seen = []

    def handler(request: httpx.Request):
        seen.append(request)
        return json_response(200, {"data": {"region": "us-east-1"}})

    response = await make_client(handler).send_request("GET", "/org/containers/photos/region")

    assert response.status_code == 200
    assert response.json() == {"data": {"region": "us-east-1"}}
    assert str(seen[0].url) == "https://grid.example.com/api/v4/org/containers/photos/region"
    assert seen[0].headers["Authorization"] == "Bearer test-token"


@pytest.mark.asyncio
async def test_send_request_status_mismatch(make_client):
    client = make_client(lambda request: json_response(404, {"message": "not found"}))

    with pytest.raises(TransportError) as info:
        await client.send_request("GET", "/org/containers/photos/region", expected_status=200)

    assert info.value.status_code == 404
    assert info.value.expected == 200
    assert "not found" in info.value.detail


@pytest.mark.asyncio
async def test_send_request_network_failure(make_client):
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError) as info:
        await make_client(handler).send_request("GET", "/org/containers")

    assert info.value.status_code == 502


@pytest.mark.asyncio
async def test_send_request_encodes_payload(make_client):
    bodies = []

    def handler(request: httpx.Request):
        bodies.append(request.content)
        return json_response(200, {"data": {}})

    client = make_client(handler)
    await client.send_request("PUT", "/org/containers/photos/policy", {"policy": None})
    await client.send_request("PUT", "/org/containers/photos/policy", b'{"policy": {}}')

    assert json.loads(bodies[0]) == {"policy": None}
    assert bodies[1] == b'{"policy": {}}'


@pytest.mark.asyncio
async def test_authorize_stores_token():
    requests = []

    def handler(request: httpx.Request):
        requests.append(request)
        if request.url.path == "/api/v4/authorize":
            return json_response(200, {"data": "fresh-token", "status": "success"})
        return json_response(200, {"data": {}})

    client = GridClient(GRID_ADDRESS, transport=httpx.MockTransport(handler))
    token = await client.authorize("root", "secret", "12345")
    await client.send_request("GET", "/org/containers")

    assert token == "fresh-token"
    assert json.loads(requests[0].content) == {
        "accountId": "12345",
        "username": "root",
        "password": "secret",
        "cookie": True,
        "csrfToken": False,
    }
    assert "Authorization" not in requests[0].headers
    assert requests[1].headers["Authorization"] == "Bearer fresh-token"


@pytest.mark.asyncio
async def test_authorize_rejected():
    client = GridClient(GRID_ADDRESS, transport=httpx.MockTransport(lambda request: json_response(401, {"message": "bad"})))

    with pytest.raises(TransportError) as info:
        await client.authorize("root", "wrong")

    assert info.value.status_code == 401
    assert client.token is None


def test_base_url_accepts_api_suffix():
    assert GridClient("https://grid.example.com/api/v4/").base_url == "https://grid.example.com/api/v4"
    assert GridClient("https://grid.example.com").base_url == "https://grid.example.com/api/v4"
