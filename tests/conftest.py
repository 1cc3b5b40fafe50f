import json

import httpx
import pytest

from app.services.grid_client import GridClient

GRID_ADDRESS = "https://grid.example.com"


def json_response(status_code: int, body=None) -> httpx.Response:
    if body is None:
        return httpx.Response(status_code)
    return httpx.Response(status_code, content=json.dumps(body).encode(), headers={"Content-Type": "application/json"})


@pytest.fixture
def make_client():
    """Returns a factory building a GridClient whose requests are answered by `handler`."""

    def factory(handler, token="test-token"):
        return GridClient(GRID_ADDRESS, token=token, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def bucket_routes():
    """
    Answers bucket sub-resource requests from a path -> response table.

    Unknown paths return 404, which the services report as a missing bucket.
    """

    def build(table):
        calls = []

        def handler(request: httpx.Request):
            calls.append((request.method, request.url.path))
            key = (request.method, request.url.path)
            if key in table:
                status_code, body = table[key]
                return json_response(status_code, body)
            return json_response(404, {"message": "not found"})

        handler.calls = calls
        return handler

    return build
