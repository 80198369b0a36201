"""
Tests for the basic handlers, streaming and middleware headers.
"""

import uuid

import pytest
from fastapi.testclient import TestClient


class TestTextHandlers:
    """Tests for plain-text routes."""

    @pytest.mark.parametrize(
        "path, body",
        [
            ("/", "Hello world!"),
            ("/hey", "Hey there!"),
            ("/app/index.html", "Hello world!"),
            ("/state", "Hello FastAPI!"),
        ],
    )
    def test_get(self, client, path, body):
        response = client.get(path)
        assert response.status_code == 200
        assert response.text == body

    def test_echo(self, client):
        response = client.post("/echo", content=b"ping pong")
        assert response.status_code == 200
        assert response.text == "ping pong"

    def test_state_uses_configured_name(self, settings):
        from fastapi.testclient import TestClient
        from webtour.app import create_app

        settings["app_name"] = "webtour"
        with TestClient(create_app(settings)) as client:
            assert client.get("/state").text == "Hello webtour!"


class TestResponders:
    """Tests for streaming, JSON objects and conditional responses."""

    def test_stream(self, client):
        response = client.get("/stream")
        assert response.status_code == 200
        assert response.content == b"test"
        assert response.headers["content-type"].startswith("application/json")

    @pytest.mark.parametrize("method", ["GET", "POST", "PUT"])
    def test_obj(self, client, method):
        response = client.request(method, "/obj")
        assert response.status_code == 200
        assert response.json() == {"name": "user"}

    def test_either_takes_bad_request_branch(self, client):
        response = client.get("/either")
        assert response.status_code == 400
        assert response.text == "Bad data"

    @pytest.mark.parametrize("method", ["GET", "POST", "DELETE", "TRACE"])
    def test_ok(self, client, method):
        response = client.request(method, "/ok")
        assert response.status_code == 200
        assert response.content == b""

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy", "worker": 0}

    @pytest.mark.parametrize("path", ["/count", "/obj", "/either", "/ok"])
    def test_any_method_routes_accept_trace(self, client, path):
        assert client.request("TRACE", path).status_code != 405


class TestErrorHandling:
    """Tests for the catch-all exception handler."""

    def test_unhandled_exception_returns_json_500(self, app):
        async def broken():
            raise KeyError("missing")

        app.add_api_route("/broken", broken)
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/broken")

        assert response.status_code == 500
        assert response.json() == {
            "error": {
                "message": "An internal server error occurred.",
                "type": "internal_error",
            }
        }


class TestMiddleware:
    """Tests for request and worker headers."""

    def test_request_id_header(self, client):
        first = client.get("/hey").headers["X-Request-ID"]
        second = client.get("/hey").headers["X-Request-ID"]
        assert uuid.UUID(first)
        assert first != second

    def test_worker_header(self, client):
        assert client.get("/hey").headers["X-Worker-Id"] == "0"
