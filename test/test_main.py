"""
Tests for application assembly and the console entry point.
"""

import logging

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport
from pydantic import ValidationError

from openphone_mcp import main
from openphone_mcp.config import Settings
from openphone_mcp.main import (
    _describe_validation_errors,
    create_app,
    registered_endpoints,
    run,
)


class TestCreateApp:
    def test_uses_injected_settings(self, test_settings: Settings) -> None:
        app = create_app(test_settings)

        assert app.state.settings is test_settings
        assert app.docs_url is None

    def test_registers_all_endpoints(self, app: FastAPI) -> None:
        assert set(registered_endpoints(app)) == {
            "GET /health",
            "GET /mcp/info",
            "POST /mcp/search",
            "POST /mcp/fetch",
            "POST /mcp/tools/send-sms",
            "POST /mcp/tools/make-call",
            "GET /mcp/tools/messages",
            "GET /mcp/tools/contacts",
            "GET /mcp/tools/calls",
            "GET /mcp/tools/phone-numbers",
            "POST /mcp/tools/create-contact",
            "POST /webhooks/openphone",
        }

    def test_startup_log_lists_endpoints(
        self,
        app: FastAPI,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.INFO, logger="openphone_mcp.main"):
            main._log_endpoints(app, app.state.settings)

        record = next(r for r in caplog.records if r.getMessage() == "OpenPhone MCP Server running")
        assert "POST /mcp/search" in record.endpoints
        assert "POST /webhooks/openphone" in record.endpoints
        assert record.server_url == "http://localhost:3001"

    def test_without_api_key_fails(
        self,
        monkeypatch: pytest.MonkeyPatch,
        clean_settings_cache: None,
    ) -> None:
        monkeypatch.delenv("OPENPHONE_API_KEY", raising=False)
        monkeypatch.setattr(main, "get_settings", lambda: Settings(_env_file=None))

        with pytest.raises(ValidationError) as exc_info:
            create_app()

        assert "openphone_api_key" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_cors_headers(self, app: FastAPI) -> None:
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test"
        ) as client:
            response = await client.options(
                "/mcp/search",
                headers={
                    "Origin": "https://chat.example.com",
                    "Access-Control-Request-Method": "POST",
                },
            )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    @pytest.mark.asyncio
    async def test_unknown_route_is_not_found(self, async_client: httpx.AsyncClient) -> None:
        response = await async_client.get("/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found", "message": "Cannot GET /nope"}


class TestRun:
    def test_exits_without_api_key(
        self,
        monkeypatch: pytest.MonkeyPatch,
        clean_settings_cache: None,
        restore_root_logger: None,
    ) -> None:
        served: list[FastAPI] = []
        monkeypatch.delenv("OPENPHONE_API_KEY", raising=False)
        monkeypatch.setattr(main, "get_settings", lambda: Settings(_env_file=None))
        monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: served.append(app))

        with pytest.raises(SystemExit) as exc_info:
            run()

        assert exc_info.value.code == 1
        assert served == []

    def test_serves_on_configured_port(
        self,
        monkeypatch: pytest.MonkeyPatch,
        test_settings: Settings,
    ) -> None:
        served: list[dict] = []
        monkeypatch.setattr(main, "get_settings", lambda: test_settings)
        monkeypatch.setattr(
            main.uvicorn,
            "run",
            lambda app, **kwargs: served.append({"app": app, **kwargs}),
        )

        run()

        assert len(served) == 1
        assert isinstance(served[0]["app"], FastAPI)
        assert served[0]["port"] == 3001
        assert served[0]["host"] == test_settings.host


class TestDescribeValidationErrors:
    def test_missing_body_field_keeps_its_name(self) -> None:
        error, message = _describe_validation_errors(
            [{"type": "missing", "loc": ("body", "query"), "msg": "Field required", "input": {}}]
        )

        assert error == "Missing required parameters: query"
        assert message == "query: Field required"

    def test_only_leading_location_is_stripped(self) -> None:
        error, _ = _describe_validation_errors(
            [
                {
                    "type": "int_parsing",
                    "loc": ("query", "limit"),
                    "msg": "Input should be a valid integer",
                    "input": "x",
                },
                {
                    "type": "string_type",
                    "loc": ("body", "body"),
                    "msg": "Input should be a valid string",
                    "input": 5,
                },
            ]
        )

        assert error == "Invalid request parameters: limit, body"

    def test_whole_body_missing(self) -> None:
        error, _ = _describe_validation_errors(
            [{"type": "missing", "loc": ("body",), "msg": "Field required", "input": None}]
        )

        assert error == "Missing required parameters: body"
