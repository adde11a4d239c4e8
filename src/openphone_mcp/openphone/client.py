"""
HTTP client for the OpenPhone REST API.

One instance is created per application and shared by every request; the
underlying httpx.AsyncClient is created lazily and closed on shutdown.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from openphone_mcp.config import Settings
from openphone_mcp.shared.exceptions import UpstreamError
from openphone_mcp.shared.logging import get_logger

logger = get_logger(__name__)


class OpenPhoneClient:
    """Thin async wrapper around the OpenPhone v1 API.

    Every method returns the decoded JSON object from upstream unchanged.
    Failures of any kind are raised as UpstreamError. Nothing is retried.
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._settings.openphone_api_base,
                headers={
                    "Authorization": self._settings.openphone_api_key,
                    "Content-Type": "application/json",
                    "User-Agent": f"{self._settings.app_name}/{self._settings.app_version}",
                },
                timeout=httpx.Timeout(self._settings.openphone_timeout_seconds),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        client = self._get_client()
        logger.debug("OpenPhone request", extra={"method": method, "path": path})

        try:
            response = await client.request(method, path, params=params, json=payload)
        except httpx.HTTPError as e:
            logger.error(
                "OpenPhone request failed",
                extra={"method": method, "path": path, "error": repr(e)},
            )
            raise UpstreamError(str(e) or e.__class__.__name__) from e

        return self._handle_response(response, method, path)

    def _handle_response(
        self,
        response: httpx.Response,
        method: str,
        path: str,
    ) -> dict[str, Any]:
        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {"message": response.text}

            message = None
            if isinstance(error_data, dict):
                message = error_data.get("message")

            logger.error(
                "OpenPhone API error",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "error": error_data,
                },
            )
            raise UpstreamError(
                message or f"OpenPhone API returned HTTP {response.status_code}",
                upstream_status=response.status_code,
                response_data=error_data,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                "OpenPhone response is not JSON",
                extra={
                    "method": method,
                    "path": path,
                    "content_type": response.headers.get("content-type"),
                },
            )
            raise UpstreamError("Malformed upstream response: body is not JSON") from e

        if not isinstance(data, dict):
            raise UpstreamError(
                "Malformed upstream response: expected a JSON object",
                upstream_status=response.status_code,
                response_data=data,
            )
        return data

    # Messages
    async def list_messages(
        self,
        limit: int,
        search: str | None = None,
        phone_number_id: str | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"limit": limit}
        if search:
            params["search"] = search
        if phone_number_id:
            params["phoneNumberId"] = phone_number_id
        return await self._request("GET", "/messages", params=params)

    async def get_message(self, message_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/messages/{quote(message_id, safe='')}")

    async def send_message(
        self,
        to: str,
        text: str,
        from_number: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"to": to, "text": text}
        if from_number:
            payload["from"] = from_number
        return await self._request("POST", "/messages", payload=payload)

    # Contacts
    async def list_contacts(self, limit: int, search: str | None = None) -> dict[str, Any]:
        params: dict[str, Any] = {"limit": limit}
        if search:
            params["search"] = search
        return await self._request("GET", "/contacts", params=params)

    async def get_contact(self, contact_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/contacts/{quote(contact_id, safe='')}")

    async def create_contact(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/contacts", payload=payload)

    # Calls
    async def list_calls(
        self,
        limit: int,
        phone_number_id: str | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"limit": limit}
        if phone_number_id:
            params["phoneNumberId"] = phone_number_id
        return await self._request("GET", "/calls", params=params)

    async def get_call(self, call_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/calls/{quote(call_id, safe='')}")

    async def create_call(self, to: str, from_number: str) -> dict[str, Any]:
        return await self._request("POST", "/calls", payload={"to": to, "from": from_number})

    # Phone numbers
    async def list_phone_numbers(self) -> dict[str, Any]:
        return await self._request("GET", "/phone-numbers")
