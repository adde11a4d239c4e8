"""
Search and fetch over the OpenPhone API.

Search fans out to messages, contacts and calls concurrently. Each source is
isolated: if one fails it contributes no results and the others still count.
"""

from __future__ import annotations

import asyncio
import math
from typing import Any, Awaitable, Callable

from openphone_mcp.mcp.schemas import (
    FetchResponse,
    ResourceType,
    ResultType,
    SearchResponse,
    SearchResult,
)
from openphone_mcp.openphone.client import OpenPhoneClient
from openphone_mcp.shared.exceptions import (
    RequestValidationFailed,
    UnsupportedResourceTypeError,
    UpstreamError,
)
from openphone_mcp.shared.logging import get_logger

logger = get_logger(__name__)

SEARCH_SOURCES = 3


def per_source_limit(limit: int) -> int:
    """Share of the overall limit requested from each upstream source."""
    return math.ceil(limit / SEARCH_SOURCES)


def _str_or_none(value: Any) -> str | None:
    return None if value is None else str(value)


def _page_items(page: dict[str, Any]) -> list[dict[str, Any]]:
    """Extract the item list from an upstream list response."""
    items = page.get("data")
    if items is None:
        return []
    if not isinstance(items, list):
        raise UpstreamError("Malformed upstream response: 'data' is not a list")
    return [item for item in items if isinstance(item, dict)]


def message_to_result(message: dict[str, Any]) -> SearchResult:
    return SearchResult(
        type=ResultType.MESSAGE,
        id=_str_or_none(message.get("id")),
        title=f"Message from {message.get('from')}",
        content=_str_or_none(message.get("body")),
        metadata={
            "createdAt": message.get("createdAt"),
            "direction": message.get("direction"),
            "status": message.get("status"),
        },
    )


def contact_to_result(contact: dict[str, Any]) -> SearchResult:
    name = contact.get("name")
    phone_number = contact.get("phoneNumber")
    return SearchResult(
        type=ResultType.CONTACT,
        id=_str_or_none(contact.get("id")),
        title=_str_or_none(name or phone_number),
        content=f"Contact: {name or 'Unknown'} - {phone_number}",
        metadata={
            "email": contact.get("email"),
            "tags": contact.get("tags"),
            "createdAt": contact.get("createdAt"),
        },
    )


def call_to_result(call: dict[str, Any]) -> SearchResult:
    direction = call.get("direction")
    duration = call.get("duration")
    return SearchResult(
        type=ResultType.CALL,
        id=_str_or_none(call.get("id")),
        title=f"Call {direction} - {duration}s",
        content=f"Call log: {direction} call lasting {duration} seconds",
        metadata={
            "createdAt": call.get("createdAt"),
            "status": call.get("status"),
            "participants": call.get("participants"),
        },
    )


def call_matches(call: dict[str, Any], query: str) -> bool:
    """True if query is a case-sensitive substring of any participant."""
    participants = call.get("participants")
    if not isinstance(participants, list):
        return False
    return any(isinstance(p, str) and query in p for p in participants)


class McpService:
    """MCP search and fetch operations backed by OpenPhone."""

    def __init__(self, client: OpenPhoneClient) -> None:
        self._client = client

    async def search(self, query: str, limit: int = 10) -> SearchResponse:
        """Search messages, contacts and calls for ``query``.

        Results keep source order (messages, contacts, calls) and are cut to
        ``limit``; ``total`` counts every match found before the cut.
        """
        per_source = per_source_limit(limit)

        messages, contacts, calls = await asyncio.gather(
            self._search_source("messages", self._search_messages, query, per_source),
            self._search_source("contacts", self._search_contacts, query, per_source),
            self._search_source("calls", self._search_calls, query, per_source),
        )
        results = [*messages, *contacts, *calls]

        logger.info(
            "Search completed",
            extra={
                "limit": limit,
                "messages": len(messages),
                "contacts": len(contacts),
                "calls": len(calls),
            },
        )
        return SearchResponse(results=results[:limit], total=len(results))

    async def _search_source(
        self,
        source: str,
        search_fn: Callable[[str, int], Awaitable[list[SearchResult]]],
        query: str,
        limit: int,
    ) -> list[SearchResult]:
        try:
            return await search_fn(query, limit)
        except Exception as e:
            logger.warning(
                "Search source failed; skipping",
                extra={"source": source, "error": str(e)},
            )
            return []

    async def _search_messages(self, query: str, limit: int) -> list[SearchResult]:
        page = await self._client.list_messages(limit=limit, search=query)
        return [message_to_result(m) for m in _page_items(page)]

    async def _search_contacts(self, query: str, limit: int) -> list[SearchResult]:
        page = await self._client.list_contacts(limit=limit, search=query)
        return [contact_to_result(c) for c in _page_items(page)]

    async def _search_calls(self, query: str, limit: int) -> list[SearchResult]:
        # /calls has no server-side text filter
        page = await self._client.list_calls(limit=limit)
        return [call_to_result(c) for c in _page_items(page) if call_matches(c, query)]

    async def fetch(self, resource_id: str | None, resource_type: str) -> FetchResponse:
        """Fetch a single upstream resource selected by its type tag."""
        try:
            kind = ResourceType(resource_type)
        except ValueError:
            raise UnsupportedResourceTypeError(resource_type) from None

        if kind is ResourceType.PHONE_NUMBERS:
            data = await self._client.list_phone_numbers()
        else:
            if not resource_id:
                raise RequestValidationFailed(
                    f"resource_id is required for type {kind.value}",
                    error="Missing required parameters: resource_id",
                )
            getters = {
                ResourceType.MESSAGE: self._client.get_message,
                ResourceType.CONTACT: self._client.get_contact,
                ResourceType.CALL: self._client.get_call,
            }
            data = await getters[kind](resource_id)

        return FetchResponse(resource_id=resource_id, type=kind, data=data)
