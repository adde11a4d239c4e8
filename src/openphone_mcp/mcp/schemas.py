"""
Pydantic schemas for the MCP search/fetch surface.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResultType(str, Enum):
    """Kinds of records returned by search."""

    MESSAGE = "message"
    CONTACT = "contact"
    CALL = "call"


class ResourceType(str, Enum):
    """Resource type tags accepted by fetch."""

    MESSAGE = "message"
    CONTACT = "contact"
    CALL = "call"
    PHONE_NUMBERS = "phone-numbers"


class ToolCapabilities(BaseModel):
    search: bool = True
    fetch: bool = True


class ServerCapabilities(BaseModel):
    tools: ToolCapabilities = Field(default_factory=ToolCapabilities)
    resources: bool = True
    prompts: bool = False


class ServerInfo(BaseModel):
    """Static service metadata advertised to MCP clients."""

    name: str
    version: str
    description: str = "MCP server for OpenPhone API integration with ChatGPT"
    capabilities: ServerCapabilities = Field(default_factory=ServerCapabilities)


class HealthResponse(BaseModel):
    status: str = "healthy"
    server: ServerInfo


class SearchRequest(BaseModel):
    """Free-text search across messages, contacts and calls."""

    query: str = Field(..., min_length=1, description="Text to search for")
    limit: int = Field(default=10, ge=1, description="Maximum number of results")


class SearchResult(BaseModel):
    type: ResultType
    id: str | None = None
    title: str | None = None
    content: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class SearchResponse(BaseModel):
    results: list[SearchResult]
    total: int = Field(..., description="Number of matches before truncation to limit")


class FetchRequest(BaseModel):
    """Fetch one upstream resource.

    ``type`` is kept as a plain string so unknown tags reach the fetch
    dispatcher and are reported as unsupported resource types.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    resource_id: str | None = None
    type: str = Field(..., min_length=1)


class FetchResponse(BaseModel):
    resource_id: str | None
    type: ResourceType
    data: dict[str, Any]
