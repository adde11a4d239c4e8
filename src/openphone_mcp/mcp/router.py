"""
API router for the MCP info, search and fetch endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from openphone_mcp.config import Settings
from openphone_mcp.dependencies import failure_title, get_app_settings, get_openphone_client
from openphone_mcp.mcp.schemas import (
    FetchRequest,
    FetchResponse,
    SearchRequest,
    SearchResponse,
    ServerInfo,
)
from openphone_mcp.mcp.service import McpService
from openphone_mcp.openphone.client import OpenPhoneClient

router = APIRouter(prefix="/mcp", tags=["mcp"])


def build_server_info(settings: Settings) -> ServerInfo:
    return ServerInfo(name=settings.app_name, version=settings.app_version)


def get_mcp_service(
    client: Annotated[OpenPhoneClient, Depends(get_openphone_client)],
) -> McpService:
    """Dependency for MCP service."""
    return McpService(client=client)


@router.get("/info", response_model=ServerInfo, summary="Server metadata")
async def server_info(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ServerInfo:
    return build_server_info(settings)


@router.post(
    "/search",
    response_model=SearchResponse,
    summary="Search across OpenPhone data",
    dependencies=[failure_title("Search failed")],
)
async def search(
    body: SearchRequest,
    service: Annotated[McpService, Depends(get_mcp_service)],
) -> SearchResponse:
    return await service.search(body.query, body.limit)


@router.post(
    "/fetch",
    response_model=FetchResponse,
    summary="Fetch a specific resource",
    dependencies=[failure_title("Fetch failed")],
)
async def fetch(
    body: FetchRequest,
    service: Annotated[McpService, Depends(get_mcp_service)],
) -> FetchResponse:
    return await service.fetch(body.resource_id, body.type)
