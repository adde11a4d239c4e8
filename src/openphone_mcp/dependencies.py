"""
FastAPI dependencies shared by routers.
"""

from typing import Any

from fastapi import Depends, Request

from openphone_mcp.config import Settings
from openphone_mcp.openphone.client import OpenPhoneClient


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_openphone_client(request: Request) -> OpenPhoneClient:
    """Shared upstream client owned by the application."""
    return request.app.state.openphone


def failure_title(title: str) -> Any:
    """Route dependency naming the operation in upstream error envelopes.

    The application's exception handlers read ``request.state.failure_title``
    so every route reports failures as ``{"error": title, "message": ...}``.
    """

    def _set_failure_title(request: Request) -> None:
        request.state.failure_title = title

    return Depends(_set_failure_title)
