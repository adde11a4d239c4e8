"""
FastAPI router for OpenPhone webhook events.

Events are logged and acknowledged. There is no signature validation and the
upstream always receives ``{"received": true}``.
"""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from openphone_mcp.shared.logging import get_logger
from openphone_mcp.webhooks.handler import WebhookEvent, WebhookHandler, get_webhook_handler

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


async def _read_payload(request: Request) -> Any:
    body = await request.body()
    if not body:
        return {}
    try:
        return json.loads(body)
    except ValueError:
        logger.warning(
            "Webhook body is not valid JSON",
            extra={"content_type": request.headers.get("content-type"), "size": len(body)},
        )
        return {}


@router.post("/openphone", summary="OpenPhone webhook receiver")
async def openphone_webhook(
    request: Request,
    handler: Annotated[WebhookHandler, Depends(get_webhook_handler)],
) -> dict[str, bool]:
    event = WebhookEvent.from_payload(await _read_payload(request))

    try:
        await handler.handle_event(event)
    except Exception:
        logger.exception(
            "Webhook handler failed",
            extra={"event_type": event.type, "event_id": event.id},
        )

    return {"received": True}
