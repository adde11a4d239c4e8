"""
Handler for OpenPhone webhook events.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from openphone_mcp.shared.logging import get_logger

logger = get_logger(__name__)


class WebhookEvent(BaseModel):
    """OpenPhone webhook envelope.

    Nothing is required; unknown keys are kept so handlers see the full payload.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str | None = None
    id: str | None = None
    created_at: str | None = Field(default=None, alias="createdAt")

    @classmethod
    def from_payload(cls, payload: Any) -> "WebhookEvent":
        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(
            {
                **payload,
                "type": _as_str(payload.get("type")),
                "id": _as_str(payload.get("id")),
                "createdAt": _as_str(payload.get("createdAt")),
            }
        )


def _as_str(value: Any) -> str | None:
    return None if value is None else str(value)


class WebhookHandler:
    """Processes OpenPhone webhook events.

    The default implementation only logs. Subclass and override
    ``handle_event`` to react to specific event types.
    """

    async def handle_event(self, event: WebhookEvent) -> None:
        logger.info(
            "OpenPhone webhook received",
            extra={
                "event_type": event.type,
                "event_id": event.id,
                "event_timestamp": event.created_at,
            },
        )


_default_handler = WebhookHandler()


def get_webhook_handler() -> WebhookHandler:
    return _default_handler
