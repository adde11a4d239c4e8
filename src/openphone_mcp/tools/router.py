"""
API router for OpenPhone tool endpoints.

Each endpoint validates its input, makes exactly one upstream call and wraps
the upstream payload in a stable envelope.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from openphone_mcp.dependencies import failure_title, get_openphone_client
from openphone_mcp.openphone.client import OpenPhoneClient
from openphone_mcp.shared.logging import get_logger
from openphone_mcp.tools.schemas import (
    CallListResponse,
    ContactListResponse,
    CreateContactRequest,
    CreateContactResponse,
    MakeCallRequest,
    MakeCallResponse,
    MessageListResponse,
    PhoneNumberListResponse,
    SendSmsRequest,
    SendSmsResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/mcp/tools", tags=["tools"])

Client = Annotated[OpenPhoneClient, Depends(get_openphone_client)]
Limit = Annotated[int, Query(ge=1, description="Maximum number of items")]


def _created_id(data: dict[str, Any]) -> str | None:
    created_id = data.get("id")
    return None if created_id is None else str(created_id)


@router.post(
    "/send-sms",
    response_model=SendSmsResponse,
    summary="Send an SMS message",
    dependencies=[failure_title("Failed to send SMS")],
)
async def send_sms(body: SendSmsRequest, client: Client) -> SendSmsResponse:
    data = await client.send_message(
        to=body.to,
        text=body.message,
        from_number=body.from_number,
    )
    message_id = _created_id(data)
    logger.info("SMS sent", extra={"message_id": message_id})
    return SendSmsResponse(message_id=message_id, data=data)


@router.post(
    "/make-call",
    response_model=MakeCallResponse,
    summary="Place an outbound call",
    dependencies=[failure_title("Failed to make call")],
)
async def make_call(body: MakeCallRequest, client: Client) -> MakeCallResponse:
    data = await client.create_call(to=body.to, from_number=body.from_number)
    call_id = _created_id(data)
    logger.info("Call created", extra={"call_id": call_id})
    return MakeCallResponse(call_id=call_id, data=data)


@router.get(
    "/messages",
    response_model=MessageListResponse,
    summary="List messages",
    dependencies=[failure_title("Failed to retrieve messages")],
)
async def list_messages(
    client: Client,
    limit: Limit = 20,
    phone_number_id: Annotated[str | None, Query()] = None,
) -> MessageListResponse:
    page = await client.list_messages(limit=limit, phone_number_id=phone_number_id)
    return MessageListResponse(
        messages=page.get("data"),
        total=page.get("totalCount"),
        has_more=page.get("hasMore"),
    )


@router.get(
    "/contacts",
    response_model=ContactListResponse,
    summary="List contacts",
    dependencies=[failure_title("Failed to retrieve contacts")],
)
async def list_contacts(
    client: Client,
    limit: Limit = 20,
    search: Annotated[str | None, Query()] = None,
) -> ContactListResponse:
    page = await client.list_contacts(limit=limit, search=search)
    return ContactListResponse(
        contacts=page.get("data"),
        total=page.get("totalCount"),
        has_more=page.get("hasMore"),
    )


@router.get(
    "/calls",
    response_model=CallListResponse,
    summary="List call history",
    dependencies=[failure_title("Failed to retrieve calls")],
)
async def list_calls(
    client: Client,
    limit: Limit = 20,
    phone_number_id: Annotated[str | None, Query()] = None,
) -> CallListResponse:
    page = await client.list_calls(limit=limit, phone_number_id=phone_number_id)
    return CallListResponse(
        calls=page.get("data"),
        total=page.get("totalCount"),
        has_more=page.get("hasMore"),
    )


@router.get(
    "/phone-numbers",
    response_model=PhoneNumberListResponse,
    summary="List workspace phone numbers",
    dependencies=[failure_title("Failed to retrieve phone numbers")],
)
async def list_phone_numbers(client: Client) -> PhoneNumberListResponse:
    page = await client.list_phone_numbers()
    return PhoneNumberListResponse(phone_numbers=page.get("data"))


@router.post(
    "/create-contact",
    response_model=CreateContactResponse,
    summary="Create a contact",
    dependencies=[failure_title("Failed to create contact")],
)
async def create_contact(body: CreateContactRequest, client: Client) -> CreateContactResponse:
    contact = await client.create_contact(body.to_upstream())
    logger.info("Contact created", extra={"contact_id": contact.get("id")})
    return CreateContactResponse(contact=contact)
