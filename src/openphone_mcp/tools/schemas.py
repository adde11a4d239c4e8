"""
Pydantic schemas for the OpenPhone tool endpoints.

Request field names follow what MCP clients send (``from``, ``phoneNumber``);
response envelopes keep the upstream camelCase keys (``hasMore``,
``phoneNumbers``).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SendSmsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: str = Field(..., min_length=1, description="Destination phone number")
    message: str = Field(..., min_length=1, description="Message body")
    from_number: str | None = Field(
        default=None,
        alias="from",
        description="Sending OpenPhone number or phone number id",
    )


class SendSmsResponse(BaseModel):
    success: bool = True
    message_id: str | None
    data: dict[str, Any]


class MakeCallRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: str = Field(..., min_length=1, description="Destination phone number")
    from_number: str = Field(
        ...,
        min_length=1,
        alias="from",
        description="Calling OpenPhone number or phone number id",
    )


class MakeCallResponse(BaseModel):
    success: bool = True
    call_id: str | None
    data: dict[str, Any]


class _PageResponse(BaseModel):
    total: Any = None
    has_more: Any = Field(default=None, serialization_alias="hasMore")


class MessageListResponse(_PageResponse):
    messages: Any = None


class ContactListResponse(_PageResponse):
    contacts: Any = None


class CallListResponse(_PageResponse):
    calls: Any = None


class PhoneNumberListResponse(BaseModel):
    phone_numbers: Any = Field(default=None, serialization_alias="phoneNumbers")


class CreateContactRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    phone_number: str = Field(
        ...,
        min_length=1,
        alias="phoneNumber",
        description="Phone number in E.164 format",
    )
    name: str | None = Field(default=None, description="Display name")
    email: str | None = Field(default=None, description="Contact email address")
    tags: list[str] | None = Field(default=None, description="Free-form contact tags")

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_absent(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_upstream(self) -> dict[str, Any]:
        """Payload for POST /contacts; empty optional fields are left out."""
        payload: dict[str, Any] = {"phoneNumber": self.phone_number}
        if self.name:
            payload["name"] = self.name
        if self.email:
            payload["email"] = self.email
        if self.tags:
            payload["tags"] = self.tags
        return payload


class CreateContactResponse(BaseModel):
    success: bool = True
    contact: dict[str, Any]
