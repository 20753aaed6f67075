"""Newsletter schemas."""

from typing import List, Optional

from pydantic import Field, field_validator

from .base import StandardizedModel, StrictRequestModel, blank_to_none, required_text


class NewsletterRequest(StrictRequestModel):
    to: Optional[List[str]] = Field(None, description="Recipients; defaults to all players with an email")
    subject: str = Field(..., max_length=255)
    body: str = Field(..., max_length=50000)
    from_name: Optional[str] = Field(None, max_length=100)

    @field_validator("subject", "body", mode="before")
    @classmethod
    def _required(cls, v: object, info) -> object:
        return required_text(v, info.field_name)

    @field_validator("from_name", mode="before")
    @classmethod
    def _from_name(cls, v: object) -> object:
        return blank_to_none(v)


class NewsletterResponse(StandardizedModel):
    sent: int
    failed: int
    errors: List[str]
