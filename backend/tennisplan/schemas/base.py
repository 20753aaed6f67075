"""
Base schemas and shared field helpers for the Tennisplan API.

Dates travel as ``YYYY-MM-DD``, times as ``HH:MM`` and money as plain
JSON numbers with two decimals.
"""

from datetime import time
from decimal import Decimal, InvalidOperation
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic_core import core_schema

TIME_REGEX = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::([0-5]\d))?$")
MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class StandardizedModel(BaseModel):
    """Base model for responses built from ORM objects."""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True, from_attributes=True)


class StrictRequestModel(BaseModel):
    """Request DTO base that forbids unexpected fields."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, use_enum_values=False)


class Money(Decimal):
    """Money field that always serializes as float; accepts ``12,50`` as well as ``12.50``."""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: Any) -> core_schema.CoreSchema:
        def validate_money(value: Any) -> Decimal:
            if isinstance(value, bool):
                raise ValueError("Cannot convert bool to Money")
            if isinstance(value, str):
                value = value.strip().replace(",", ".")
            try:
                amount = value if isinstance(value, Decimal) else Decimal(str(value))
            except InvalidOperation:
                raise ValueError(f"Not an amount: {value!r}")
            if not amount.is_finite():
                raise ValueError("Amount must be finite")
            return amount

        return core_schema.no_info_after_validator_function(
            validate_money,
            core_schema.union_schema(
                [
                    core_schema.int_schema(),
                    core_schema.float_schema(),
                    core_schema.str_schema(),
                    core_schema.is_instance_schema(Decimal),
                ]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                float,
                info_arg=False,
                return_schema=core_schema.float_schema(),
            ),
        )


def blank_to_none(value: Any) -> Any:
    """Trim strings; empty strings become None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def required_text(value: Any, field_name: str) -> Any:
    """Trim a required string and reject it when nothing is left."""
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError(f"{field_name} must not be empty")
    return value


def parse_hhmm(value: Any) -> Any:
    """Convert ``HH:MM`` strings to time objects."""
    if isinstance(value, str):
        match = TIME_REGEX.fullmatch(value.strip())
        if not match:
            raise ValueError(f"Invalid time format: {value}. Expected HH:MM format.")
        return time(int(match.group(1)), int(match.group(2)))
    return value


def serialize_hhmm(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value is not None else None
