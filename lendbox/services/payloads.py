from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from lendbox.errors import ValidationError
from lendbox.models.borrow_request import RequestStatus


def parse_date(value, field: str) -> date:
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f"{field} is required")
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date (YYYY-MM-DD)")


def clean_message(value, field: str, max_length: int) -> str | None:
    """Blank -> None; longer than max_length -> ValidationError."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    value = value.strip()
    if not value:
        return None
    if len(value) > max_length:
        raise ValidationError(f"{field} must not exceed {max_length} characters")
    return value


def parse_status(value) -> RequestStatus | None:
    if value is None or isinstance(value, RequestStatus):
        return value
    name = str(value).strip().upper()
    if not name:
        return None
    try:
        return RequestStatus[name]
    except KeyError:
        allowed = ", ".join(s.name for s in RequestStatus)
        raise ValidationError(f"Unknown status '{value}'. Allowed: {allowed}")


@dataclass(frozen=True)
class CreateRequestPayload:
    borrow_date: date
    return_date: date
    request_message: str | None = None

    @classmethod
    def from_json(cls, data: dict) -> "CreateRequestPayload":
        return cls(
            borrow_date=parse_date(data.get("borrow_date"), "borrow_date"),
            return_date=parse_date(data.get("return_date"), "return_date"),
            request_message=data.get("request_message"),
        )
