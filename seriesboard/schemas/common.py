"""Shared / generic schemas."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    success: bool = False
    error_code: str
    message: str
    details: dict[str, Any] | None = None


def _half_up(value: float, exponent: str) -> Decimal:
    # str() first so 6.25 stays 6.25 instead of its binary expansion
    return Decimal(str(value)).quantize(Decimal(exponent), rounding=ROUND_HALF_UP)


def round_percent(value: float) -> float:
    """Percentages leave the service with one decimal place, halves rounded up."""
    return float(_half_up(value, "0.1"))


def round_minutes(seconds: float) -> int:
    """Durations leave the service as whole minutes, halves rounded up."""
    return int(_half_up(seconds / 60, "1"))


def whole_minutes(minutes: float) -> int:
    return int(_half_up(minutes, "1"))
