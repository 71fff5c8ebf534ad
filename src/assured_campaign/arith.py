"""Checked unsigned arithmetic for campaign amounts."""

from __future__ import annotations

from .config import PERCENT_DENOMINATOR, U256_MAX
from .errors import CampaignError, ErrorCode


def _require_uint(value: int, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CampaignError(ErrorCode.INVALID_AMOUNT, f"{what} must be an integer")
    if value < 0:
        raise CampaignError(ErrorCode.UNDERFLOW, f"{what} is negative")
    if value > U256_MAX:
        raise CampaignError(ErrorCode.OVERFLOW, f"{what} exceeds u256 max")
    return value


def checked_add(a: int, b: int) -> int:
    """a + b with u256 bounds; never wraps."""
    total = _require_uint(a, "lhs") + _require_uint(b, "rhs")
    if total > U256_MAX:
        raise CampaignError(ErrorCode.OVERFLOW, "addition overflow")
    return total


def checked_sub(a: int, b: int) -> int:
    diff = _require_uint(a, "lhs") - _require_uint(b, "rhs")
    if diff < 0:
        raise CampaignError(ErrorCode.UNDERFLOW, "subtraction underflow")
    return diff


def checked_mul(a: int, b: int) -> int:
    product = _require_uint(a, "lhs") * _require_uint(b, "rhs")
    if product > U256_MAX:
        raise CampaignError(ErrorCode.OVERFLOW, "multiplication overflow")
    return product


def percent_of(amount: int, percent: int) -> int:
    """floor(amount * percent / 100), overflow-checked on the product."""
    return checked_mul(amount, percent) // PERCENT_DENOMINATOR
