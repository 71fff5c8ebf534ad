"""Value-vs-amount checks shared by payable operations."""

from __future__ import annotations

from ..config import U256_MAX
from ..errors import CampaignError, ErrorCode
from ..types import Invocation


def require_attached_amount(inv: Invocation) -> int:
    """Return the declared amount once it matches the attached value."""
    amount = inv.value if inv.amount is None else inv.amount
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise CampaignError(ErrorCode.INVALID_AMOUNT, "amount must be a positive integer")
    if amount > U256_MAX:
        raise CampaignError(ErrorCode.OVERFLOW, "amount exceeds u256 max")
    if inv.value != amount:
        raise CampaignError(ErrorCode.VALUE_MISMATCH, "attached value does not match amount")
    return amount


def require_no_value(inv: Invocation) -> None:
    if inv.value != 0:
        raise CampaignError(ErrorCode.VALUE_MISMATCH, f"{inv.method.value} does not accept value")
