"""Assured campaign error codes and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCategory(IntEnum):
    SUCCESS = 0x00
    INVALID_CONFIGURATION = 0x01
    PHASE_VIOLATION = 0x02
    AUTHORIZATION = 0x03
    INSUFFICIENT_AMOUNT = 0x04
    ALREADY_PROCESSED = 0x05
    ARITHMETIC = 0x06
    INTERNAL = 0xFF


class ErrorCode(IntEnum):
    # Success
    SUCCESS = 0x0000

    # Invalid configuration (creation-time)
    START_TOO_SOON = 0x0100
    DURATION_TOO_SHORT = 0x0101
    INVALID_ADDRESS = 0x0102
    INVALID_TARGET = 0x0103
    PROFIT_NOT_BELOW_TARGET = 0x0104
    INVALID_STAKE_PERCENT = 0x0105
    INVALID_TIMESTAMP = 0x0106
    MISSING_PARAMETER = 0x0107

    # Phase violation
    NOT_PRE_START = 0x0200
    NOT_ACTIVE = 0x0201
    STAKE_BELOW_MINIMUM = 0x0202
    NOT_SUCCESS = 0x0203
    NOT_FAILURE = 0x0204

    # Authorization
    UNAUTHORIZED = 0x0300

    # Insufficient amount
    INVALID_AMOUNT = 0x0400
    BELOW_MIN_CONTRIBUTION = 0x0401
    VALUE_MISMATCH = 0x0402
    NOTHING_TO_REFUND = 0x0403
    INSUFFICIENT_BALANCE = 0x0404

    # Already processed
    ALREADY_REFUNDED = 0x0500
    ALREADY_SETTLED = 0x0501
    STAKE_ALREADY_RETURNED = 0x0502

    # Arithmetic
    OVERFLOW = 0x0600
    UNDERFLOW = 0x0601

    # Internal
    TRANSFER_FAILED = 0xFF00
    CLOCK_REGRESSION = 0xFF01
    UNKNOWN_METHOD = 0xFF02
    CAMPAIGN_NOT_FOUND = 0xFF03
    ACCOUNTING_MISMATCH = 0xFF04
    UNKNOWN = 0xFFFF

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory(self.value >> 8)


@dataclass(frozen=True)
class CampaignError(Exception):
    code: ErrorCode
    message: str

    @property
    def category(self) -> ErrorCategory:
        return self.code.category

    def __str__(self) -> str:
        return f"{self.code.name}({self.code:#06x}): {self.message}"


# Allow Python's Exception machinery to set __traceback__/__context__/__cause__
# while keeping dataclass fields frozen (Python 3.13 contextlib compat).
_EXCEPTION_ATTRS = frozenset(("__traceback__", "__context__", "__cause__"))
_frozen_setattr = CampaignError.__setattr__


def _campaign_error_setattr(self: CampaignError, name: str, value: object) -> None:
    if name in _EXCEPTION_ATTRS:
        object.__setattr__(self, name, value)
    else:
        _frozen_setattr(self, name, value)


CampaignError.__setattr__ = _campaign_error_setattr  # type: ignore[method-assign]
