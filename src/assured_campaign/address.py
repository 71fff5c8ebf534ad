"""Account identity helpers."""

from __future__ import annotations

from .config import ADDRESS_LEN, ZERO_ADDRESS
from .errors import CampaignError, ErrorCode


def require_address(value: object, what: str = "address", allow_zero: bool = False) -> bytes:
    if isinstance(value, bytearray):
        value = bytes(value)
    if not isinstance(value, bytes) or len(value) != ADDRESS_LEN:
        raise CampaignError(ErrorCode.INVALID_ADDRESS, f"{what} must be {ADDRESS_LEN} bytes")
    if not allow_zero and value == ZERO_ADDRESS:
        raise CampaignError(ErrorCode.INVALID_ADDRESS, f"{what} is the zero address")
    return value


def address_from_hex(value: str) -> bytes:
    v = value[2:] if value.startswith(("0x", "0X")) else value
    try:
        raw = bytes.fromhex(v)
    except ValueError as exc:
        raise CampaignError(ErrorCode.INVALID_ADDRESS, f"invalid hex address: {value!r}") from exc
    return require_address(raw, allow_zero=True)


def address_to_hex(value: bytes) -> str:
    return "0x" + value.hex()
