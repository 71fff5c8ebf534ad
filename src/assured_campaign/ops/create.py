"""Campaign creation checks."""

from __future__ import annotations

from ..address import require_address
from ..arith import percent_of
from ..config import MAX_STAKE_PERCENT, MIN_DURATION, MIN_START_DELAY, TIMESTAMP_MAX, U256_MAX
from ..errors import CampaignError, ErrorCode
from ..params import CampaignParams
from ..types import CampaignConfig


def _require_timestamp(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= TIMESTAMP_MAX:
        raise CampaignError(ErrorCode.INVALID_TIMESTAMP, f"{what} must be an unsigned timestamp")
    return value


def _require_amount(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CampaignError(ErrorCode.INVALID_AMOUNT, f"{what} must be an integer")
    if value < 0:
        raise CampaignError(ErrorCode.INVALID_AMOUNT, f"{what} must be non-negative")
    if value > U256_MAX:
        raise CampaignError(ErrorCode.OVERFLOW, f"{what} exceeds u256 max")
    return value


def verify(params: CampaignParams, now: int) -> None:
    require_address(params.ent_hot_account, "ent_hot_account")
    require_address(params.ent_cold_account, "ent_cold_account")
    require_address(params.recipient_account, "recipient_account")

    start = _require_timestamp(params.start_time, "start_time")
    end = _require_timestamp(params.end_time, "end_time")
    if start < now + MIN_START_DELAY:
        raise CampaignError(ErrorCode.START_TOO_SOON, f"start_time must be at least {MIN_START_DELAY}s ahead")
    if end < start or end - start < MIN_DURATION:
        raise CampaignError(ErrorCode.DURATION_TOO_SHORT, f"campaign must last at least {MIN_DURATION}s")

    target = _require_amount(params.target_amount, "target_amount")
    if target == 0:
        raise CampaignError(ErrorCode.INVALID_TARGET, "target_amount must be > 0")
    profit = _require_amount(params.profit_amount, "profit_amount")
    if profit >= target:
        raise CampaignError(ErrorCode.PROFIT_NOT_BELOW_TARGET, "profit_amount must be below target_amount")
    _require_amount(params.contrib_min_amount, "contrib_min_amount")

    pct = params.stake_percent
    if isinstance(pct, bool) or not isinstance(pct, int) or not 0 <= pct <= MAX_STAKE_PERCENT:
        raise CampaignError(ErrorCode.INVALID_STAKE_PERCENT, f"stake_percent must be within 0..{MAX_STAKE_PERCENT}")


def build(params: CampaignParams) -> CampaignConfig:
    """Freeze verified params into a config with its derived constants."""
    return CampaignConfig(
        start_time=params.start_time,
        end_time=params.end_time,
        target_amount=params.target_amount,
        profit_amount=params.profit_amount,
        contrib_min_amount=params.contrib_min_amount,
        stake_percent=params.stake_percent,
        ent_hot_account=bytes(params.ent_hot_account),
        ent_cold_account=bytes(params.ent_cold_account),
        recipient_account=bytes(params.recipient_account),
        min_stake_required=percent_of(params.target_amount, params.stake_percent),
    )
