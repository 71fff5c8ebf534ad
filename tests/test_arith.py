"""Checked arithmetic specs."""

from __future__ import annotations

import pytest

from assured_campaign.arith import checked_add, checked_mul, checked_sub, percent_of
from assured_campaign.config import U256_MAX
from assured_campaign.errors import CampaignError, ErrorCategory, ErrorCode


def test_checked_add() -> None:
    assert checked_add(2, 3) == 5
    assert checked_add(U256_MAX - 1, 1) == U256_MAX
    with pytest.raises(CampaignError) as exc_info:
        checked_add(U256_MAX, 1)
    assert exc_info.value.code == ErrorCode.OVERFLOW
    assert exc_info.value.category == ErrorCategory.ARITHMETIC


def test_checked_sub() -> None:
    assert checked_sub(5, 5) == 0
    with pytest.raises(CampaignError) as exc_info:
        checked_sub(4, 5)
    assert exc_info.value.code == ErrorCode.UNDERFLOW


def test_checked_mul() -> None:
    assert checked_mul(U256_MAX, 1) == U256_MAX
    with pytest.raises(CampaignError) as exc_info:
        checked_mul(U256_MAX // 2 + 1, 2)
    assert exc_info.value.code == ErrorCode.OVERFLOW


@pytest.mark.parametrize("bad", [-1, U256_MAX + 1, True, 1.5, "3"])
def test_operands_must_be_u256(bad) -> None:
    with pytest.raises(CampaignError):
        checked_add(bad, 0)


def test_percent_of_floors() -> None:
    assert percent_of(50, 10) == 5
    assert percent_of(59, 10) == 5
    assert percent_of(1, 99) == 0
