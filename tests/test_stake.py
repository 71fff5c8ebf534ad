"""Stake specs."""

from __future__ import annotations

from assured_campaign.config import U256_MAX
from assured_campaign.errors import ErrorCategory, ErrorCode
from assured_campaign.test_accounts import ALICE, BOB
from assured_campaign.types import Invocation, Method
from conftest import ENT_HOT, INITIAL_BALANCE, START


def _stake(campaign: bytes, sender: bytes, amount: int, value: int | None = None) -> Invocation:
    return Invocation(
        campaign=campaign,
        method=Method.STAKE,
        sender=sender,
        value=amount if value is None else value,
        amount=amount,
    )


def test_stake_success(ledger, campaign, invoke_test) -> None:
    receipt = invoke_test("stake/stake.json", "stake_success", ledger, _stake(campaign, ENT_HOT, 5))
    assert receipt.ok
    assert ledger.campaign(campaign).staked_amount() == 5
    assert ledger.balance_of(ENT_HOT) == INITIAL_BALANCE - 5
    assert ledger.balance_of(campaign) == 5
    assert [e.name for e in receipt.events] == ["Staked"]
    assert receipt.events[0].fields["staked_amount"] == 5


def test_stake_is_cumulative(ledger, campaign) -> None:
    for amount in (1, 2, 3):
        assert ledger.stake(campaign, ENT_HOT, amount).ok
    assert ledger.campaign(campaign).staked_amount() == 6


def test_stake_above_target_accepted(ledger, campaign) -> None:
    assert ledger.stake(campaign, ENT_HOT, 500).ok
    assert ledger.campaign(campaign).staked_amount() == 500


def test_stake_from_other_account_rejected(ledger, campaign, invoke_test) -> None:
    receipt = invoke_test("stake/stake.json", "stake_not_hot_account", ledger, _stake(campaign, ALICE, 5))
    assert not receipt.ok
    assert receipt.error.code == ErrorCode.UNAUTHORIZED
    assert receipt.error.category == ErrorCategory.AUTHORIZATION
    assert ledger.balance_of(ALICE) == INITIAL_BALANCE
    assert ledger.campaign(campaign).staked_amount() == 0


def test_stake_at_start_rejected(ledger, campaign, invoke_test) -> None:
    ledger.set_time(START)
    receipt = invoke_test("stake/stake.json", "stake_at_start", ledger, _stake(campaign, ENT_HOT, 5))
    assert receipt.error.code == ErrorCode.NOT_PRE_START
    assert receipt.error.category == ErrorCategory.PHASE_VIOLATION


def test_stake_one_second_before_start_accepted(ledger, campaign) -> None:
    ledger.set_time(START - 1)
    assert ledger.stake(campaign, ENT_HOT, 5).ok


def test_stake_after_start_always_rejected(ledger, campaign) -> None:
    assert ledger.stake(campaign, ENT_HOT, 5).ok
    ledger.set_time(START + 10)
    for _ in range(3):
        assert ledger.stake(campaign, ENT_HOT, 5).error.code == ErrorCode.NOT_PRE_START
    assert ledger.campaign(campaign).staked_amount() == 5


def test_stake_value_mismatch_rejected(ledger, campaign, invoke_test) -> None:
    receipt = invoke_test(
        "stake/stake.json", "stake_value_mismatch", ledger, _stake(campaign, ENT_HOT, 5, value=4)
    )
    assert receipt.error.code == ErrorCode.VALUE_MISMATCH
    assert receipt.error.category == ErrorCategory.INSUFFICIENT_AMOUNT
    assert ledger.balance_of(ENT_HOT) == INITIAL_BALANCE


def test_stake_zero_rejected(ledger, campaign) -> None:
    assert ledger.stake(campaign, ENT_HOT, 0).error.code == ErrorCode.INVALID_AMOUNT


def test_stake_without_funds_rolls_back(ledger, campaign) -> None:
    receipt = ledger.stake(campaign, ENT_HOT, INITIAL_BALANCE + 1)
    assert receipt.error.code == ErrorCode.INSUFFICIENT_BALANCE
    assert ledger.campaign(campaign).staked_amount() == 0
    assert ledger.balance_of(campaign) == 0


def test_stake_overflow_rejected(ledger, campaign) -> None:
    engine = ledger.campaign(campaign)
    engine.state.staked_amount = U256_MAX - 1
    ledger.install(engine)
    receipt = ledger.stake(campaign, ENT_HOT, 2)
    assert receipt.error.code == ErrorCode.OVERFLOW
    assert receipt.error.category == ErrorCategory.ARITHMETIC
    assert engine.staked_amount() == U256_MAX - 1
    assert ledger.balance_of(ENT_HOT) == INITIAL_BALANCE


def test_stake_does_not_touch_pledges(ledger, campaign) -> None:
    assert ledger.stake(campaign, ENT_HOT, 5).ok
    engine = ledger.campaign(campaign)
    assert engine.total_pledged() == 0
    assert not engine.pledge_exists(ENT_HOT)
    assert engine.fetch_my_balance(BOB) == 0
