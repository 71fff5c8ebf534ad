"""Pytest hooks and shared campaign fixtures.

Tests that go through ``invoke_test`` are also recorded as invocation
fixtures when pytest runs with ``--output DIR``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from assured_campaign.config import DEFAULT_GENESIS_TIME
from assured_campaign.ledger import ExecutionLedger, Receipt
from assured_campaign.params import CampaignParams
from assured_campaign.test_accounts import ALICE, BOB, CAROL, DAVE, DEPLOYER, EVE, FRANK
from assured_campaign.types import Invocation
from tools.fixtures_io import case_to_json, ledger_to_json

GENESIS = DEFAULT_GENESIS_TIME
START = GENESIS + 120
END = START + 86_400

ENT_HOT = DAVE
ENT_COLD = FRANK
RECIPIENT = CAROL

INITIAL_BALANCE = 1_000

_CASES: dict[str, list[dict[str, Any]]] = {}


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--output",
        action="store",
        default=None,
        help="Output directory for generated fixtures",
    )


def make_params(**overrides: Any) -> CampaignParams:
    """Default campaign: target=50, profit=10, min pledge=2, 10% stake (min stake 5)."""
    values: dict[str, Any] = {
        "start_time": START,
        "end_time": END,
        "target_amount": 50,
        "profit_amount": 10,
        "contrib_min_amount": 2,
        "stake_percent": 10,
        "ent_hot_account": ENT_HOT,
        "ent_cold_account": ENT_COLD,
        "recipient_account": RECIPIENT,
    }
    values.update(overrides)
    return CampaignParams(**values)


@pytest.fixture
def ledger() -> ExecutionLedger:
    ledger = ExecutionLedger(genesis_time=GENESIS)
    for account in (ALICE, BOB, EVE, DAVE):
        ledger.credit(account, INITIAL_BALANCE)
    return ledger


@pytest.fixture
def campaign(ledger: ExecutionLedger) -> bytes:
    return ledger.deploy(DEPLOYER, make_params())


@pytest.fixture
def active_campaign(ledger: ExecutionLedger, campaign: bytes) -> bytes:
    """Campaign with the minimum stake posted and the clock at start_time."""
    assert ledger.stake(campaign, ENT_HOT, 5).ok
    ledger.set_time(START)
    return campaign


@pytest.fixture
def successful_campaign(ledger: ExecutionLedger, active_campaign: bytes) -> bytes:
    """Alice 30 + Bob 25 pledged (target 50), clock at end_time."""
    assert ledger.pledge(active_campaign, ALICE, 30).ok
    assert ledger.pledge(active_campaign, BOB, 25).ok
    ledger.set_time(END)
    return active_campaign


@pytest.fixture
def failed_campaign(ledger: ExecutionLedger, active_campaign: bytes) -> bytes:
    """Alice 20 + Bob 10 pledged (target 50), clock at end_time."""
    assert ledger.pledge(active_campaign, ALICE, 20).ok
    assert ledger.pledge(active_campaign, BOB, 10).ok
    ledger.set_time(END)
    return active_campaign


@pytest.fixture
def invoke_test() -> Callable[[str, str, ExecutionLedger, Invocation], Receipt]:
    """Execute an invocation, record it as a fixture case and return its receipt."""

    def _invoke_test(rel_path: str, name: str, ledger: ExecutionLedger, inv: Invocation) -> Receipt:
        pre_state = ledger_to_json(ledger, inv.campaign)
        receipt = ledger.execute(inv)
        _CASES.setdefault(rel_path, []).append(
            case_to_json(name, pre_state, inv, receipt, ledger_to_json(ledger, inv.campaign))
        )
        return receipt

    return _invoke_test


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    output_dir = session.config.getoption("--output")
    if not output_dir:
        return

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)

    for rel_path, cases in _CASES.items():
        if not cases:
            continue
        target = out / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps({"cases": cases}, indent=2))
