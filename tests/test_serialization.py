"""Serialization specs."""

from __future__ import annotations

import json
from pathlib import Path

import conftest
from assured_campaign.serialization import engine_from_json, engine_to_json, receipt_to_json
from assured_campaign.state_digest import compute_state_digest
from assured_campaign.test_accounts import ALICE, BOB, DAVE
from assured_campaign.types import Invocation, Method
from tools.consume import check_fixtures
from tools.fixtures_io import (
    invocation_from_json,
    invocation_to_json,
    ledger_from_json,
    ledger_to_json,
)


def test_engine_json_round_trip(ledger, failed_campaign) -> None:
    assert ledger.refund(failed_campaign, ALICE).ok
    engine = ledger.campaign(failed_campaign)

    restored = engine_from_json(engine_to_json(engine))
    assert restored.config == engine.config
    assert restored.have_i_been_refunded(ALICE)
    assert restored.fetch_my_balance(BOB) == 10
    assert compute_state_digest(restored) == compute_state_digest(engine)


def test_receipt_json(ledger, active_campaign) -> None:
    receipt = ledger.pledge(active_campaign, ALICE, 7)
    data = receipt_to_json(receipt)
    assert data["ok"] is True
    assert data["method"] == "pledge"
    assert data["events"][0]["name"] == "Pledged"

    rejected = receipt_to_json(ledger.pledge(active_campaign, ALICE, 1))
    assert rejected["ok"] is False
    assert rejected["error"] == "BELOW_MIN_CONTRIBUTION"


def test_restored_ledger_replays_invocation(ledger, failed_campaign) -> None:
    pre = ledger_to_json(ledger, failed_campaign)
    inv = Invocation(campaign=failed_campaign, method=Method.REFUND, sender=BOB)

    replay, address = ledger_from_json(pre)
    assert address == failed_campaign
    assert replay.balance_of(address) == ledger.balance_of(failed_campaign)

    receipt = replay.execute(invocation_from_json(invocation_to_json(inv)))
    assert receipt.ok
    assert replay.campaign(address).have_i_been_refunded(BOB)
    assert replay.balance_of(BOB) == ledger.balance_of(BOB) + 10


def _stake(campaign: bytes, sender: bytes) -> Invocation:
    return Invocation(campaign=campaign, method=Method.STAKE, sender=sender, value=5, amount=5)


def test_recorded_cases_replay_unchanged(ledger, campaign, invoke_test, tmp_path: Path) -> None:
    rel_path = "serialization/replay.json"
    recorded = [
        invoke_test(rel_path, "stake_on_empty_custody", ledger, _stake(campaign, DAVE)),
        invoke_test(rel_path, "stake_not_hot_account", ledger, _stake(campaign, ALICE)),
    ]
    assert [r.ok for r in recorded] == [True, False]

    cases = conftest._CASES[rel_path][-2:]
    assert all(b["address"] != "0x" + campaign.hex() for b in cases[0]["pre_state"]["balances"])

    for case in cases:
        replay, address = ledger_from_json(case["pre_state"])
        replay.execute(invocation_from_json(case["invocation"]))
        assert ledger_to_json(replay, address) == case["expected"]["post_state"]

    (tmp_path / "replay.json").write_text(json.dumps({"cases": cases}))
    assert check_fixtures(tmp_path) == []
