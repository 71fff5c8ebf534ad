"""Helpers to serialize/deserialize campaign invocation fixtures."""

from __future__ import annotations

from typing import Any

from assured_campaign.address import address_from_hex, address_to_hex
from assured_campaign.ledger import ExecutionLedger, Receipt
from assured_campaign.serialization import engine_from_json, engine_to_json
from assured_campaign.types import Invocation, Method


def ledger_to_json(ledger: ExecutionLedger, campaign: bytes) -> dict[str, Any]:
    """Snapshot of everything an invocation against ``campaign`` can observe.

    Empty accounts are omitted, so a replayed ledger that opened a zero custody
    row serializes the same as the recorded one.
    """
    return {
        "now": ledger.now,
        "balances": [
            {"address": address_to_hex(addr), "balance": bal}
            for addr, bal in sorted(ledger.balances.items())
            if bal
        ],
        "campaign": engine_to_json(ledger.campaign(campaign)),
    }


def ledger_from_json(data: dict[str, Any]) -> tuple[ExecutionLedger, bytes]:
    ledger = ExecutionLedger(genesis_time=int(data["now"]))
    engine = engine_from_json(data["campaign"])
    custody = 0
    for entry in data.get("balances", []):
        addr = address_from_hex(entry["address"])
        if addr == engine.address:
            custody = int(entry["balance"])
        else:
            ledger.balances[addr] = int(entry["balance"])
    ledger.install(engine, custody=custody)
    return ledger, engine.address


def invocation_to_json(inv: Invocation) -> dict[str, Any]:
    return {
        "campaign": address_to_hex(inv.campaign),
        "method": inv.method.value,
        "sender": address_to_hex(inv.sender),
        "value": inv.value,
        "amount": inv.amount,
    }


def invocation_from_json(data: dict[str, Any]) -> Invocation:
    return Invocation(
        campaign=address_from_hex(data["campaign"]),
        method=Method(data["method"]),
        sender=address_from_hex(data["sender"]),
        value=int(data.get("value", 0)),
        amount=data.get("amount"),
    )


def case_to_json(
    name: str,
    pre_state: dict[str, Any],
    inv: Invocation,
    receipt: Receipt,
    post_state: dict[str, Any],
) -> dict[str, Any]:
    return {
        "name": name,
        "pre_state": pre_state,
        "invocation": invocation_to_json(inv),
        "expected": {
            "ok": receipt.ok,
            "error": receipt.error.code.name if receipt.error else None,
            "post_state": post_state,
        },
    }
