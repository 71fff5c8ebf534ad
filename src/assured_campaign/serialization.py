"""JSON-friendly conversion of campaign state, events and receipts."""

from __future__ import annotations

from typing import Any

from .address import address_from_hex, address_to_hex
from .engine import CampaignEngine
from .ledger import Receipt
from .types import CampaignConfig, CampaignState, ContributorRecord, Event


def _jsonable(v: Any) -> Any:
    if isinstance(v, bytes):
        return address_to_hex(v)
    return v


def config_to_json(cfg: CampaignConfig) -> dict[str, Any]:
    return {
        "start_time": cfg.start_time,
        "end_time": cfg.end_time,
        "target_amount": cfg.target_amount,
        "profit_amount": cfg.profit_amount,
        "contrib_min_amount": cfg.contrib_min_amount,
        "stake_percent": cfg.stake_percent,
        "ent_hot_account": address_to_hex(cfg.ent_hot_account),
        "ent_cold_account": address_to_hex(cfg.ent_cold_account),
        "recipient_account": address_to_hex(cfg.recipient_account),
        "min_stake_required": cfg.min_stake_required,
    }


def config_from_json(data: dict[str, Any]) -> CampaignConfig:
    return CampaignConfig(
        start_time=int(data["start_time"]),
        end_time=int(data["end_time"]),
        target_amount=int(data["target_amount"]),
        profit_amount=int(data["profit_amount"]),
        contrib_min_amount=int(data["contrib_min_amount"]),
        stake_percent=int(data["stake_percent"]),
        ent_hot_account=address_from_hex(data["ent_hot_account"]),
        ent_cold_account=address_from_hex(data["ent_cold_account"]),
        recipient_account=address_from_hex(data["recipient_account"]),
        min_stake_required=int(data["min_stake_required"]),
    )


def state_to_json(state: CampaignState) -> dict[str, Any]:
    return {
        "staked_amount": state.staked_amount,
        "total_pledged": state.total_pledged,
        "indivisible_stake_returned": state.indivisible_stake_returned,
        "settled": state.settled,
        "contributors": [
            {
                "address": address_to_hex(addr),
                "pledged_balance": rec.pledged_balance,
                "refunded": rec.refunded,
            }
            for addr, rec in sorted(state.contributors.items())
        ],
    }


def state_from_json(data: dict[str, Any]) -> CampaignState:
    state = CampaignState(
        staked_amount=int(data.get("staked_amount", 0)),
        total_pledged=int(data.get("total_pledged", 0)),
        indivisible_stake_returned=bool(data.get("indivisible_stake_returned", False)),
        settled=bool(data.get("settled", False)),
    )
    for c in data.get("contributors", []):
        state.contributors[address_from_hex(c["address"])] = ContributorRecord(
            pledged_balance=int(c["pledged_balance"]),
            refunded=bool(c.get("refunded", False)),
        )
    return state


def engine_to_json(engine: CampaignEngine) -> dict[str, Any]:
    return {
        "address": address_to_hex(engine.address),
        "config": config_to_json(engine.config),
        "state": state_to_json(engine.state),
    }


def engine_from_json(data: dict[str, Any]) -> CampaignEngine:
    return CampaignEngine(
        address_from_hex(data["address"]),
        config_from_json(data["config"]),
        state_from_json(data["state"]),
    )


def event_to_json(event: Event) -> dict[str, Any]:
    return {
        "name": event.name,
        "campaign": address_to_hex(event.campaign),
        "fields": {k: _jsonable(v) for k, v in event.fields.items()},
    }


def receipt_to_json(receipt: Receipt) -> dict[str, Any]:
    inv = receipt.invocation
    return {
        "method": inv.method.value,
        "sender": address_to_hex(inv.sender),
        "value": inv.value,
        "amount": inv.amount,
        "timestamp": receipt.timestamp,
        "ok": receipt.ok,
        "error": receipt.error.code.name if receipt.error else None,
        "events": [event_to_json(e) for e in receipt.events],
        "payouts": [
            {"destination": address_to_hex(p.destination), "amount": p.amount}
            for p in receipt.payouts
        ],
    }
