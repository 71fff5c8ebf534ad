"""Generate the canonical YAML scenarios under scenarios/."""

from __future__ import annotations

from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "tools"))

from yaml_dump import write_yaml  # noqa: E402

OUT = ROOT / "scenarios"

_CAMPAIGN = {
    "start_in": 120,
    "duration": 86_400,
    "target_amount": 50,
    "profit_amount": 10,
    "contrib_min_amount": 2,
    "stake_percent": 10,
    "ent_hot_account": "deployer",
    "ent_cold_account": "frank",
    "recipient_account": "carol",
}

_BALANCES = {"deployer": 100, "alice": 100, "bob": 100}

SCENARIOS = {
    "stake_gate": {
        "name": "stake_gate",
        "balances": _BALANCES,
        "campaign": _CAMPAIGN,
        "steps": [
            {"op": "stake", "sender": "deployer", "amount": 4, "expect": {"ok": True}},
            {"op": "advance_to", "at": "start"},
            {"op": "pledge", "sender": "alice", "amount": 2, "expect": {"error": "STAKE_BELOW_MINIMUM"}},
            {"op": "stake", "sender": "deployer", "amount": 1, "expect": {"error": "NOT_PRE_START"}},
        ],
        "expect_state": {"staked_amount": 4, "total_pledged": 0, "balances": {"deployer": 96}},
    },
    "success_split": {
        "name": "success_split",
        "balances": _BALANCES,
        "campaign": _CAMPAIGN,
        "steps": [
            {"op": "stake", "sender": "deployer", "amount": 5, "expect": {"ok": True}},
            {"op": "advance_to", "at": "start"},
            {"op": "pledge", "sender": "alice", "amount": 30, "expect": {"ok": True}},
            {"op": "pledge", "sender": "bob", "amount": 25, "expect": {"ok": True}},
            {"op": "advance_to", "at": "end"},
            {"op": "settle", "sender": "bob", "expect": {"ok": True}},
            {"op": "refund", "sender": "alice", "expect": {"category": "PHASE_VIOLATION"}},
            {"op": "settle", "sender": "bob", "expect": {"error": "ALREADY_SETTLED"}},
        ],
        "expect_state": {
            "total_pledged": 55,
            "pledges": {"alice": 30, "bob": 25},
            "balances": {"frank": 15, "carol": 45, "alice": 70, "bob": 75},
        },
    },
    "failure_refunds": {
        "name": "failure_refunds",
        "balances": _BALANCES,
        "campaign": _CAMPAIGN,
        "steps": [
            {"op": "stake", "sender": "deployer", "amount": 5, "expect": {"ok": True}},
            {"op": "advance_to", "at": "start"},
            {"op": "pledge", "sender": "alice", "amount": 20, "expect": {"ok": True}},
            {"op": "advance_to", "at": "end"},
            {"op": "refund", "sender": "alice", "expect": {"ok": True}},
            {"op": "refund", "sender": "alice", "expect": {"error": "ALREADY_REFUNDED"}},
            {"op": "refund", "sender": "bob", "expect": {"error": "NOTHING_TO_REFUND"}},
            {"op": "return_indivisible_stake", "sender": "deployer", "expect": {"ok": True}},
            {"op": "return_indivisible_stake", "sender": "deployer", "expect": {"error": "STAKE_ALREADY_RETURNED"}},
        ],
        "expect_state": {"balances": {"alice": 100, "frank": 5, "deployer": 95}},
    },
}


def main() -> None:
    OUT.mkdir(parents=True, exist_ok=True)
    for name, scenario in SCENARIOS.items():
        write_yaml(OUT / f"{name}.yaml", scenario)
        print("wrote", OUT / f"{name}.yaml")


if __name__ == "__main__":
    main()
