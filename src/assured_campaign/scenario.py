"""YAML campaign scenarios.

A scenario deploys one campaign on a fresh ledger, runs a list of steps
against it and compares each receipt with an optional expectation::

    name: success_split
    balances: {deployer: 100, alice: 100}
    campaign:
      start_in: 120
      duration: 86400
      target_amount: 50
      profit_amount: 10
      contrib_min_amount: 2
      stake_percent: 10
      ent_hot_account: deployer
      ent_cold_account: deployer
      recipient_account: carol
    steps:
      - {op: stake, sender: deployer, amount: 5}
      - {op: advance_to, at: start}
      - {op: pledge, sender: alice, amount: 50}
      - {op: advance_to, at: end}
      - {op: settle, sender: bob, expect: {ok: true}}
    expect_state:
      total_pledged: 50
      balances: {carol: 45}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from .config import DEFAULT_GENESIS_TIME
from .errors import CampaignError, ErrorCode
from .ledger import ExecutionLedger, Receipt
from .params import CampaignParams
from .test_accounts import resolve
from .types import Method

logger = logging.getLogger(__name__)

_ADDRESS_FIELDS = ("ent_hot_account", "ent_cold_account", "recipient_account")
_STATE_QUERIES = ("staked_amount", "total_pledged", "min_stake_required")


@dataclass
class StepResult:
    index: int
    op: str
    receipt: Optional[Receipt] = None
    failure: Optional[str] = None


@dataclass
class ScenarioResult:
    name: str
    ledger: ExecutionLedger
    campaign: Optional[bytes]
    steps: List[StepResult] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _campaign_params(data: Mapping[str, Any], genesis: int) -> CampaignParams:
    raw = dict(data)
    if "start_time" not in raw:
        raw["start_time"] = genesis + int(raw.pop("start_in", 0))
    if "end_time" not in raw:
        raw["end_time"] = raw["start_time"] + int(raw.pop("duration", 0))
    for name in _ADDRESS_FIELDS:
        if isinstance(raw.get(name), str):
            raw[name] = resolve(raw[name])
    raw.pop("start_in", None)
    raw.pop("duration", None)
    return CampaignParams.from_mapping(raw)


def _check_expect(step: StepResult, expect: Mapping[str, Any]) -> None:
    receipt = step.receipt
    if receipt is None:
        return
    if "ok" in expect and receipt.ok != bool(expect["ok"]):
        step.failure = f"ok_mismatch: expected {expect['ok']}, got {receipt.ok}"
        return
    if "error" in expect:
        actual = receipt.error.code.name if receipt.error else None
        if actual != expect["error"]:
            step.failure = f"error_mismatch: expected {expect['error']}, got {actual}"
            return
    if "category" in expect:
        actual = receipt.error.category.name if receipt.error else None
        if actual != expect["category"]:
            step.failure = f"category_mismatch: expected {expect['category']}, got {actual}"


def _run_step(ledger: ExecutionLedger, campaign: bytes, index: int, spec: Mapping[str, Any]) -> StepResult:
    op = spec.get("op")
    step = StepResult(index=index, op=str(op))
    engine = ledger.campaign(campaign)

    if op == "advance":
        ledger.advance(int(spec["seconds"]))
        return step
    if op == "advance_to":
        at = spec["at"]
        target = {"start": engine.start_time(), "end": engine.end_time()}.get(at, at)
        ledger.set_time(max(ledger.now, int(target) + int(spec.get("offset", 0))))
        return step

    try:
        method = Method(op)
    except ValueError as exc:
        raise CampaignError(ErrorCode.UNKNOWN_METHOD, f"unknown scenario op {op!r}") from exc

    sender = resolve(spec["sender"])
    amount = spec.get("amount")
    value = int(spec.get("value", amount or 0))
    step.receipt = ledger.call(campaign, method, sender, value=value, amount=amount)
    _check_expect(step, spec.get("expect", {}))
    return step


def _check_state(result: ScenarioResult, expect: Mapping[str, Any]) -> None:
    engine = result.ledger.campaign(result.campaign)
    for key in _STATE_QUERIES:
        if key in expect and getattr(engine, key)() != expect[key]:
            result.failures.append(f"state_mismatch: {key}={getattr(engine, key)()} != {expect[key]}")
    for name, amount in (expect.get("balances") or {}).items():
        actual = result.ledger.balance_of(resolve(name))
        if actual != amount:
            result.failures.append(f"balance_mismatch: {name}={actual} != {amount}")
    for name, amount in (expect.get("pledges") or {}).items():
        actual = engine.fetch_my_balance(resolve(name))
        if actual != amount:
            result.failures.append(f"pledge_mismatch: {name}={actual} != {amount}")


def run_scenario(data: Mapping[str, Any]) -> ScenarioResult:
    """Run a parsed scenario; malformed steps and creation errors are reported, not raised."""
    genesis = int(data.get("genesis_time", DEFAULT_GENESIS_TIME))
    ledger = ExecutionLedger(genesis_time=genesis)
    result = ScenarioResult(name=str(data.get("name", "scenario")), ledger=ledger, campaign=None)

    try:
        for name, amount in (data.get("balances") or {}).items():
            ledger.credit(resolve(name), int(amount))
        deployer = resolve(data.get("deployer", "deployer"))
    except CampaignError as exc:
        result.failures.append(f"invalid_setup: {exc}")
        return result

    try:
        result.campaign = ledger.deploy(deployer, _campaign_params(data["campaign"], genesis))
    except KeyError as exc:
        result.failures.append(f"create_failed: missing key {exc}")
        return result
    except CampaignError as exc:
        expected = (data.get("expect_create") or {}).get("error")
        if expected != exc.code.name:
            result.failures.append(f"create_failed: {exc}")
        return result
    if (data.get("expect_create") or {}).get("error"):
        result.failures.append("create_succeeded: expected failure")

    for index, spec in enumerate(data.get("steps") or []):
        try:
            step = _run_step(ledger, result.campaign, index, spec)
        except KeyError as exc:
            step = StepResult(index=index, op=str(spec.get("op")), failure=f"invalid_step: missing key {exc}")
        except CampaignError as exc:
            step = StepResult(index=index, op=str(spec.get("op")), failure=f"invalid_step: {exc}")
        result.steps.append(step)
        if step.failure:
            result.failures.append(f"step {index} ({step.op}): {step.failure}")

    try:
        _check_state(result, data.get("expect_state") or {})
    except CampaignError as exc:
        result.failures.append(f"invalid_expect_state: {exc}")
    logger.info("scenario %s: %d steps, %d failures", result.name, len(result.steps), len(result.failures))
    return result


def load_scenario(path: Union[str, Path]) -> Dict[str, Any]:
    data = yaml.safe_load(Path(path).read_text())
    if not isinstance(data, dict):
        raise CampaignError(ErrorCode.MISSING_PARAMETER, f"{path}: scenario must be a mapping")
    return data
