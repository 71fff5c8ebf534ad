"""Pledge operation: contributions during the active window."""

from __future__ import annotations

from copy import deepcopy

from ..arith import checked_add
from ..errors import CampaignError, ErrorCode
from ..phase import require_phase
from ..types import CampaignConfig, CampaignState, ContributorRecord, Event, Invocation, Outcome, Phase
from .amounts import require_attached_amount


def verify(config: CampaignConfig, state: CampaignState, inv: Invocation, now: int) -> None:
    require_phase(config, state, now, Phase.ACTIVE)
    # Stake sufficiency is checked per call, not once at phase entry.
    if state.staked_amount < config.min_stake_required:
        raise CampaignError(
            ErrorCode.STAKE_BELOW_MINIMUM,
            f"staked {state.staked_amount} below required {config.min_stake_required}",
        )
    amount = require_attached_amount(inv)
    if amount < config.contrib_min_amount:
        raise CampaignError(ErrorCode.BELOW_MIN_CONTRIBUTION, "pledge below contrib_min_amount")

    record = state.contributors.get(inv.sender)
    current = record.pledged_balance if record is not None else 0
    checked_add(current, amount)
    checked_add(state.total_pledged, amount)


def apply(config: CampaignConfig, state: CampaignState, inv: Invocation, now: int) -> Outcome:
    ns = deepcopy(state)
    record = ns.contributors.setdefault(inv.sender, ContributorRecord())
    record.pledged_balance = checked_add(record.pledged_balance, inv.value)
    ns.total_pledged = checked_add(ns.total_pledged, inv.value)
    event = Event(
        "Pledged",
        inv.campaign,
        {"contributor": inv.sender, "amount": inv.value, "balance": record.pledged_balance},
    )
    return Outcome(state=ns, events=[event])
