"""Stake operation: entrepreneur collateral before the campaign starts."""

from __future__ import annotations

from copy import deepcopy

from ..arith import checked_add
from ..errors import CampaignError, ErrorCode
from ..phase import require_phase
from ..types import CampaignConfig, CampaignState, Event, Invocation, Outcome, Phase
from .amounts import require_attached_amount


def verify(config: CampaignConfig, state: CampaignState, inv: Invocation, now: int) -> None:
    if inv.sender != config.ent_hot_account:
        raise CampaignError(ErrorCode.UNAUTHORIZED, "only the entrepreneur hot account may stake")
    require_phase(config, state, now, Phase.PRE_START)
    amount = require_attached_amount(inv)
    checked_add(state.staked_amount, amount)


def apply(config: CampaignConfig, state: CampaignState, inv: Invocation, now: int) -> Outcome:
    ns = deepcopy(state)
    ns.staked_amount = checked_add(ns.staked_amount, inv.value)
    event = Event(
        "Staked",
        inv.campaign,
        {"account": inv.sender, "amount": inv.value, "staked_amount": ns.staked_amount},
    )
    return Outcome(state=ns, events=[event])
