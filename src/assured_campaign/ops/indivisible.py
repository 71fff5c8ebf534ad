"""Indivisible stake return after a failed campaign.

Refunds only ever pay back pledges, so after a failure the whole stake is
residual. It is released once, to the entrepreneur cold account.
"""

from __future__ import annotations

from copy import deepcopy

from ..errors import CampaignError, ErrorCode
from ..phase import require_phase
from ..types import CampaignConfig, CampaignState, Event, Invocation, Outcome, Payout, Phase
from .amounts import require_no_value


def residual_stake(config: CampaignConfig, state: CampaignState) -> int:
    return state.staked_amount


def verify(config: CampaignConfig, state: CampaignState, inv: Invocation, now: int) -> None:
    require_phase(config, state, now, Phase.FAILURE)
    require_no_value(inv)
    if state.indivisible_stake_returned:
        raise CampaignError(ErrorCode.STAKE_ALREADY_RETURNED, "indivisible stake already returned")


def apply(config: CampaignConfig, state: CampaignState, inv: Invocation, now: int) -> Outcome:
    ns = deepcopy(state)
    amount = residual_stake(config, ns)
    ns.indivisible_stake_returned = True

    payouts = [Payout(config.ent_cold_account, amount)] if amount else []
    event = Event(
        "IndivisibleStakeReturned",
        inv.campaign,
        {"ent_account": config.ent_cold_account, "amount": amount},
    )
    return Outcome(state=ns, payouts=payouts, events=[event])
