"""Refund operation: contributors reclaim pledges after a failed campaign."""

from __future__ import annotations

from copy import deepcopy

from ..errors import CampaignError, ErrorCode
from ..phase import require_phase
from ..types import CampaignConfig, CampaignState, Event, Invocation, Outcome, Payout, Phase
from .amounts import require_no_value


def verify(config: CampaignConfig, state: CampaignState, inv: Invocation, now: int) -> None:
    require_phase(config, state, now, Phase.FAILURE)
    require_no_value(inv)
    record = state.contributors.get(inv.sender)
    if record is None or record.pledged_balance == 0:
        raise CampaignError(ErrorCode.NOTHING_TO_REFUND, "caller has no pledge")
    if record.refunded:
        raise CampaignError(ErrorCode.ALREADY_REFUNDED, "caller already refunded")


def apply(config: CampaignConfig, state: CampaignState, inv: Invocation, now: int) -> Outcome:
    ns = deepcopy(state)
    record = ns.contributors[inv.sender]
    # The balance stays on record; the flag alone marks it as paid back.
    record.refunded = True
    amount = record.pledged_balance
    event = Event("Refunded", inv.campaign, {"contributor": inv.sender, "amount": amount})
    return Outcome(state=ns, payouts=[Payout(inv.sender, amount)], events=[event])
