"""Settle operation: split a successful campaign between entrepreneur and recipient."""

from __future__ import annotations

from copy import deepcopy

from ..arith import checked_add, checked_sub
from ..errors import CampaignError, ErrorCode
from ..phase import require_phase
from ..types import CampaignConfig, CampaignState, Event, Invocation, Outcome, Payout, Phase
from .amounts import require_no_value


def split(config: CampaignConfig, state: CampaignState) -> tuple[int, int]:
    """Return (ent_share, recipient_payout) for the current ledger totals."""
    ent_share = checked_add(state.staked_amount, config.profit_amount)
    total_held = checked_add(state.staked_amount, state.total_pledged)
    return ent_share, checked_sub(total_held, ent_share)


def verify(config: CampaignConfig, state: CampaignState, inv: Invocation, now: int) -> None:
    require_phase(config, state, now, Phase.SUCCESS)
    require_no_value(inv)
    if state.settled:
        raise CampaignError(ErrorCode.ALREADY_SETTLED, "campaign already settled")
    split(config, state)


def apply(config: CampaignConfig, state: CampaignState, inv: Invocation, now: int) -> Outcome:
    ns = deepcopy(state)
    ent_share, recipient_payout = split(config, ns)
    ns.settled = True

    payouts = []
    if ent_share:
        payouts.append(Payout(config.ent_cold_account, ent_share))
    if recipient_payout:
        payouts.append(Payout(config.recipient_account, recipient_payout))

    event = Event(
        "Settled",
        inv.campaign,
        {
            "ent_account": config.ent_cold_account,
            "ent_share": ent_share,
            "recipient": config.recipient_account,
            "recipient_payout": recipient_payout,
        },
    )
    return Outcome(state=ns, payouts=payouts, events=[event])
