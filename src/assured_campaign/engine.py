"""Campaign engine: immutable config plus mutable ledger state for one campaign."""

from __future__ import annotations

import logging

from .address import require_address
from .arith import checked_add
from .errors import CampaignError, ErrorCode
from .ops import create as op_create
from .ops import indivisible as op_indivisible
from .ops import pledge as op_pledge
from .ops import refund as op_refund
from .ops import settle as op_settle
from .ops import stake as op_stake
from .params import CampaignParams
from .phase import current_phase
from .types import CampaignConfig, CampaignState, Invocation, Method, Outcome, Phase

logger = logging.getLogger(__name__)

_OPS = {
    Method.STAKE: op_stake,
    Method.PLEDGE: op_pledge,
    Method.REFUND: op_refund,
    Method.SETTLE: op_settle,
    Method.RETURN_INDIVISIBLE_STAKE: op_indivisible,
}


def _dispatch(method: Method):
    op = _OPS.get(method)
    if op is None:
        raise CampaignError(ErrorCode.UNKNOWN_METHOD, f"unknown method {method!r}")
    return op


class CampaignEngine:
    """A single staked crowdfunding campaign.

    The engine never moves value itself. ``apply`` commits the effects of an
    invocation and hands back the payouts owed, which the ledger performs
    afterwards, so any reentrant call made during a payout already sees the
    committed state.
    """

    def __init__(self, address: bytes, config: CampaignConfig, state: CampaignState | None = None):
        self.address = address
        self.config = config
        self.state = state if state is not None else CampaignState()

    @classmethod
    def create(cls, address: bytes, params: CampaignParams, now: int) -> "CampaignEngine":
        """Validate params atomically and build a fresh campaign."""
        op_create.verify(params, now)
        engine = cls(address, op_create.build(params))
        logger.info(
            "campaign %s created: target=%d profit=%d min_stake=%d window=[%d, %d)",
            address.hex(),
            engine.config.target_amount,
            engine.config.profit_amount,
            engine.config.min_stake_required,
            engine.config.start_time,
            engine.config.end_time,
        )
        return engine

    def verify(self, inv: Invocation, now: int) -> None:
        _dispatch(inv.method).verify(self.config, self.state, inv, now)

    def apply(self, inv: Invocation, now: int) -> Outcome:
        """Verify and commit an invocation; returns the payouts still owed."""
        op = _dispatch(inv.method)
        op.verify(self.config, self.state, inv, now)
        outcome = op.apply(self.config, self.state, inv, now)
        self.state = outcome.state
        logger.info(
            "campaign %s: %s by %s committed (%d payouts)",
            self.address.hex(),
            inv.method.value,
            inv.sender.hex(),
            len(outcome.payouts),
        )
        return outcome

    # --- queries ---

    def phase(self, now: int) -> Phase:
        return current_phase(self.config, self.state, now)

    def min_stake_required(self) -> int:
        return self.config.min_stake_required

    def target_amount(self) -> int:
        return self.config.target_amount

    def profit_amount(self) -> int:
        return self.config.profit_amount

    def contrib_min_amount(self) -> int:
        return self.config.contrib_min_amount

    def stake_percent(self) -> int:
        return self.config.stake_percent

    def start_time(self) -> int:
        return self.config.start_time

    def end_time(self) -> int:
        return self.config.end_time

    def ent_hot_account(self) -> bytes:
        return self.config.ent_hot_account

    def ent_cold_account(self) -> bytes:
        return self.config.ent_cold_account

    def recipient_account(self) -> bytes:
        return self.config.recipient_account

    def staked_amount(self) -> int:
        return self.state.staked_amount

    def total_pledged(self) -> int:
        return self.state.total_pledged

    def fetch_my_balance(self, caller: bytes) -> int:
        record = self.state.contributors.get(require_address(caller, "caller", allow_zero=True))
        return record.pledged_balance if record is not None else 0

    def pledge_exists(self, identity: bytes) -> bool:
        record = self.state.contributors.get(require_address(identity, "identity", allow_zero=True))
        return record is not None and record.pledged_balance > 0

    def have_i_been_refunded(self, caller: bytes) -> bool:
        record = self.state.contributors.get(require_address(caller, "caller", allow_zero=True))
        return record is not None and record.refunded

    def ent_got_indivisible_stake_portion(self) -> bool:
        return self.state.indivisible_stake_returned

    def is_settled(self) -> bool:
        return self.state.settled

    def total_held(self) -> int:
        """Value the campaign still owes out: the amount it must have in custody."""
        if self.state.settled:
            return 0
        held = 0
        for record in self.state.contributors.values():
            if not record.refunded:
                held = checked_add(held, record.pledged_balance)
        if not self.state.indivisible_stake_returned:
            held = checked_add(held, self.state.staked_amount)
        return held
