"""In-memory execution ledger hosting campaign engines.

The ledger owns what a campaign cannot provide for itself: the clock, account
balances and value transfer. Every invocation either commits in full or is
rolled back entirely.

Failed-invocation semantics:
- Verification failure: no value moved, campaign state unchanged
- Payout failure (including a failing receive hook): everything rolled back
"""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from blake3 import blake3

from .address import require_address
from .arith import checked_add, checked_sub
from .config import ADDRESS_LEN, DEFAULT_GENESIS_TIME, TIMESTAMP_MAX
from .engine import CampaignEngine
from .errors import CampaignError, ErrorCode
from .params import CampaignParams
from .types import CampaignState, Event, Invocation, Method, Payout

logger = logging.getLogger(__name__)

ReceiveHook = Callable[["ExecutionLedger", bytes, int], None]


@dataclass
class Receipt:
    """Outcome of one invocation."""

    invocation: Invocation
    ok: bool
    error: Optional[CampaignError] = None
    events: List[Event] = field(default_factory=list)
    payouts: List[Payout] = field(default_factory=list)
    timestamp: int = 0

    @classmethod
    def success(cls, inv: Invocation, events: List[Event], payouts: List[Payout], timestamp: int) -> "Receipt":
        return cls(inv, True, None, events, payouts, timestamp)

    @classmethod
    def failure(cls, inv: Invocation, error: CampaignError, timestamp: int) -> "Receipt":
        return cls(inv, False, error, [], [], timestamp)


@dataclass
class _Checkpoint:
    balances: Dict[bytes, int]
    campaign_states: Dict[bytes, CampaignState]
    deploy_nonces: Dict[bytes, int]
    log_len: int
    now: int


def campaign_address(creator: bytes, nonce: int) -> bytes:
    buf = bytearray()
    buf += creator
    buf += nonce.to_bytes(8, "big")
    return blake3(buf).digest()[:ADDRESS_LEN]


class ExecutionLedger:
    """Append-only execution ledger with a monotonic clock."""

    def __init__(self, genesis_time: int = DEFAULT_GENESIS_TIME):
        self._now = genesis_time
        self.balances: Dict[bytes, int] = {}
        self.campaigns: Dict[bytes, CampaignEngine] = {}
        self.log: List[Event] = []
        self._hooks: Dict[bytes, ReceiveHook] = {}
        self._deploy_nonces: Dict[bytes, int] = {}
        self._snapshots: List[_Checkpoint] = []
        self._depth = 0

    # --- clock ---

    @property
    def now(self) -> int:
        return self._now

    def set_time(self, timestamp: int) -> int:
        if not isinstance(timestamp, int) or timestamp > TIMESTAMP_MAX:
            raise CampaignError(ErrorCode.INVALID_TIMESTAMP, "timestamp must be an unsigned integer")
        if timestamp < self._now:
            raise CampaignError(ErrorCode.CLOCK_REGRESSION, f"clock cannot move back from {self._now} to {timestamp}")
        self._now = timestamp
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise CampaignError(ErrorCode.CLOCK_REGRESSION, "cannot advance by a negative duration")
        return self.set_time(self._now + int(seconds))

    # --- accounts ---

    def balance_of(self, account: bytes) -> int:
        return self.balances.get(account, 0)

    def credit(self, account: bytes, amount: int) -> None:
        """Mint value into an account (test faucet)."""
        require_address(account, "account")
        self.balances[account] = checked_add(self.balance_of(account), amount)

    def on_receive(self, account: bytes, hook: Optional[ReceiveHook]) -> None:
        """Install (or clear) a callback run whenever ``account`` receives value."""
        if hook is None:
            self._hooks.pop(account, None)
        else:
            self._hooks[account] = hook

    def _move(self, source: bytes, destination: bytes, amount: int) -> None:
        available = self.balance_of(source)
        if available < amount:
            raise CampaignError(
                ErrorCode.INSUFFICIENT_BALANCE,
                f"{source.hex()} holds {available}, needs {amount}",
            )
        self.balances[source] = checked_sub(available, amount)
        self.balances[destination] = checked_add(self.balance_of(destination), amount)

    def transfer(self, source: bytes, destination: bytes, amount: int) -> None:
        """Move value and run the receiver's hook; a failing hook fails the transfer."""
        self._move(source, destination, amount)
        logger.debug("transfer %d from %s to %s", amount, source.hex(), destination.hex())
        hook = self._hooks.get(destination)
        if hook is None:
            return
        try:
            hook(self, source, amount)
        except CampaignError as exc:
            raise CampaignError(ErrorCode.TRANSFER_FAILED, f"receiver rejected transfer: {exc}") from exc
        except Exception as exc:
            raise CampaignError(ErrorCode.TRANSFER_FAILED, f"receiver hook raised {type(exc).__name__}") from exc

    # --- checkpoints ---

    def _checkpoint(self) -> _Checkpoint:
        return _Checkpoint(
            balances=dict(self.balances),
            campaign_states={addr: deepcopy(e.state) for addr, e in self.campaigns.items()},
            deploy_nonces=dict(self._deploy_nonces),
            log_len=len(self.log),
            now=self._now,
        )

    def _restore(self, cp: _Checkpoint, restore_clock: bool = False) -> None:
        self.balances = dict(cp.balances)
        # Engines are restored in place so references held by callers stay valid.
        for address in list(self.campaigns):
            saved = cp.campaign_states.get(address)
            if saved is None:
                del self.campaigns[address]
            else:
                self.campaigns[address].state = deepcopy(saved)
        self._deploy_nonces = dict(cp.deploy_nonces)
        del self.log[cp.log_len:]
        if restore_clock:
            self._now = cp.now

    def snapshot(self) -> int:
        """Record the full ledger state (clock included) and return its id."""
        self._snapshots.append(self._checkpoint())
        return len(self._snapshots) - 1

    def revert(self, snapshot_id: int) -> None:
        """Return to a snapshot; it and every later snapshot are consumed."""
        if not 0 <= snapshot_id < len(self._snapshots):
            raise CampaignError(ErrorCode.UNKNOWN, f"unknown snapshot {snapshot_id}")
        cp = self._snapshots[snapshot_id]
        del self._snapshots[snapshot_id:]
        self._restore(cp, restore_clock=True)

    # --- campaigns ---

    def deploy(self, creator: bytes, *args, **kwargs) -> bytes:
        """Create a campaign from ordered constructor arguments; returns its address.

        Any invalid argument aborts creation and leaves the ledger untouched.
        """
        require_address(creator, "creator")
        params = args[0] if len(args) == 1 and isinstance(args[0], CampaignParams) else CampaignParams(*args, **kwargs)
        nonce = self._deploy_nonces.get(creator, 0)
        address = campaign_address(creator, nonce)
        engine = CampaignEngine.create(address, params, self._now)
        self._deploy_nonces[creator] = nonce + 1
        self.campaigns[address] = engine
        self.log.append(Event("CampaignCreated", address, {"creator": creator}))
        return address

    def install(self, engine: CampaignEngine, custody: Optional[int] = None) -> None:
        """Host an existing engine, funding its custody with what it owes by default."""
        self.campaigns[engine.address] = engine
        self.balances[engine.address] = engine.total_held() if custody is None else custody

    def campaign(self, address: bytes) -> CampaignEngine:
        engine = self.campaigns.get(address)
        if engine is None:
            raise CampaignError(ErrorCode.CAMPAIGN_NOT_FOUND, f"no campaign at {address.hex()}")
        return engine

    def _invoke(self, inv: Invocation) -> tuple[List[Event], List[Payout]]:
        require_address(inv.sender, "sender", allow_zero=True)
        engine = self.campaign(require_address(inv.campaign, "campaign", allow_zero=True))
        now = self._now

        # checks
        engine.verify(inv, now)
        if inv.value:
            self._move(inv.sender, engine.address, inv.value)

        # effects
        outcome = engine.apply(inv, now)
        self.log.extend(outcome.events)

        # interactions
        for payout in outcome.payouts:
            self.transfer(engine.address, payout.destination, payout.amount)

        if self._depth == 1:
            self._check_custody(self.campaign(inv.campaign))
        return outcome.events, outcome.payouts

    def _check_custody(self, engine: CampaignEngine) -> None:
        held = self.balance_of(engine.address)
        owed = engine.total_held()
        if held != owed:
            raise CampaignError(ErrorCode.ACCOUNTING_MISMATCH, f"custody {held} != liability {owed}")

    def execute(self, inv: Invocation) -> Receipt:
        """Run one invocation to completion or roll it back entirely."""
        cp = self._checkpoint()
        self._depth += 1
        try:
            events, payouts = self._invoke(inv)
        except CampaignError as exc:
            self._restore(cp)
            method = inv.method.value if isinstance(inv.method, Method) else inv.method
            sender = inv.sender.hex() if isinstance(inv.sender, bytes) else repr(inv.sender)
            logger.debug("%s by %s rejected: %s", method, sender, exc)
            return Receipt.failure(inv, exc, self._now)
        finally:
            self._depth -= 1
        return Receipt.success(inv, events, payouts, self._now)

    def call(
        self,
        campaign: bytes,
        method: Method,
        sender: bytes,
        value: int = 0,
        amount: Optional[int] = None,
    ) -> Receipt:
        return self.execute(Invocation(campaign=campaign, method=method, sender=sender, value=value, amount=amount))

    def stake(self, campaign: bytes, sender: bytes, amount: int) -> Receipt:
        return self.call(campaign, Method.STAKE, sender, value=amount, amount=amount)

    def pledge(self, campaign: bytes, sender: bytes, amount: int) -> Receipt:
        return self.call(campaign, Method.PLEDGE, sender, value=amount, amount=amount)

    def refund(self, campaign: bytes, sender: bytes) -> Receipt:
        return self.call(campaign, Method.REFUND, sender)

    def settle(self, campaign: bytes, sender: bytes) -> Receipt:
        return self.call(campaign, Method.SETTLE, sender)

    def return_indivisible_stake(self, campaign: bytes, sender: bytes) -> Receipt:
        return self.call(campaign, Method.RETURN_INDIVISIBLE_STAKE, sender)
