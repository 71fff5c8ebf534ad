"""Core types for the assured campaign engine.

Identities are raw 20-byte account addresses. Amounts are unsigned integers
in the smallest unit of value, timestamps are whole seconds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Phase(Enum):
    PRE_START = "pre_start"
    ACTIVE = "active"
    SUCCESS = "success"
    FAILURE = "failure"


class Method(Enum):
    STAKE = "stake"
    PLEDGE = "pledge"
    REFUND = "refund"
    SETTLE = "settle"
    RETURN_INDIVISIBLE_STAKE = "return_indivisible_stake"


@dataclass(frozen=True)
class CampaignConfig:
    start_time: int
    end_time: int
    target_amount: int
    profit_amount: int
    contrib_min_amount: int
    stake_percent: int
    ent_hot_account: bytes
    ent_cold_account: bytes
    recipient_account: bytes
    min_stake_required: int = 0


@dataclass
class ContributorRecord:
    pledged_balance: int = 0
    refunded: bool = False


@dataclass
class CampaignState:
    staked_amount: int = 0
    total_pledged: int = 0
    contributors: Dict[bytes, ContributorRecord] = field(default_factory=dict)
    indivisible_stake_returned: bool = False
    settled: bool = False


@dataclass
class Invocation:
    """A single call into a campaign, as delivered by the ledger."""

    campaign: bytes
    method: Method
    sender: bytes
    value: int = 0
    amount: Optional[int] = None


@dataclass
class Payout:
    """An outbound transfer owed by the campaign once its effects are committed."""

    destination: bytes
    amount: int


@dataclass
class Event:
    name: str
    campaign: bytes
    fields: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Outcome:
    """Result of applying an operation to campaign state."""

    state: CampaignState
    payouts: List[Payout] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
