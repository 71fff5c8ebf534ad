"""Canonical campaign state digest (v1)."""
from __future__ import annotations

from blake3 import blake3

from .engine import CampaignEngine

DIGEST_VERSION = 1


def _u64_be(value: int) -> bytes:
    if value < 0:
        raise ValueError("u64 must be non-negative")
    return int(value).to_bytes(8, "big", signed=False)


def _u256_be(value: int) -> bytes:
    if value < 0:
        raise ValueError("u256 must be non-negative")
    return int(value).to_bytes(32, "big", signed=False)


def encode_campaign(engine: CampaignEngine) -> bytes:
    """Canonical bytes for a campaign's config and ledger state.

    Contributors are sorted by address so the encoding does not depend on
    pledge order.
    """
    cfg = engine.config
    st = engine.state
    buf = bytearray()
    buf += bytes([DIGEST_VERSION])
    buf += engine.address
    buf += _u64_be(cfg.start_time)
    buf += _u64_be(cfg.end_time)
    for amount in (cfg.target_amount, cfg.profit_amount, cfg.contrib_min_amount):
        buf += _u256_be(amount)
    buf += bytes([cfg.stake_percent])
    buf += cfg.ent_hot_account
    buf += cfg.ent_cold_account
    buf += cfg.recipient_account
    buf += _u256_be(cfg.min_stake_required)

    buf += _u256_be(st.staked_amount)
    buf += _u256_be(st.total_pledged)
    buf += bytes([int(st.indivisible_stake_returned), int(st.settled)])
    buf += _u64_be(len(st.contributors))
    for addr in sorted(st.contributors):
        record = st.contributors[addr]
        buf += addr
        buf += _u256_be(record.pledged_balance)
        buf += bytes([int(record.refunded)])
    return bytes(buf)


def compute_state_digest(engine: CampaignEngine) -> str:
    """BLAKE3-256 hex digest of the canonical campaign encoding."""
    return blake3(encode_campaign(engine)).hexdigest()
