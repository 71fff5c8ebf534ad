"""Assured campaign protocol constants and runtime settings.

Protocol constants mirror the deployed campaign contract; runtime settings
only affect the tooling around the engine (logging, fixture output).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

# Timing (seconds)
MIN_START_DELAY = 60
MIN_DURATION = 24 * 3600

# Stake
MAX_STAKE_PERCENT = 100
PERCENT_DENOMINATOR = 100

# Value range (unsigned 256-bit words)
U256_MAX = (1 << 256) - 1
TIMESTAMP_MAX = (1 << 64) - 1

# Identities
ADDRESS_LEN = 20
ZERO_ADDRESS = bytes(ADDRESS_LEN)

# Ledger
DEFAULT_GENESIS_TIME = 1_600_000_000


@dataclass
class RuntimeSettings:
    """Settings for the CLI and scenario tooling."""

    log_level: str = "INFO"
    output_dir: Optional[str] = None
    genesis_time: int = DEFAULT_GENESIS_TIME

    @classmethod
    def from_env(cls) -> "RuntimeSettings":
        """Load settings from environment variables."""
        settings = cls()
        settings.log_level = os.environ.get("CAMPAIGN_LOG_LEVEL", settings.log_level).upper()
        settings.output_dir = os.environ.get("CAMPAIGN_OUTPUT_DIR") or None
        genesis = os.environ.get("CAMPAIGN_GENESIS_TIME")
        if genesis:
            settings.genesis_time = int(genesis)
        return settings
