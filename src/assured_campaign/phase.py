"""Campaign phase derivation.

The phase is never stored: it is recomputed from the configuration, the
current ledger snapshot and the clock on every invocation.
"""

from __future__ import annotations

from .errors import CampaignError, ErrorCode
from .types import CampaignConfig, CampaignState, Phase

_REQUIRED_ERRORS = {
    Phase.PRE_START: (ErrorCode.NOT_PRE_START, "campaign already started"),
    Phase.ACTIVE: (ErrorCode.NOT_ACTIVE, "campaign not active"),
    Phase.SUCCESS: (ErrorCode.NOT_SUCCESS, "campaign not successful"),
    Phase.FAILURE: (ErrorCode.NOT_FAILURE, "campaign not failed"),
}


def current_phase(config: CampaignConfig, state: CampaignState, now: int) -> Phase:
    if now < config.start_time:
        return Phase.PRE_START
    if now < config.end_time:
        return Phase.ACTIVE
    if state.total_pledged >= config.target_amount:
        return Phase.SUCCESS
    return Phase.FAILURE


def require_phase(config: CampaignConfig, state: CampaignState, now: int, expected: Phase) -> None:
    actual = current_phase(config, state, now)
    if actual != expected:
        code, message = _REQUIRED_ERRORS[expected]
        raise CampaignError(code, f"{message} (phase={actual.value})")
