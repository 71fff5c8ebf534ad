"""Phase derivation specs."""

from __future__ import annotations

import pytest

from assured_campaign.errors import CampaignError, ErrorCode
from assured_campaign.ops import create as op_create
from assured_campaign.phase import current_phase, require_phase
from assured_campaign.types import CampaignState, Phase
from conftest import END, START, make_params

_CONFIG = op_create.build(make_params())


@pytest.mark.parametrize(
    ("now", "pledged", "expected"),
    [
        (START - 1, 0, Phase.PRE_START),
        (START - 1, 100, Phase.PRE_START),
        (START, 0, Phase.ACTIVE),
        (END - 1, 100, Phase.ACTIVE),
        (END, 50, Phase.SUCCESS),
        (END + 10**6, 51, Phase.SUCCESS),
        (END, 49, Phase.FAILURE),
        (END, 0, Phase.FAILURE),
    ],
)
def test_current_phase(now, pledged, expected) -> None:
    assert current_phase(_CONFIG, CampaignState(total_pledged=pledged), now) == expected


def test_phase_ignores_stored_flags() -> None:
    state = CampaignState(total_pledged=60, settled=True, indivisible_stake_returned=True)
    assert current_phase(_CONFIG, state, END) == Phase.SUCCESS


def test_require_phase_names_the_expected_phase() -> None:
    with pytest.raises(CampaignError) as exc_info:
        require_phase(_CONFIG, CampaignState(), START, Phase.FAILURE)
    assert exc_info.value.code == ErrorCode.NOT_FAILURE
    assert "phase=active" in exc_info.value.message


def test_engine_phase_query(ledger, active_campaign) -> None:
    engine = ledger.campaign(active_campaign)
    assert engine.phase(ledger.now) == Phase.ACTIVE
    assert ledger.pledge(active_campaign, engine.ent_hot_account(), 50).ok
    ledger.set_time(END)
    assert engine.phase(ledger.now) == Phase.SUCCESS
