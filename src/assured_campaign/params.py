"""Campaign creation parameters and loaders."""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from .address import address_from_hex
from .errors import CampaignError, ErrorCode

_ADDRESS_FIELDS = ("ent_hot_account", "ent_cold_account", "recipient_account")


@dataclass
class CampaignParams:
    """Constructor arguments in their canonical order."""

    start_time: int
    end_time: int
    target_amount: int
    profit_amount: int
    contrib_min_amount: int
    stake_percent: int
    ent_hot_account: bytes
    ent_cold_account: bytes
    recipient_account: bytes

    def as_args(self) -> tuple:
        return astuple(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CampaignParams":
        """Build params from a plain mapping; identities may be hex strings."""
        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                raise CampaignError(ErrorCode.MISSING_PARAMETER, f"missing campaign parameter: {f.name}")
            raw = data[f.name]
            if f.name in _ADDRESS_FIELDS and isinstance(raw, str):
                raw = address_from_hex(raw)
            values[f.name] = raw
        return cls(**values)


def load_params(source: Union[str, Path, Mapping[str, Any]]) -> CampaignParams:
    """Load params from a YAML file path or an already-parsed mapping."""
    if isinstance(source, Mapping):
        data: Any = source
    else:
        data = yaml.safe_load(Path(source).read_text())
    if not isinstance(data, Mapping):
        raise CampaignError(ErrorCode.MISSING_PARAMETER, "campaign params must be a mapping")
    return CampaignParams.from_mapping(data.get("campaign", data))
