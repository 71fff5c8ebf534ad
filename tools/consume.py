"""Consume generated fixtures and re-check them against the campaign engine."""

from __future__ import annotations

import json
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT / "tools"))

from fixtures_io import invocation_from_json, ledger_from_json, ledger_to_json  # noqa: E402


def _check_cases(path: Path) -> list[str]:
    failures: list[str] = []
    data = json.loads(path.read_text())

    for case in data.get("cases", []):
        ledger, campaign = ledger_from_json(case["pre_state"])
        receipt = ledger.execute(invocation_from_json(case["invocation"]))

        expected = case["expected"]
        if receipt.ok != expected["ok"]:
            failures.append(f"{case['name']}: ok_mismatch")
            continue

        actual_err = receipt.error.code.name if receipt.error else None
        if actual_err != expected["error"]:
            failures.append(f"{case['name']}: error_mismatch")
            continue

        if ledger_to_json(ledger, campaign) != expected["post_state"]:
            failures.append(f"{case['name']}: post_state_mismatch")

    return failures


def check_fixtures(fixtures: Path) -> list[str]:
    """Replay every fixture file below ``fixtures``; returns one line per failing case."""
    failures: list[str] = []
    for path in sorted(fixtures.rglob("*.json")):
        failures.extend(f"{path.relative_to(fixtures)}: {f}" for f in _check_cases(path))
    return failures


def main() -> None:
    failures = check_fixtures(ROOT / "fixtures")
    if failures:
        for f in failures:
            print("FAIL", f)
        raise SystemExit(1)

    print("All fixtures passed")


if __name__ == "__main__":
    main()
