"""Command line entry point for running campaign scenarios."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from .config import RuntimeSettings
from .errors import CampaignError
from .ops import create as op_create
from .params import load_params
from .scenario import load_scenario, run_scenario
from .serialization import config_to_json, engine_to_json, receipt_to_json
from .state_digest import compute_state_digest

logger = logging.getLogger(__name__)


@click.group()
@click.option("--log-level", default=None, help="Logging level (default: $CAMPAIGN_LOG_LEVEL or INFO)")
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """Assured campaign tooling."""
    settings = RuntimeSettings.from_env()
    if log_level:
        settings.log_level = log_level.upper()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    ctx.obj = settings


@main.command()
@click.argument("scenarios", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--output", type=click.Path(file_okay=False), default=None, help="Write receipts as JSON here")
@click.option("--stop-on-failure", is_flag=True, help="Stop after the first failing scenario")
@click.pass_obj
def run(settings: RuntimeSettings, scenarios: tuple[str, ...], output: str | None, stop_on_failure: bool) -> None:
    """Run one or more YAML scenarios."""
    out_dir = output or settings.output_dir
    failed = 0
    for path in scenarios:
        logger.debug("running scenario %s", path)
        result = run_scenario(load_scenario(path))
        status = "PASS" if result.ok else "FAIL"
        click.echo(f"{status} {result.name} ({len(result.steps)} steps)")
        for failure in result.failures:
            click.echo(f"  {failure}")

        if out_dir:
            target = Path(out_dir) / f"{Path(path).stem}.json"
            target.parent.mkdir(parents=True, exist_ok=True)
            payload = {
                "name": result.name,
                "ok": result.ok,
                "failures": result.failures,
                "receipts": [receipt_to_json(s.receipt) for s in result.steps if s.receipt is not None],
            }
            if result.campaign is not None:
                engine = result.ledger.campaign(result.campaign)
                payload["post_state"] = engine_to_json(engine)
                payload["state_digest"] = compute_state_digest(engine)
            target.write_text(json.dumps(payload, indent=2))

        if not result.ok:
            failed += 1
            if stop_on_failure:
                break
    if failed:
        sys.exit(1)


@main.command()
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False))
def digest(scenario: str) -> None:
    """Print the post-state digest of a scenario's campaign."""
    result = run_scenario(load_scenario(scenario))
    if result.campaign is None:
        raise click.ClickException("campaign was not created")
    click.echo(compute_state_digest(result.ledger.campaign(result.campaign)))


@main.command()
@click.argument("params_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--now", type=int, default=None, help="Creation timestamp (default: genesis time)")
@click.pass_obj
def check(settings: RuntimeSettings, params_file: str, now: int | None) -> None:
    """Validate campaign parameters and print the derived config."""
    try:
        params = load_params(params_file)
        op_create.verify(params, settings.genesis_time if now is None else now)
    except CampaignError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(json.dumps(config_to_json(op_create.build(params)), indent=2))


if __name__ == "__main__":
    main()
