import copy
import json
import logging
import sys
from dataclasses import replace

import click

from . import __version__ as VERSION
from .clock import FixedClock, SystemClock
from .config import Config, config_from_mapping, refresh_config
from .errors import OrderflowError
from .notifications import LoggingTransport
from .payload import Scenario, inventory_snapshot, load_scenario, user_snapshot
from .processor import OrderProcessor
from .types import ProcessResult

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.pass_context
@click.option("--version", is_flag=True, help="Show the version and exit.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Override the configured log level.",
)
def main(ctx, version, log_level):
    """orderflow: price, reserve and confirm orders from JSON scenarios."""
    try:
        config = refresh_config()
    except OrderflowError as exc:
        _emit_structured_error(exc.explanation, code=exc.error_code, category=exc.category)
    if log_level:
        config = replace(config, log_level=log_level.upper())
    logging.basicConfig(level=config.log_level_value, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = {"config": config}

    if version:
        click.echo(f"orderflow version {VERSION}")
        return
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _emit_structured_error(message: str, *, code: str, category: str, as_json: bool = False, exit_code: int = 2):
    payload = {
        "ok": False,
        "error": {
            "code": code,
            "category": category,
            "message": message,
        },
    }
    if as_json:
        click.echo(json.dumps(payload, indent=2, sort_keys=True))
    else:
        click.echo(f"orderflow error [{category}:{code}]: {message}")
    sys.exit(exit_code)


def _resolve_config(base: Config, scenario: Scenario, tax) -> Config:
    config = config_from_mapping(scenario.config, base)
    if tax is not None:
        config = replace(config, tax_enabled=tax)
    return config


def _print_result(label: str, order_id: str, result: ProcessResult, scenario: Scenario, as_json: bool = False):
    if as_json:
        payload = {
            "result": result.to_dict(),
            "inventory": inventory_snapshot(scenario.inventory),
            "user": user_snapshot(scenario.user),
        }
        click.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    click.echo(f"{label} {order_id}: {result.state.value.upper()}")
    if not result.success:
        failure = result.failure
        click.echo(f"Error [{failure.category}:{failure.code.value}]: {failure.explanation}")
        return

    breakdown = result.breakdown
    click.echo(f"Subtotal:    {breakdown.subtotal:.2f}")
    click.echo(f"Shipping:    {breakdown.shipping:.2f}")
    click.echo(f"Tax:         {breakdown.tax:.2f}")
    click.echo(f"Payment fee: {breakdown.payment_fee:.2f}")
    click.echo(f"Total:       {breakdown.total:.2f}")
    click.echo(f"Loyalty points awarded: {result.loyalty_points_awarded} (balance {scenario.user.loyalty_points})")
    for notification in result.notifications:
        click.echo(f"Notify: {notification.type} -> {notification.recipient}")
    stock = ", ".join(f"{item_id}={qty}" for item_id, qty in sorted(inventory_snapshot(scenario.inventory).items()))
    click.echo(f"Inventory: {stock or '<empty>'}")


def _run(ctx, scenario_path, json_output, as_of, tax, dry_run: bool):
    try:
        scenario = load_scenario(scenario_path)
        logger.debug("Loaded scenario %s (order=%s)", scenario_path, scenario.order.id if scenario.order else None)
        config = _resolve_config(ctx.obj["config"], scenario, tax)
    except OrderflowError as exc:
        _emit_structured_error(exc.explanation, code=exc.error_code, category=exc.category, as_json=json_output)

    if dry_run:
        scenario = copy.deepcopy(scenario)

    processor = OrderProcessor(
        clock=FixedClock(as_of) if as_of else SystemClock(),
        transport=None if dry_run else LoggingTransport(),
    )
    result = processor.process(scenario.order, scenario.user, scenario.inventory, config)
    order_id = scenario.order.id if scenario.order is not None else "<missing>"
    _print_result("Quote" if dry_run else "Order", order_id, result, scenario, as_json=json_output)
    sys.exit(0 if result.success else 1)


def _scenario_options(func):
    func = click.pass_context(func)
    func = click.option("--tax/--no-tax", default=None, help="Force tax on or off, overriding config.")(func)
    func = click.option(
        "--as-of",
        type=click.DateTime(formats=["%Y-%m-%d"]),
        help="Price as of this date instead of today (drives seasonal discounts).",
    )(func)
    func = click.option("--json", "json_output", is_flag=True, help="Emit a machine-readable result")(func)
    return click.argument("scenario", type=click.Path(dir_okay=False))(func)


@main.command()
@_scenario_options
def process(ctx, scenario, json_output, as_of, tax):
    """Process SCENARIO: reserve stock, price, notify and award points."""
    _run(ctx, scenario, json_output, as_of, tax, dry_run=False)


@main.command()
@_scenario_options
def quote(ctx, scenario, json_output, as_of, tax):
    """Price SCENARIO without changing its inventory or loyalty balance."""
    _run(ctx, scenario, json_output, as_of, tax, dry_run=True)


if __name__ == "__main__":
    main()
