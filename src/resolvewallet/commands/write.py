"""
Write mode - submit a state-changing transaction and await its receipt.

Each submission is attempted once.  If anything goes wrong after the
node accepted the transaction, the tx hash is printed with the error.
"""

from __future__ import annotations

from typing import Optional

import click

from ..codec import to_display
from ..errors import ResolveWalletError
from ..models import TxStatus, WriteResult
from ..runtime import CliState
from . import fail

# let "-5" reach the validator instead of being parsed as an option
_ARG_SETTINGS = {"ignore_unknown_options": True}

_wait_option = click.option(
    "--wait/--no-wait",
    default=True,
    show_default=True,
    help="Wait for the transaction receipt",
)
_timeout_option = click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds to wait for confirmation (default: CONFIRM_TIMEOUT or 120)",
)


def send(state: CliState, token: str, value: str, wait: bool, timeout: Optional[float]) -> None:
    try:
        settings = state.settings()
        dispatcher = state.dispatcher(confirm_timeout=timeout)
        # a bad argument is reported even when no key is configured
        request = dispatcher.build_request(token, value)
        dispatcher.signer = state.signer()
    except Exception as exc:  # noqa: BLE001 - reported with its exit code
        fail(exc)

    args = ", ".join(to_display(arg) for arg in request.args)
    click.echo(f"Calling {request.function_name}({args})...")

    submitted: list[WriteResult] = []

    def on_submitted(result: WriteResult) -> None:
        submitted.append(result)
        click.echo(f"Tx hash: {result.transaction_id}")
        click.echo(f"View on explorer: {settings.explorer_url(result.transaction_id)}")

    try:
        outcome = dispatcher.run(token, value, wait=wait, on_submitted=on_submitted)
    except Exception as exc:  # noqa: BLE001 - reported with its exit code
        if submitted:
            tx_id = submitted[0].transaction_id
            fail(exc, tx_id, settings.explorer_url(tx_id))
        fail(exc)

    result = outcome.result
    if result.status is TxStatus.PENDING:
        click.echo("Submitted; not waiting for confirmation.")
        return
    if result.status is TxStatus.CONFIRMED:
        click.secho(f"Confirmed in block {to_display(result.confirmed_block)}", fg="green")
        return

    where = f" in block {to_display(result.confirmed_block)}" if result.confirmed_block else ""
    fail(
        ResolveWalletError(f"Transaction failed{where} (reverted or dropped)"),
        result.transaction_id,
        settings.explorer_url(result.transaction_id),
    )


@click.command(context_settings=_ARG_SETTINGS)
@click.argument("amount")
@_wait_option
@_timeout_option
@click.pass_obj
def deposit(state: CliState, amount: str, wait: bool, timeout: Optional[float]) -> None:
    """Add AMOUNT credits to your available balance."""
    send(state, "deposit", amount, wait, timeout)


@click.command(context_settings=_ARG_SETTINGS)
@click.argument("amount")
@_wait_option
@_timeout_option
@click.pass_obj
def withdraw(state: CliState, amount: str, wait: bool, timeout: Optional[float]) -> None:
    """Remove AMOUNT credits from your available balance."""
    send(state, "withdraw", amount, wait, timeout)


@click.command(context_settings=_ARG_SETTINGS)
@click.argument("goal_id", metavar="GOAL_ID")
@_wait_option
@_timeout_option
@click.pass_obj
def complete(state: CliState, goal_id: str, wait: bool, timeout: Optional[float]) -> None:
    """Mark goal GOAL_ID completed and release its stake."""
    send(state, "complete", goal_id, wait, timeout)


@click.command(context_settings=_ARG_SETTINGS)
@click.argument("goal_id", metavar="GOAL_ID")
@_wait_option
@_timeout_option
@click.pass_obj
def miss(state: CliState, goal_id: str, wait: bool, timeout: Optional[float]) -> None:
    """Mark goal GOAL_ID missed and burn its stake to the charity pool."""
    send(state, "miss", goal_id, wait, timeout)
