"""
Read mode - runs when no subcommand is given.

Always reads the charity pool total.  With USER_ADDR configured it also
reads the user's balances and, if the contract declares ``statsOf``, the
user's goal statistics.
"""

from __future__ import annotations

import click

from ..codec import to_display
from ..dispatcher import READ_STATS, CommandOutcome
from ..runtime import CliState
from . import fail


def _echo_outcome(outcome: CommandOutcome, subject: str = "") -> None:
    name = outcome.request.function_name
    pairs = outcome.labelled
    if not subject and len(pairs) == 1:
        click.echo(f"{name} = {to_display(pairs[0][1])}")
        return
    click.echo(f"{name} {subject}".rstrip())
    for label, value in pairs:
        click.echo(f"  {label}: {to_display(value)}")


def read_state(state: CliState) -> None:
    try:
        settings = state.settings()
        dispatcher = state.dispatcher()
    except Exception as exc:  # noqa: BLE001 - reported with its exit code
        fail(exc)

    click.echo(f"Contract: {to_display(dispatcher.gateway.address)}")
    click.echo(f"RPC: {settings.rpc_url}")
    click.echo("---")

    try:
        _echo_outcome(dispatcher.run("pool"))

        if not settings.user_address:
            click.echo("Tip: set USER_ADDR in .env to read your balances.")
            return

        balances = dispatcher.run("balances", settings.user_address)
        user = to_display(balances.request.args[0])
        _echo_outcome(balances, user)

        if dispatcher.gateway.has_function(READ_STATS.function_name):
            _echo_outcome(dispatcher.run("stats", settings.user_address), user)
    except Exception as exc:  # noqa: BLE001 - reported with its exit code
        fail(exc)
