"""
ResolveWallet CLI

Command-line client for the ResolveWallet contract.

Without a subcommand, reads the charity pool and (with USER_ADDR set)
your balances.  Subcommands submit transactions:

  deposit   - Add credits to your available balance
  withdraw  - Remove credits from your available balance
  complete  - Mark a goal completed
  miss      - Mark a goal missed
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .commands.read import read_state
from .commands.write import complete, deposit, miss, withdraw
from .runtime import CliState

# ============ Constants ============

VERSION = "0.1.0"


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="resolve-wallet")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Env file to load (default: ./.env if present)",
)
@click.option("--rpc-url", default=None, help="JSON-RPC endpoint (overrides RPC_URL)")
@click.option(
    "--abi",
    "abi_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Contract interface JSON (overrides ABI_PATH)",
)
@click.option("-v", "--verbose", is_flag=True, help="Log RPC and transaction lifecycle")
@click.pass_context
def cli(
    ctx: click.Context,
    env_file: Optional[Path],
    rpc_url: Optional[str],
    abi_path: Optional[Path],
    verbose: bool,
) -> None:
    """ResolveWallet: read balances and submit goal transactions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    state = ctx.ensure_object(CliState)
    state.env_file = env_file
    state.rpc_url = rpc_url
    state.abi_path = abi_path

    if ctx.invoked_subcommand is None:
        read_state(state)


cli.add_command(deposit)
cli.add_command(withdraw)
cli.add_command(complete)
cli.add_command(miss)


# ============ Entry Points ============


def main() -> None:
    """ResolveWallet CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
