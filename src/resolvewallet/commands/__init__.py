"""
Command implementations for the ResolveWallet CLI.

- read:  default mode, pool total plus per-user balances and stats
- write: deposit / withdraw / complete / miss transactions
"""

from __future__ import annotations

import logging
import sys
from typing import NoReturn, Optional

import click

from ..errors import ResolveWalletError, format_error

logger = logging.getLogger(__name__)


def fail(exc: BaseException, transaction_id: Optional[str] = None, explorer_url: Optional[str] = None) -> NoReturn:
    """Report ``exc`` on stderr and exit with its code.

    When a transaction was already submitted its id and explorer link are
    always repeated, since the on-chain outcome is then unknown or failed.
    """
    logger.debug("Command failed", exc_info=exc)
    click.secho(format_error(exc, transaction_id), fg="red", err=True)
    if transaction_id:
        click.echo(f"Tx hash: {transaction_id}", err=True)
        if explorer_url:
            click.echo(f"View on explorer: {explorer_url}", err=True)
    exit_code = exc.exit_code if isinstance(exc, ResolveWalletError) else 1
    sys.exit(exit_code)
