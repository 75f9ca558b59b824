"""
Command Dispatcher - maps the fixed command vocabulary onto contract calls.

Each command declares the one argument it takes (if any) and its shape.
Arguments are validated before a ``CallRequest`` is built, so nothing
malformed reaches the gateway.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from eth_account.signers.local import LocalAccount

from .chain.gateway import ContractGateway
from .chain.tracker import TransactionTracker
from .codec import to_wide, validate_address
from .config import DEFAULT_CONFIRM_TIMEOUT
from .errors import MissingArgumentError, SigningError, UnknownCommandError
from .models import CallRequest, ReadResult, WriteResult

logger = logging.getLogger(__name__)


class ArgKind(str, Enum):
    NONE = "none"
    ADDRESS = "address"
    UINT = "uint"


@dataclass(frozen=True)
class CommandSpec:
    token: str
    function_name: str
    arg_kind: ArgKind = ArgKind.NONE
    arg_label: str = ""
    result_labels: tuple[str, ...] = ()


READ_POOL = CommandSpec("pool", "charityPoolTotal")
READ_BALANCES = CommandSpec(
    "balances",
    "balancesOf",
    ArgKind.ADDRESS,
    "USER_ADDR",
    ("available", "staked", "earned", "burned"),
)
READ_STATS = CommandSpec(
    "stats",
    "statsOf",
    ArgKind.ADDRESS,
    "USER_ADDR",
    ("wins", "losses", "currentStreak", "longestStreak"),
)
DEPOSIT = CommandSpec("deposit", "depositCredits", ArgKind.UINT, "amount")
WITHDRAW = CommandSpec("withdraw", "withdrawCredits", ArgKind.UINT, "amount")
COMPLETE_GOAL = CommandSpec("complete", "completeGoal", ArgKind.UINT, "goal id")
MISS_GOAL = CommandSpec("miss", "missGoal", ArgKind.UINT, "goal id")

COMMANDS: dict[str, CommandSpec] = {
    spec.token: spec
    for spec in (READ_POOL, READ_BALANCES, READ_STATS, DEPOSIT, WITHDRAW, COMPLETE_GOAL, MISS_GOAL)
}
WRITE_TOKENS = ("deposit", "withdraw", "complete", "miss")


@dataclass(frozen=True)
class CommandOutcome:
    command: CommandSpec
    request: CallRequest
    result: Union[ReadResult, WriteResult]
    submitted: Optional[WriteResult] = None

    @property
    def labelled(self) -> list[tuple[str, object]]:
        """Pair read values with the command's labels (positional fallback)."""
        if not isinstance(self.result, ReadResult):
            return []
        labels = self.command.result_labels
        return [
            (labels[i] if i < len(labels) else str(i), value)
            for i, value in enumerate(self.result.values)
        ]


class CommandDispatcher:
    def __init__(
        self,
        gateway: ContractGateway,
        tracker: Optional[TransactionTracker] = None,
        signer: Optional[LocalAccount] = None,
        confirm_timeout: float = DEFAULT_CONFIRM_TIMEOUT,
    ) -> None:
        self.gateway = gateway
        self.tracker = tracker
        self.signer = signer
        self.confirm_timeout = confirm_timeout

    @staticmethod
    def spec_for(token: str) -> CommandSpec:
        try:
            return COMMANDS[token]
        except KeyError:
            raise UnknownCommandError(token, list(COMMANDS)) from None

    def build_request(self, token: str, value: Optional[str] = None) -> CallRequest:
        """
        Validate ``value`` for command ``token`` and build its CallRequest.

        Raises:
            UnknownCommandError: token is not in the command set
            MissingArgumentError: required argument absent
            InvalidAddressError / InvalidNumberError: argument malformed
        """
        spec = self.spec_for(token)
        if spec.arg_kind is ArgKind.NONE:
            args = ()
        elif value is None or (isinstance(value, str) and not value.strip()):
            raise MissingArgumentError(spec.arg_label)
        elif spec.arg_kind is ArgKind.ADDRESS:
            args = (validate_address(value, spec.arg_label),)
        else:
            args = (to_wide(value, spec.arg_label),)
        return self.gateway.request(spec.function_name, args)

    def run(
        self,
        token: str,
        value: Optional[str] = None,
        wait: bool = True,
        on_submitted: Optional[Callable[[WriteResult], None]] = None,
    ) -> CommandOutcome:
        """Validate, execute and (for writes) await one command.

        ``on_submitted`` sees the PENDING result before any waiting, so the
        transaction id is reported even if confirmation later times out.
        """
        spec = self.spec_for(token)
        request = self.build_request(token, value)

        read_only = self.gateway.is_read_only(request.function_name)
        if not read_only and self.signer is None:
            raise SigningError("PRIVATE_KEY missing in .env")

        result = self.gateway.execute(request, signer=self.signer)
        if isinstance(result, WriteResult) and on_submitted is not None:
            on_submitted(result)
        if read_only or not wait or self.tracker is None:
            return CommandOutcome(spec, request, result)

        logger.debug("Awaiting confirmation of %s", result.transaction_id)
        final = self.tracker.await_confirmation(result.transaction_id, timeout=self.confirm_timeout)
        return CommandOutcome(spec, request, final, submitted=result)
