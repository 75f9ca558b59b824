"""
Error taxonomy for the ResolveWallet client.

Every error carries an ``exit_code`` so the CLI can terminate with a
distinct status per failure class.  Validation errors never reach the
network; everything else is reported at the top level by ``format_error``.
"""

from __future__ import annotations

from typing import Any, Optional


class ResolveWalletError(RuntimeError):
    exit_code: int = 1


# ============ Local validation ============


class ValidationError(ResolveWalletError):
    """Rejected input, carrying the field label and the offending value."""

    exit_code = 2

    def __init__(self, label: str, value: Any, message: str) -> None:
        super().__init__(message)
        self.label = label
        self.value = value


class InvalidAddressError(ValidationError):
    def __init__(self, label: str, value: Any) -> None:
        super().__init__(
            label,
            value,
            f'{label} "{value}" is invalid. Expected 0x + 40 hex chars.',
        )


class InvalidNumberError(ValidationError):
    def __init__(self, label: str, value: Any) -> None:
        super().__init__(
            label,
            value,
            f'{label} "{value}" is invalid. Expected a non-negative decimal integer.',
        )


class MissingArgumentError(ValidationError):
    def __init__(self, label: str) -> None:
        super().__init__(label, None, f"Missing {label}")


class UnknownCommandError(ValidationError):
    def __init__(self, value: str, choices: list[str]) -> None:
        super().__init__(
            "command",
            value,
            f'Unknown command "{value}". Use {"|".join(choices)}.',
        )


# ============ Startup ============


class ConfigurationError(ResolveWalletError):
    exit_code = 3


class DescriptorError(ConfigurationError):
    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


# ============ Chain interaction ============


class SigningError(ResolveWalletError):
    exit_code = 4


class ContractCallError(ResolveWalletError):
    exit_code = 5

    def __init__(self, function_name: str, reason: str) -> None:
        super().__init__(f"{function_name}: {reason}")
        self.function_name = function_name
        self.reason = reason


class TransactionRejectedError(ResolveWalletError):
    exit_code = 6

    def __init__(self, function_name: str, reason: str) -> None:
        super().__init__(f"{function_name}: transaction rejected: {reason}")
        self.function_name = function_name
        self.reason = reason


class ConfirmationTimeoutError(ResolveWalletError, TimeoutError):
    exit_code = 7

    def __init__(self, transaction_id: str, timeout: float) -> None:
        super().__init__(
            f"Transaction {transaction_id} not confirmed within {timeout:g}s. "
            "It may still be included; check the explorer before resending."
        )
        self.transaction_id = transaction_id
        self.timeout = timeout


def format_error(exc: BaseException, transaction_id: Optional[str] = None) -> str:
    """Render any error as the single line shown to the operator."""
    if isinstance(exc, ResolveWalletError):
        text = str(exc)
    else:
        text = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
    if transaction_id and transaction_id not in text:
        text = f"{text} (tx {transaction_id})"
    return f"Error: {text}"
