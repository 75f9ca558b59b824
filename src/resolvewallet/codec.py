"""
Address validation and wide-integer conversion.

All console and log output of chain values goes through ``to_display`` so
that amounts are always printed as exact decimals.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from eth_hash.auto import keccak

from .errors import InvalidAddressError, InvalidNumberError
from .models import Address, WideUint

_ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")
_DECIMAL_RE = re.compile(r"[0-9]+")
# len(str(2**256 - 1))
_MAX_UINT_DIGITS = 78


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.
    """
    addr = address.lower().replace("0x", "")
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    addr_hash = keccak(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def validate_address(candidate: Optional[str], label: str = "address") -> Address:
    """
    Validate an externally supplied address.

    Args:
        candidate: Raw address string (from env, argv, ...)
        label: Field name reported in the error

    Returns:
        Canonical lowercase Address

    Raises:
        InvalidAddressError: Empty, wrong shape, or bad EIP-55 checksum
    """
    if not candidate or not isinstance(candidate, str):
        raise InvalidAddressError(label, candidate)
    text = candidate.strip()
    if not _ADDRESS_RE.fullmatch(text):
        raise InvalidAddressError(label, candidate)

    body = text[2:]
    mixed_case = body != body.lower() and body != body.upper()
    if mixed_case and to_checksum_address(text) != text:
        raise InvalidAddressError(label, candidate)

    return Address("0x" + body.lower())


def to_wide(external: Optional[str], label: str = "value") -> WideUint:
    """Parse a non-negative base-10 integer literal without going through float."""
    if not isinstance(external, str):
        raise InvalidNumberError(label, external)
    text = external.strip()
    # str.isdigit() accepts non-ASCII digits such as "²"; the regex does not
    if not _DECIMAL_RE.fullmatch(text):
        raise InvalidNumberError(label, external)
    # also keeps int() clear of the interpreter's digit limit
    if len(text.lstrip("0")) > _MAX_UINT_DIGITS:
        raise InvalidNumberError(label, external)
    return WideUint(int(text, 10))


def to_display(value: Any) -> str:
    """Canonical text for a chain value: exact decimal or 0x-hex."""
    if isinstance(value, Address):
        return value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, WideUint):
        return str(value.value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)
