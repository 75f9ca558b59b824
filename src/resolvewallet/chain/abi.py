"""
ABI Loader - Loads the contract interface descriptor and encodes calls.

The descriptor is a JSON file holding either a bare ABI array (as written
by ``cargo stylus export-abi --json`` / solc) or a Foundry/Hardhat
artifact with an ``abi`` key.  It is validated once at startup.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

import jsonschema
from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_hash.auto import keccak

from ..codec import validate_address
from ..errors import DescriptorError
from ..models import AbiFunction, ContractDescriptor

ABI_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["type"],
        "properties": {
            "type": {"type": "string"},
            "name": {"type": "string"},
            "inputs": {"type": "array", "items": {"$ref": "#/$defs/param"}},
            "outputs": {"type": "array", "items": {"$ref": "#/$defs/param"}},
            "stateMutability": {"enum": ["pure", "view", "nonpayable", "payable"]},
            "constant": {"type": "boolean"},
        },
        "if": {"properties": {"type": {"const": "function"}}},
        "then": {"required": ["name", "inputs"]},
    },
    "$defs": {
        "param": {
            "type": "object",
            "required": ["type"],
            "properties": {
                "name": {"type": "string"},
                "type": {"type": "string", "minLength": 1},
            },
        },
    },
}

# Error(string) selector used by solidity/stylus reverts
_REVERT_SELECTOR = bytes.fromhex("08c379a0")


def _format_error(error: jsonschema.ValidationError) -> str:
    location = "/".join(str(part) for part in error.path) or "<root>"
    return f"{location}: {error.message}"


def validate_abi(abi: Any, source: str = "<abi>") -> None:
    validator_cls = jsonschema.validators.validator_for(ABI_SCHEMA)
    validator = validator_cls(ABI_SCHEMA)
    errors = sorted(validator.iter_errors(abi), key=lambda e: list(e.path))
    if errors:
        raise DescriptorError(
            f"Contract interface {source} is malformed.",
            errors=[_format_error(err) for err in errors],
        )


def _mutability(entry: dict[str, Any]) -> str:
    if "stateMutability" in entry:
        return entry["stateMutability"]
    # pre-0.4.16 ABI entries only carry constant/payable flags
    if entry.get("constant"):
        return "view"
    return "payable" if entry.get("payable") else "nonpayable"


def parse_functions(abi: list[dict[str, Any]]) -> dict[str, tuple[AbiFunction, ...]]:
    functions: dict[str, list[AbiFunction]] = {}
    for entry in abi:
        if entry.get("type") != "function":
            continue
        func = AbiFunction(
            name=entry["name"],
            inputs=tuple(p["type"] for p in entry.get("inputs", [])),
            outputs=tuple(p["type"] for p in entry.get("outputs", [])),
            state_mutability=_mutability(entry),
        )
        functions.setdefault(func.name, []).append(func)
    return {name: tuple(overloads) for name, overloads in functions.items()}


def load_abi(path: Path) -> list[dict[str, Any]]:
    """
    Load and validate an ABI file.

    Args:
        path: JSON file with an ABI array or an artifact holding ``abi``

    Returns:
        ABI as a list of dicts

    Raises:
        DescriptorError: If the file is missing, not JSON, or malformed
    """
    if not path.is_file():
        raise DescriptorError(f"Contract interface not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise DescriptorError(f"Cannot read contract interface {path}: {exc}") from exc

    abi = payload.get("abi") if isinstance(payload, dict) else payload
    validate_abi(abi, source=str(path))
    return abi


def load_descriptor(path: Path, contract_address: str) -> ContractDescriptor:
    """Build the immutable descriptor for one contract deployment."""
    address = validate_address(contract_address, "CONTRACT")
    functions = parse_functions(load_abi(path))
    if not functions:
        raise DescriptorError(f"Contract interface {path} declares no functions.")
    return ContractDescriptor(address=address, functions=functions)


# ============ Encoding ============


def function_selector(func: AbiFunction) -> bytes:
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(func.signature.encode("utf-8"))[:4]


def encode_call(func: AbiFunction, args: Sequence[Any]) -> str:
    """ABI-encode a function call to 0x-prefixed hex calldata."""
    encoded_args = encode(list(func.inputs), list(args)) if func.inputs else b""
    return "0x" + function_selector(func).hex() + encoded_args.hex()


def decode_result(func: AbiFunction, data: str) -> tuple[Any, ...]:
    """ABI-decode return data into a tuple, one item per declared output."""
    if not func.outputs:
        return ()
    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    return tuple(decode(list(func.outputs), raw))


def decode_revert_reason(data: Any) -> str | None:
    """Extract the message from Error(string) revert data, if present."""
    if not isinstance(data, str) or not data.startswith("0x"):
        return None
    try:
        raw = bytes.fromhex(data[2:])
    except ValueError:
        return None
    if raw[:4] != _REVERT_SELECTOR:
        return None
    try:
        (reason,) = decode(["string"], raw[4:])
    except DecodingError:
        return None
    return reason
