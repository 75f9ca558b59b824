"""
Runtime configuration, sourced from the environment.

A ``.env`` file in the working directory (or the one passed with
``--env-file``) is loaded first and overrides the process environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .chain.rpc import DEFAULT_CHAIN_ID, DEFAULT_RPC_URL
from .errors import ConfigurationError

DEFAULT_ENV_FILE = Path(".env")
DEFAULT_ABI_PATH = "abi.clean.json"
DEFAULT_EXPLORER_TX_URL = "https://sepolia.arbiscan.io/tx/"
DEFAULT_CONFIRM_TIMEOUT = 120.0


def _optional(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key, "").strip()
    return value or None


def _parse_int(env: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = _optional(env, key)
    if raw is None:
        return default
    try:
        value = int(raw, 0)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{key} must be positive, got {raw!r}")
    return value


def _parse_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = _optional(env, key)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number of seconds, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{key} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    """
    Everything a command needs to reach the contract.

    Attributes:
        rpc_url: JSON-RPC endpoint
        contract: Contract address as configured (validated when the
            descriptor is loaded)
        private_key: Signing key; only write commands require it
        user_address: Address for balance reads, validated per command
        abi_path: Contract interface descriptor file
        chain_id: Chain id baked into signed transactions
        explorer_tx_url: Prefix for transaction links
        gas_limit: Fixed gas limit, or None to estimate per transaction
        confirm_timeout: Seconds to wait for a receipt
    """

    rpc_url: str
    contract: str
    private_key: Optional[str] = None
    user_address: Optional[str] = None
    abi_path: Path = Path(DEFAULT_ABI_PATH)
    chain_id: int = DEFAULT_CHAIN_ID
    explorer_tx_url: str = DEFAULT_EXPLORER_TX_URL
    gas_limit: Optional[int] = None
    confirm_timeout: float = DEFAULT_CONFIRM_TIMEOUT

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from an environment mapping (default: ``os.environ``).

        Raises:
            ConfigurationError: CONTRACT missing or a numeric setting invalid
        """
        env = os.environ if env is None else env

        contract = _optional(env, "CONTRACT")
        if contract is None:
            raise ConfigurationError("CONTRACT missing in .env")

        return cls(
            rpc_url=_optional(env, "RPC_URL") or DEFAULT_RPC_URL,
            contract=contract,
            private_key=_optional(env, "PRIVATE_KEY"),
            user_address=_optional(env, "USER_ADDR"),
            abi_path=Path(_optional(env, "ABI_PATH") or DEFAULT_ABI_PATH),
            chain_id=_parse_int(env, "CHAIN_ID", DEFAULT_CHAIN_ID),
            explorer_tx_url=_optional(env, "EXPLORER_TX_URL") or DEFAULT_EXPLORER_TX_URL,
            gas_limit=_parse_int(env, "GAS_LIMIT", None),
            confirm_timeout=_parse_float(env, "CONFIRM_TIMEOUT", DEFAULT_CONFIRM_TIMEOUT),
        )

    def explorer_url(self, tx_hash: str) -> str:
        return f"{self.explorer_tx_url}{tx_hash}"


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Load ``env_file`` (default ``./.env``) if present, then read the environment."""
    env_path = env_file or DEFAULT_ENV_FILE
    if env_path.exists():
        load_dotenv(env_path, override=True)
    elif env_file is not None:
        raise ConfigurationError(f"Env file not found: {env_file}")
    return Settings.from_env()
