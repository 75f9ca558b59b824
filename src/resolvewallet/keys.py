"""
ECDSA / secp256k1 signing credential.

The key comes from PRIVATE_KEY (environment or .env).  It is only loaded
for write commands; reads never need it.

Dependencies: eth-account (lightweight, no full web3.py needed)
"""

from __future__ import annotations

import binascii
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .errors import SigningError


def load_signer(private_key: Optional[str]) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Args:
        private_key: hex private key, with or without 0x prefix

    Returns:
        LocalAccount instance for signing transactions

    Raises:
        SigningError: If the key is missing or not a valid secp256k1 key
    """
    if not private_key or not private_key.strip():
        raise SigningError("PRIVATE_KEY missing in .env")

    # Ensure 0x prefix
    key = private_key.strip()
    if not key.startswith("0x"):
        key = "0x" + key

    try:
        return Account.from_key(key)
    except (ValueError, TypeError, binascii.Error) as exc:
        # never echo the key itself
        raise SigningError(f"PRIVATE_KEY is not a valid secp256k1 key ({type(exc).__name__})") from exc
