"""
JSON-RPC Client for EVM chains.

Lightweight alternative to web3.py: uses httpx for HTTP.  One request per
call, no retries; transport errors (``httpx.HTTPError``) and node errors
(``RpcError``) propagate to the caller.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

# Default RPC endpoint (Arbitrum Sepolia)
DEFAULT_RPC_URL = "https://sepolia-rollup.arbitrum.io/rpc"
DEFAULT_CHAIN_ID = 421614  # Arbitrum Sepolia


class RpcError(RuntimeError):
    """Error object returned by the node in a JSON-RPC response."""

    def __init__(self, method: str, error: Any) -> None:
        if isinstance(error, dict):
            self.code = error.get("code")
            self.message = str(error.get("message", error))
            self.data = error.get("data")
        else:
            self.code = None
            self.message = str(error)
            self.data = None
        super().__init__(f"RPC error from {method}: {self.message}")
        self.method = method


class RpcClient:
    """Minimal synchronous JSON-RPC 2.0 client bound to one endpoint."""

    def __init__(
        self,
        url: str = DEFAULT_RPC_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._ids = itertools.count(1)

    def request(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node answers with an error object
            httpx.HTTPError: On transport failure or non-2xx status
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        logger.debug("RPC %s -> %s", method, self.url)

        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.post(self.url, json=payload)
            response.raise_for_status()
            try:
                data = response.json()
            except ValueError as exc:
                raise RpcError(method, f"invalid JSON response: {exc}") from exc

        if not isinstance(data, dict):
            raise RpcError(method, f"unexpected response: {data!r}")
        if "error" in data:
            raise RpcError(method, data["error"])

        return data.get("result")

    # ---- eth_* helpers ----

    def call(self, to: str, data: str, block: str = "latest") -> str:
        return self.request("eth_call", [{"to": to, "data": data}, block])

    def chain_id(self) -> int:
        return int(self.request("eth_chainId", []), 16)

    def get_nonce(self, address: str, block: str = "pending") -> int:
        return int(self.request("eth_getTransactionCount", [address, block]), 16)

    def gas_price(self) -> int:
        return int(self.request("eth_gasPrice", []), 16)

    def estimate_gas(self, tx: dict[str, Any]) -> int:
        return int(self.request("eth_estimateGas", [tx]), 16)

    def send_raw_transaction(self, raw_tx: str) -> str:
        """Send a signed raw transaction; returns the 0x-prefixed tx hash."""
        return self.request("eth_sendRawTransaction", [raw_tx])

    def get_receipt(self, tx_hash: str) -> Optional[dict[str, Any]]:
        return self.request("eth_getTransactionReceipt", [tx_hash])

    def get_transaction(self, tx_hash: str) -> Optional[dict[str, Any]]:
        return self.request("eth_getTransactionByHash", [tx_hash])
