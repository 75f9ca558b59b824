"""
Shared fixtures: an in-memory JSON-RPC node behind httpx.MockTransport.

The fake node answers the eth_* methods the client uses, decodes
eth_call calldata against the shipped ABI, and records every request so
tests can assert what reached the network.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest
from eth_abi import decode, encode
from eth_hash.auto import keccak

from resolvewallet.chain.abi import function_selector, load_abi, load_descriptor, parse_functions
from resolvewallet.chain.gateway import ContractGateway
from resolvewallet.chain.rpc import RpcClient
from resolvewallet.keys import load_signer
from resolvewallet.models import ContractDescriptor

REPO_ROOT = Path(__file__).resolve().parents[1]
ABI_PATH = REPO_ROOT / "abi.clean.json"

CONTRACT = "0x5fbdb2315678afecb367f032d93f642f64180aa3"
USER = "0x70997970c51812dc3a010c7d01b50e0d17dc79c8"
USER_CHECKSUMMED = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

# Well-known local devnet account #0; never holds real funds
SIGNER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
SIGNER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

RPC_URL = "http://node.test/rpc"


class FakeNode:
    """Scriptable JSON-RPC node for one contract."""

    def __init__(self, abi: list[dict[str, Any]]) -> None:
        self.functions = {
            function_selector(func): func
            for overloads in parse_functions(abi).values()
            for func in overloads
        }
        self.pool = 0
        self.balances: dict[str, tuple[int, int, int, int]] = {}
        self.stats: dict[str, tuple[int, int, int, int]] = {}
        self.nonce = 7
        self.block = 1234
        self.receipt_status = "0x1"
        self.mine = True
        self.known = True
        self.errors: dict[str, Any] = {}
        self.methods: list[str] = []
        self.sent: list[str] = []
        self.estimates: list[dict[str, Any]] = []
        self.receipts: dict[str, dict[str, Any]] = {}

    # ---- transport ----

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        self.methods.append(method)
        if method in self.errors:
            error = self.errors[method]
            if isinstance(error, Exception):
                raise error
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": error})
        result = getattr(self, "_" + method)(body["params"])
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})

    # ---- eth_* ----

    def _eth_call(self, params: list) -> str:
        data = bytes.fromhex(params[0]["data"][2:])
        func = self.functions[data[:4]]
        args = decode(list(func.inputs), data[4:]) if func.inputs else ()
        if func.name == "charityPoolTotal":
            values: list[Any] = [self.pool]
        elif func.name == "balancesOf":
            values = list(self.balances.get(args[0].lower(), (0, 0, 0, 0)))
        elif func.name == "statsOf":
            values = list(self.stats.get(args[0].lower(), (0, 0, 0, 0)))
        else:
            raise AssertionError(f"unexpected eth_call to {func.name}")
        return "0x" + encode(list(func.outputs), values).hex()

    def _eth_getTransactionCount(self, params: list) -> str:
        return hex(self.nonce)

    def _eth_gasPrice(self, params: list) -> str:
        return hex(100_000_000)

    def _eth_estimateGas(self, params: list) -> str:
        self.estimates.append(params[0])
        return hex(90_000)

    def _eth_sendRawTransaction(self, params: list) -> str:
        raw = params[0]
        self.sent.append(raw)
        tx_hash = "0x" + keccak(bytes.fromhex(raw[2:])).hex()
        if self.mine:
            self.receipts[tx_hash] = {
                "transactionHash": tx_hash,
                "status": self.receipt_status,
                "blockNumber": hex(self.block),
            }
        return tx_hash

    def _eth_getTransactionReceipt(self, params: list) -> Optional[dict[str, Any]]:
        return self.receipts.get(params[0])

    def _eth_getTransactionByHash(self, params: list) -> Optional[dict[str, Any]]:
        return {"hash": params[0]} if self.known else None

    def _eth_chainId(self, params: list) -> str:
        return hex(421614)


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode(load_abi(ABI_PATH))


@pytest.fixture()
def rpc(node: FakeNode) -> RpcClient:
    return RpcClient(RPC_URL, transport=node.transport())


@pytest.fixture()
def descriptor() -> ContractDescriptor:
    return load_descriptor(ABI_PATH, CONTRACT)


@pytest.fixture()
def gateway(descriptor: ContractDescriptor, rpc: RpcClient) -> ContractGateway:
    return ContractGateway(descriptor, rpc, chain_id=421614)


@pytest.fixture()
def signer():
    return load_signer(SIGNER_KEY)
