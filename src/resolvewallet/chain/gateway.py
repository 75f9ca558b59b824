"""
Contract Gateway - typed read/write access to one deployed contract.

Reads go through ``eth_call``; writes are built, signed with eth-account
and sent with a single ``eth_sendRawTransaction``.  Whether a function is
a read or a write is decided only by the descriptor's state mutability.

A submitted transaction is never resent from here: a second send of a
non-idempotent call could apply it twice.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Sequence

import httpx
from eth_abi.exceptions import DecodingError, EncodingError
from eth_account.signers.local import LocalAccount

from ..codec import to_checksum_address, to_display, validate_address
from ..errors import ContractCallError, SigningError, TransactionRejectedError
from ..models import (
    AbiFunction,
    Address,
    CallArg,
    CallRequest,
    ContractDescriptor,
    ReadResult,
    ResultValue,
    TxStatus,
    WideUint,
    WriteResult,
)
from .abi import decode_result, decode_revert_reason, encode_call
from .rpc import DEFAULT_CHAIN_ID, RpcClient, RpcError

logger = logging.getLogger(__name__)

_UINT_RE = re.compile(r"uint([0-9]*)")


def _uint_bits(abi_type: str) -> Optional[int]:
    match = _UINT_RE.fullmatch(abi_type)
    if match is None:
        return None
    return int(match.group(1) or "256")


def _rpc_reason(exc: Exception) -> str:
    if isinstance(exc, RpcError):
        reason = decode_revert_reason(exc.data)
        if reason is not None:
            return f"execution reverted: {reason}"
        return exc.message
    if isinstance(exc, httpx.HTTPError):
        return f"transport error: {exc}"
    return str(exc)


class ContractGateway:
    """Read and write named functions of the contract in ``descriptor``."""

    def __init__(
        self,
        descriptor: ContractDescriptor,
        rpc: RpcClient,
        chain_id: int = DEFAULT_CHAIN_ID,
        gas_limit: Optional[int] = None,
    ) -> None:
        self.descriptor = descriptor
        self.rpc = rpc
        self.chain_id = chain_id
        self.gas_limit = gas_limit

    @property
    def address(self) -> Address:
        return self.descriptor.address

    # ---- descriptor queries ----

    def has_function(self, fn: str) -> bool:
        return bool(self.descriptor.lookup(fn))

    def is_read_only(self, fn: str) -> bool:
        overloads = self.descriptor.lookup(fn)
        if not overloads:
            raise ContractCallError(fn, "function not found in contract interface")
        return all(func.read_only for func in overloads)

    def request(self, fn: str, args: Sequence[CallArg] = ()) -> CallRequest:
        return CallRequest(target=self.address, function_name=fn, args=tuple(args))

    def _resolve(self, fn: str, args: Sequence[CallArg]) -> tuple[AbiFunction, list[Any]]:
        """Pick the overload matching ``args`` and marshal them for eth-abi."""
        overloads = self.descriptor.lookup(fn)
        if not overloads:
            raise ContractCallError(fn, "function not found in contract interface")

        candidates = [func for func in overloads if len(func.inputs) == len(args)]
        if not candidates:
            expected = " or ".join(str(len(func.inputs)) for func in overloads)
            raise ContractCallError(fn, f"expected {expected} argument(s), got {len(args)}")

        errors: list[str] = []
        for func in candidates:
            try:
                return func, self._marshal(func, args)
            except ContractCallError as exc:
                errors.append(exc.reason)
        raise ContractCallError(fn, "; ".join(errors))

    @staticmethod
    def _marshal(func: AbiFunction, args: Sequence[CallArg]) -> list[Any]:
        marshalled: list[Any] = []
        for index, (abi_type, arg) in enumerate(zip(func.inputs, args)):
            if abi_type == "address":
                if not isinstance(arg, Address):
                    raise ContractCallError(
                        func.name, f"argument {index} must be an address for {func.signature}"
                    )
                marshalled.append(arg.value)
                continue

            bits = _uint_bits(abi_type)
            if bits is None:
                raise ContractCallError(
                    func.name, f"unsupported input type {abi_type} in {func.signature}"
                )
            if not isinstance(arg, WideUint):
                raise ContractCallError(
                    func.name, f"argument {index} must be an unsigned integer for {func.signature}"
                )
            if arg.value >= 1 << bits:
                raise ContractCallError(
                    func.name, f"argument {index} ({to_display(arg)}) does not fit in {abi_type}"
                )
            marshalled.append(arg.value)
        return marshalled

    @staticmethod
    def _unmarshal(func: AbiFunction, decoded: Sequence[Any]) -> tuple[ResultValue, ...]:
        values: list[ResultValue] = []
        for abi_type, raw in zip(func.outputs, decoded):
            if abi_type == "address":
                values.append(validate_address(raw, f"{func.name} result"))
            elif abi_type == "bool":
                values.append(bool(raw))
            elif _uint_bits(abi_type) is not None:
                values.append(WideUint(raw))
            else:
                raise ContractCallError(func.name, f"unsupported output type {abi_type}")
        return tuple(values)

    # ---- operations ----

    def call(self, fn: str, args: Sequence[CallArg] = ()) -> ReadResult:
        """
        Read from the contract (eth_call).  No signer, no state change.

        Raises:
            ContractCallError: Unknown function, state-changing function,
                argument mismatch, revert, or transport failure
        """
        func, marshalled = self._resolve(fn, args)
        if not func.read_only:
            raise ContractCallError(fn, "function is state-changing; submit a transaction instead")

        try:
            calldata = encode_call(func, marshalled)
        except EncodingError as exc:
            raise ContractCallError(fn, f"cannot encode arguments: {exc}") from exc

        logger.info("Reading %s(%s)", fn, ", ".join(to_display(a) for a in args))
        try:
            result = self.rpc.call(self.address.value, calldata)
        except (RpcError, httpx.HTTPError) as exc:
            raise ContractCallError(fn, _rpc_reason(exc)) from exc

        if func.outputs and (not result or result == "0x"):
            raise ContractCallError(fn, "empty return data (is CONTRACT deployed on this chain?)")
        try:
            decoded = decode_result(func, result or "0x")
        except (DecodingError, ValueError) as exc:
            raise ContractCallError(fn, f"cannot decode return data: {exc}") from exc

        return ReadResult(function_name=fn, values=self._unmarshal(func, decoded))

    def submit(
        self,
        fn: str,
        args: Sequence[CallArg],
        signer: Optional[LocalAccount],
    ) -> WriteResult:
        """
        Build, sign and send a state-changing transaction.

        Returns as soon as the node accepts the transaction, with status
        PENDING.  Confirmation is the TransactionTracker's job.

        Raises:
            ContractCallError: Same conditions as ``call``, or a failed
                nonce/gas lookup before sending
            SigningError: No signing credential
            TransactionRejectedError: The node refused the signed transaction
        """
        func, marshalled = self._resolve(fn, args)
        if func.read_only:
            raise ContractCallError(fn, "function is read-only; nothing to submit")
        if signer is None:
            raise SigningError("PRIVATE_KEY missing in .env")

        try:
            calldata = encode_call(func, marshalled)
        except EncodingError as exc:
            raise ContractCallError(fn, f"cannot encode arguments: {exc}") from exc

        sender = signer.address
        to = to_checksum_address(self.address.value)
        try:
            nonce = self.rpc.get_nonce(sender)
            gas_price = self.rpc.gas_price()
            gas = self.gas_limit or self.rpc.estimate_gas(
                {"from": sender, "to": to, "data": calldata}
            )
        except (RpcError, httpx.HTTPError) as exc:
            raise ContractCallError(fn, _rpc_reason(exc)) from exc

        tx = {
            "to": to,
            "data": calldata,
            "value": 0,
            "nonce": nonce,
            "gas": gas,
            "gasPrice": gas_price,
            "chainId": self.chain_id,
        }
        try:
            signed = signer.sign_transaction(tx)
        except (ValueError, TypeError) as exc:
            raise SigningError(f"Cannot sign {fn} transaction: {exc}") from exc
        raw_tx = "0x" + bytes(signed.raw_transaction).hex()
        local_hash = "0x" + bytes(signed.hash).hex()

        logger.info(
            "Submitting %s(%s) from %s nonce=%s gas=%s",
            fn,
            ", ".join(to_display(a) for a in args),
            sender,
            nonce,
            gas,
        )
        try:
            tx_hash = self.rpc.send_raw_transaction(raw_tx)
        except RpcError as exc:
            raise TransactionRejectedError(fn, _rpc_reason(exc)) from exc
        except httpx.HTTPError as exc:
            raise ContractCallError(
                fn,
                f"{_rpc_reason(exc)}; submission outcome unknown, check {local_hash}",
            ) from exc

        tx_hash = (tx_hash or local_hash).lower()
        logger.info("Transaction sent for %s hash=%s", fn, tx_hash)
        return WriteResult(transaction_id=tx_hash, status=TxStatus.PENDING)

    def execute(self, request: CallRequest, signer: Optional[LocalAccount] = None) -> ReadResult | WriteResult:
        """Dispatch ``request`` to ``call`` or ``submit`` by declared mutability."""
        if request.target != self.address:
            raise ContractCallError(
                request.function_name,
                f"request targets {request.target}, gateway is bound to {self.address}",
            )
        if self.is_read_only(request.function_name):
            return self.call(request.function_name, request.args)
        return self.submit(request.function_name, request.args, signer)
