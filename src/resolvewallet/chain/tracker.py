"""Receipt polling for submitted transactions."""

from __future__ import annotations

import logging
import time
from typing import Callable

import httpx

from ..errors import ConfirmationTimeoutError
from ..models import TxStatus, WideUint, WriteResult
from .rpc import RpcClient, RpcError

logger = logging.getLogger(__name__)


class TransactionTracker:
    """
    Wait for a transaction to reach a terminal state.

    Giving up on the wait does not cancel anything: once sent, the
    transaction may still be mined after ``ConfirmationTimeoutError``.
    """

    def __init__(
        self,
        rpc: RpcClient,
        poll_interval: float = 2.0,
        dropped_after: int = 3,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.rpc = rpc
        self.poll_interval = poll_interval
        self.dropped_after = dropped_after
        self._clock = clock
        self._sleep = sleep

    def await_confirmation(self, tx_id: str, timeout: float = 120) -> WriteResult:
        """
        Poll for the receipt of ``tx_id``.

        Args:
            tx_id: Transaction hash returned by ``ContractGateway.submit``
            timeout: Maximum wait time in seconds

        Returns:
            WriteResult with CONFIRMED (receipt status 1) or FAILED
            (reverted, or unknown to the node for ``dropped_after`` polls)

        Raises:
            ConfirmationTimeoutError: If no terminal state within timeout
        """
        deadline = self._clock() + timeout
        unseen = 0
        while True:
            try:
                receipt = self.rpc.get_receipt(tx_id)
                if receipt is None:
                    unseen = unseen + 1 if self.rpc.get_transaction(tx_id) is None else 0
            except (RpcError, httpx.HTTPError) as exc:
                # a flaky poll says nothing about the transaction; keep waiting
                logger.warning("Receipt poll for %s failed: %s", tx_id, exc)
                receipt = None

            if receipt is not None:
                return self._from_receipt(tx_id, receipt)

            if unseen >= self.dropped_after:
                logger.warning("Transaction %s is unknown to the node; treating as dropped", tx_id)
                return WriteResult(transaction_id=tx_id, status=TxStatus.FAILED)

            if self._clock() >= deadline:
                raise ConfirmationTimeoutError(tx_id, timeout)
            self._sleep(self.poll_interval)

    @staticmethod
    def _from_receipt(tx_id: str, receipt: dict) -> WriteResult:
        block_hex = receipt.get("blockNumber")
        block = WideUint(int(block_hex, 16)) if block_hex else None
        status = int(receipt.get("status") or "0x0", 16)
        if status == 1:
            logger.info("Transaction %s confirmed in block %s", tx_id, block)
            return WriteResult(tx_id, TxStatus.CONFIRMED, block)
        logger.warning("Transaction %s reverted in block %s", tx_id, block)
        return WriteResult(tx_id, TxStatus.FAILED, block)
