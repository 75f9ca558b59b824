"""TransactionTracker receipt polling."""

from __future__ import annotations

import httpx
import pytest

from resolvewallet.chain.rpc import RpcClient
from resolvewallet.chain.tracker import TransactionTracker
from resolvewallet.errors import ConfirmationTimeoutError
from resolvewallet.models import TxStatus, WideUint

TX = "0x" + "ab" * 32


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


def _tracker(rpc: RpcClient, clock: FakeClock, **kwargs) -> TransactionTracker:
    return TransactionTracker(rpc, poll_interval=2.0, clock=clock, sleep=clock.sleep, **kwargs)


class TestAwaitConfirmation:
    def test_confirmed(self, rpc, node, clock) -> None:
        node.receipts[TX] = {"status": "0x1", "blockNumber": hex(98765)}
        result = _tracker(rpc, clock).await_confirmation(TX, timeout=10)
        assert result.status is TxStatus.CONFIRMED
        assert result.confirmed_block == WideUint(98765)
        assert clock.sleeps == []

    def test_reverted(self, rpc, node, clock) -> None:
        node.receipts[TX] = {"status": "0x0", "blockNumber": "0x10"}
        result = _tracker(rpc, clock).await_confirmation(TX, timeout=10)
        assert result.status is TxStatus.FAILED
        assert result.confirmed_block == WideUint(16)

    def test_confirmed_after_polling(self, rpc, node, clock) -> None:
        def mine_later(seconds: float) -> None:
            clock.sleep(seconds)
            if len(clock.sleeps) == 2:
                node.receipts[TX] = {"status": "0x1", "blockNumber": "0x2a"}

        tracker = TransactionTracker(rpc, poll_interval=2.0, clock=clock, sleep=mine_later)
        result = tracker.await_confirmation(TX, timeout=30)
        assert result.status is TxStatus.CONFIRMED
        assert clock.sleeps == [2.0, 2.0]

    def test_timeout_raises(self, rpc, node, clock) -> None:
        with pytest.raises(ConfirmationTimeoutError) as excinfo:
            _tracker(rpc, clock).await_confirmation(TX, timeout=5)
        assert excinfo.value.transaction_id == TX
        assert isinstance(excinfo.value, TimeoutError)
        assert clock.now >= 5

    def test_dropped_transaction_fails(self, rpc, node, clock) -> None:
        node.known = False
        result = _tracker(rpc, clock, dropped_after=3).await_confirmation(TX, timeout=60)
        assert result.status is TxStatus.FAILED
        assert result.confirmed_block is None
        assert node.methods.count("eth_getTransactionByHash") == 3

    def test_poll_errors_do_not_end_the_wait(self, rpc, node, clock) -> None:
        node.errors["eth_getTransactionReceipt"] = httpx.ConnectError("flaky")

        def recover(seconds: float) -> None:
            clock.sleep(seconds)
            node.errors.clear()
            node.receipts[TX] = {"status": "0x1", "blockNumber": "0x1"}

        tracker = TransactionTracker(rpc, poll_interval=1.0, clock=clock, sleep=recover)
        assert tracker.await_confirmation(TX, timeout=10).status is TxStatus.CONFIRMED
