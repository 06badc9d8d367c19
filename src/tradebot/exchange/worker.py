"""Serializing wrapper around a TradingApi.

Adapters are single-caller. TradingApiWorker lets several tasks share
one adapter by funnelling every call through a queue that a single
consumer task drains in submission order.
"""

from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
from collections.abc import Awaitable, Callable
from decimal import Decimal
from types import TracebackType
from typing import TYPE_CHECKING, Any

from tradebot.exchange.base import TradingApi

if TYPE_CHECKING:
    from tradebot.domain.balances import BalanceInfo
    from tradebot.domain.market_data import MarketOrderBook
    from tradebot.domain.orders import OpenOrder
    from tradebot.domain.types import OrderType

logger = logging.getLogger(__name__)

NOT_RUNNING_MSG = "TradingApiWorker is not running"
STOPPED_MSG = "TradingApiWorker stopped before the call completed"

_Call = tuple[Callable[[], Awaitable[Any]], "asyncio.Future[Any]"]


def _cancel_if_abandoned(task: asyncio.Task[Any], future: asyncio.Future[Any]) -> None:
    if future.cancelled():
        task.cancel()


class TradingApiWorker(TradingApi):
    """Runs adapter calls one at a time, in the order they were submitted.

    Exceptions raised by the adapter reach the caller that submitted the
    call unchanged. Cancelling a caller cancels its adapter call, which
    tears down the underlying HTTP request.

    Usage:
        async with TradingApiWorker(adapter) as api:
            price = await api.get_latest_market_price("BTC-USD")
    """

    def __init__(self, adapter: TradingApi) -> None:
        self._adapter = adapter
        self._queue: asyncio.Queue[_Call] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None

    @property
    def adapter(self) -> TradingApi:
        """Return the wrapped adapter."""
        return self._adapter

    @property
    def is_running(self) -> bool:
        """Return True while the consumer task is alive."""
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the consumer task. Calling start twice is a no-op."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Started worker for {self._adapter.get_impl_name()}")

    async def stop(self) -> None:
        """Stop the consumer task.

        The call in flight is cancelled; it and every queued call fail
        with RuntimeError.
        """
        if self._task is None:
            return

        task, self._task = self._task, None
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

        abandoned = 0
        while not self._queue.empty():
            _, future = self._queue.get_nowait()
            self._queue.task_done()
            if not future.done():
                future.set_exception(RuntimeError(STOPPED_MSG))
                abandoned += 1

        logger.info(f"Stopped worker for {self._adapter.get_impl_name()} ({abandoned} queued calls failed)")

    async def aclose(self) -> None:
        """Stop the worker and close the wrapped adapter."""
        await self.stop()
        await self._adapter.aclose()

    async def __aenter__(self) -> TradingApiWorker:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _submit(self, call: Callable[[], Awaitable[Any]]) -> Any:
        if not self.is_running:
            raise RuntimeError(NOT_RUNNING_MSG)

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._queue.put_nowait((call, future))
        return await future

    async def _run(self) -> None:
        while True:
            call, future = await self._queue.get()
            try:
                if future.done():
                    continue

                task = asyncio.ensure_future(call())
                future.add_done_callback(functools.partial(_cancel_if_abandoned, task))

                try:
                    await asyncio.wait({task})
                except asyncio.CancelledError:
                    task.cancel()
                    # Let the call unwind before the adapter can be closed.
                    await asyncio.wait({task})
                    if not task.cancelled():
                        task.exception()
                    if not future.done():
                        future.set_exception(RuntimeError(STOPPED_MSG))
                    raise

                self._settle(future, task)
            finally:
                self._queue.task_done()

    @staticmethod
    def _settle(future: asyncio.Future[Any], task: asyncio.Future[Any]) -> None:
        if task.cancelled():
            if not future.done():
                future.cancel()
            return

        error = task.exception()
        if future.done():
            # Caller is gone; nothing to deliver to.
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(task.result())

    async def create_order(
        self,
        market_id: str,
        order_type: OrderType,
        quantity: Decimal,
        price: Decimal,
    ) -> str:
        return await self._submit(
            lambda: self._adapter.create_order(market_id, order_type, quantity, price)
        )

    async def cancel_order(self, order_id: str, market_id: str) -> bool:
        return await self._submit(lambda: self._adapter.cancel_order(order_id, market_id))

    async def get_your_open_orders(self, market_id: str) -> list[OpenOrder]:
        return await self._submit(lambda: self._adapter.get_your_open_orders(market_id))

    async def get_market_orders(self, market_id: str) -> MarketOrderBook:
        return await self._submit(lambda: self._adapter.get_market_orders(market_id))

    async def get_balance_info(self) -> BalanceInfo:
        return await self._submit(self._adapter.get_balance_info)

    async def get_latest_market_price(self, market_id: str) -> Decimal:
        return await self._submit(lambda: self._adapter.get_latest_market_price(market_id))

    async def get_percentage_of_buy_order_taken_for_exchange_fee(
        self, market_id: str
    ) -> Decimal:
        return await self._submit(
            lambda: self._adapter.get_percentage_of_buy_order_taken_for_exchange_fee(market_id)
        )

    async def get_percentage_of_sell_order_taken_for_exchange_fee(
        self, market_id: str
    ) -> Decimal:
        return await self._submit(
            lambda: self._adapter.get_percentage_of_sell_order_taken_for_exchange_fee(market_id)
        )

    def get_impl_name(self) -> str:
        """Return the wrapped adapter's name."""
        return self._adapter.get_impl_name()
