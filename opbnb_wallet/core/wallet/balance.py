"""
Native balance lookup and the recurring balance refresh.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ...providers.base import WalletProvider
from ...services.chains import ChainConfig, parse_chain_id
from ...services.units import format_units
from .errors import WrongNetworkError
from .models import BALANCE_ERROR

logger = logging.getLogger(__name__)


class BalanceTracker:
    """Reads the active account's native balance through the wallet."""

    def __init__(self, provider: WalletProvider, chain: ChainConfig):
        self.provider = provider
        self.chain = chain

    async def refresh(self, address: str) -> str:
        """
        Fetch the balance of *address* as a 4-decimal display string.

        Query failures are logged and reported as the ``"Error"`` sentinel
        instead of raising.

        Raises:
            WrongNetworkError: the wallet is on another chain; nothing was queried
        """
        try:
            chain_id = parse_chain_id(await self.provider.request("eth_chainId"))
            if chain_id != self.chain.chain_id:
                raise WrongNetworkError(
                    f"Please switch to {self.chain.display_name}",
                    chain_id=chain_id,
                )

            raw = await self.provider.request("eth_getBalance", [address, "latest"])
            balance_wei = int(raw, 16) if isinstance(raw, str) else int(raw)
        except WrongNetworkError:
            raise
        except Exception as e:
            logger.error(f"Error fetching balance for {address}: {e}")
            return BALANCE_ERROR

        return format_units(balance_wei, self.chain.native_currency.decimals)


class BalancePoller:
    """
    Owned, cancellable task that calls *refresh* every *interval_seconds*.

    ``start`` replaces any running loop, so a session never has two
    timers; ``stop`` cancels and awaits the task.
    """

    def __init__(
        self,
        refresh: Callable[[], Awaitable[None]],
        interval_seconds: float = 30.0,
    ):
        self._refresh = refresh
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        await self.stop()
        self._task = asyncio.create_task(self._run(), name="balance-poller")
        logger.debug("Balance poller started; interval=%ss", self.interval_seconds)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        if task is asyncio.current_task():
            return
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Balance poller stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self._refresh()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Balance poll tick failed: %s", exc, exc_info=True)
