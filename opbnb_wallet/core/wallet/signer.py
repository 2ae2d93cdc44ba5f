"""
Signing and broadcast through the wallet provider.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ...config import settings
from ...providers.base import WalletProvider
from ...providers.errors import DISCONNECTED, ProviderRpcError
from .errors import SubmissionError, SubmissionErrorKind

logger = logging.getLogger(__name__)


class PendingTransaction(ABC):
    """A broadcast transaction whose hash is known."""

    hash: str

    @abstractmethod
    async def wait(self) -> Dict[str, Any]:
        """Suspend until the transaction is mined; return its receipt"""
        pass


class Signer(ABC):
    """Capability that signs and broadcasts a transfer for the connected account."""

    @abstractmethod
    async def send_transaction(self, tx: Dict[str, Any]) -> PendingTransaction:
        """Ask the wallet to sign and send *tx* ({"to", "value"})"""
        pass


class ReceiptPoller(PendingTransaction):
    """Waits for a receipt by polling ``eth_getTransactionReceipt``.

    There is no timeout: the wait lasts until the node reports a receipt or
    a non-transport error. Transport errors are logged and retried.
    """

    def __init__(
        self,
        tx_hash: str,
        provider: WalletProvider,
        poll_interval: Optional[float] = None,
    ):
        self.hash = tx_hash
        self.provider = provider
        self.poll_interval = poll_interval or settings.receipt_poll_interval_seconds

    async def wait(self) -> Dict[str, Any]:
        while True:
            try:
                receipt = await self.provider.request("eth_getTransactionReceipt", [self.hash])
            except ProviderRpcError as e:
                if e.code != DISCONNECTED:
                    raise SubmissionError(e.message, SubmissionErrorKind.NODE_ERROR, cause=e, tx_hash=self.hash) from e
                logger.warning(f"Error checking transaction status: {e}")
                receipt = None

            if receipt:
                if _receipt_status(receipt, self.hash) == 0:
                    raise SubmissionError(
                        "Transaction reverted",
                        SubmissionErrorKind.REVERTED,
                        tx_hash=self.hash,
                    )
                logger.info(f"Transaction confirmed: {self.hash} (block {receipt.get('blockNumber')})")
                return receipt

            await asyncio.sleep(self.poll_interval)


class ProviderSigner(Signer):
    """Sends through ``eth_sendTransaction`` on the wallet provider."""

    def __init__(
        self,
        provider: WalletProvider,
        from_address: str,
        poll_interval: Optional[float] = None,
    ):
        self.provider = provider
        self.from_address = from_address
        self.poll_interval = poll_interval

    async def send_transaction(self, tx: Dict[str, Any]) -> PendingTransaction:
        payload = {
            "from": self.from_address,
            "to": tx["to"],
            "value": hex(int(tx["value"])),
        }
        tx_hash = await self.provider.request("eth_sendTransaction", [payload])
        if not isinstance(tx_hash, str) or not tx_hash:
            raise SubmissionError("Wallet did not return a transaction hash", SubmissionErrorKind.NODE_ERROR)
        return ReceiptPoller(tx_hash, self.provider, self.poll_interval)


def _receipt_status(receipt: Dict[str, Any], tx_hash: str) -> Optional[int]:
    """0x1 = success, 0x0 = revert; ``None`` when the node omits the field."""
    status = receipt.get("status")
    if status is None:
        logger.warning(f"Receipt for {tx_hash} has no status; treating as mined")
        return None
    try:
        return int(status, 16) if isinstance(status, str) else int(status)
    except (TypeError, ValueError) as e:
        raise SubmissionError(
            "Invalid transaction receipt",
            SubmissionErrorKind.NODE_ERROR,
            cause=e,
            tx_hash=tx_hash,
        ) from e
