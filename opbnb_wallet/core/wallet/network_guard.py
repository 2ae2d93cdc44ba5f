"""
Keeps the wallet on the required network.
"""

from __future__ import annotations

import logging

from ...providers.base import WalletProvider
from ...providers.errors import ProviderRpcError
from ...services.chains import ChainConfig
from .errors import NetworkError, NetworkErrorKind

logger = logging.getLogger(__name__)


class NetworkGuard:
    """Asks the wallet to switch to the required chain, registering it if unknown."""

    def __init__(self, provider: WalletProvider, chain: ChainConfig):
        self.provider = provider
        self.chain = chain

    @property
    def mismatch_message(self) -> str:
        return f"Please switch to {self.chain.display_name}"

    @property
    def switch_failed_message(self) -> str:
        return f"Failed to switch to {self.chain.display_name}. Please switch manually."

    async def ensure_network(self) -> None:
        """
        Switch the wallet to the required chain.

        Falls back to ``wallet_addEthereumChain`` when the wallet reports the
        chain as unrecognized. Does not retry; call again to retry.

        Raises:
            NetworkError: SWITCH_FAILED on rejection or any other provider error
        """
        try:
            try:
                await self.provider.request(
                    "wallet_switchEthereumChain",
                    [{"chainId": self.chain.chain_id_hex}],
                )
            except ProviderRpcError as switch_error:
                if not switch_error.is_unrecognized_chain:
                    raise
                logger.info("Wallet does not know chain %s; registering it", self.chain.chain_id_hex)
                await self.provider.request(
                    "wallet_addEthereumChain",
                    [self.chain.to_add_chain_params()],
                )
        except Exception as exc:
            logger.warning("Network switch to %s failed: %s", self.chain.display_name, exc)
            raise NetworkError(
                self.switch_failed_message,
                kind=NetworkErrorKind.SWITCH_FAILED,
                cause=exc,
            ) from exc
