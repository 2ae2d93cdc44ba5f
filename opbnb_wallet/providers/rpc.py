"""
JSON-RPC access to an EVM node over HTTP.

``RpcWalletProvider`` exposes a node with unlocked accounts (anvil, hardhat,
geth --dev) through the same request/event interface as a browser wallet,
so the wallet session can run headless against a development node.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, List, Optional, Sequence

import httpx

from ..config import settings
from ..services.chains import parse_chain_id
from .base import EventEmitter, WalletProvider
from .errors import (
    DISCONNECTED,
    UNAUTHORIZED,
    UNRECOGNIZED_CHAIN,
    UNSUPPORTED_METHOD,
    ProviderRpcError,
)

logger = logging.getLogger(__name__)


class JsonRpcClient:
    """Minimal async JSON-RPC 2.0 client."""

    def __init__(
        self,
        rpc_url: str,
        timeout_s: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.rpc_url = rpc_url
        self._client = client or httpx.AsyncClient(timeout=timeout_s or settings.request_timeout_seconds)
        self._ids = itertools.count(1)

    async def call(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        """Make an RPC call and return its ``result`` member."""
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": list(params or []),
            "id": next(self._ids),
        }

        try:
            response = await self._client.post(
                self.rpc_url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"RPC transport error for {method}: {e}")
            raise ProviderRpcError(DISCONNECTED, f"RPC request failed: {e}") from e
        except ValueError as e:
            raise ProviderRpcError(DISCONNECTED, "RPC node returned invalid JSON") from e

        if "error" in data:
            raise ProviderRpcError.from_rpc_error(data["error"])

        return data.get("result")

    async def aclose(self) -> None:
        await self._client.aclose()


class RpcWalletProvider(EventEmitter, WalletProvider):
    """Wallet provider backed by a node's unlocked accounts."""

    name = "rpc"

    def __init__(self, rpc_url: str, client: Optional[JsonRpcClient] = None):
        super().__init__()
        self.rpc = client or JsonRpcClient(rpc_url)

    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        if method == "eth_requestAccounts":
            accounts: List[str] = await self.rpc.call("eth_accounts") or []
            if not accounts:
                raise ProviderRpcError(UNAUTHORIZED, "No unlocked accounts available on node")
            return accounts

        if method == "wallet_switchEthereumChain":
            requested = parse_chain_id((params or [{}])[0].get("chainId"))
            current = parse_chain_id(await self.rpc.call("eth_chainId"))
            if requested is None or requested != current:
                raise ProviderRpcError(
                    UNRECOGNIZED_CHAIN,
                    f"Unrecognized chain ID {requested!r}; node serves {current!r}",
                )
            return None

        if method == "wallet_addEthereumChain":
            raise ProviderRpcError(UNSUPPORTED_METHOD, "Node-backed provider cannot add networks")

        return await self.rpc.call(method, params)

    async def aclose(self) -> None:
        await self.rpc.aclose()
