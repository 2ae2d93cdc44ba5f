import httpx
from typing import Any, Dict, Optional

from ..config import settings


class ExplorerError(RuntimeError):
    """Raised when the explorer API cannot be reached or returns garbage."""


class ExplorerProvider:
    """Etherscan-compatible explorer API (BscScan testnet by default)"""

    name = "explorer"
    timeout_s = 30

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.api_key = settings.explorer_api_key if api_key is None else api_key
        self.base_url = base_url or settings.explorer_api_url
        self.timeout_s = settings.request_timeout_seconds

    async def ready(self) -> bool:
        return bool(self.api_key)

    async def get_transaction_list(
        self,
        address: str,
        page: int = 1,
        offset: int = 5,
        sort: str = "desc",
    ) -> Dict[str, Any]:
        """Get normal transactions for address (``module=account&action=txlist``)"""
        params = {
            "module": "account",
            "action": "txlist",
            "address": address,
            "startblock": 0,
            "endblock": 99999999,
            "page": page,
            "offset": offset,
            "sort": sort,
            "apikey": self.api_key,
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(self.base_url, params=params, timeout=self.timeout_s)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise ExplorerError(f"Explorer request failed: {e}") from e
        except ValueError as e:
            raise ExplorerError("Explorer returned invalid JSON") from e

        if not isinstance(data, dict):
            raise ExplorerError("Explorer returned an unexpected payload")
        return data
