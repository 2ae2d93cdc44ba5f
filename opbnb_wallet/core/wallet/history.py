"""Recent transaction history from the block explorer."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ...config import settings
from ...providers.explorer import ExplorerError, ExplorerProvider
from .errors import FetchError
from .models import TransactionRecord

logger = logging.getLogger(__name__)


class HistoryFetcher:
    def __init__(self, explorer: Optional[ExplorerProvider] = None, limit: Optional[int] = None):
        self.explorer = explorer or ExplorerProvider()
        self.limit = settings.history_limit if limit is None else limit

    async def fetch_recent(self, address: str, limit: Optional[int] = None) -> Tuple[TransactionRecord, ...]:
        """Return the newest confirmed transactions of *address*, most recent first.

        Raises ``FetchError`` when the explorer is not configured, unreachable,
        answers with ``status != "1"`` or sends records that cannot be parsed.
        """
        if limit is None:
            limit = self.limit
        if limit < 1:
            return ()
        if not await self.explorer.ready():
            raise FetchError("Explorer API key not configured")

        try:
            data = await self.explorer.get_transaction_list(address, page=1, offset=limit, sort="desc")
        except ExplorerError as e:
            raise FetchError(str(e), cause=e) from e

        result = data.get("result")
        if data.get("status") != "1" or not isinstance(result, list):
            raise FetchError(f"Explorer returned no transactions: {data.get('message') or 'unknown error'}")

        try:
            records = [TransactionRecord.from_explorer(item) for item in result[:limit]]
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise FetchError(f"Malformed transaction record: {e}", cause=e) from e

        logger.debug("Fetched %d transactions for %s", len(records), address)
        return tuple(records)
