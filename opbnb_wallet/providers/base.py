from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

ACCOUNTS_CHANGED = "accountsChanged"
CHAIN_CHANGED = "chainChanged"

Listener = Callable[[Any], Any]


class WalletProvider(ABC):
    """EIP-1193 shaped wallet capability (request + event subscription)."""

    name: str = "wallet"

    @abstractmethod
    async def request(self, method: str, params: Optional[Sequence[Any]] = None) -> Any:
        """Send a request to the wallet; raises ``ProviderRpcError`` on failure"""
        pass

    @abstractmethod
    def on(self, event: str, listener: Listener) -> None:
        """Subscribe *listener* to a provider event"""
        pass

    @abstractmethod
    def remove_listener(self, event: str, listener: Listener) -> None:
        """Undo a previous ``on`` call"""
        pass


class EventEmitter:
    """Callback registry keyed by event kind.

    Each registered listener receives every emitted payload exactly once;
    a listener registered twice for one event is stored once.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def on(self, event: str, listener: Listener) -> None:
        handlers = self._listeners.setdefault(event, [])
        if listener not in handlers:
            handlers.append(listener)

    def remove_listener(self, event: str, listener: Listener) -> None:
        handlers = self._listeners.get(event)
        if not handlers:
            return
        try:
            handlers.remove(listener)
        except ValueError:
            return
        if not handlers:
            del self._listeners[event]

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    async def emit(self, event: str, payload: Any) -> None:
        """Deliver *payload* to the listeners of *event*, awaiting coroutine handlers."""
        for listener in list(self._listeners.get(event, [])):
            try:
                result = listener(payload)
                if hasattr(result, "__await__"):
                    await result
            except Exception as exc:  # noqa: BLE001
                logger.error("Listener for %s failed: %s", event, exc, exc_info=True)
