"""
Wallet session: connection lifecycle, provider events and shared state.

The session owns the single-slot state the presentation layer renders
(account, balance, errors, transfer status, history). Every change
replaces the ``SessionState`` snapshot and notifies ``on_change``
observers.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ...config import settings
from ...logging_config import bind_wallet_context, clear_wallet_context
from ...providers.base import ACCOUNTS_CHANGED, CHAIN_CHANGED, Listener, WalletProvider
from ...providers.errors import ProviderRpcError
from ...services.address import same_address
from ...services.chains import ChainConfig, get_chain_config
from .balance import BalancePoller, BalanceTracker
from .errors import (
    ConnectError,
    FetchError,
    NetworkError,
    NoProviderError,
    WalletError,
    WrongNetworkError,
)
from .history import HistoryFetcher
from .models import (
    BALANCE_ERROR,
    BALANCE_ZERO,
    ConnectionState,
    SessionState,
    TransferRequest,
)
from .network_guard import NetworkGuard
from .signer import ProviderSigner, Signer

logger = logging.getLogger(__name__)

StateObserver = Callable[[SessionState], None]


class WalletSession:
    """
    Connection to a wallet provider, pinned to one required network.

    Usage:
        async with WalletSession(provider) as session:
            await session.connect()
            print(session.state.balance)
    """

    def __init__(
        self,
        provider: Optional[WalletProvider],
        chain: Optional[ChainConfig] = None,
        *,
        history: Optional[HistoryFetcher] = None,
        poll_interval_seconds: Optional[float] = None,
        signer_factory: Optional[Callable[[WalletProvider, str], Signer]] = None,
    ):
        self.provider = provider
        self.chain = chain or get_chain_config()
        self.guard = NetworkGuard(provider, self.chain) if provider else None
        self.balances = BalanceTracker(provider, self.chain) if provider else None
        self.history = history or HistoryFetcher()
        self.poller = BalancePoller(
            self.refresh_balance,
            poll_interval_seconds or settings.balance_poll_interval_seconds,
        )
        self._signer_factory = signer_factory or ProviderSigner
        self._state = SessionState()
        self._observers: List[StateObserver] = []
        self._listeners: List[Tuple[str, Listener]] = []
        # Monotonic balance request ids; older responses are discarded
        self._balance_seq = 0
        self._balance_applied = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def account(self) -> str:
        return self._state.account

    @property
    def connected(self) -> bool:
        return self._state.connected

    def on_change(self, observer: StateObserver) -> Callable[[], None]:
        """Register *observer* for state snapshots; returns an unsubscribe callable."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def update_state(self, **changes: Any) -> SessionState:
        """Replace the state snapshot and notify observers."""
        self._state = self._state.evolve(**changes)
        for observer in list(self._observers):
            try:
                observer(self._state)
            except Exception as exc:  # noqa: BLE001
                logger.error("State observer failed: %s", exc, exc_info=True)
        return self._state

    def set_form(self, recipient: Optional[str] = None, amount_smallest_unit: Optional[str] = None) -> None:
        """Record the transfer inputs as the user types them."""
        form = self._state.form
        self.update_state(
            form=TransferRequest(
                recipient=form.recipient if recipient is None else recipient,
                amount_smallest_unit=form.amount_smallest_unit if amount_smallest_unit is None else amount_smallest_unit,
            )
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Install provider event listeners (idempotent)."""
        if self.provider is None or self._listeners:
            return
        for event, listener in (
            (ACCOUNTS_CHANGED, self._handle_accounts_changed),
            (CHAIN_CHANGED, self._handle_chain_changed),
        ):
            self.provider.on(event, listener)
            self._listeners.append((event, listener))
        logger.debug("Subscribed to provider events")

    async def close(self) -> None:
        """Remove listeners and cancel the balance timer."""
        if self.provider is not None:
            for event, listener in self._listeners:
                self.provider.remove_listener(event, listener)
        self._listeners.clear()
        await self.poller.stop()
        clear_wallet_context()

    async def __aenter__(self) -> "WalletSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def connect(self) -> str:
        """
        Connect to the wallet and return the active account.

        A failed network switch is recorded in ``network_error`` and does not
        abort the connection.

        Raises:
            NoProviderError: no wallet capability present
            ConnectError: the wallet refused or failed account access
        """
        if self.provider is None:
            err = NoProviderError()
            self.update_state(connection=ConnectionState.DISCONNECTED, error=err.message)
            raise err

        await self.start()
        await self.ensure_network()

        try:
            accounts = await self.provider.request("eth_requestAccounts")
            if not accounts:
                raise ConnectError("Wallet returned no accounts")
        except Exception as exc:
            message = _user_message(exc, "An unknown error occurred")
            await self.poller.stop()
            self.update_state(connection=ConnectionState.DISCONNECTED, error=message)
            logger.warning("Account access failed: %s", message)
            if isinstance(exc, ConnectError):
                raise
            raise ConnectError(message, cause=exc) from exc

        account = accounts[0]
        self.update_state(connection=ConnectionState.CONNECTED, account=account, error=None)
        bind_wallet_context(account, self.chain.chain_id)
        logger.info("Wallet connected: %s", account)

        await self.poller.start()
        await self.refresh_balance(account)
        await self.refresh_history(account)
        return account

    async def ensure_network(self) -> bool:
        """Run the network guard and record its outcome; returns success."""
        if self.guard is None:
            return False
        try:
            await self.guard.ensure_network()
        except NetworkError as e:
            self.update_state(network_error=e.message)
            return False
        self.update_state(network_error=None)
        return True

    def signer(self) -> Signer:
        if self.provider is None:
            raise NoProviderError("No wallet found!")
        return self._signer_factory(self.provider, self._state.account)

    # ------------------------------------------------------------------
    # Balance and history
    # ------------------------------------------------------------------

    async def refresh_balance(self, address: Optional[str] = None) -> Optional[str]:
        """
        Refresh the balance slot for *address* (default: active account).

        Returns the applied display balance, or ``None`` when nothing was
        applied (no account, wrong network, or a newer refresh already won).
        """
        address = address or self._state.account
        if not address or self.balances is None:
            return None

        self._balance_seq += 1
        seq = self._balance_seq

        try:
            balance = await self.balances.refresh(address)
        except WrongNetworkError as e:
            if seq > self._balance_applied:
                self._balance_applied = seq
                self.update_state(network_error=e.message)
            return None

        if seq <= self._balance_applied or not same_address(address, self._state.account):
            logger.debug("Discarding stale balance response for %s", address)
            return None

        self._balance_applied = seq
        if balance == BALANCE_ERROR:
            self.update_state(balance=balance)
        else:
            self.update_state(balance=balance, network_error=None)
        return balance

    async def refresh_history(self, address: Optional[str] = None) -> None:
        """Replace the history sequence; failures are logged and leave it unchanged."""
        address = address or self._state.account
        if not address:
            return
        try:
            records = await self.history.fetch_recent(address)
        except FetchError as e:
            logger.error(f"Error fetching transactions: {e}")
            return
        if not same_address(address, self._state.account):
            return
        self.update_state(transactions=records)

    # ------------------------------------------------------------------
    # Provider events
    # ------------------------------------------------------------------

    async def _handle_accounts_changed(self, accounts: Sequence[str]) -> None:
        accounts = list(accounts or [])
        if not accounts:
            logger.info("Wallet reported no accounts; disconnecting")
            await self.poller.stop()
            self._invalidate_balance_requests()
            self.update_state(
                connection=ConnectionState.DISCONNECTED,
                account="",
                balance=BALANCE_ZERO,
            )
            clear_wallet_context()
            return

        account = accounts[0]
        changed = not same_address(account, self._state.account)
        self.update_state(account=account)
        if self.connected:
            bind_wallet_context(account, self.chain.chain_id)
        if changed and self.connected:
            await self.poller.start()
        await self.refresh_balance(account)
        if changed and self.connected:
            await self.refresh_history(account)

    async def _handle_chain_changed(self, chain_id: Any) -> None:
        if not self.chain.matches(chain_id):
            logger.info("Wallet switched to chain %s; %s required", chain_id, self.chain.chain_id_hex)
            self._invalidate_balance_requests()
            self.update_state(
                network_error=self.guard.mismatch_message if self.guard else None,
                balance=BALANCE_ZERO,
            )
            return

        self.update_state(network_error=None)
        if self._state.account:
            await self.refresh_balance()

    def _invalidate_balance_requests(self) -> None:
        self._balance_applied = self._balance_seq


def _user_message(exc: BaseException, default: str) -> str:
    if isinstance(exc, (WalletError, ProviderRpcError)):
        return exc.message or default
    return str(exc) or default
