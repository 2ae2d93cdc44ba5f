"""
Tests for wallet connection lifecycle and provider event handling.
"""

import asyncio

import pytest
import structlog

from opbnb_wallet.core.wallet import (
    BALANCE_ZERO,
    ConnectError,
    ConnectionState,
    HistoryFetcher,
    NoProviderError,
    WalletSession,
)
from opbnb_wallet.providers.base import ACCOUNTS_CHANGED, CHAIN_CHANGED
from opbnb_wallet.providers.errors import USER_REJECTED, ProviderRpcError

from tests.wallet.fakes import ACCOUNT, OTHER_ACCOUNT, FakeExplorer, FakeWalletProvider, explorer_tx


@pytest.mark.asyncio
async def test_connect_without_provider_raises_no_provider(chain):
    session = WalletSession(None, chain)

    with pytest.raises(NoProviderError):
        await session.connect()

    assert session.state.connection == ConnectionState.DISCONNECTED
    assert session.state.error == "No wallet found! Please install MetaMask."


@pytest.mark.asyncio
async def test_connect_sets_account_balance_and_history(session, provider):
    account = await session.connect()

    state = session.state
    assert account == ACCOUNT
    assert state.connection == ConnectionState.CONNECTED
    assert state.account == ACCOUNT
    assert state.balance == "1.0000"
    assert state.error is None
    assert state.network_error is None
    assert len(state.transactions) == 1
    assert state.transactions[0].value == 10**18
    # Network is enforced before account access is requested
    methods = provider.methods()
    assert methods.index("wallet_switchEthereumChain") < methods.index("eth_requestAccounts")
    assert session.poller.is_running

    await session.close()


@pytest.mark.asyncio
async def test_network_switch_failure_does_not_abort_connect(session, provider):
    provider.chain_id = "0x38"
    provider.errors["wallet_switchEthereumChain"] = ProviderRpcError(USER_REJECTED, "User rejected the request.")

    await session.connect()

    assert session.connected
    assert session.state.account == ACCOUNT
    # Balance was not read on the wrong chain; the mismatch is reported
    assert session.state.balance == BALANCE_ZERO
    assert session.state.network_error == "Please switch to opBNB Testnet"
    assert "eth_getBalance" not in provider.methods()

    await session.close()


@pytest.mark.asyncio
async def test_network_switch_failure_message_when_balance_unaffected(session, provider):
    provider.errors["wallet_switchEthereumChain"] = ProviderRpcError(USER_REJECTED, "User rejected the request.")
    messages = []
    session.on_change(lambda state: messages.append(state.network_error))

    await session.connect()

    assert "Failed to switch to opBNB Testnet. Please switch manually." in messages
    # Wallet was already on the right chain, so the successful balance read clears it
    assert session.state.network_error is None

    await session.close()


@pytest.mark.asyncio
async def test_account_access_failure_leaves_disconnected(session, provider):
    provider.errors["eth_requestAccounts"] = ProviderRpcError(USER_REJECTED, "User rejected the request.")

    with pytest.raises(ConnectError) as exc_info:
        await session.connect()

    assert exc_info.value.message == "User rejected the request."
    assert session.state.connection == ConnectionState.DISCONNECTED
    assert session.state.error == "User rejected the request."
    assert not session.poller.is_running

    await session.close()


@pytest.mark.asyncio
async def test_empty_accounts_event_disconnects(session, provider):
    await session.connect()

    await provider.emit(ACCOUNTS_CHANGED, [])

    assert session.state.connection == ConnectionState.DISCONNECTED
    assert session.state.account == ""
    assert session.state.balance == "0"
    assert not session.poller.is_running

    await session.close()


@pytest.mark.asyncio
async def test_accounts_changed_switches_account_and_refreshes(session, provider, explorer):
    await session.connect()
    provider.balance = 2 * 10**18

    await provider.emit(ACCOUNTS_CHANGED, [OTHER_ACCOUNT])

    assert session.state.account == OTHER_ACCOUNT
    assert session.state.balance == "2.0000"
    assert provider.calls[-1] == ("eth_getBalance", [OTHER_ACCOUNT, "latest"])
    assert [r["address"] for r in explorer.requests] == [ACCOUNT, OTHER_ACCOUNT]

    await session.close()


@pytest.mark.asyncio
async def test_chain_changed_to_other_network_zeroes_balance_but_stays_connected(session, provider):
    await session.connect()
    provider.chain_id = "0x38"

    await provider.emit(CHAIN_CHANGED, "0x38")

    assert session.connected
    assert session.state.account == ACCOUNT
    assert session.state.balance == "0"
    assert session.state.network_error == "Please switch to opBNB Testnet"

    await session.close()


@pytest.mark.asyncio
async def test_chain_changed_back_clears_error_and_refreshes(session, provider):
    await session.connect()
    provider.chain_id = "0x38"
    await provider.emit(CHAIN_CHANGED, "0x38")

    provider.chain_id = "0x15eb"
    await provider.emit(CHAIN_CHANGED, "0x15EB")

    assert session.state.network_error is None
    assert session.state.balance == "1.0000"

    await session.close()


@pytest.mark.asyncio
async def test_chain_changed_without_account_is_noop(session, provider):
    await session.start()

    await provider.emit(CHAIN_CHANGED, "0x15eb")

    assert provider.methods() == []
    await session.close()


@pytest.mark.asyncio
async def test_listeners_installed_once_and_removed_on_close(chain):
    provider = FakeWalletProvider()

    for _ in range(3):
        session = WalletSession(provider, chain, history=HistoryFetcher(explorer=FakeExplorer()))
        await session.start()
        await session.start()
        assert provider.listener_count(ACCOUNTS_CHANGED) == 1
        assert provider.listener_count(CHAIN_CHANGED) == 1
        await session.close()
        assert provider.listener_count(ACCOUNTS_CHANGED) == 0
        assert provider.listener_count(CHAIN_CHANGED) == 0


@pytest.mark.asyncio
async def test_context_manager_tears_down(provider, chain):
    async with WalletSession(provider, chain, history=HistoryFetcher(explorer=FakeExplorer())) as session:
        await session.connect()
        assert session.poller.is_running

    assert not session.poller.is_running
    assert provider.listener_count(ACCOUNTS_CHANGED) == 0


@pytest.mark.asyncio
async def test_history_failure_keeps_previous_sequence(provider, chain):
    explorer = FakeExplorer({"status": "1", "message": "OK", "result": [explorer_tx()]})
    session = WalletSession(provider, chain, history=HistoryFetcher(explorer=explorer))
    await session.connect()
    before = session.state.transactions

    explorer.payload = {"status": "0", "message": "NOTOK", "result": "Max rate limit reached"}
    await session.refresh_history()

    assert session.state.transactions == before
    assert session.state.error is None

    await session.close()


@pytest.mark.asyncio
async def test_observers_receive_snapshots_and_can_unsubscribe(session):
    seen = []
    unsubscribe = session.on_change(lambda state: seen.append(state.connection))

    await session.connect()
    unsubscribe()
    count = len(seen)
    await session.refresh_balance()

    assert ConnectionState.CONNECTED in seen
    assert len(seen) == count

    await session.close()


@pytest.mark.asyncio
async def test_stale_balance_response_is_discarded(chain):
    class SlowFirstProvider(FakeWalletProvider):
        def __init__(self):
            super().__init__()
            self.release_first = asyncio.Event()
            self._balance_calls = 0

        async def request(self, method, params=None):
            if method == "eth_getBalance":
                self._balance_calls += 1
                if self._balance_calls == 1:
                    await self.release_first.wait()
                    return hex(5 * 10**18)
            return await super().request(method, params)

    provider = SlowFirstProvider()
    session = WalletSession(provider, chain, history=HistoryFetcher(explorer=FakeExplorer()))
    session.update_state(account=ACCOUNT)

    older = asyncio.create_task(session.refresh_balance())
    await asyncio.sleep(0)
    assert await session.refresh_balance() == "1.0000"

    provider.release_first.set()
    assert await older is None
    assert session.state.balance == "1.0000"


@pytest.mark.asyncio
async def test_connected_account_is_bound_to_log_context(session, provider):
    await session.connect()
    assert structlog.contextvars.get_contextvars()["wallet_account"] == ACCOUNT

    await provider.emit(ACCOUNTS_CHANGED, [OTHER_ACCOUNT])
    assert structlog.contextvars.get_contextvars()["wallet_account"] == OTHER_ACCOUNT

    await provider.emit(ACCOUNTS_CHANGED, [])
    assert "wallet_account" not in structlog.contextvars.get_contextvars()

    await session.close()
