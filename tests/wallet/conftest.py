import pytest

from opbnb_wallet.core.wallet import HistoryFetcher, WalletSession
from opbnb_wallet.services.chains import get_chain_config

from tests.wallet.fakes import FakeExplorer, FakeWalletProvider, explorer_tx


@pytest.fixture
def chain():
    return get_chain_config()


@pytest.fixture
def provider():
    return FakeWalletProvider()


@pytest.fixture
def explorer():
    return FakeExplorer({"status": "1", "message": "OK", "result": [explorer_tx()]})


@pytest.fixture
def session(provider, explorer, chain):
    return WalletSession(
        provider,
        chain,
        history=HistoryFetcher(explorer=explorer),
        poll_interval_seconds=3600,
    )
