"""
Wallet session core for a browser-style (EIP-1193) wallet.

Components:
- NetworkGuard: keeps the wallet on the required chain
- WalletSession: connection lifecycle, provider events, shared state
- BalanceTracker / BalancePoller: native balance and its 30s refresh
- validate_transfer: local pre-submission checks
- TransferExecutor: transfer lifecycle from validation to confirmation
- HistoryFetcher: recent transactions from the block explorer
"""

from .balance import BalancePoller, BalanceTracker
from .errors import (
    BalanceError,
    BalanceErrorKind,
    ConnectError,
    FetchError,
    NetworkError,
    NetworkErrorKind,
    NoProviderError,
    SubmissionError,
    SubmissionErrorKind,
    ValidationError,
    ValidationErrorKind,
    WalletError,
    WrongNetworkError,
)
from .executor import TransferExecutor
from .history import HistoryFetcher
from .models import (
    BALANCE_ERROR,
    BALANCE_ZERO,
    ConnectionState,
    SessionState,
    TransactionRecord,
    TransferRequest,
    TransferState,
    TransferStatus,
)
from .network_guard import NetworkGuard
from .session import WalletSession
from .signer import PendingTransaction, ProviderSigner, ReceiptPoller, Signer
from .validator import validate_transfer

__all__ = [
    "BALANCE_ERROR",
    "BALANCE_ZERO",
    "BalanceError",
    "BalanceErrorKind",
    "BalancePoller",
    "BalanceTracker",
    "ConnectError",
    "ConnectionState",
    "FetchError",
    "HistoryFetcher",
    "NetworkError",
    "NetworkErrorKind",
    "NetworkGuard",
    "NoProviderError",
    "PendingTransaction",
    "ProviderSigner",
    "ReceiptPoller",
    "SessionState",
    "Signer",
    "SubmissionError",
    "SubmissionErrorKind",
    "TransactionRecord",
    "TransferExecutor",
    "TransferRequest",
    "TransferState",
    "TransferStatus",
    "ValidationError",
    "ValidationErrorKind",
    "WalletError",
    "WalletSession",
    "WrongNetworkError",
    "validate_transfer",
]
