"""
Wallet error taxonomy.

Every error carries a short ``message`` that is safe to show to the user and
a ``kind`` naming the failure. Raw provider payloads stay on ``cause``.
"""

from enum import Enum
from typing import Optional


class NetworkErrorKind(str, Enum):
    MISMATCH = "mismatch"
    SWITCH_FAILED = "switch_failed"


class ValidationErrorKind(str, Enum):
    INVALID_RECIPIENT = "invalid_recipient"
    INVALID_AMOUNT = "invalid_amount"
    AMOUNT_NOT_POSITIVE = "amount_not_positive"
    INSUFFICIENT_BALANCE = "insufficient_balance"


class SubmissionErrorKind(str, Enum):
    USER_REJECTED = "user_rejected"
    NODE_ERROR = "node_error"
    REVERTED = "reverted"
    IN_PROGRESS = "in_progress"
    NOT_CONNECTED = "not_connected"


class BalanceErrorKind(str, Enum):
    WRONG_NETWORK = "wrong_network"
    QUERY_FAILED = "query_failed"


class WalletError(Exception):
    """Base class for wallet session errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class NoProviderError(WalletError):
    """No wallet capability is available."""

    def __init__(self, message: str = "No wallet found! Please install MetaMask."):
        super().__init__(message)


class ConnectError(WalletError):
    """Account access was not granted."""


class NetworkError(WalletError):
    """The wallet is on, or could not be moved to, the wrong network."""

    def __init__(
        self,
        message: str,
        kind: NetworkErrorKind = NetworkErrorKind.SWITCH_FAILED,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.kind = kind


class ValidationError(WalletError):
    """A transfer request was rejected before reaching the wallet."""

    MESSAGES = {
        ValidationErrorKind.INVALID_RECIPIENT: "Invalid recipient address",
        ValidationErrorKind.INVALID_AMOUNT: "Invalid amount",
        ValidationErrorKind.AMOUNT_NOT_POSITIVE: "Amount must be greater than 0",
        ValidationErrorKind.INSUFFICIENT_BALANCE: "Insufficient balance",
    }

    def __init__(self, kind: ValidationErrorKind, message: Optional[str] = None):
        super().__init__(message or self.MESSAGES[kind])
        self.kind = kind


class SubmissionError(WalletError):
    """Sending or confirming a transfer failed."""

    def __init__(
        self,
        message: str,
        kind: SubmissionErrorKind = SubmissionErrorKind.NODE_ERROR,
        cause: Optional[BaseException] = None,
        tx_hash: Optional[str] = None,
    ):
        super().__init__(message, cause)
        self.kind = kind
        self.tx_hash = tx_hash


class BalanceError(WalletError):
    """Balance could not be read for the active account."""

    def __init__(
        self,
        message: str,
        kind: BalanceErrorKind = BalanceErrorKind.QUERY_FAILED,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.kind = kind


class WrongNetworkError(BalanceError):
    """The wallet is connected to a network other than the required one."""

    def __init__(self, message: str, chain_id: Optional[int] = None):
        super().__init__(message, kind=BalanceErrorKind.WRONG_NETWORK)
        self.chain_id = chain_id


class FetchError(WalletError):
    """Transaction history could not be fetched."""
