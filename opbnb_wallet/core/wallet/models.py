"""
Wallet session models and types.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .errors import WalletError

BALANCE_ZERO = "0"
BALANCE_ERROR = "Error"


class ConnectionState(str, Enum):
    """Whether the wallet has granted account access."""
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class TransferStatus(str, Enum):
    """Transfer lifecycle status."""
    IDLE = "idle"
    VALIDATING = "validating"
    AWAITING_WALLET_CONFIRMATION = "awaiting_wallet_confirmation"
    SUBMITTED = "submitted"      # Hash known, waiting for the chain
    CONFIRMED = "confirmed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({TransferStatus.CONFIRMED, TransferStatus.FAILED})
SUBMITTABLE_STATUSES = frozenset({TransferStatus.IDLE, *TERMINAL_STATUSES})


@dataclass(frozen=True)
class TransferRequest:
    """User-supplied transfer inputs, exactly as typed."""
    recipient: str = ""
    amount_smallest_unit: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.recipient and not self.amount_smallest_unit


@dataclass(frozen=True)
class TransferState:
    """Snapshot of the single in-flight (or last finished) transfer."""
    status: TransferStatus = TransferStatus.IDLE
    message: str = ""
    tx_hash: Optional[str] = None
    reason: Optional[str] = None            # Failure reason, set when FAILED
    error: Optional[WalletError] = None

    @property
    def is_final(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def can_submit(self) -> bool:
        return self.status in SUBMITTABLE_STATUSES


@dataclass(frozen=True)
class TransactionRecord:
    """A confirmed transaction as listed by the explorer."""
    hash: str
    from_address: str
    to_address: Optional[str]               # None for contract creation
    value: int                              # Smallest units
    timestamp: Optional[int] = None         # Epoch seconds

    @property
    def is_contract_creation(self) -> bool:
        return self.to_address is None

    @classmethod
    def from_explorer(cls, data: Dict[str, Any]) -> "TransactionRecord":
        """Create a record from an explorer ``txlist`` entry.

        Raises ``KeyError``/``ValueError``/``TypeError`` on malformed entries.
        """
        raw_time = data.get("timeStamp")
        return cls(
            hash=str(data["hash"]),
            from_address=str(data["from"]),
            to_address=data.get("to") or None,
            value=int(str(data["value"]), 10),
            timestamp=int(str(raw_time), 10) if raw_time not in (None, "") else None,
        )


@dataclass(frozen=True)
class SessionState:
    """Everything the presentation layer renders, replaced wholesale on change."""
    connection: ConnectionState = ConnectionState.DISCONNECTED
    account: str = ""
    balance: str = BALANCE_ZERO
    error: Optional[str] = None
    network_error: Optional[str] = None
    transfer: TransferState = field(default_factory=TransferState)
    form: TransferRequest = field(default_factory=TransferRequest)
    transactions: Tuple[TransactionRecord, ...] = ()

    @property
    def connected(self) -> bool:
        return self.connection == ConnectionState.CONNECTED

    def evolve(self, **changes: Any) -> "SessionState":
        return replace(self, **changes)
