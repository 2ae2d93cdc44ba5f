"""opBNB Testnet wallet session core."""

from .core.wallet import TransferExecutor, WalletSession

__version__ = "0.1.0"

__all__ = ["TransferExecutor", "WalletSession", "__version__"]
