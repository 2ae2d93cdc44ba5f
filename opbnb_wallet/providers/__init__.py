from .base import ACCOUNTS_CHANGED, CHAIN_CHANGED, EventEmitter, WalletProvider
from .errors import ProviderRpcError
from .explorer import ExplorerError, ExplorerProvider
from .rpc import JsonRpcClient, RpcWalletProvider

__all__ = [
    "ACCOUNTS_CHANGED",
    "CHAIN_CHANGED",
    "EventEmitter",
    "ExplorerError",
    "ExplorerProvider",
    "JsonRpcClient",
    "ProviderRpcError",
    "RpcWalletProvider",
    "WalletProvider",
]
