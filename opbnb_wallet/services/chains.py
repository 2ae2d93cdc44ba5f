"""
Definition of the single network this wallet operates on.

The configuration is immutable and shared process-wide; ``get_chain_config``
fills in the RPC credential from settings once and caches the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional

from ..config import Settings, settings as default_settings


@dataclass(frozen=True)
class NativeCurrency:
    """Metadata of a chain's native currency."""
    name: str
    symbol: str
    decimals: int


@dataclass(frozen=True)
class ChainConfig:
    """The network the wallet must be on."""
    chain_id: int
    display_name: str
    native_currency: NativeCurrency
    rpc_url: str
    explorer_url: str

    @property
    def chain_id_hex(self) -> str:
        return hex(self.chain_id)

    def matches(self, chain_id: Any) -> bool:
        """Return ``True`` if *chain_id* (int, hex or decimal string) is this chain."""
        parsed = parse_chain_id(chain_id)
        return parsed is not None and parsed == self.chain_id

    def tx_url(self, tx_hash: str) -> str:
        """Explorer page for a transaction."""
        return f"{self.explorer_url.rstrip('/')}/tx/{tx_hash}"

    def to_add_chain_params(self) -> Dict[str, Any]:
        """Payload for ``wallet_addEthereumChain`` (EIP-3085)."""
        explorer = self.explorer_url if self.explorer_url.endswith("/") else f"{self.explorer_url}/"
        return {
            "chainId": self.chain_id_hex,
            "chainName": self.display_name,
            "nativeCurrency": {
                "name": self.native_currency.name,
                "symbol": self.native_currency.symbol,
                "decimals": self.native_currency.decimals,
            },
            "rpcUrls": [self.rpc_url],
            "blockExplorerUrls": [explorer],
        }


OPBNB_TESTNET_CHAIN_ID = 5611
OPBNB_TESTNET_RPC_TEMPLATE = "https://opbnb-testnet.infura.io/v3/{key}"
OPBNB_TESTNET_EXPLORER = "https://testnet.opbnbscan.com/"


def parse_chain_id(value: Any) -> Optional[int]:
    """Normalize a chain id reported by a wallet or node.

    Wallets report ``"0x15eb"``, nodes sometimes a decimal string and
    configuration code an int. Returns ``None`` when the value is not a chain id.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip().lower()
    try:
        if text.startswith("0x"):
            return int(text, 16)
        return int(text, 10)
    except ValueError:
        return None


def build_opbnb_testnet(cfg: Settings) -> ChainConfig:
    return ChainConfig(
        chain_id=OPBNB_TESTNET_CHAIN_ID,
        display_name="opBNB Testnet",
        native_currency=NativeCurrency(name="tBNB", symbol="tBNB", decimals=18),
        rpc_url=OPBNB_TESTNET_RPC_TEMPLATE.format(key=cfg.rpc_api_key),
        explorer_url=OPBNB_TESTNET_EXPLORER,
    )


@lru_cache(maxsize=1)
def get_chain_config() -> ChainConfig:
    """Return the required network, built from the global settings."""
    return build_opbnb_testnet(default_settings)


__all__ = [
    "ChainConfig",
    "NativeCurrency",
    "OPBNB_TESTNET_CHAIN_ID",
    "build_opbnb_testnet",
    "get_chain_config",
    "parse_chain_id",
]
