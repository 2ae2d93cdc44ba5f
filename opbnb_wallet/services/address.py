"""Helpers for validating and normalizing wallet addresses."""

from __future__ import annotations

import re
from functools import lru_cache

from eth_utils import is_address, is_checksum_address

_EVM_ADDRESS_RE = re.compile(r"(0x)?[a-fA-F0-9]{40}")


@lru_cache(maxsize=256)
def is_valid_evm_address(address: str) -> bool:
    """Return True for a well-formed EVM address.

    All-lowercase and all-uppercase hex are accepted as is; mixed case must
    carry a valid EIP-55 checksum.
    """
    if not isinstance(address, str) or not _EVM_ADDRESS_RE.fullmatch(address):
        return False
    body = address[2:] if address.startswith("0x") else address
    if body != body.lower() and body != body.upper():
        return is_checksum_address(f"0x{body}")
    return is_address(address)


def normalize_address(address: str) -> str:
    """Lowercase, 0x-prefixed form used for comparisons."""
    value = address.strip().lower()
    if not value.startswith("0x"):
        value = f"0x{value}"
    return value


def same_address(a: str | None, b: str | None) -> bool:
    if not a or not b:
        return False
    return normalize_address(a) == normalize_address(b)


__all__ = ["is_valid_evm_address", "normalize_address", "same_address"]
