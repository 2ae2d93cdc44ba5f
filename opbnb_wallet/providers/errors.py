"""
Errors raised by wallet providers.

Codes follow EIP-1193 / EIP-1474 so that injected wallets and the
node-backed provider report failures the same way.
"""

from typing import Any, Optional


USER_REJECTED = 4001
UNAUTHORIZED = 4100
UNSUPPORTED_METHOD = 4200
DISCONNECTED = 4900
CHAIN_DISCONNECTED = 4901
UNRECOGNIZED_CHAIN = 4902
INTERNAL_ERROR = -32603


class ProviderRpcError(Exception):
    """A provider ``request`` failed."""

    def __init__(self, code: int, message: str, data: Optional[Any] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    @property
    def is_user_rejection(self) -> bool:
        return self.code == USER_REJECTED

    @property
    def is_unrecognized_chain(self) -> bool:
        return self.code == UNRECOGNIZED_CHAIN

    @classmethod
    def from_rpc_error(cls, error: Any) -> "ProviderRpcError":
        """Build from a JSON-RPC ``error`` member."""
        if isinstance(error, dict):
            return cls(
                code=int(error.get("code", INTERNAL_ERROR)),
                message=str(error.get("message") or "RPC error"),
                data=error.get("data"),
            )
        return cls(code=INTERNAL_ERROR, message=str(error))

    def __repr__(self) -> str:
        return f"ProviderRpcError(code={self.code}, message={self.message!r})"
