"""
Node adapter exceptions.

Closed hierarchy: every failure the adapter raises is one of
TransportError, DecodeError, RPCError or ValidationError.
"""

from typing import Any, Optional


# Bitcoin Core RPC error codes (src/rpc/protocol.h)
RPC_MISC_ERROR = -1
RPC_TYPE_ERROR = -3
RPC_INVALID_ADDRESS_OR_KEY = -5
RPC_INVALID_PARAMETER = -8
RPC_DESERIALIZATION_ERROR = -22
RPC_VERIFY_ERROR = -25
RPC_VERIFY_REJECTED = -26
RPC_VERIFY_ALREADY_IN_CHAIN = -27
RPC_IN_WARMUP = -28
RPC_METHOD_NOT_FOUND = -32601


class NodeAdapterError(Exception):
    """Base exception for all node adapter errors."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.method = method
        self.original_error = original_error

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "method": self.method,
            "original_error": str(self.original_error) if self.original_error else None,
        }

    def __str__(self) -> str:
        parts = [self.message]
        if self.method:
            parts.append(f"[method={self.method}]")
        if self.original_error:
            parts.append(f"(caused by: {self.original_error})")
        return " ".join(parts)


class TransportError(NodeAdapterError):
    """Network or I/O failure talking to the node."""


class DecodeError(NodeAdapterError):
    """Response body could not be decoded into an RPC envelope."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, method, original_error)
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class RPCError(NodeAdapterError):
    """Domain error reported by the node. Match on `code`."""

    def __init__(self, code: int, message: str, method: Optional[str] = None) -> None:
        super().__init__(message, method)
        self.code = code

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["code"] = self.code
        return data

    def __str__(self) -> str:
        return f"RPC ERROR Bitcoin {self.code} {self.message}"


class ValidationError(NodeAdapterError):
    """Node answered, but the answer is not acceptable."""
