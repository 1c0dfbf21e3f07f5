"""
Custom domain exceptions for consistent error handling.

These exceptions are mapped to HTTP status codes by the global exception handler
in main.py.
"""
from fastapi import HTTPException, status

from domain.constants import MAX_MEMO_BYTES
from domain.enums import TipErrorCode


class DomainError(HTTPException):
    """Base class for all domain-specific errors."""
    code: str | None = None

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, details: dict | None = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.details = details or {}


class ValidationError(DomainError):
    """Validation error (400)."""
    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        if field:
            message = f"Validation error on {field}: {message}"
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class PermissionDeniedError(DomainError):
    """Permission denied (403)."""
    def __init__(self, message: str = "Permission denied", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN, details=details)


class UnauthorizedError(DomainError):
    """Unauthorized access (401)."""
    def __init__(self, message: str = "Unauthorized", details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED, details=details)


class TipPendingError(DomainError):
    """
    Tip submitted to the ledger but not seen confirmed (504).

    details.txId identifies the group; resending would risk a double tip.
    """
    code = "TransferUnconfirmed"

    def __init__(self, tx_id: str):
        super().__init__(
            "Tip submitted but not yet confirmed. Check txId before retrying.",
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            details={"txId": tx_id},
        )


# ── Tip errors (stable wire codes) ──────────────────────────────────


class TipError(DomainError):
    """Base class for the four tip error kinds. `code` is the wire identifier."""
    code: str = ""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, details=details)


class InvalidAmountError(TipError):
    code = TipErrorCode.INVALID_AMOUNT.value

    def __init__(self, message: str = "Tip amount must be greater than 0", details: dict | None = None):
        super().__init__(message, details=details)


class MathOverflowError(TipError):
    code = TipErrorCode.MATH_OVERFLOW.value

    def __init__(self, message: str = "Math operation overflow", details: dict | None = None):
        super().__init__(message, details=details)


class InvalidPlatformWalletError(TipError):
    code = TipErrorCode.INVALID_PLATFORM_WALLET.value

    def __init__(self, message: str = "Invalid platform wallet", details: dict | None = None):
        super().__init__(message, details=details)


class MemoTooLongError(TipError):
    code = TipErrorCode.MEMO_TOO_LONG.value

    def __init__(self, message: str = f"Memo is too long (max {MAX_MEMO_BYTES} bytes)", details: dict | None = None):
        super().__init__(message, details=details)
