"""
Domain enums (minimal set used for clarity in services).
"""

from enum import Enum


class TipErrorCode(str, Enum):
    """Stable wire-level identifiers surfaced to callers."""
    INVALID_AMOUNT = "InvalidAmount"
    MATH_OVERFLOW = "MathOverflow"
    INVALID_PLATFORM_WALLET = "InvalidPlatformWallet"
    MEMO_TOO_LONG = "MemoTooLong"


class MemoFlowState(str, Enum):
    VALIDATING = "VALIDATING"
    BASE_TIP_EXECUTING = "BASE_TIP_EXECUTING"
    MEMO_EVENT_EMITTING = "MEMO_EVENT_EMITTING"
    DONE = "DONE"
    ABORTED = "ABORTED"
