"""
Transfer service — issues the two tip legs inside one atomic ledger unit.

Leg order is fixed: payer → treasury (platform fee), then payer → creator.
No compensating rollback happens here; the ledger unit is all-or-nothing and
any primitive failure propagates unchanged.
"""
import logging

from domain.tips import FeeSplit, PaymentAuthorization
from exceptions import (
    AlgorandNodeError,
    InsufficientBalanceError,
    TransactionValidationError,
    TransferUnconfirmedError,
)
from services.ledger import TransferLedger

logger = logging.getLogger(__name__)


def execute_split(
    ledger: TransferLedger,
    split: FeeSplit,
    *,
    payer: str,
    creator: str,
    treasury: str,
    authorization: PaymentAuthorization,
) -> str:
    """
    Move the fee and the creator share from payer in one unit.

    Returns:
        Transaction ID assigned by the ledger
    """
    logger.debug(
        f"Issuing tip legs: fee={split.platform_fee} → {treasury[:8]}..., "
        f"creator={split.creator_amount} → {creator[:8]}..."
    )
    with ledger.atomic(authorization) as unit:
        unit.transfer(payer, treasury, split.platform_fee)
        unit.transfer(payer, creator, split.creator_amount)

    return unit.tx_id


def classify_transfer_error(error: Exception) -> tuple[int, str]:
    """
    Classify a ledger error into HTTP status code and user-friendly message.

    Returns:
        Tuple of (status_code, detail_message)
    """
    if isinstance(error, TransferUnconfirmedError):
        return 504, f"Tip submitted but not yet confirmed (txId={error.tx_id}). Do not resend."
    if isinstance(error, InsufficientBalanceError):
        return 400, "Insufficient balance for this tip"
    if isinstance(error, TransactionValidationError):
        return 400, f"Transfer rejected: {error}"

    lower = str(error).lower()

    if "insufficient balance" in lower or "overspend" in lower or "below min" in lower:
        return 400, "Insufficient balance for this tip"
    elif "invalid signature" in lower:
        return 400, "Invalid transaction signature"
    elif "already in ledger" in lower:
        return 409, "Transaction already submitted"
    elif "transaction pool" in lower and "full" in lower:
        return 503, "Network busy — transaction pool full. Try again shortly."
    elif isinstance(error, AlgorandNodeError):
        return 502, "Payment group rejected by the network"
    else:
        return 500, "Tip transfer failed"
