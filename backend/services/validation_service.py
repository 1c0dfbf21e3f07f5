"""
Validation guard — preconditions checked before any value moves.

Order matters: authorization, then treasury identity, then amount. A wrong
treasury fails with InvalidPlatformWallet whatever the amount is.
"""
import hmac
import logging

from domain.constants import MAX_MEMO_BYTES, U64_MAX
from domain.errors import (
    InvalidAmountError,
    InvalidPlatformWalletError,
    MemoTooLongError,
    UnauthorizedError,
)
from domain.tips import PaymentAuthorization, TipRequest

logger = logging.getLogger(__name__)


def require_authorization(authorization: PaymentAuthorization | None, payer: str) -> None:
    """The core never proceeds without a credential for this exact payer."""
    if authorization is None:
        raise UnauthorizedError("Payer authorization is required to send a tip.")
    if authorization.payer != payer:
        logger.warning(
            f"Authorization mismatch: credential for {authorization.payer[:8]}... "
            f"used for payer {payer[:8]}..."
        )
        raise UnauthorizedError("Authorization does not belong to the paying wallet.")


def validate_platform_wallet(supplied: str, expected: str) -> None:
    """Supplied treasury must equal the configured one, byte for byte."""
    if not isinstance(supplied, str) or not hmac.compare_digest(
        supplied.encode("utf-8"), expected.encode("utf-8")
    ):
        raise InvalidPlatformWalletError(details={"platform_wallet": str(supplied)})


def validate_amount(amount: int) -> None:
    # bool is an int subclass; True is not a tip amount
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError("Tip amount must be an integer", details={"amount": repr(amount)})
    if amount < 0 or amount > U64_MAX:
        raise InvalidAmountError(
            "Tip amount must be an unsigned 64-bit integer",
            details={"amount": str(amount)},
        )
    if amount == 0:
        raise InvalidAmountError(details={"amount": "0"})


def validate_memo(memo: str) -> None:
    size = len(memo.encode("utf-8"))
    if size > MAX_MEMO_BYTES:
        raise MemoTooLongError(details={"memo_bytes": size, "max_bytes": MAX_MEMO_BYTES})


def validate_tip_request(
    request: TipRequest,
    authorization: PaymentAuthorization | None,
    treasury: str,
) -> None:
    """Run every base-tip check. Raises on the first failure."""
    require_authorization(authorization, request.payer)
    validate_platform_wallet(request.treasury, treasury)
    validate_amount(request.amount)
