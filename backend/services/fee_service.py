"""
Fee service — pure 3% platform fee split.

platform_fee = floor(amount * 300 / 10000), multiply first, truncating.
The multiplication is checked against the u64 range instead of relying on
Python's unbounded ints, so the same amounts that overflow on-chain fail here.
"""
from domain.constants import BPS_DENOMINATOR, PLATFORM_FEE_BPS, U64_MAX
from domain.errors import InvalidAmountError, MathOverflowError
from domain.tips import FeeSplit


def _checked_mul(a: int, b: int) -> int:
    product = a * b
    if product > U64_MAX:
        raise MathOverflowError(details={"amount": str(a)})
    return product


def calculate_fee_split(amount: int) -> FeeSplit:
    """
    Split a tip into platform fee and creator amount.

    Args:
        amount: Total tip in minimal value units

    Returns:
        FeeSplit with platform_fee + creator_amount == amount

    Raises:
        MathOverflowError: amount * 300 exceeds u64
        InvalidAmountError: creator share would be zero
    """
    platform_fee = _checked_mul(amount, PLATFORM_FEE_BPS) // BPS_DENOMINATOR
    creator_amount = amount - platform_fee

    if creator_amount <= 0:
        raise InvalidAmountError(details={"amount": str(amount)})

    return FeeSplit(
        total=amount,
        platform_fee=platform_fee,
        creator_amount=creator_amount,
    )
