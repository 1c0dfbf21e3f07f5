"""
Input validation utilities for wallet addresses.

The tip core compares the treasury by exact equality and lets the ledger
reject bad destinations; these checks give API callers an early 400 instead.
"""
from fastapi import Path
from algosdk import encoding

from domain.errors import ValidationError

ALGORAND_ADDRESS_LENGTH = 58


def validate_algorand_address(address: str, field: str = "wallet") -> str:
    """
    Validate an Algorand address format and checksum.

    Returns:
        The validated address (unchanged)

    Raises:
        ValidationError (400) if the address is invalid
    """
    if not address:
        raise ValidationError("address is required", field=field)

    if len(address) != ALGORAND_ADDRESS_LENGTH:
        raise ValidationError(
            f"expected {ALGORAND_ADDRESS_LENGTH} characters, got {len(address)}",
            field=field,
        )

    if not encoding.is_valid_address(address):
        raise ValidationError(f"bad address checksum: {address[:12]}...", field=field)

    return address


def validated_wallet(wallet: str = Path(..., description="Algorand wallet address")) -> str:
    """FastAPI dependency for validating wallet path parameters."""
    return validate_algorand_address(wallet)
