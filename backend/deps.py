"""
Shared FastAPI dependencies.

Routers import the tip service and the payer credential from here so tests
can swap them with app.dependency_overrides.
"""

from __future__ import annotations

from fastapi import Depends

from domain.errors import PermissionDeniedError
from domain.tips import PaymentAuthorization
from middleware.auth import require_authenticated_wallet
from services import signer_service
from services.tip_service import TipService, get_tip_service


def tip_service() -> TipService:
    return get_tip_service()


async def payer_authorization(
    wallet: str = Depends(require_authenticated_wallet),
    service: TipService = Depends(tip_service),
) -> PaymentAuthorization:
    """
    Build the payer credential for the authenticated wallet.

    The Algorand ledger signs the payment group, so it needs the payer's key;
    the in-memory ledger does not.
    """
    if service.ledger.backend == "memory":
        return PaymentAuthorization(payer=wallet)

    signing_key = signer_service.resolve_signing_key(wallet)
    if signing_key is None:
        raise PermissionDeniedError(
            "No server-side signing key for this wallet. Sign the payment group client-side.",
        )
    return PaymentAuthorization(payer=wallet, signing_key=signing_key)
