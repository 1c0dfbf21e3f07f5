"""
Simulation endpoints — fund wallets and inspect the in-memory ledger.

Registered only when SIMULATION_MODE is on, and double-guarded per request.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from config import settings
from deps import tip_service
from domain.responses import success_response
from models import BalanceResponse, FundWalletRequest
from services.ledger import InMemoryLedger
from services.tip_service import TipService, recent_events
from utils.validators import validate_algorand_address, validated_wallet

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/simulate", tags=["simulation"])


def _memory_ledger(service: TipService) -> InMemoryLedger:
    if not settings.simulation_mode or settings.environment == "production":
        raise HTTPException(status_code=403, detail="Simulation endpoints are disabled")
    if not isinstance(service.ledger, InMemoryLedger):
        raise HTTPException(status_code=409, detail="Tip service is not using the in-memory ledger")
    return service.ledger


@router.post("/fund-wallet")
async def simulate_fund_wallet(
    req: FundWalletRequest,
    service: TipService = Depends(tip_service),
):
    """Credit a wallet so it can send tips on the in-memory ledger."""
    ledger = _memory_ledger(service)
    wallet = validate_algorand_address(req.wallet_address, field="walletAddress")
    balance = ledger.fund(wallet, req.amount)
    return success_response(
        BalanceResponse(wallet_address=wallet, balance=balance).model_dump(by_alias=True)
    )


@router.get("/balance/{wallet}")
async def simulate_balance(
    wallet: str = Depends(validated_wallet),
    service: TipService = Depends(tip_service),
):
    ledger = _memory_ledger(service)
    return success_response(
        BalanceResponse(wallet_address=wallet, balance=ledger.balance_of(wallet)).model_dump(by_alias=True)
    )


@router.get("/events")
async def simulate_recent_events(
    limit: int = Query(50, ge=1, le=200),
    service: TipService = Depends(tip_service),
):
    """Most recent audit events seen by this process (not persisted)."""
    _memory_ledger(service)
    events = [e.to_dict() for e in recent_events.events[-limit:]]
    return success_response(events, meta={"count": len(events)})
