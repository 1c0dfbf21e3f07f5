"""
Tip endpoints — send a tip, send a tip with memo, preview the fee split.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from deps import payer_authorization, tip_service
from domain.constants import U64_MAX
from domain.errors import DomainError, TipPendingError
from domain.responses import TIP_ERROR_RESPONSES, StandardSuccessResponse, success_response
from domain.tips import PaymentAuthorization, TipReceipt, TipRequest
from exceptions import TransferUnconfirmedError
from models import (
    FeeSplitResponse,
    SendTipRequest,
    SendTipWithMemoRequest,
    TipReceiptResponse,
)
from services.async_executor import run_blocking
from services.tip_service import TipService
from services.transfer_service import classify_transfer_error
from utils.validators import validate_algorand_address

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tips"])


def _tip_request(req: SendTipRequest, authorization: PaymentAuthorization) -> TipRequest:
    validate_algorand_address(req.creator, field="creator")
    return TipRequest(
        payer=authorization.payer,
        creator=req.creator,
        treasury=req.platform_wallet,
        amount=req.amount,
    )


async def _run(func, *args) -> TipReceipt:
    """Run a tip call off the event loop and map ledger failures to HTTP errors."""
    try:
        return await run_blocking(func, *args)
    except DomainError:
        raise
    except TransferUnconfirmedError as e:
        raise TipPendingError(e.tx_id)
    except Exception as e:
        code, detail = classify_transfer_error(e)
        logger.error(f"Tip transfer failed: {type(e).__name__}: {e}")
        raise HTTPException(status_code=code, detail=detail)


@router.post("/tips", response_model=StandardSuccessResponse[TipReceiptResponse], responses=TIP_ERROR_RESPONSES)
async def send_tip(
    req: SendTipRequest,
    authorization: PaymentAuthorization = Depends(payer_authorization),
    service: TipService = Depends(tip_service),
):
    """Tip a creator. 3% goes to the platform wallet, the rest to the creator."""
    request = _tip_request(req, authorization)
    receipt = await _run(service.send_tip, request, authorization)
    return success_response(TipReceiptResponse.from_receipt(receipt).model_dump(by_alias=True))


@router.post("/tips/memo", response_model=StandardSuccessResponse[TipReceiptResponse], responses=TIP_ERROR_RESPONSES)
async def send_tip_with_memo(
    req: SendTipWithMemoRequest,
    authorization: PaymentAuthorization = Depends(payer_authorization),
    service: TipService = Depends(tip_service),
):
    """Tip a creator and publish a memo audit event alongside it."""
    request = _tip_request(req, authorization)
    receipt = await _run(service.send_tip_with_memo, request, authorization, req.memo)
    return success_response(TipReceiptResponse.from_receipt(receipt).model_dump(by_alias=True))


@router.get("/tips/fee-preview")
async def fee_preview(
    amount: int = Query(..., ge=0, le=U64_MAX, description="Total tip in microAlgos"),
    service: TipService = Depends(tip_service),
):
    """Show how an amount would be split. Moves no value."""
    split = service.preview(amount)
    return success_response(
        FeeSplitResponse.from_split(split).model_dump(by_alias=True),
        meta={"platformWallet": service.treasury},
    )


@router.get("/tips/metrics")
async def tip_metrics(service: TipService = Depends(tip_service)):
    """In-memory tip counters since process start."""
    return success_response(service.metrics.to_dict(), meta={"ledger": service.ledger.backend})
