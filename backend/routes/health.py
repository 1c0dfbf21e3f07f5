"""
Health check endpoint.
"""
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from config import settings
from deps import tip_service
from services.tip_service import TipService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(service: TipService = Depends(tip_service)):
    """Health check — reports the ledger backend and whether it is reachable."""
    body = {
        "ledger": service.ledger.backend,
        "platform_wallet": service.treasury,
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if service.ledger.is_healthy():
        return {"status": "healthy", "ledger_connected": True, **body}

    logger.error(f"Health check failed: ledger '{service.ledger.backend}' unreachable")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unhealthy", "ledger_connected": False, **body},
    )
