"""
Response envelopes shared by every endpoint.

- Success: { "success": true, "data": <payload>, "meta": {...} }
- Error:   { "success": false, "error": { "code": "...", "message": "...", "details": {...} } }

Tip errors put their stable wire identifier in error.code.
"""
from typing import Any, Generic, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorDetail(BaseModel):
    code: str = Field(..., description="InvalidAmount, MathOverflow, InvalidPlatformWallet, MemoTooLong, or a generic code such as http_error")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(default=None, description="Additional error context")


class StandardErrorResponse(BaseModel):
    success: bool = Field(False, description="Always false for errors")
    error: ErrorDetail


class StandardSuccessResponse(BaseModel, Generic[T]):
    success: bool = Field(True, description="Always true for success")
    data: T
    meta: dict[str, Any] | None = Field(default=None, description="Optional metadata")


# OpenAPI documentation for routes that run the tip core
TIP_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": StandardErrorResponse, "description": "Tip rejected (see error.code) or transfer refused"},
    401: {"model": StandardErrorResponse, "description": "No payer credential"},
    403: {"model": StandardErrorResponse, "description": "Payer cannot sign on this ledger"},
    502: {"model": StandardErrorResponse, "description": "Ledger node rejected the payment group"},
    504: {"model": StandardErrorResponse, "description": "Payment group submitted but not confirmed; details.txId, do not resend"},
}


def success_response(data: Any, meta: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Wrap a payload in the success envelope.

    meta is omitted when empty.
    """
    response = {"success": True, "data": data}
    if meta:
        response["meta"] = meta
    return response


def error_response(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    envelope = StandardErrorResponse(error=ErrorDetail(code=code, message=message, details=details))
    return envelope.model_dump(exclude_none=True)
