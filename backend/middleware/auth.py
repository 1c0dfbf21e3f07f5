"""
Payer authentication helpers.

Verifying who is paying is an upstream concern; this module only turns a
request credential into the paying wallet:

  - Authorization: Bearer <jwt>  (HS256, scope "tips:send", sub = payer wallet)
  - X-Wallet-Address: <wallet>   (legacy; development only, not secure)
"""
import logging
from datetime import datetime, timezone, timedelta
from fastapi import HTTPException, Header
from typing import Optional

import jwt

from config import settings

logger = logging.getLogger(__name__)

TOKEN_SCOPE = "tips:send"


def _signing_secret() -> str:
    if not settings.jwt_secret:
        raise HTTPException(
            status_code=500,
            detail="Server auth misconfigured (JWT secret missing).",
        )
    return settings.jwt_secret


def _parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def issue_access_token(*, wallet_address: str, ttl_minutes: Optional[int] = None) -> str:
    """Short-lived token naming the wallet allowed to pay tips."""
    issued = datetime.now(timezone.utc).replace(microsecond=0)
    ttl = timedelta(minutes=ttl_minutes if ttl_minutes is not None else settings.jwt_access_ttl_minutes)
    claims = {
        "iss": settings.jwt_issuer,
        "sub": wallet_address,
        "scope": TOKEN_SCOPE,
        "iat": int(issued.timestamp()),
        "exp": int((issued + ttl).timestamp()),
    }
    return jwt.encode(claims, _signing_secret(), algorithm="HS256")


def decode_access_token(token: str) -> dict:
    try:
        claims = jwt.decode(
            token,
            _signing_secret(),
            algorithms=["HS256"],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iat", "iss", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Access token expired.")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid access token.")

    if claims.get("scope") != TOKEN_SCOPE:
        raise HTTPException(status_code=403, detail="Access token does not allow sending tips.")
    return claims


async def require_authenticated_wallet(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    x_wallet_address: Optional[str] = Header(None, alias="X-Wallet-Address"),
) -> str:
    """
    Resolve the paying wallet.

    A Bearer token wins over the legacy header. The legacy header is refused
    in production.
    """
    token = _parse_bearer_token(authorization)
    if token:
        return decode_access_token(token)["sub"]

    if not x_wallet_address:
        raise HTTPException(
            status_code=401,
            detail="Authentication required. Provide Authorization: Bearer <token> (preferred) or X-Wallet-Address (legacy).",
        )
    if settings.environment == "production":
        raise HTTPException(
            status_code=401,
            detail="X-Wallet-Address is not accepted in production. Use a Bearer token.",
        )
    logger.debug(f"Legacy header auth for {x_wallet_address[:8]}...")
    return x_wallet_address
