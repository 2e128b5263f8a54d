# app/api/v1/deps.py
"""
FastAPI dependencies for the v1 API layer.

``get_current_user`` verifies the identity provider's Bearer JWT and returns
the caller's identity; ``get_ledger_store`` and ``get_insights_client`` hand
the request its store and GST insights client. The store publishes writes to
the feed held on ``app.state``, injected through ``get_change_feed``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Header, Request, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db import get_db
from app.domain.services.ledger_service import LedgerStore
from app.infrastructure.db.repositories import ChangeFeed, LedgerRepository
from app.infrastructure.external.gst_insights_client import GstInsightsClient

logger = logging.getLogger("api.v1.deps")


@dataclass(frozen=True)
class CurrentUser:
    """Authenticated caller. ``id`` is the token subject and owns all records."""

    id: str


async def get_current_user(authorization: str | None = Header(None)) -> CurrentUser:
    """
    Validate the ``Authorization: Bearer <jwt>`` header.

    Raises HTTP 401 if the token is missing, invalid, expired, or has no subject.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header. Expected: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[7:]  # strip "Bearer "

    try:
        payload = jwt.decode(
            token,
            settings.USER_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError as exc:
        logger.debug("JWT decode failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing subject",
        )

    return CurrentUser(id=str(user_id))


def get_change_feed(request: Request) -> ChangeFeed:
    """The app-wide feed that ledger writes are published to."""
    return request.app.state.change_feed


async def get_ledger_store(
    db: AsyncSession = Depends(get_db),
    feed: ChangeFeed = Depends(get_change_feed),
) -> LedgerStore:
    return LedgerRepository(db, feed)


def get_insights_client() -> GstInsightsClient:
    return GstInsightsClient()
