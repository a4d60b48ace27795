"""Credential and admin checks shared by the route modules."""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rating_api import config
from rating_api.models import Player

logger = logging.getLogger(__name__)


async def find_player(session: AsyncSession, name: str) -> Optional[Player]:
    """Case-insensitive lookup; returns the row with its canonical name."""
    name = (name or "").strip()
    if not name:
        return None
    stmt = select(Player).where(func.lower(Player.name) == name.lower())
    return (await session.execute(stmt)).scalars().first()


def is_admin_name(name: str) -> bool:
    return (name or "").lower() == config.ADMIN_NAME.lower()


async def check_credentials(session: AsyncSession, name: str, password: str) -> Player:
    player = await find_player(session, name)
    # Plaintext passwords by design of the roster table; compare in constant time
    if player is None or not hmac.compare_digest(
        player.password.encode("utf-8"), (password or "").encode("utf-8")
    ):
        raise HTTPException(status_code=401, detail="invalid_credentials")
    return player


async def require_admin(session: AsyncSession, name: str, password: str) -> Player:
    player = await find_player(session, name)
    if player is None or not is_admin_name(player.name):
        logger.warning("Admin call rejected for %r", name)
        raise HTTPException(status_code=403, detail="admin_only")
    try:
        return await check_credentials(session, player.name, password)
    except HTTPException:
        logger.warning("Admin call rejected for %r: bad password", name)
        raise HTTPException(status_code=403, detail="admin_only")
