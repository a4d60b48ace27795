"""Current round lookup."""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException
from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rating_api.models import Match


async def latest_match(session: AsyncSession) -> Optional[Match]:
    stmt = select(Match).order_by(Match.id.desc()).limit(1)
    return (await session.execute(stmt)).scalars().first()


async def current_match(session: AsyncSession) -> Match:
    """
    Latest match row.

    Read only: the first round is opened at boot by ``bootstrap.ensure_current_match``,
    so an empty table means the database was not bootstrapped (503 ``no_current_round``).
    """
    match = await latest_match(session)
    if match is None:
        raise HTTPException(status_code=503, detail="no_current_round")
    return match


def closed_matches(current: Match):
    """WHERE clause for rounds that feed the overall leaderboard."""
    return and_(Match.locked.is_(True), Match.id != current.id)
