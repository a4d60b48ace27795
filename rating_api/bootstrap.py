"""
Startup data: roster seeding and the first round.

Called from ``database.init_db`` on every boot, so both helpers only add what
is missing.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rating_api.models import Match, Player
from rating_api.rounds import latest_match

logger = logging.getLogger(__name__)


async def seed_roster(session: AsyncSession, roster: list) -> int:
    """Insert roster players that are not in the table yet. Returns the count added."""
    existing = {
        n for (n,) in (await session.execute(select(func.lower(Player.name)))).all()
    }
    added = 0
    for name, password in roster:
        if name.lower() in existing:
            continue
        session.add(Player(name=name, password=password, can_rate=True))
        existing.add(name.lower())
        added += 1
    if added:
        await session.flush()
        logger.info("Seeded %d roster players", added)
    return added


async def ensure_current_match(session: AsyncSession) -> Match:
    """Open round #1 (unlocked) when the matches table is empty."""
    match = await latest_match(session)
    if match is None:
        match = Match(locked=False)
        session.add(match)
        await session.flush()
        logger.info("Opened first match #%d", match.id)
    return match
