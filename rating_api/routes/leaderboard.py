"""Leaderboard endpoints -- current round (gated on readiness) and overall history."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rating_api.database import get_session
from rating_api.models import Match, Player, Rating
from rating_api.rounds import closed_matches, current_match
from rating_api.schemas import LeaderboardResponse, LeaderboardRow, OverallResponse, OverallRow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=LeaderboardResponse)
async def current_leaderboard(session: AsyncSession = Depends(get_session)):
    """
    Averages for the current round.

    Rows are only exposed once every eligible player has submitted; until then
    the client gets the progress counters so it can keep polling.
    """
    match = await current_match(session)

    total = (
        await session.execute(
            select(func.count(Player.id)).where(Player.can_rate.is_(True))
        )
    ).scalar() or 0

    raters = (
        await session.execute(
            select(func.count(func.distinct(Rating.rater)))
            .select_from(Rating)
            .join(Player, Player.name == Rating.rater)
            .where(Rating.match_id == match.id, Player.can_rate.is_(True))
        )
    ).scalar() or 0

    ready = total > 0 and raters >= total

    rows = []
    if ready:
        average = func.coalesce(func.avg(Rating.score), 0)
        stmt = (
            select(Player.name, average.label("average"), func.count(Rating.score).label("ratings"))
            .select_from(Player)
            .outerjoin(
                Rating,
                and_(Rating.ratee == Player.name, Rating.match_id == match.id),
            )
            .group_by(Player.name)
            .order_by(average.desc(), Player.name.asc())
        )
        rows = [
            LeaderboardRow(player=name, average=float(avg), ratings=int(cnt))
            for name, avg, cnt in (await session.execute(stmt)).all()
        ]

    return LeaderboardResponse(
        match_id=match.id,
        locked=bool(match.locked),
        ready=ready,
        raters=raters,
        total=total,
        rows=rows,
    )


@router.get("/overall", response_model=OverallResponse)
async def overall_leaderboard(session: AsyncSession = Depends(get_session)):
    """Averages across every closed round, for players still on the roster."""
    match = await current_match(session)
    closed = closed_matches(match)

    match_count = (
        await session.execute(select(func.count(Match.id)).where(closed))
    ).scalar() or 0

    average = func.avg(Rating.score)
    stmt = (
        select(
            Rating.ratee,
            average.label("average"),
            func.count(Rating.score).label("ratings"),
            func.count(func.distinct(Rating.match_id)).label("matches"),
        )
        .select_from(Rating)
        .join(Match, Match.id == Rating.match_id)
        .join(Player, Player.name == Rating.ratee)
        .where(closed)
        .group_by(Rating.ratee)
        .order_by(average.desc(), Rating.ratee.asc())
    )
    rows = [
        OverallRow(player=name, average=float(avg), ratings=int(cnt), matches=int(m))
        for name, avg, cnt, m in (await session.execute(stmt)).all()
    ]

    return OverallResponse(matches=match_count, rows=rows)
