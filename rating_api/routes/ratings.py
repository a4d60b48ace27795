"""Rating endpoints -- one-time submission per round and the rater's own set."""

from __future__ import annotations

import logging
import math
import time

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rating_api import config
from rating_api.auth import check_credentials, find_player
from rating_api.database import get_session
from rating_api.models import Player, Rating
from rating_api.rounds import current_match
from rating_api.schemas import MineResponse, RatingEntry, RatingRecord, SubmitRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ratings"])


def _parse_score(raw) -> int:
    """JSON number within the score range, rounded half away from zero."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise HTTPException(status_code=400, detail="invalid_score")
    try:
        value = float(raw)
    except OverflowError:
        raise HTTPException(status_code=400, detail="invalid_score")
    if not math.isfinite(value) or value < config.MIN_SCORE or value > config.MAX_SCORE:
        raise HTTPException(status_code=400, detail="invalid_score")
    return int(math.floor(value + 0.5))


def _validate_entries(entries: list[RatingEntry], rater: str, roster: set[str]) -> list[tuple[str, int]]:
    seen = set()
    parsed = []
    for entry in entries:
        ratee = entry.ratee
        if ratee not in roster or ratee == rater or ratee in seen:
            raise HTTPException(status_code=400, detail="invalid_ratee")
        seen.add(ratee)
        parsed.append((ratee, _parse_score(entry.score)))
    return parsed


@router.post("/submit")
async def submit_ratings(
    req: SubmitRequest,
    session: AsyncSession = Depends(get_session),
):
    player = await check_credentials(session, req.name, req.password)
    match = await current_match(session)

    if match.locked:
        raise HTTPException(status_code=403, detail="ratings_locked")
    if not player.can_rate:
        raise HTTPException(status_code=403, detail="no_permission_to_rate")
    if not req.entries:
        raise HTTPException(status_code=400, detail="entries_required")

    roster = set((await session.execute(select(Player.name))).scalars().all())
    parsed = _validate_entries(req.entries, player.name, roster)

    already = (
        await session.execute(
            select(func.count())
            .select_from(Rating)
            .where(Rating.match_id == match.id, Rating.rater == player.name)
        )
    ).scalar() or 0
    if already:
        raise HTTPException(status_code=409, detail="already_submitted")

    ts = int(time.time() * 1000)
    session.add_all([
        Rating(match_id=match.id, rater=player.name, ratee=ratee, score=score, ts=ts)
        for ratee, score in parsed
    ])
    try:
        await session.commit()
    except IntegrityError:
        # A concurrent submit from the same rater won the race on the primary key
        await session.rollback()
        raise HTTPException(status_code=409, detail="already_submitted")

    logger.info("%s submitted %d ratings for match #%d", player.name, len(parsed), match.id)
    return {"ok": True, "match_id": match.id, "count": len(parsed)}


@router.get("/mine", response_model=MineResponse)
async def my_ratings(name: str = "", session: AsyncSession = Depends(get_session)):
    player = await find_player(session, name)
    if player is None:
        raise HTTPException(status_code=400, detail="invalid_name")

    match = await current_match(session)
    rows = (
        await session.execute(
            select(Rating)
            .where(Rating.match_id == match.id, Rating.rater == player.name)
            .order_by(Rating.ratee.asc())
        )
    ).scalars().all()

    return MineResponse(
        match_id=match.id,
        ratings=[RatingRecord(**r.to_dict()) for r in rows],
    )
