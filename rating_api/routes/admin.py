"""Admin endpoints -- roster management, rating permissions, lock and round reset."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rating_api import config
from rating_api.auth import find_player, is_admin_name, require_admin
from rating_api.database import get_session
from rating_api.models import Comment, CommentVote, Match, Player, Rating
from rating_api.rounds import current_match
from rating_api.schemas import (
    AddPlayerRequest,
    AdminCredentials,
    Credentials,
    LockRequest,
    LockResponse,
    PermissionRequest,
    RemovePlayerRequest,
    ResetResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


@router.post("/admin/players")
async def add_player(req: AddPlayerRequest, session: AsyncSession = Depends(get_session)):
    """New players start excluded; the admin includes them when ready."""
    await require_admin(session, req.admin_name, req.admin_password)

    name = req.name.strip()
    if not name or not req.password or len(name) > config.PLAYER_NAME_MAX_LENGTH:
        raise HTTPException(status_code=400, detail="invalid_player")
    if await find_player(session, name) is not None:
        raise HTTPException(status_code=409, detail="player_exists")

    session.add(Player(name=name, password=req.password, can_rate=False))
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=409, detail="player_exists")

    logger.info("Admin added player %s", name)
    return {"ok": True, "name": name}


@router.delete("/admin/players")
async def remove_player(req: RemovePlayerRequest, session: AsyncSession = Depends(get_session)):
    await require_admin(session, req.admin_name, req.admin_password)

    player = await find_player(session, req.name)
    if player is None:
        raise HTTPException(status_code=404, detail="player_not_found")
    if is_admin_name(player.name):
        raise HTTPException(status_code=400, detail="cannot_remove_admin")

    name = player.name
    await session.execute(
        delete(Rating).where(or_(Rating.rater == name, Rating.ratee == name))
    )
    await session.execute(delete(CommentVote).where(CommentVote.voter == name))
    await session.execute(delete(Player).where(Player.id == player.id))
    await session.commit()

    logger.info("Admin removed player %s", name)
    return {"ok": True}


@router.patch("/admin/players/permission")
async def set_permission(req: PermissionRequest, session: AsyncSession = Depends(get_session)):
    await require_admin(session, req.admin_name, req.admin_password)

    player = await find_player(session, req.name)
    if player is None:
        raise HTTPException(status_code=404, detail="player_not_found")

    player.can_rate = req.can_rate
    await session.commit()

    logger.info("Admin set can_rate=%s for %s", req.can_rate, player.name)
    return {"ok": True, "name": player.name, "can_rate": req.can_rate}


@router.post("/admin/lock", response_model=LockResponse)
async def set_lock(req: LockRequest, session: AsyncSession = Depends(get_session)):
    """Locking excludes every player; unlocking includes every player."""
    await require_admin(session, req.name, req.password)

    match = await current_match(session)
    match.locked = req.locked
    await session.execute(update(Player).values(can_rate=not req.locked))
    await session.commit()

    logger.info("Admin %s match #%d", "locked" if req.locked else "unlocked", match.id)
    return LockResponse(locked=req.locked)


@router.post("/reset", response_model=ResetResponse)
@router.post("/admin/reset", response_model=ResetResponse)
async def reset_round(req: Credentials, session: AsyncSession = Depends(get_session)):
    """
    Close the current round and open the next one locked.

    The closed round's ratings move to the overall leaderboard. Nobody can rate
    until the admin unlocks.
    """
    await require_admin(session, req.name, req.password)

    match = await current_match(session)
    match.locked = True
    next_match = Match(locked=True)
    session.add(next_match)
    await session.execute(update(Player).values(can_rate=False))
    await session.commit()

    logger.info("Admin closed match #%d, opened match #%d", match.id, next_match.id)
    return ResetResponse(match_id=next_match.id)


@router.delete("/admin/comments/{comment_id}")
async def delete_comment(
    comment_id: int,
    req: AdminCredentials,
    session: AsyncSession = Depends(get_session),
):
    await require_admin(session, req.admin_name, req.admin_password)

    comment = await session.get(Comment, comment_id)
    if comment is None:
        raise HTTPException(status_code=404, detail="comment_not_found")

    await session.execute(delete(CommentVote).where(CommentVote.comment_id == comment_id))
    await session.execute(delete(Comment).where(Comment.id == comment_id))
    await session.commit()

    logger.info("Admin deleted comment #%d", comment_id)
    return {"ok": True}
