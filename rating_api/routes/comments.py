"""Comment endpoints -- anonymous comments on the current round with like/dislike votes."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy import case, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rating_api import config
from rating_api.auth import check_credentials
from rating_api.database import get_session
from rating_api.models import Comment, CommentVote
from rating_api.rounds import current_match
from rating_api.schemas import (
    CommentCreate,
    CommentCreated,
    CommentList,
    CommentOut,
    VoteRequest,
    VoteResponse,
)
from rating_api.voting import DISLIKE, LIKE, next_vote

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])

_likes = func.coalesce(func.sum(case((CommentVote.value == LIKE, 1), else_=0)), 0)
_dislikes = func.coalesce(func.sum(case((CommentVote.value == DISLIKE, 1), else_=0)), 0)


async def _vote_counts(session: AsyncSession, comment_id: int) -> tuple[int, int]:
    row = (
        await session.execute(
            select(_likes, _dislikes).where(CommentVote.comment_id == comment_id)
        )
    ).one()
    return int(row[0]), int(row[1])


async def _my_votes(session: AsyncSession, voter: str, comment_ids: list[int]) -> dict[int, str]:
    if not comment_ids:
        return {}
    rows = await session.execute(
        select(CommentVote.comment_id, CommentVote.value).where(
            CommentVote.voter == voter,
            CommentVote.comment_id.in_(comment_ids),
        )
    )
    return {cid: value for cid, value in rows.all()}


@router.get("", response_model=CommentList)
async def list_comments(
    x_player_name: Optional[str] = Header(None),
    x_player_password: Optional[str] = Header(None),
    session: AsyncSession = Depends(get_session),
):
    """
    Comments on the current round, newest first. Authors are never returned.

    `my_vote` is only filled in for a caller who sends valid credentials in the
    X-Player-Name / X-Player-Password headers.
    """
    player = None
    if x_player_name is not None:
        player = await check_credentials(session, x_player_name, x_player_password)

    match = await current_match(session)

    stmt = (
        select(Comment, _likes.label("likes"), _dislikes.label("dislikes"))
        .select_from(Comment)
        .outerjoin(CommentVote, CommentVote.comment_id == Comment.id)
        .where(Comment.match_id == match.id)
        .group_by(Comment.id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    rows = (await session.execute(stmt)).all()

    mine = {}
    if player is not None:
        mine = await _my_votes(session, player.name, [c.id for c, _, _ in rows])

    return CommentList(
        match_id=match.id,
        comments=[
            CommentOut(
                id=c.id,
                text=c.body,
                created_at=c.created_at,
                likes=int(likes),
                dislikes=int(dislikes),
                my_vote=mine.get(c.id),
            )
            for c, likes, dislikes in rows
        ],
    )


@router.post("", response_model=CommentCreated)
async def create_comment(req: CommentCreate, session: AsyncSession = Depends(get_session)):
    player = await check_credentials(session, req.name, req.password)

    text = req.text.strip()
    if not text or len(text) > config.COMMENT_MAX_LENGTH:
        raise HTTPException(status_code=400, detail="invalid_comment")

    match = await current_match(session)
    comment = Comment(match_id=match.id, author=player.name, body=text)
    session.add(comment)
    await session.commit()
    await session.refresh(comment)

    logger.info("New comment #%d on match #%d", comment.id, match.id)
    return CommentCreated(comment=CommentOut(id=comment.id, text=comment.body, created_at=comment.created_at))


@router.post("/{comment_id}/vote", response_model=VoteResponse)
async def vote_comment(
    comment_id: int,
    req: VoteRequest,
    session: AsyncSession = Depends(get_session),
):
    """
    Toggle a like/dislike.

    Same reaction twice clears the vote, the opposite reaction switches it.
    Only comments on the current round accept votes.
    """
    player = await check_credentials(session, req.name, req.password)
    try:
        # Validate up front; the stored value is computed below
        next_vote(None, req.vote)
    except ValueError:
        raise HTTPException(status_code=400, detail="invalid_vote")

    match = await current_match(session)
    comment = await session.get(Comment, comment_id)
    if comment is None or comment.match_id != match.id:
        raise HTTPException(status_code=404, detail="comment_not_found")

    existing = (
        await session.execute(
            select(CommentVote).where(
                CommentVote.comment_id == comment_id,
                CommentVote.voter == player.name,
            )
        )
    ).scalars().first()

    stored = next_vote(existing.value if existing else None, req.vote)
    if existing is None:
        session.add(CommentVote(comment_id=comment_id, voter=player.name, value=stored))
    elif stored is None:
        await session.execute(delete(CommentVote).where(CommentVote.id == existing.id))
    else:
        existing.value = stored

    try:
        await session.commit()
    except IntegrityError:
        # Two first votes from the same player raced on (comment_id, voter)
        await session.rollback()
        raise HTTPException(status_code=409, detail="vote_conflict")

    likes, dislikes = await _vote_counts(session, comment_id)
    return VoteResponse(comment_id=comment_id, likes=likes, dislikes=dislikes, my_vote=stored)
