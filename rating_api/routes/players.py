"""Roster endpoints -- player lists, login, per-day rating order."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rating_api.auth import check_credentials, find_player
from rating_api.database import get_session
from rating_api.models import Player
from rating_api.ordering import day_key, parse_day_key, rating_order
from rating_api.schemas import Credentials, LoginResponse, OrderResponse, PlayerDetail

logger = logging.getLogger(__name__)

router = APIRouter(tags=["players"])


async def roster_names(session: AsyncSession) -> list[str]:
    stmt = select(Player.name).order_by(Player.id)
    return list((await session.execute(stmt)).scalars().all())


@router.get("/players")
async def list_players(session: AsyncSession = Depends(get_session)):
    return {"players": await roster_names(session)}


@router.get("/players/details")
async def player_details(session: AsyncSession = Depends(get_session)):
    rows = (await session.execute(select(Player).order_by(Player.id))).scalars().all()
    return {
        "ok": True,
        "players": [PlayerDetail.model_validate(p) for p in rows],
    }


@router.post("/login", response_model=LoginResponse)
async def login(req: Credentials, session: AsyncSession = Depends(get_session)):
    """Case-insensitive login; the response carries the canonical name."""
    player = await check_credentials(session, req.name, req.password)
    logger.info("Login: %s", player.name)
    return LoginResponse(name=player.name)


@router.get("/order", response_model=OrderResponse)
async def order_for_player(
    name: str = "",
    day: Optional[str] = None,
    session: AsyncSession = Depends(get_session),
):
    """Teammates in the shuffled order the rating wizard shows them today."""
    player = await find_player(session, name)
    if player is None:
        raise HTTPException(status_code=400, detail="invalid_name")

    if day:
        try:
            parse_day_key(day)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid_day")
    else:
        day = day_key()

    order = rating_order(await roster_names(session), player.name, day)
    return OrderResponse(name=player.name, day=day, order=order)
