import asyncio

import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from rating_api import config
from rating_api.bootstrap import ensure_current_match, seed_roster
from rating_api.database import async_session, normalise_url
from rating_api.models import Match, Player


def test_normalise_url_rewrites_scheme_and_strips_libpq_params():
    url, connect_args = normalise_url(
        "postgres://user:pw@db.example.com/ratings?sslmode=require&channel_binding=require"
    )
    assert url == "postgresql+asyncpg://user:pw@db.example.com/ratings"
    assert connect_args == {"ssl": "require"}


def test_normalise_url_keeps_other_params():
    url, connect_args = normalise_url("postgresql://u@h:5432/db?application_name=ratings&sslmode=disable")
    assert url == "postgresql+asyncpg://u@h:5432/db?application_name=ratings"
    assert connect_args == {}


def test_normalise_url_leaves_asyncpg_urls_alone():
    url, connect_args = normalise_url("postgresql+asyncpg://u@h/db")
    assert url == "postgresql+asyncpg://u@h/db"
    assert connect_args == {}


def test_roster_parsing(monkeypatch):
    monkeypatch.setenv("TEST_ROSTER", " Ana:pw1 , broken, Ben:pw2 ")
    assert config._env_roster("TEST_ROSTER", []) == [("Ana", "pw1"), ("Ben", "pw2")]
    monkeypatch.setenv("TEST_ROSTER", "")
    assert config._env_roster("TEST_ROSTER", [("X", "y")]) == [("X", "y")]


def test_seeding_is_idempotent_and_keeps_permissions(client):
    from tests.conftest import admin_body

    resp = client.patch("/admin/players/permission", json=admin_body(name="Charbel", can_rate=False))
    assert resp.status_code == 200

    async def reseed():
        async with async_session() as session:
            added = await seed_roster(session, [("charbel", "other"), ("Newbie", "pw")])
            await session.commit()
            return added

    assert asyncio.run(reseed()) == 1

    details = {p["name"]: p["can_rate"] for p in client.get("/players/details").json()["players"]}
    assert details["Charbel"] is False
    assert details["Newbie"] is True
    # Existing password untouched
    assert client.post("/login", json={"name": "Charbel", "password": "charbel123"}).status_code == 200


async def _match_count():
    async with async_session() as session:
        return (await session.execute(select(func.count(Match.id)))).scalar()


def test_ensure_current_match_opens_one_round(client):
    async def ensure_twice():
        async with async_session() as session:
            first = await ensure_current_match(session)
            second = await ensure_current_match(session)
            await session.commit()
            return first.id, second.id, first.locked

    assert asyncio.run(ensure_twice()) == (1, 1, False)
    assert asyncio.run(_match_count()) == 1


def test_reads_never_create_a_round(client):
    async def clear_matches():
        async with async_session() as session:
            await session.execute(delete(Match))
            await session.commit()

    asyncio.run(clear_matches())

    for path in ("/leaderboard", "/leaderboard/overall", "/comments"):
        resp = client.get(path)
        assert resp.status_code == 503
        assert resp.json() == {"ok": False, "error": "no_current_round"}
    assert client.get("/mine", params={"name": "Charbel"}).status_code == 503
    assert asyncio.run(_match_count()) == 0


@pytest.mark.parametrize("name", ["charbel", "CHARBEL", "ChArBeL"])
def test_player_names_unique_ignoring_case(client, name):
    async def insert_variant():
        async with async_session() as session:
            session.add(Player(name=name, password="pw", can_rate=False))
            await session.commit()

    with pytest.raises(IntegrityError):
        asyncio.run(insert_variant())
