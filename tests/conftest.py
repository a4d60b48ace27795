"""
Shared fixtures: a throwaway SQLite database and a FastAPI TestClient.

Environment must be set before rating_api is imported, since config and the
engine are built at import time.
"""
import asyncio
import os
import tempfile

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="peer-ratings-tests-")

os.environ["DATABASE_URL"] = ""
os.environ["DATABASE_URL_FALLBACK"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["ADMIN_NAME"] = "Bader"
os.environ["ROSTER"] = "Bader:bader123,Charbel:charbel123,Christian:christian123,Edmond:edmond123"

from fastapi.testclient import TestClient  # noqa: E402

from rating_api.app import app  # noqa: E402
from rating_api.database import Base, engine  # noqa: E402

PASSWORDS = {
    "Bader": "bader123",
    "Charbel": "charbel123",
    "Christian": "christian123",
    "Edmond": "edmond123",
}
PLAYERS = list(PASSWORDS)


async def _drop_all():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def client():
    asyncio.run(_drop_all())
    with TestClient(app) as c:
        yield c


def admin_body(**extra):
    return {"adminName": "Bader", "adminPassword": PASSWORDS["Bader"], **extra}


def submit(client, rater, scores, password=None):
    """POST /submit for ``rater`` with ``{ratee: score}``."""
    return client.post(
        "/submit",
        json={
            "name": rater,
            "password": password if password is not None else PASSWORDS[rater],
            "entries": [{"ratee": r, "score": s} for r, s in scores.items()],
        },
    )


def submit_everyone(client, score_for=lambda rater, ratee: 7):
    for rater in PLAYERS:
        scores = {ratee: score_for(rater, ratee) for ratee in PLAYERS if ratee != rater}
        resp = submit(client, rater, scores)
        assert resp.status_code == 200, resp.json()
