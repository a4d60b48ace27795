"""
FastAPI application -- peer ratings API server.

Run locally:
    uvicorn rating_api.app:app --reload --port 8787

In production ``peer-ratings`` (rating_api.start) bootstraps and serves it.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from rating_api import config
from rating_api.database import check_connection, init_db
from rating_api.routes import admin, comments, leaderboard, players, ratings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables, seed roster, open the first round
    await init_db()
    yield


app = FastAPI(
    title="Peer Ratings API",
    version="1.0.0",
    description="Round-based teammate ratings with leaderboards and anonymous comments",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(players.router)
app.include_router(ratings.router)
app.include_router(leaderboard.router)
app.include_router(comments.router)
app.include_router(admin.router)


# ---------------------------------------------------------------------------
# Error envelope: {"ok": false, "error": "<code>"}
# ---------------------------------------------------------------------------

@app.exception_handler(HTTPException)
async def http_error(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.detail},
    )


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    logger.debug("Invalid request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"ok": False, "error": "invalid_request"})


@app.exception_handler(SQLAlchemyError)
async def database_error(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"ok": False, "error": "db_error"})


@app.get("/")
async def root():
    return {"ok": True}


@app.get("/health")
async def health():
    """Health check endpoint."""
    db_ok = await check_connection()
    return {
        "status": "ok" if db_ok else "degraded",
        "database": db_ok,
    }
