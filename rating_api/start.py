"""
Unified startup script.

Handles:
    1. Database bootstrap (creates tables, seeds the roster, opens round #1)
    2. Starts the FastAPI app with uvicorn in the foreground

Usage:
    peer-ratings               # bootstrap + serve on $PORT
    peer-ratings --init-only   # bootstrap and exit
"""

import argparse
import asyncio
import logging

import uvicorn

from rating_api import config

logger = logging.getLogger(__name__)


def setup_logging():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def run_bootstrap():
    from rating_api.database import engine, init_db

    try:
        await init_db()
    finally:
        await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Peer ratings API server")
    parser.add_argument("--init-only", action="store_true", help="Bootstrap the database and exit")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=config.PORT)
    args = parser.parse_args()

    setup_logging()

    logger.info("Database initialization...")
    asyncio.run(run_bootstrap())
    if args.init_only:
        return

    logger.info("Starting FastAPI on port %s...", args.port)
    # In-process so the logging configured above also covers the app modules
    uvicorn.run(
        "rating_api.app:app",
        host=args.host,
        port=args.port,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
