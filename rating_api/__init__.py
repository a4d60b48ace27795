# rating_api -- FastAPI server + PostgreSQL models for round-based peer ratings
#
# Modules:
#   app        -- FastAPI application with lifespan management
#   config     -- environment-driven settings (.env supported)
#   database   -- PostgreSQL / SQLite async engine
#   models     -- SQLAlchemy ORM models (players, matches, ratings, comments)
#   schemas    -- Pydantic request/response schemas
#   bootstrap  -- roster seeding and first-round creation
#   auth       -- credential and admin checks
#   rounds     -- current round lookup
#   ordering   -- deterministic per-user-per-day rating order
#   voting     -- like/dislike toggle rules
#   start      -- startup script (bootstrap + uvicorn)
#   routes/    -- API endpoints (players, ratings, leaderboard, comments, admin)
