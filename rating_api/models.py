"""
SQLAlchemy ORM models -- PostgreSQL schema for round-based peer ratings.

Tables
------
players        -- roster with plaintext passwords and the can_rate flag
matches        -- rating rounds; the row with the highest id is current
ratings        -- one score per (match, rater, ratee)
comments       -- anonymous comments on a round
comment_votes  -- one like/dislike per (comment, voter)
"""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base

# ---------------------------------------------------------------------------
# Players & rounds
# ---------------------------------------------------------------------------

class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)  # roster order
    name = Column(String(64), unique=True, nullable=False)
    password = Column(String(128), nullable=False)
    can_rate = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        Index("uq_players_name_lower", func.lower(name), unique=True),
    )


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    locked = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=func.now())

    ratings = relationship("Rating", back_populates="match")
    comments = relationship("Comment", back_populates="match")


# ---------------------------------------------------------------------------
# Ratings
# ---------------------------------------------------------------------------

class Rating(Base):
    __tablename__ = "ratings"

    # Composite key: a rater scores each teammate at most once per round
    match_id = Column(Integer, ForeignKey("matches.id"), primary_key=True)
    rater = Column(String(64), ForeignKey("players.name"), primary_key=True)
    ratee = Column(String(64), ForeignKey("players.name"), primary_key=True)
    score = Column(Integer, nullable=False)
    ts = Column(BigInteger, nullable=False)  # epoch milliseconds

    match = relationship("Match", back_populates="ratings")

    __table_args__ = (
        Index("ix_ratings_match_ratee", "match_id", "ratee"),
    )

    def to_dict(self) -> dict:
        return {
            "rater": self.rater,
            "ratee": self.ratee,
            "score": self.score,
            "timestamp": self.ts,
        }


# ---------------------------------------------------------------------------
# Comments & votes
# ---------------------------------------------------------------------------

class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    match_id = Column(Integer, ForeignKey("matches.id"), nullable=False, index=True)
    author = Column(String(64), nullable=False)  # stored, never exposed
    body = Column(Text, nullable=False)
    created_at = Column(DateTime, default=func.now())

    match = relationship("Match", back_populates="comments")
    votes = relationship("CommentVote", back_populates="comment", cascade="all, delete-orphan")


class CommentVote(Base):
    __tablename__ = "comment_votes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False)
    voter = Column(String(64), nullable=False, index=True)
    value = Column(String(8), nullable=False)  # like | dislike

    comment = relationship("Comment", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("comment_id", "voter", name="uq_comment_votes_comment_voter"),
    )
