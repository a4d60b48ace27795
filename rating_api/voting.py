"""Like/dislike toggle rules for comment votes."""

from __future__ import annotations

from typing import Optional

LIKE = "like"
DISLIKE = "dislike"
REACTIONS = (LIKE, DISLIKE)


def next_vote(current: Optional[str], submitted: str) -> Optional[str]:
    """
    Value to store after ``submitted`` arrives on top of ``current``.

    ``None`` means the stored vote is removed: repeating a reaction clears it,
    the opposite reaction switches it, and a first reaction is recorded.
    """
    if submitted not in REACTIONS:
        raise ValueError(f"unknown reaction: {submitted!r}")
    if current == submitted:
        return None
    return submitted
