"""Coercion helpers for loosely typed GitHub webhook fields.

Every function here is total: unparseable input yields ``None`` (or the
documented fallback) rather than an exception.  ``None`` always means "field
absent" and must not be read as zero.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Mapping

from review_sync.models.comment import CommentSide
from review_sync.models.review import ReviewState

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_REVIEW_STATE_ALIASES = {
    "APPROVED": ReviewState.APPROVE,
    "CHANGES_REQUESTED": ReviewState.REQUEST_CHANGES,
    "COMMENTED": ReviewState.COMMENT,
}


def to_number(value: Any) -> int | None:
    """Coerce an integer or numeric string to ``int``.

    Strings are read up to the first non-digit, so ``"42"`` and ``"42px"``
    both give 42.  Booleans, non-finite floats and anything else give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


def to_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def to_flag(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def to_mapping(value: Any) -> Mapping[str, Any] | None:
    return value if isinstance(value, Mapping) else None


def normalize_review_state(state: Any) -> ReviewState:
    """Map GitHub's review vocabulary onto the three local review states.

    Unknown values fall back to ``COMMENT``.
    """
    if not isinstance(state, str):
        return ReviewState.COMMENT
    upper = state.strip().upper()
    if upper in ReviewState.__members__:
        return ReviewState[upper]
    return _REVIEW_STATE_ALIASES.get(upper, ReviewState.COMMENT)


def normalize_comment_side(side: Any) -> CommentSide | None:
    if not isinstance(side, str):
        return None
    upper = side.strip().upper()
    return CommentSide[upper] if upper in CommentSide.__members__ else None
