from datetime import datetime, timezone

import pytest

from review_sync.models import CommentSide, ReviewState
from review_sync.services.normalize import (
    normalize_comment_side,
    normalize_review_state,
    to_datetime,
    to_number,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (42, 42),
        ("42", 42),
        (" 17 ", 17),
        ("-3", -3),
        ("42px", 42),
        (7.9, 7),
        ("abc", None),
        ("", None),
        (None, None),
        (True, None),
        (float("nan"), None),
        ({"id": 1}, None),
        ([1], None),
    ],
)
def test_to_number(value, expected):
    assert to_number(value) == expected


def test_to_datetime_parses_github_timestamps():
    assert to_datetime("2024-05-01T10:00:00Z") == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


def test_to_datetime_keeps_offsets_and_assumes_utc_for_naive():
    parsed = to_datetime("2024-05-01T12:00:00+02:00")
    assert parsed == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert to_datetime("2024-05-01T10:00:00").tzinfo == timezone.utc


@pytest.mark.parametrize("value", [None, "", "not a date", "2024-13-45T00:00:00Z", 12345, {}, []])
def test_to_datetime_returns_none_for_invalid_input(value):
    assert to_datetime(value) is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("APPROVED", ReviewState.APPROVE),
        ("approved", ReviewState.APPROVE),
        ("CHANGES_REQUESTED", ReviewState.REQUEST_CHANGES),
        ("APPROVE", ReviewState.APPROVE),
        ("REQUEST_CHANGES", ReviewState.REQUEST_CHANGES),
        ("COMMENT", ReviewState.COMMENT),
        ("commented", ReviewState.COMMENT),
        ("bogus", ReviewState.COMMENT),
        (None, ReviewState.COMMENT),
        (3, ReviewState.COMMENT),
    ],
)
def test_normalize_review_state(value, expected):
    assert normalize_review_state(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("LEFT", CommentSide.LEFT),
        ("right", CommentSide.RIGHT),
        ("Right", CommentSide.RIGHT),
        ("middle", None),
        ("", None),
        (None, None),
        (1, None),
    ],
)
def test_normalize_comment_side(value, expected):
    assert normalize_comment_side(value) == expected
