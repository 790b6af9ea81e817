from datetime import timedelta

import pytest

from config import parse_duration, split_terms


@pytest.mark.parametrize("value,expected", [
    ("1d", timedelta(days=1)),
    ("12h", timedelta(hours=12)),
    ("30m", timedelta(minutes=30)),
    ("90", timedelta(seconds=90)),
    (None, timedelta(days=1)),
    ("", timedelta(days=1)),
])
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


def test_split_terms():
    assert split_terms("1st, 2nd,,summer ") == ["1st", "2nd", "summer"]
