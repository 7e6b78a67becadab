"""Tests for date normalization."""

import math
from datetime import datetime, timezone

import pytest

from plantlog.database.document_store import StoreTimestamp
from plantlog.parsing.normalizer import (
    INVALID_DATE_TEXT,
    NO_DATE_TEXT,
    normalize_date,
    to_instant,
)


class _BrokenTimestamp:
    def to_datetime(self):
        raise ValueError("corrupt timestamp")


def test_none_has_no_date_text():
    assert normalize_date(None) == NO_DATE_TEXT == "No date data available"


def test_epoch_seconds_formats_local_wall_clock():
    """Epoch for 2024-01-05 08:03 local time formats back to the same wall clock."""
    epoch = datetime(2024, 1, 5, 8, 3).timestamp()

    assert normalize_date(epoch) == "2024-01-05 08:03"
    assert normalize_date(int(epoch)) == "2024-01-05 08:03"


def test_naive_datetime_is_taken_as_local():
    assert normalize_date(datetime(2024, 1, 5, 8, 3, 59)) == "2024-01-05 08:03"


def test_aware_datetime_is_converted_to_local():
    aware = datetime(2024, 1, 5, 8, 3, tzinfo=timezone.utc)
    expected = aware.astimezone().strftime("%Y-%m-%d %H:%M")

    assert normalize_date(aware) == expected


def test_store_timestamp_wrapper_is_converted():
    wrapped = StoreTimestamp("2024-07-09T21:45:00Z")
    expected = datetime(2024, 7, 9, 21, 45, tzinfo=timezone.utc).astimezone().strftime("%Y-%m-%d %H:%M")

    assert normalize_date(wrapped) == expected


def test_iso_string_is_parsed():
    assert normalize_date("2024-01-05T08:03:00") == "2024-01-05 08:03"


def test_zero_padding():
    assert normalize_date(datetime(2024, 3, 4, 5, 6)) == "2024-03-04 05:06"


@pytest.mark.parametrize(
    "raw",
    [
        "not a date",
        "",
        math.nan,
        math.inf,
        1e20,
        True,
        ["2024-01-05"],
        _BrokenTimestamp(),
        StoreTimestamp("garbage"),
    ],
)
def test_unparseable_values_are_invalid(raw):
    assert normalize_date(raw) == INVALID_DATE_TEXT == "Invalid"


def test_to_instant_returns_none_for_absent_value():
    assert to_instant(None) is None


def test_to_instant_raises_for_unparseable_value():
    with pytest.raises(ValueError):
        to_instant("31/02/2024")
