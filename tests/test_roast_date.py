from datetime import date

import pytest

from coffee_radar.normalization.roast_date import (
    freshness_cutoff,
    is_fresh_roast,
    parse_roast_date,
    subtract_months,
)


def test_parse_roast_date_strips_label_prefix() -> None:
    assert parse_roast_date("Data palenia: 15.02.2024") == date(2024, 2, 15)
    assert parse_roast_date("  Data palenia:\n  03.11.2023 ") == date(2023, 11, 3)


def test_parse_roast_date_accepts_bare_date() -> None:
    assert parse_roast_date("01.01.2024") == date(2024, 1, 1)


@pytest.mark.parametrize("text", ["Data palenia: 2024-02-15", "Data palenia: 31.02.2024", "Data palenia:", ""])
def test_parse_roast_date_rejects_other_formats(text: str) -> None:
    with pytest.raises(ValueError):
        parse_roast_date(text)


def test_cutoff_is_two_calendar_months_back() -> None:
    assert freshness_cutoff(date(2024, 4, 1)) == date(2024, 2, 1)
    assert freshness_cutoff(date(2024, 1, 15)) == date(2023, 11, 15)


def test_cutoff_clamps_to_end_of_shorter_month() -> None:
    assert freshness_cutoff(date(2024, 4, 30)) == date(2024, 2, 29)
    assert subtract_months(date(2023, 4, 30), 2) == date(2023, 2, 28)


def test_roast_before_cutoff_is_stale() -> None:
    today = date(2024, 4, 1)
    assert is_fresh_roast(parse_roast_date("Data palenia: 01.01.2024"), today) is False
    assert is_fresh_roast(date(2024, 1, 31), today) is False


def test_roast_on_or_after_cutoff_is_fresh() -> None:
    today = date(2024, 4, 1)
    assert is_fresh_roast(date(2024, 2, 1), today) is True
    assert is_fresh_roast(parse_roast_date("Data palenia: 15.02.2024"), today) is True
