"""Tests for CLI parsing helpers."""

from datetime import datetime
from decimal import Decimal

import pytest

from salesboard.domain.errors import NotFoundError
from salesboard.utils.amount_parser import parse_amount, parse_category_target
from salesboard.utils.date_parser import parse_datetime
from salesboard.utils.entity_resolver import resolve_agent, resolve_team

NOW = datetime(2024, 3, 10, 15, 30)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("1234.50", Decimal("1234.50")),
        ("$1,234.50", Decimal("1234.50")),
        (" €99 ", Decimal("99")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_category_target():
    assert parse_category_target("Solar=5000:3") == ("Solar", Decimal("5000"), 3)
    assert parse_category_target("Home Storage = 1,500") == ("Home Storage", Decimal("1500"), 0)


@pytest.mark.parametrize("text", ["Solar", "=100", "Solar=", "Solar=100:x"])
def test_parse_category_target_invalid(text):
    with pytest.raises(ValueError):
        parse_category_target(text)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("now", NOW),
        ("today", datetime(2024, 3, 10)),
        ("yesterday", datetime(2024, 3, 9)),
        ("this month", datetime(2024, 3, 1)),
        ("last month", datetime(2024, 2, 1)),
        ("next month", datetime(2024, 4, 1)),
        ("2024-01-15", datetime(2024, 1, 15)),
        ("2024-01-15 09:30", datetime(2024, 1, 15, 9, 30)),
        ("2024-01-15T09:30:00+02:00", datetime(2024, 1, 15, 7, 30)),
    ],
)
def test_parse_datetime(text, expected):
    assert parse_datetime(text, now=NOW) == expected


def test_parse_datetime_invalid():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_datetime("not a date", now=NOW)


def test_resolve_by_name_or_id(temp_db, sample_agent):
    assert resolve_agent(temp_db, "Ana") == sample_agent.id
    assert resolve_agent(temp_db, str(sample_agent.id)) == sample_agent.id
    assert resolve_team(temp_db, "North") == sample_agent.team_id
    assert resolve_team(temp_db, sample_agent.team_id) == sample_agent.team_id


def test_resolve_missing(temp_db):
    with pytest.raises(NotFoundError):
        resolve_agent(temp_db, "Nobody")
    with pytest.raises(NotFoundError):
        resolve_team(temp_db, 7)
