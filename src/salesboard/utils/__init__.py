"""Utility functions for salesboard."""

from salesboard.utils.amount_parser import parse_amount, parse_category_target
from salesboard.utils.date_parser import parse_datetime
from salesboard.utils.entity_resolver import resolve_agent, resolve_team

__all__ = [
    "parse_amount",
    "parse_category_target",
    "parse_datetime",
    "resolve_agent",
    "resolve_team",
]
