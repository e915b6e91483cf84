"""Target and cycle field handling shared by the agent and team services."""

from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

from salesboard.database.base import Database
from salesboard.domain.cycles import validate_cycle_config
from salesboard.domain.entities import CycleConfig, CycleType
from salesboard.domain.errors import NotFoundError, ValidationError, category_not_found
from salesboard.domain.money import validate_money


def validate_targets(target_volume: Decimal, target_units: int) -> None:
    """Reject negative targets and volumes finer than a cent."""
    validate_money(target_volume, "Target volume")
    if target_units < 0:
        raise ValidationError(f"Target units cannot be negative, got {target_units}")


def merge_cycle(
    current: Optional[CycleConfig],
    target_cycle: Optional[str] = None,
    reset_day: Optional[int] = None,
    reset_month: Optional[int] = None,
) -> CycleConfig:
    """Combine edited cycle fields with the current configuration and validate.

    Fields left as None keep their current value. Switching to a monthly
    cycle drops the reset month.
    """
    base = current or CycleConfig()
    cycle_type = target_cycle if target_cycle is not None else base.cycle_type
    if reset_month is None and cycle_type == CycleType.YEARLY:
        reset_month = base.reset_month
    return validate_cycle_config(
        cycle_type,
        reset_day if reset_day is not None else base.reset_day,
        reset_month,
    )


def resolve_category_targets(
    db: Database, targets: Iterable[tuple[str, Decimal, int]]
) -> list[tuple[int, Decimal, int]]:
    """Turn (category name, volume, units) triples into rows keyed by category ID.

    Raises:
        NotFoundError: If a category does not exist
        ValidationError: If a category repeats or a target is negative
    """
    rows = []
    seen: set[int] = set()
    for name, volume, units in targets:
        category = db.get_category_by_name(name)
        if category is None:
            raise NotFoundError(category_not_found(name))
        if category.id in seen:
            raise ValidationError(f"Category '{name}' has more than one target")
        validate_targets(volume, units)
        seen.add(category.id)
        rows.append((category.id, volume, units))
    return rows
