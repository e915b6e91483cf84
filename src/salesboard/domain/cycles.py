"""Target cycle date arithmetic.

Pure functions only: no database access, no clock. Period boundaries fall at
midnight of the reset day. A reset day that does not exist in a given month
(e.g. the 31st in April, or the 30th in February) is clamped to that month's
last day, so every month still gets exactly one period boundary.
"""

import calendar
from datetime import datetime
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from salesboard.domain.entities import CycleConfig, CycleType, Period
from salesboard.domain.errors import ValidationError


def clamped_boundary(year: int, month: int, day: int) -> datetime:
    """Return midnight of ``day`` in the given month, clamped to the month's length."""
    last_day = calendar.monthrange(year, month)[1]
    return datetime(year, month, min(day, last_day))


def compute_current_period(config: CycleConfig, now: datetime) -> Period:
    """Compute the period containing ``now``.

    A ``now`` that falls exactly on a reset boundary belongs to the period
    that starts at that boundary.

    Args:
        config: Cycle configuration (already validated)
        now: Reference instant

    Returns:
        Period whose ``start <= now < end``; ``end`` is the next reset
    """
    if config.cycle_type == CycleType.YEARLY:
        return _yearly_period(config.reset_month or 1, config.reset_day, now)
    return _monthly_period(config.reset_day, now)


def next_period(config: CycleConfig, period: Period) -> Period:
    """Return the period that starts where ``period`` ends."""
    return compute_current_period(config, period.end)


def _monthly_period(reset_day: int, now: datetime) -> Period:
    candidate = clamped_boundary(now.year, now.month, reset_day)
    month_start = datetime(now.year, now.month, 1)
    if candidate <= now:
        following = month_start + relativedelta(months=1)
        return Period(
            start=candidate,
            end=clamped_boundary(following.year, following.month, reset_day),
        )
    previous = month_start - relativedelta(months=1)
    return Period(
        start=clamped_boundary(previous.year, previous.month, reset_day),
        end=candidate,
    )


def _yearly_period(reset_month: int, reset_day: int, now: datetime) -> Period:
    candidate = clamped_boundary(now.year, reset_month, reset_day)
    if candidate <= now:
        return Period(
            start=candidate,
            end=clamped_boundary(now.year + 1, reset_month, reset_day),
        )
    return Period(
        start=clamped_boundary(now.year - 1, reset_month, reset_day),
        end=candidate,
    )


def validate_cycle_config(
    cycle_type: Union[str, CycleType],
    reset_day: int,
    reset_month: Optional[int] = None,
) -> CycleConfig:
    """Validate cycle fields coming from an admin edit.

    Args:
        cycle_type: "monthly" or "yearly"
        reset_day: Day of month on which a new period begins (1-31)
        reset_month: Month of the reset for yearly cycles (1-12)

    Returns:
        Validated CycleConfig

    Raises:
        ValidationError: If the combination is not a valid cycle
    """
    try:
        kind = CycleType(cycle_type)
    except ValueError:
        raise ValidationError(
            f"Unknown target cycle '{cycle_type}'. Supported cycles: monthly, yearly"
        )

    if not 1 <= reset_day <= 31:
        raise ValidationError(f"Reset day must be between 1 and 31, got {reset_day}")

    if kind == CycleType.YEARLY:
        if reset_month is None:
            raise ValidationError("Yearly target cycles require a reset month")
        if not 1 <= reset_month <= 12:
            raise ValidationError(f"Reset month must be between 1 and 12, got {reset_month}")
    elif reset_month is not None:
        raise ValidationError("Reset month only applies to yearly target cycles")

    return CycleConfig(cycle_type=kind, reset_day=reset_day, reset_month=reset_month)
