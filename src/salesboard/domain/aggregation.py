"""Achieved volume/units for one entity over one period."""

from collections.abc import Collection, Iterable
from datetime import datetime
from decimal import Decimal

from salesboard.domain.entities import (
    Achievement,
    CategoryAchievement,
    CategoryTarget,
    CycleEntity,
    Sale,
)


def aggregate(
    agent_ids: Collection[int],
    period_start: datetime,
    period_end: datetime,
    sales: Iterable[Sale],
    by_category: bool = False,
) -> Achievement:
    """Sum the sales of ``agent_ids`` with ``period_start <= created_at < period_end``.

    An agent aggregates over its own id; a team over the ids of its agents.
    Amounts are summed as Decimal so many small sales never drift.

    Args:
        agent_ids: Agents whose sales count toward the entity
        period_start: Inclusive lower bound
        period_end: Exclusive upper bound
        sales: Candidate sales (may include sales outside the window)
        by_category: If True, also group the figures by sale category

    Returns:
        Achievement; zero figures when nothing falls in the window
    """
    volume = Decimal("0")
    units = 0
    categories: dict[str, tuple[Decimal, int]] = {}

    for sale in sales:
        if sale.agent_id not in agent_ids:
            continue
        if not period_start <= sale.created_at < period_end:
            continue
        volume += sale.amount
        units += sale.units
        if by_category:
            cat_volume, cat_units = categories.get(sale.category, (Decimal("0"), 0))
            categories[sale.category] = (cat_volume + sale.amount, cat_units + sale.units)

    return Achievement(
        volume=volume,
        units=units,
        by_category={
            name: CategoryAchievement(category=name, volume=cat_volume, units=cat_units)
            for name, (cat_volume, cat_units) in sorted(categories.items())
        },
    )


def category_breakdown(
    achievement: Achievement, targets: Iterable[CategoryTarget]
) -> list[dict]:
    """Pair each category target with the achieved figures for its category."""
    breakdown = []
    for target in targets:
        achieved = achievement.by_category.get(
            target.category_name, CategoryAchievement(category=target.category_name)
        )
        breakdown.append(
            {
                "category_id": target.category_id,
                "category_name": target.category_name,
                "volume_target": str(target.volume_target),
                "units_target": target.units_target,
                "achieved_volume": str(achieved.volume),
                "achieved_units": achieved.units,
            }
        )
    return breakdown


def summed_category_targets(targets: Iterable[CategoryTarget]) -> tuple[Decimal, int]:
    """Total volume and units across a set of category targets."""
    volume = Decimal("0")
    units = 0
    for target in targets:
        volume += target.volume_target
        units += target.units_target
    return volume, units


def effective_targets(entity: CycleEntity) -> tuple[Decimal, int]:
    """Targets an entity is measured against.

    A scalar target of zero falls back to the sum of the entity's category
    targets, so an entity configured only per category still has a total.
    """
    category_volume, category_units = summed_category_targets(entity.category_targets)
    volume = entity.target_volume if entity.target_volume > 0 else category_volume
    units = entity.target_units if entity.target_units > 0 else category_units
    return volume, units
