"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the cycle engine and services
never touch ORM instances.
"""

from salesboard.domain import entities as domain
from salesboard.database.models import (
    Agent as ORMAgent,
    Category as ORMCategory,
    CategoryTarget as ORMCategoryTarget,
    Sale as ORMSale,
    TargetHistory as ORMTargetHistory,
    Team as ORMTeam,
)


def cycle_config_to_domain(orm_entity: ORMAgent | ORMTeam) -> domain.CycleConfig:
    """Build the CycleConfig stored on an agent or team row."""
    return domain.CycleConfig(
        cycle_type=domain.CycleType(orm_entity.target_cycle),
        reset_day=orm_entity.reset_day,
        reset_month=orm_entity.reset_month,
    )


def category_target_to_domain(orm_target: ORMCategoryTarget) -> domain.CategoryTarget:
    """Convert SQLAlchemy CategoryTarget model to domain CategoryTarget entity."""
    return domain.CategoryTarget(
        id=orm_target.id,
        entity_kind=domain.EntityKind(orm_target.entity_kind),
        entity_id=orm_target.entity_id,
        category_id=orm_target.category_id,
        category_name=orm_target.category.name,
        volume_target=orm_target.volume_target,
        units_target=orm_target.units_target,
    )


def team_to_domain(
    orm_team: ORMTeam, category_targets: tuple[domain.CategoryTarget, ...] = ()
) -> domain.Team:
    """Convert SQLAlchemy Team model to domain Team entity."""
    return domain.Team(
        id=orm_team.id,
        name=orm_team.name,
        color=orm_team.color,
        target_volume=orm_team.target_volume,
        target_units=orm_team.target_units,
        cycle=cycle_config_to_domain(orm_team),
        cycle_start=orm_team.cycle_start,
        next_reset=orm_team.next_reset,
        is_active=orm_team.is_active,
        created_at=orm_team.created_at,
        category_targets=category_targets,
    )


def agent_to_domain(
    orm_agent: ORMAgent, category_targets: tuple[domain.CategoryTarget, ...] = ()
) -> domain.Agent:
    """Convert SQLAlchemy Agent model to domain Agent entity."""
    return domain.Agent(
        id=orm_agent.id,
        name=orm_agent.name,
        team_id=orm_agent.team_id,
        category=orm_agent.category,
        target_volume=orm_agent.target_volume,
        target_units=orm_agent.target_units,
        cycle=cycle_config_to_domain(orm_agent),
        cycle_start=orm_agent.cycle_start,
        next_reset=orm_agent.next_reset,
        is_active=orm_agent.is_active,
        created_at=orm_agent.created_at,
        photo=orm_agent.photo,
        category_targets=category_targets,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        created_at=orm_category.created_at,
    )


def sale_to_domain(orm_sale: ORMSale) -> domain.Sale:
    """Convert SQLAlchemy Sale model to domain Sale entity."""
    return domain.Sale(
        id=orm_sale.id,
        agent_id=orm_sale.agent_id,
        amount=orm_sale.amount,
        units=orm_sale.units,
        category=orm_sale.category,
        client_name=orm_sale.client_name,
        created_at=orm_sale.created_at,
        description=orm_sale.description,
    )


def target_history_to_domain(orm_history: ORMTargetHistory) -> domain.TargetHistory:
    """Convert SQLAlchemy TargetHistory model to domain TargetHistory entity."""
    return domain.TargetHistory(
        id=orm_history.id,
        entity_kind=domain.EntityKind(orm_history.entity_kind),
        entity_id=orm_history.entity_id,
        period_start=orm_history.period_start,
        period_end=orm_history.period_end,
        target_volume=orm_history.target_volume,
        target_units=orm_history.target_units,
        achieved_volume=orm_history.achieved_volume,
        achieved_units=orm_history.achieved_units,
        category_breakdown=tuple(orm_history.category_breakdown or ()),
        created_at=orm_history.created_at,
    )
