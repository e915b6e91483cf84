"""Tests for the team, agent, sale and category services."""

from datetime import datetime
from decimal import Decimal

import pytest

from salesboard.domain.entities import CycleType, EntityKind
from salesboard.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
)


# Teams
def test_create_team_defaults(team_service):
    team_id = team_service.create_team("North")
    team = team_service.get_team(team_id)

    assert team.name == "North"
    assert team.color == "#2563eb"
    assert team.target_volume == Decimal("0")
    assert team.cycle.cycle_type == CycleType.MONTHLY
    assert team.cycle.reset_day == 1
    assert team.current_period is None
    assert team.is_active


def test_create_team_duplicate_name(team_service):
    team_service.create_team("North")
    with pytest.raises(ConflictError, match="already exists"):
        team_service.create_team("North")


def test_create_team_rejects_invalid_cycle(team_service):
    with pytest.raises(ValidationError):
        team_service.create_team("North", target_cycle="yearly", reset_day=1)


def test_create_team_rejects_negative_target(team_service):
    with pytest.raises(ValidationError):
        team_service.create_team("North", target_volume=Decimal("-1"))


def test_update_team_fields(team_service, sample_team):
    updated = team_service.update_team(
        sample_team.id, name="North East", color="#ff0000", target_units=50
    )

    assert updated.name == "North East"
    assert updated.color == "#ff0000"
    assert updated.target_units == 50
    assert updated.target_volume == sample_team.target_volume


def test_update_team_to_yearly(team_service, sample_team):
    updated = team_service.update_team(
        sample_team.id, target_cycle="yearly", reset_day=1, reset_month=7
    )
    assert updated.cycle.cycle_type == CycleType.YEARLY
    assert updated.cycle.reset_month == 7

    monthly = team_service.update_team(sample_team.id, target_cycle="monthly")
    assert monthly.cycle.cycle_type == CycleType.MONTHLY
    assert monthly.cycle.reset_month is None


def test_update_team_missing(team_service):
    with pytest.raises(NotFoundError):
        team_service.update_team(999, name="Nope")


def test_update_team_replaces_category_targets(team_service, category_service, sample_team):
    category_service.create_category("Solar")
    category_service.create_category("Storage")

    team_service.update_team(sample_team.id, category_targets=[("Solar", Decimal("100"), 1)])
    updated = team_service.update_team(
        sample_team.id, category_targets=[("Storage", Decimal("200"), 2)]
    )

    assert [t.category_name for t in updated.category_targets] == ["Storage"]
    assert updated.category_targets[0].volume_target == Decimal("200")


def test_category_targets_require_known_category(team_service, sample_team):
    with pytest.raises(NotFoundError, match="Category 'Wind' not found"):
        team_service.update_team(sample_team.id, category_targets=[("Wind", Decimal("1"), 0)])


def test_category_targets_reject_duplicates(team_service, category_service, sample_team):
    category_service.create_category("Solar")
    with pytest.raises(ValidationError):
        team_service.update_team(
            sample_team.id,
            category_targets=[("Solar", Decimal("1"), 0), ("Solar", Decimal("2"), 0)],
        )


def test_update_team_active_flag(team_service, sample_team):
    updated = team_service.update_team(sample_team.id, is_active=False)

    assert not updated.is_active
    assert team_service.list_teams() == []
    assert team_service.update_team(sample_team.id, is_active=True).is_active


def test_delete_team_with_agents_deactivates_it(team_service, sample_agent):
    assert team_service.delete_team(sample_agent.team_id) is False

    team = team_service.get_team(sample_agent.team_id)
    assert team is not None
    assert not team.is_active
    assert team_service.list_teams() == []
    assert [t.id for t in team_service.list_teams(include_inactive=True)] == [team.id]


def test_delete_team_after_agent_was_deactivated(
    team_service, agent_service, sale_service, sample_agent
):
    sale_service.create_sale(sample_agent.id, Decimal("10"), "ACME")
    assert agent_service.delete_agent(sample_agent.id) is False

    assert team_service.delete_team(sample_agent.team_id) is False
    assert not team_service.get_team(sample_agent.team_id).is_active


def test_delete_team_with_history_deactivates_it(team_service, temp_db, sample_team):
    temp_db.close_period(
        entity_kind=EntityKind.TEAM,
        entity_id=sample_team.id,
        period_start=datetime(2024, 2, 1),
        period_end=datetime(2024, 3, 1),
        target_volume=Decimal("100000"),
        target_units=40,
        achieved_volume=Decimal("0"),
        achieved_units=0,
        category_breakdown=[],
        next_cycle_start=datetime(2024, 3, 1),
        next_reset=datetime(2024, 4, 1),
    )

    assert team_service.delete_team(sample_team.id) is False
    assert not team_service.get_team(sample_team.id).is_active


def test_delete_unreferenced_team_removes_it(team_service, sample_team):
    assert team_service.delete_team(sample_team.id) is True
    assert team_service.get_team(sample_team.id) is None


def test_team_target_volume_limited_to_cents(team_service, category_service, sample_team):
    category_service.create_category("Solar")

    with pytest.raises(ValidationError, match="decimal places"):
        team_service.create_team("South", target_volume=Decimal("100.001"))

    with pytest.raises(ValidationError, match="decimal places"):
        team_service.update_team(
            sample_team.id, category_targets=[("Solar", Decimal("0.125"), 0)]
        )


# Agents
def test_create_agent(agent_service, sample_team):
    agent_id = agent_service.create_agent(
        name="Ana", team_id=sample_team.id, category="Solar", photo="https://example.com/a.png"
    )
    agent = agent_service.get_agent(agent_id)

    assert agent.team_id == sample_team.id
    assert agent.category == "Solar"
    assert agent.photo == "https://example.com/a.png"


def test_create_agent_unknown_team(agent_service):
    with pytest.raises(NotFoundError, match="Team 42 not found"):
        agent_service.create_agent(name="Ana", team_id=42, category="Solar")


def test_create_agent_duplicate_name(agent_service, sample_agent):
    with pytest.raises(ConflictError):
        agent_service.create_agent(name="Ana", team_id=sample_agent.team_id, category="Solar")


def test_list_agents_by_team(agent_service, team_service, sample_agent):
    other_team = team_service.create_team("South")
    agent_service.create_agent(name="Ben", team_id=other_team, category="Solar")

    assert [a.name for a in agent_service.list_agents()] == ["Ana", "Ben"]
    assert [a.name for a in agent_service.list_agents(team_id=other_team)] == ["Ben"]


def test_update_agent_moves_team(agent_service, team_service, sample_agent):
    other_team = team_service.create_team("South")

    updated = agent_service.update_agent(sample_agent.id, team_id=other_team)

    assert updated.team_id == other_team


def test_delete_agent_without_sales_removes_it(agent_service, sample_agent):
    assert agent_service.delete_agent(sample_agent.id) is True
    assert agent_service.get_agent(sample_agent.id) is None


def test_delete_agent_with_sales_deactivates_it(agent_service, sale_service, sample_agent):
    sale_service.create_sale(sample_agent.id, Decimal("10"), "ACME")

    assert agent_service.delete_agent(sample_agent.id) is False

    agent = agent_service.get_agent(sample_agent.id)
    assert agent is not None
    assert not agent.is_active
    assert agent_service.list_agents() == []
    assert len(agent_service.list_agents(include_inactive=True)) == 1


# Sales
def test_create_sale_defaults_category_to_agent(sale_service, sample_agent):
    sale_id = sale_service.create_sale(sample_agent.id, Decimal("99.95"), "ACME")
    sale = sale_service.get_sale(sale_id)

    assert sale.amount == Decimal("99.95")
    assert sale.units == 1
    assert sale.category == "Solar"
    assert sale.client_name == "ACME"


def test_create_sale_with_timestamp(sale_service, sample_agent):
    when = datetime(2024, 3, 1, 9, 30)
    sale_id = sale_service.create_sale(sample_agent.id, Decimal("1"), "ACME", created_at=when)
    assert sale_service.get_sale(sale_id).created_at == when


@pytest.mark.parametrize(
    "amount, units, client",
    [(Decimal("-1"), 1, "ACME"), (Decimal("1"), -1, "ACME"), (Decimal("1"), 1, "  ")],
)
def test_create_sale_validation(sale_service, sample_agent, amount, units, client):
    with pytest.raises(ValidationError):
        sale_service.create_sale(sample_agent.id, amount, client, units=units)


def test_sale_amount_limited_to_cents(sale_service, sample_agent):
    with pytest.raises(ValidationError, match="decimal places"):
        sale_service.create_sale(sample_agent.id, Decimal("10.005"), "ACME")

    sale_id = sale_service.create_sale(sample_agent.id, Decimal("10.500"), "ACME")
    assert sale_service.get_sale(sale_id).amount == Decimal("10.5")

    with pytest.raises(ValidationError, match="decimal places"):
        sale_service.update_sale(sale_id, amount=Decimal("0.001"))
    assert sale_service.get_sale(sale_id).amount == Decimal("10.5")


def test_create_sale_for_inactive_agent(sale_service, agent_service, sample_agent):
    agent_service.update_agent(sample_agent.id, is_active=False)
    with pytest.raises(ValidationError, match="inactive"):
        sale_service.create_sale(sample_agent.id, Decimal("1"), "ACME")


def test_create_sale_unknown_agent(sale_service):
    with pytest.raises(NotFoundError):
        sale_service.create_sale(404, Decimal("1"), "ACME")


def test_list_sales_window(sale_service, sample_agent):
    for day in (1, 15, 31):
        sale_service.create_sale(
            sample_agent.id, Decimal(day), "ACME", created_at=datetime(2024, 3, day)
        )

    sales = sale_service.list_sales(start=datetime(2024, 3, 1), end=datetime(2024, 3, 31))

    assert [s.amount for s in sales] == [Decimal("15"), Decimal("1")]


def test_update_sale_keeps_timestamp(sale_service, sample_agent):
    when = datetime(2024, 3, 5)
    sale_id = sale_service.create_sale(sample_agent.id, Decimal("10"), "ACME", created_at=when)

    sale = sale_service.update_sale(sale_id, amount=Decimal("12"), client_name="ACME Corp")

    assert sale.amount == Decimal("12")
    assert sale.client_name == "ACME Corp"
    assert sale.created_at == when


def test_update_sale_rejects_negative(sale_service, sample_agent):
    sale_id = sale_service.create_sale(sample_agent.id, Decimal("10"), "ACME")
    with pytest.raises(ValidationError):
        sale_service.update_sale(sale_id, units=-2)


def test_delete_sale(sale_service, sample_agent):
    sale_id = sale_service.create_sale(sample_agent.id, Decimal("10"), "ACME")
    sale_service.delete_sale(sale_id)
    assert sale_service.get_sale(sale_id) is None
    with pytest.raises(NotFoundError):
        sale_service.delete_sale(sale_id)


# Categories
def test_create_and_list_categories(category_service):
    category_service.create_category("Storage")
    category_service.create_category(" Solar ")

    assert [c.name for c in category_service.list_categories()] == ["Solar", "Storage"]


def test_create_category_validation(category_service):
    with pytest.raises(ValidationError):
        category_service.create_category("   ")
    category_service.create_category("Solar")
    with pytest.raises(ConflictError):
        category_service.create_category("Solar")


# Settings
def test_currency_defaults_to_us_dollar(settings_service):
    currency = settings_service.get_currency()
    assert (currency.symbol, currency.code, currency.name) == ("$", "USD", "US Dollar")


def test_set_currency_changes_only_given_parts(settings_service):
    settings_service.set_currency(symbol="Rs", code="lkr", name="Sri Lankan Rupee")
    updated = settings_service.set_currency(symbol="LKR ")

    assert (updated.symbol, updated.code, updated.name) == ("LKR", "LKR", "Sri Lankan Rupee")
    assert settings_service.get_currency() == updated


@pytest.mark.parametrize(
    "fields", [{"symbol": " "}, {"code": "EURO"}, {"code": "E1R"}, {"name": ""}]
)
def test_set_currency_validation(settings_service, fields):
    with pytest.raises(ValidationError):
        settings_service.set_currency(**fields)
    assert settings_service.get_currency().code == "USD"
