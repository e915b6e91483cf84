"""Tests for the SQLAlchemy database returning domain models."""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from salesboard.database import models
from salesboard.domain import entities
from salesboard.domain.entities import CycleConfig, CycleType, EntityKind


@pytest.fixture
def team_id(temp_db):
    return temp_db.create_team(
        name="North",
        color="#123456",
        target_volume=Decimal("5000"),
        target_units=10,
        cycle=CycleConfig(cycle_type=CycleType.YEARLY, reset_day=15, reset_month=4),
    )


@pytest.fixture
def agent_id(temp_db, team_id):
    return temp_db.create_agent(
        name="Ana",
        team_id=team_id,
        category="Solar",
        target_volume=Decimal("1000"),
        target_units=2,
        cycle=CycleConfig(),
    )


def close(temp_db, agent_id, start, end, following_end, volume="0"):
    return temp_db.close_period(
        entity_kind=EntityKind.AGENT,
        entity_id=agent_id,
        period_start=start,
        period_end=end,
        target_volume=Decimal("1000"),
        target_units=2,
        achieved_volume=Decimal(volume),
        achieved_units=0,
        category_breakdown=[],
        next_cycle_start=end,
        next_reset=following_end,
    )


class TestEntities:
    """The database hands back domain entities, not ORM rows."""

    def test_get_team_returns_domain_model(self, temp_db, team_id):
        team = temp_db.get_team(team_id)

        assert isinstance(team, entities.Team)
        assert team.color == "#123456"
        assert team.cycle == CycleConfig(CycleType.YEARLY, 15, 4)
        assert team.kind == EntityKind.TEAM
        assert isinstance(team.created_at, datetime)

    def test_get_agent_returns_domain_model(self, temp_db, agent_id, team_id):
        agent = temp_db.get_agent(agent_id)

        assert isinstance(agent, entities.Agent)
        assert agent.team_id == team_id
        assert agent.target_volume == Decimal("1000")
        assert agent.kind == EntityKind.AGENT
        assert agent.current_period is None

    def test_missing_rows_return_none(self, temp_db):
        assert temp_db.get_team(1) is None
        assert temp_db.get_agent(1) is None
        assert temp_db.get_sale(1) is None
        assert temp_db.get_category_by_name("Solar") is None

    def test_sale_round_trip(self, temp_db, agent_id):
        sale_id = temp_db.create_sale(
            agent_id=agent_id,
            amount=Decimal("1234.56"),
            units=3,
            category="Solar",
            client_name="ACME",
            description="Roof",
            created_at=datetime(2024, 3, 5, 10, 0),
        )

        sale = temp_db.get_sale(sale_id)
        assert isinstance(sale, entities.Sale)
        assert sale.amount == Decimal("1234.56")
        assert sale.description == "Roof"
        assert sale.created_at == datetime(2024, 3, 5, 10, 0)


class TestUpdates:
    def test_update_team_columns_and_cycle(self, temp_db, team_id):
        temp_db.update_team(team_id, name="South", cycle=CycleConfig(reset_day=10))

        team = temp_db.get_team(team_id)
        assert team.name == "South"
        assert team.cycle == CycleConfig(CycleType.MONTHLY, 10, None)

    def test_update_rejects_unknown_field(self, temp_db, team_id):
        with pytest.raises(ValueError):
            temp_db.update_team(team_id, cycle_start=datetime(2024, 1, 1))

    def test_update_cycle_state(self, temp_db, agent_id):
        temp_db.update_cycle_state(
            EntityKind.AGENT, agent_id, datetime(2024, 3, 1), datetime(2024, 4, 1)
        )
        assert temp_db.get_agent(agent_id).current_period == entities.Period(
            datetime(2024, 3, 1), datetime(2024, 4, 1)
        )

        temp_db.update_cycle_state(EntityKind.AGENT, agent_id, None, None)
        assert temp_db.get_agent(agent_id).current_period is None

    def test_delete_agent_with_sales_is_refused(self, temp_db, agent_id):
        temp_db.create_sale(agent_id, Decimal("1"), 1, "Solar", "ACME")
        assert temp_db.get_agent_sale_count(agent_id) == 1
        with pytest.raises(ValueError):
            temp_db.delete_agent(agent_id)


class TestCategoryTargets:
    def test_replace_category_targets(self, temp_db, agent_id):
        solar = temp_db.create_category("Solar")
        storage = temp_db.create_category("Storage")

        temp_db.replace_category_targets(
            EntityKind.AGENT, agent_id, [(solar, Decimal("100"), 1), (storage, Decimal("50"), 2)]
        )
        temp_db.replace_category_targets(EntityKind.AGENT, agent_id, [(storage, Decimal("75"), 3)])

        targets = temp_db.list_category_targets(EntityKind.AGENT, agent_id)
        assert [(t.category_name, t.volume_target, t.units_target) for t in targets] == [
            ("Storage", Decimal("75"), 3)
        ]
        assert temp_db.get_agent(agent_id).category_targets == tuple(targets)

    def test_targets_are_scoped_by_entity_kind(self, temp_db, agent_id, team_id):
        solar = temp_db.create_category("Solar")
        temp_db.replace_category_targets(EntityKind.TEAM, team_id, [(solar, Decimal("9"), 0)])

        assert temp_db.list_category_targets(EntityKind.AGENT, agent_id) == []
        assert len(temp_db.list_category_targets(EntityKind.TEAM, team_id)) == 1


class TestClosePeriod:
    def test_close_period_writes_history_and_advances(self, temp_db, agent_id):
        history_id = close(
            temp_db,
            agent_id,
            datetime(2024, 3, 1),
            datetime(2024, 4, 1),
            datetime(2024, 5, 1),
            volume="350",
        )

        history = temp_db.list_target_history(EntityKind.AGENT, agent_id)
        assert [h.id for h in history] == [history_id]
        assert history[0].achieved_volume == Decimal("350")
        assert temp_db.get_agent(agent_id).current_period == entities.Period(
            datetime(2024, 4, 1), datetime(2024, 5, 1)
        )

    def test_closing_same_period_twice_rolls_back(self, temp_db, agent_id):
        close(temp_db, agent_id, datetime(2024, 3, 1), datetime(2024, 4, 1), datetime(2024, 5, 1))

        with pytest.raises(IntegrityError):
            close(temp_db, agent_id, datetime(2024, 3, 1), datetime(2024, 6, 1), datetime(2024, 7, 1))

        # Neither the duplicate history row nor the state change survived
        assert len(temp_db.list_target_history(EntityKind.AGENT, agent_id)) == 1
        assert temp_db.get_agent(agent_id).next_reset == datetime(2024, 5, 1)


class TestSales:
    def test_list_sales_filters_and_orders(self, temp_db, agent_id, team_id):
        other = temp_db.create_agent(
            name="Ben",
            team_id=team_id,
            category="Solar",
            target_volume=Decimal("0"),
            target_units=0,
            cycle=CycleConfig(),
        )
        temp_db.create_sale(agent_id, Decimal("1"), 1, "Solar", "A", created_at=datetime(2024, 3, 1))
        temp_db.create_sale(other, Decimal("10"), 1, "Solar", "B", created_at=datetime(2024, 3, 10))
        temp_db.create_sale(agent_id, Decimal("20"), 1, "Solar", "C", created_at=datetime(2024, 3, 20))
        temp_db.create_sale(agent_id, Decimal("40"), 1, "Solar", "D", created_at=datetime(2024, 4, 1))

        march = temp_db.list_sales(
            agent_ids=[agent_id], start=datetime(2024, 3, 1), end=datetime(2024, 4, 1)
        )

        assert [s.client_name for s in march] == ["C", "A"]
        assert [s.client_name for s in temp_db.list_sales()] == ["D", "C", "B", "A"]


class TestSettings:
    def test_unset_setting_is_none(self, temp_db):
        assert temp_db.get_setting("currency_code") is None

    def test_set_settings_inserts_then_updates(self, temp_db):
        temp_db.set_settings({"currency_code": "EUR", "currency_symbol": "€"})
        temp_db.set_settings({"currency_code": "GBP"})

        assert temp_db.get_setting("currency_code") == "GBP"
        assert temp_db.get_setting("currency_symbol") == "€"

    def test_rollback_discards_pending_changes(self, temp_db, team_id):
        session = temp_db._get_session()
        session.get(models.Team, team_id).name = "Renamed"

        temp_db.rollback()

        assert temp_db.get_team(team_id).name == "North"
