"""Shared pytest fixtures for salesboard tests."""

import os
import tempfile
from datetime import datetime
from decimal import Decimal

import pytest
from click.testing import CliRunner

from salesboard.database.factories import create_sqlite_database
from salesboard.domain.agent import AgentService
from salesboard.domain.category import CategoryService
from salesboard.domain.sale import SaleService
from salesboard.domain.settings import SettingsService
from salesboard.domain.team import TeamService


class FakeClock:
    """Settable clock returning naive UTC datetimes."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests that pass --db-path
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def team_service(temp_db):
    return TeamService(temp_db)


@pytest.fixture
def agent_service(temp_db):
    return AgentService(temp_db)


@pytest.fixture
def sale_service(temp_db):
    return SaleService(temp_db)


@pytest.fixture
def category_service(temp_db):
    return CategoryService(temp_db)


@pytest.fixture
def settings_service(temp_db):
    return SettingsService(temp_db)


@pytest.fixture
def clock():
    """Clock fixed at 2024-03-10 12:00 UTC; tests move it as needed."""
    return FakeClock(datetime(2024, 3, 10, 12, 0))


@pytest.fixture
def sample_team(team_service):
    """A monthly team resetting on the 1st with a 100k target."""
    team_id = team_service.create_team(
        name="North", target_volume=Decimal("100000"), target_units=40
    )
    return team_service.get_team(team_id)


@pytest.fixture
def sample_agent(agent_service, sample_team):
    """A monthly agent of the sample team with a 20k target."""
    agent_id = agent_service.create_agent(
        name="Ana",
        team_id=sample_team.id,
        category="Solar",
        target_volume=Decimal("20000"),
        target_units=8,
    )
    return agent_service.get_agent(agent_id)


@pytest.fixture
def cli_runner():
    """Create a CLI test runner."""
    return CliRunner()
