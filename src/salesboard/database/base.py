"""Abstract database interface."""

from abc import ABC, abstractmethod
from collections.abc import Collection
from typing import Optional, Any
from datetime import datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from salesboard.domain.entities import (
    Agent,
    Category,
    CategoryTarget,
    CycleConfig,
    EntityKind,
    Sale,
    TargetHistory,
    Team,
)


class Database(ABC):
    """Abstract database interface for salesboard."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted work so the session can be used again."""
        pass

    # Team operations
    @abstractmethod
    def create_team(
        self,
        name: str,
        color: str,
        target_volume: Decimal,
        target_units: int,
        cycle: CycleConfig,
    ) -> int:
        """Create a team. Returns team ID."""
        pass

    @abstractmethod
    def get_team(self, team_id: int) -> Optional[Team]:
        """Get team by ID."""
        pass

    @abstractmethod
    def get_team_by_name(self, name: str) -> Optional[Team]:
        """Get team by name."""
        pass

    @abstractmethod
    def list_teams(self, include_inactive: bool = False) -> list[Team]:
        """List teams, active only unless include_inactive is set."""
        pass

    @abstractmethod
    def update_team(self, team_id: int, **changes: Any) -> None:
        """Update team columns (name, color, target_volume, target_units, cycle, is_active)."""
        pass

    @abstractmethod
    def delete_team(self, team_id: int) -> None:
        """Delete a team."""
        pass

    @abstractmethod
    def get_team_agent_count(self, team_id: int) -> int:
        """Get count of agents (active or not) assigned to a team."""
        pass

    # Agent operations
    @abstractmethod
    def create_agent(
        self,
        name: str,
        team_id: int,
        category: str,
        target_volume: Decimal,
        target_units: int,
        cycle: CycleConfig,
        photo: Optional[str] = None,
    ) -> int:
        """Create an agent. Returns agent ID."""
        pass

    @abstractmethod
    def get_agent(self, agent_id: int) -> Optional[Agent]:
        """Get agent by ID."""
        pass

    @abstractmethod
    def get_agent_by_name(self, name: str) -> Optional[Agent]:
        """Get agent by name."""
        pass

    @abstractmethod
    def list_agents(
        self, team_id: Optional[int] = None, include_inactive: bool = False
    ) -> list[Agent]:
        """List agents, optionally filtered by team."""
        pass

    @abstractmethod
    def update_agent(self, agent_id: int, **changes: Any) -> None:
        """Update agent columns (name, team_id, category, targets, cycle, photo, is_active)."""
        pass

    @abstractmethod
    def delete_agent(self, agent_id: int) -> None:
        """Hard-delete an agent. Only valid while no sale references it."""
        pass

    @abstractmethod
    def get_agent_sale_count(self, agent_id: int) -> int:
        """Get count of sales recorded for an agent."""
        pass

    # Cycle state
    @abstractmethod
    def update_cycle_state(
        self,
        entity_kind: EntityKind,
        entity_id: int,
        cycle_start: Optional[datetime],
        next_reset: Optional[datetime],
    ) -> None:
        """Store the current period boundaries of an entity (None clears them)."""
        pass

    @abstractmethod
    def close_period(
        self,
        entity_kind: EntityKind,
        entity_id: int,
        period_start: datetime,
        period_end: datetime,
        target_volume: Decimal,
        target_units: int,
        achieved_volume: Decimal,
        achieved_units: int,
        category_breakdown: list[dict],
        next_cycle_start: datetime,
        next_reset: datetime,
    ) -> int:
        """Write a history record and advance the entity in one transaction.

        Either both the history row and the new cycle state are committed,
        or neither is. Returns the history record ID.
        """
        pass

    @abstractmethod
    def list_target_history(
        self, entity_kind: EntityKind, entity_id: int
    ) -> list[TargetHistory]:
        """List history records of an entity, oldest period first."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories."""
        pass

    @abstractmethod
    def replace_category_targets(
        self,
        entity_kind: EntityKind,
        entity_id: int,
        targets: list[tuple[int, Decimal, int]],
    ) -> None:
        """Delete every category target of an entity and insert the given ones.

        Args:
            targets: (category_id, volume_target, units_target) tuples
        """
        pass

    @abstractmethod
    def list_category_targets(
        self, entity_kind: EntityKind, entity_id: int
    ) -> list[CategoryTarget]:
        """List category targets of an entity."""
        pass

    # Sale operations
    @abstractmethod
    def create_sale(
        self,
        agent_id: int,
        amount: Decimal,
        units: int,
        category: str,
        client_name: str,
        description: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Create a sale. Returns sale ID."""
        pass

    @abstractmethod
    def get_sale(self, sale_id: int) -> Optional[Sale]:
        """Get sale by ID."""
        pass

    @abstractmethod
    def update_sale(self, sale_id: int, **changes: Any) -> None:
        """Update sale columns (amount, units, category, client_name, description)."""
        pass

    @abstractmethod
    def delete_sale(self, sale_id: int) -> None:
        """Delete a sale."""
        pass

    @abstractmethod
    def list_sales(
        self,
        agent_ids: Optional[Collection[int]] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Sale]:
        """List sales with optional filters, newest first.

        Args:
            agent_ids: Optional agent ID filter
            start: Optional inclusive lower bound on created_at
            end: Optional exclusive upper bound on created_at
        """
        pass

    # System settings
    @abstractmethod
    def get_setting(self, key: str) -> Optional[str]:
        """Get a setting value, or None if it was never set."""
        pass

    @abstractmethod
    def set_settings(self, values: dict[str, str]) -> None:
        """Insert or update several settings in one transaction."""
        pass
