"""Agent domain service."""

from decimal import Decimal
from typing import Optional

from salesboard.database.base import Database
from salesboard.domain.entities import Agent as AgentEntity, EntityKind
from salesboard.domain.errors import (
    ConflictError,
    NotFoundError,
    agent_not_found,
    duplicate_name,
    team_not_found,
)
from salesboard.domain.targets import merge_cycle, resolve_category_targets, validate_targets


class AgentService:
    """Service for managing sales agents."""

    def __init__(self, db: Database):
        """Initialize agent service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_agent(
        self,
        name: str,
        team_id: int,
        category: str,
        target_volume: Decimal = Decimal("0"),
        target_units: int = 0,
        target_cycle: str = "monthly",
        reset_day: int = 1,
        reset_month: Optional[int] = None,
        photo: Optional[str] = None,
        category_targets: Optional[list[tuple[str, Decimal, int]]] = None,
    ) -> int:
        """Create a new agent.

        Args:
            name: Agent display name
            team_id: Owning team
            category: Default sale category of the agent
            target_volume: Sales volume target per period
            target_units: Units target per period
            target_cycle: "monthly" or "yearly"
            reset_day: Day on which a new period begins
            reset_month: Month of the reset (yearly cycles only)
            photo: Optional photo URL
            category_targets: Optional (category name, volume, units) triples

        Returns:
            Agent ID

        Raises:
            NotFoundError: If the team does not exist
            ConflictError: If agent name already exists
            ValidationError: If targets or cycle fields are invalid
        """
        if self.db.get_team(team_id) is None:
            raise NotFoundError(team_not_found(team_id))
        if self.db.get_agent_by_name(name) is not None:
            raise ConflictError(duplicate_name("Agent", name))

        validate_targets(target_volume, target_units)
        cycle = merge_cycle(None, target_cycle, reset_day, reset_month)
        rows = resolve_category_targets(self.db, category_targets or [])

        agent_id = self.db.create_agent(
            name=name,
            team_id=team_id,
            category=category,
            target_volume=target_volume,
            target_units=target_units,
            cycle=cycle,
            photo=photo,
        )
        if rows:
            self.db.replace_category_targets(EntityKind.AGENT, agent_id, rows)
        return agent_id

    def get_agent(self, agent_id: int) -> Optional[AgentEntity]:
        """Get agent by ID.

        Args:
            agent_id: Agent ID

        Returns:
            Agent entity or None if not found
        """
        return self.db.get_agent(agent_id)

    def list_agents(
        self, team_id: Optional[int] = None, include_inactive: bool = False
    ) -> list[AgentEntity]:
        """List agents, optionally only those of one team."""
        return self.db.list_agents(team_id=team_id, include_inactive=include_inactive)

    def update_agent(
        self,
        agent_id: int,
        name: Optional[str] = None,
        team_id: Optional[int] = None,
        category: Optional[str] = None,
        target_volume: Optional[Decimal] = None,
        target_units: Optional[int] = None,
        target_cycle: Optional[str] = None,
        reset_day: Optional[int] = None,
        reset_month: Optional[int] = None,
        photo: Optional[str] = None,
        is_active: Optional[bool] = None,
        category_targets: Optional[list[tuple[str, Decimal, int]]] = None,
    ) -> AgentEntity:
        """Edit an agent.

        Fields left as None are unchanged. Passing category_targets replaces
        every existing category target of the agent. Changing a cycle field
        clears the stored cycle state.

        Raises:
            NotFoundError: If agent or new team not found
            ConflictError: If the new name is taken
            ValidationError: If targets or cycle fields are invalid
        """
        agent = self.db.get_agent(agent_id)
        if agent is None:
            raise NotFoundError(agent_not_found(agent_id))

        changes: dict = {}
        if name is not None and name != agent.name:
            existing = self.db.get_agent_by_name(name)
            if existing is not None and existing.id != agent_id:
                raise ConflictError(duplicate_name("Agent", name))
            changes["name"] = name
        if team_id is not None and team_id != agent.team_id:
            if self.db.get_team(team_id) is None:
                raise NotFoundError(team_not_found(team_id))
            changes["team_id"] = team_id
        if category is not None:
            changes["category"] = category
        if photo is not None:
            changes["photo"] = photo
        if is_active is not None:
            changes["is_active"] = is_active

        validate_targets(
            target_volume if target_volume is not None else agent.target_volume,
            target_units if target_units is not None else agent.target_units,
        )
        if target_volume is not None:
            changes["target_volume"] = target_volume
        if target_units is not None:
            changes["target_units"] = target_units

        cycle = merge_cycle(agent.cycle, target_cycle, reset_day, reset_month)
        cycle_changed = cycle != agent.cycle
        if cycle_changed:
            changes["cycle"] = cycle

        rows = None
        if category_targets is not None:
            rows = resolve_category_targets(self.db, category_targets)

        if changes:
            self.db.update_agent(agent_id, **changes)
        if cycle_changed:
            self.db.update_cycle_state(EntityKind.AGENT, agent_id, None, None)
        if rows is not None:
            self.db.replace_category_targets(EntityKind.AGENT, agent_id, rows)

        return self.db.get_agent(agent_id)

    def delete_agent(self, agent_id: int) -> bool:
        """Delete an agent, or deactivate it when sales reference it.

        Args:
            agent_id: Agent ID to delete

        Returns:
            True if the agent row was removed, False if it was deactivated

        Raises:
            NotFoundError: If agent not found
        """
        agent = self.db.get_agent(agent_id)
        if agent is None:
            raise NotFoundError(agent_not_found(agent_id))

        if self.db.get_agent_sale_count(agent_id) > 0:
            self.db.update_agent(agent_id, is_active=False)
            return False

        self.db.delete_agent(agent_id)
        return True
