"""Team domain service."""

from decimal import Decimal
from typing import Optional

from salesboard.database.base import Database
from salesboard.domain.entities import EntityKind, Team as TeamEntity
from salesboard.domain.errors import (
    ConflictError,
    NotFoundError,
    duplicate_name,
    team_not_found,
)
from salesboard.domain.targets import merge_cycle, resolve_category_targets, validate_targets


class TeamService:
    """Service for managing teams."""

    def __init__(self, db: Database):
        """Initialize team service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_team(
        self,
        name: str,
        color: str = "#2563eb",
        target_volume: Decimal = Decimal("0"),
        target_units: int = 0,
        target_cycle: str = "monthly",
        reset_day: int = 1,
        reset_month: Optional[int] = None,
        category_targets: Optional[list[tuple[str, Decimal, int]]] = None,
    ) -> int:
        """Create a new team.

        Args:
            name: Team name
            color: Display color
            target_volume: Sales volume target per period
            target_units: Units target per period
            target_cycle: "monthly" or "yearly"
            reset_day: Day on which a new period begins
            reset_month: Month of the reset (yearly cycles only)
            category_targets: Optional (category name, volume, units) triples

        Returns:
            Team ID

        Raises:
            ConflictError: If team name already exists
            ValidationError: If targets or cycle fields are invalid
        """
        if self.db.get_team_by_name(name) is not None:
            raise ConflictError(duplicate_name("Team", name))

        validate_targets(target_volume, target_units)
        cycle = merge_cycle(None, target_cycle, reset_day, reset_month)
        rows = resolve_category_targets(self.db, category_targets or [])

        team_id = self.db.create_team(
            name=name,
            color=color,
            target_volume=target_volume,
            target_units=target_units,
            cycle=cycle,
        )
        if rows:
            self.db.replace_category_targets(EntityKind.TEAM, team_id, rows)
        return team_id

    def get_team(self, team_id: int) -> Optional[TeamEntity]:
        """Get team by ID.

        Args:
            team_id: Team ID

        Returns:
            Team entity or None if not found
        """
        return self.db.get_team(team_id)

    def list_teams(self, include_inactive: bool = False) -> list[TeamEntity]:
        """List teams."""
        return self.db.list_teams(include_inactive=include_inactive)

    def update_team(
        self,
        team_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None,
        is_active: Optional[bool] = None,
        target_volume: Optional[Decimal] = None,
        target_units: Optional[int] = None,
        target_cycle: Optional[str] = None,
        reset_day: Optional[int] = None,
        reset_month: Optional[int] = None,
        category_targets: Optional[list[tuple[str, Decimal, int]]] = None,
    ) -> TeamEntity:
        """Edit a team.

        Fields left as None are unchanged. Passing category_targets replaces
        every existing category target of the team. Changing a cycle field
        clears the stored cycle state; the next initialization re-establishes
        it without recording history for the interrupted period.

        Raises:
            NotFoundError: If team not found
            ConflictError: If the new name is taken
            ValidationError: If targets or cycle fields are invalid
        """
        team = self.db.get_team(team_id)
        if team is None:
            raise NotFoundError(team_not_found(team_id))

        changes: dict = {}
        if name is not None and name != team.name:
            existing = self.db.get_team_by_name(name)
            if existing is not None and existing.id != team_id:
                raise ConflictError(duplicate_name("Team", name))
            changes["name"] = name
        if color is not None:
            changes["color"] = color
        if is_active is not None:
            changes["is_active"] = is_active

        validate_targets(
            target_volume if target_volume is not None else team.target_volume,
            target_units if target_units is not None else team.target_units,
        )
        if target_volume is not None:
            changes["target_volume"] = target_volume
        if target_units is not None:
            changes["target_units"] = target_units

        cycle = merge_cycle(team.cycle, target_cycle, reset_day, reset_month)
        cycle_changed = cycle != team.cycle
        if cycle_changed:
            changes["cycle"] = cycle

        rows = None
        if category_targets is not None:
            rows = resolve_category_targets(self.db, category_targets)

        if changes:
            self.db.update_team(team_id, **changes)
        if cycle_changed:
            self.db.update_cycle_state(EntityKind.TEAM, team_id, None, None)
        if rows is not None:
            self.db.replace_category_targets(EntityKind.TEAM, team_id, rows)

        return self.db.get_team(team_id)

    def delete_team(self, team_id: int) -> bool:
        """Delete a team, or deactivate it while agents or history reference it.

        A team keeps its agents (active or not) and its closed periods, so
        their sales stay attributed to it.

        Args:
            team_id: Team ID to delete

        Returns:
            True if the team row was removed, False if it was deactivated

        Raises:
            NotFoundError: If team not found
        """
        team = self.db.get_team(team_id)
        if team is None:
            raise NotFoundError(team_not_found(team_id))

        agent_count = self.db.get_team_agent_count(team_id)
        has_history = bool(self.db.list_target_history(EntityKind.TEAM, team_id))
        if agent_count > 0 or has_history:
            self.db.update_team(team_id, is_active=False)
            return False

        self.db.delete_team(team_id)
        return True
