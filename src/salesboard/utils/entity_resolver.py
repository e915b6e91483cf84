"""Resolve agent and team references given on the command line."""

from salesboard.database.base import Database
from salesboard.domain.errors import NotFoundError, agent_not_found, team_not_found


def resolve_team(db: Database, team: str | int) -> int:
    """Resolve a team name or ID to a team ID.

    Numeric strings are treated as IDs, anything else as a name.

    Raises:
        NotFoundError: If no such team exists
    """
    team_id = _as_id(team)
    if team_id is not None:
        if db.get_team(team_id) is None:
            raise NotFoundError(team_not_found(team_id))
        return team_id

    found = db.get_team_by_name(str(team))
    if found is None:
        raise NotFoundError(f"Team '{team}' not found")
    return found.id


def resolve_agent(db: Database, agent: str | int) -> int:
    """Resolve an agent name or ID to an agent ID.

    Raises:
        NotFoundError: If no such agent exists
    """
    agent_id = _as_id(agent)
    if agent_id is not None:
        if db.get_agent(agent_id) is None:
            raise NotFoundError(agent_not_found(agent_id))
        return agent_id

    found = db.get_agent_by_name(str(agent))
    if found is None:
        raise NotFoundError(f"Agent '{agent}' not found")
    return found.id


def _as_id(value: str | int) -> int | None:
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
