"""Leaderboard read path for the TV dashboard.

Achieved figures are always derived from sales through the aggregator at
read time; no running totals are stored anywhere.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from salesboard.database.base import Database
from salesboard.domain.aggregation import aggregate, effective_targets
from salesboard.domain.cycle_reset import Clock, utc_now
from salesboard.domain.cycles import compute_current_period
from salesboard.domain.entities import (
    CycleEntity,
    LeaderboardRow,
    Period,
    Sale,
)


@dataclass(frozen=True)
class Dashboard:
    """Snapshot of everything the TV display renders."""

    generated_at: datetime
    agents: tuple[LeaderboardRow, ...]
    teams: tuple[LeaderboardRow, ...]
    recent_sales: tuple[Sale, ...]


class DashboardService:
    """Service for building leaderboard snapshots."""

    def __init__(self, db: Database, clock: Clock = utc_now, recent_limit: int = 10):
        """Initialize dashboard service.

        Args:
            db: Database instance
            clock: Callable returning the current naive UTC datetime
            recent_limit: Number of latest sales to include
        """
        self.db = db
        self.clock = clock
        self.recent_limit = recent_limit

    def current_period(self, entity: CycleEntity, now: datetime) -> Period:
        """Stored period when it still contains ``now``, otherwise a computed one.

        The reset engine may lag up to one pass behind; the display should
        already show the new period in that window.
        """
        stored = entity.current_period
        if stored is not None and stored.contains(now):
            return stored
        return compute_current_period(entity.cycle, now)

    def build(self) -> Dashboard:
        """Build the ranked dashboard for the current instant."""
        now = self.clock()
        agents = self.db.list_agents()
        teams = self.db.list_teams()

        periods = {
            (entity.kind, entity.id): self.current_period(entity, now)
            for entity in [*agents, *teams]
        }
        earliest = min((period.start for period in periods.values()), default=now)
        # One read covers every entity's window; the aggregator filters per entity
        sales = self.db.list_sales(start=earliest)

        members: dict[int, set[int]] = {team.id: set() for team in teams}
        for agent in self.db.list_agents(include_inactive=True):
            members.setdefault(agent.team_id, set()).add(agent.id)

        agent_rows = self._rank(
            [
                (agent, periods[(agent.kind, agent.id)], {agent.id}, agent.team_id)
                for agent in agents
            ],
            sales,
        )
        team_rows = self._rank(
            [
                (team, periods[(team.kind, team.id)], members.get(team.id, set()), None)
                for team in teams
            ],
            sales,
        )

        return Dashboard(
            generated_at=now,
            agents=tuple(agent_rows),
            teams=tuple(team_rows),
            recent_sales=tuple(sales[: self.recent_limit]),
        )

    def _rank(
        self,
        entries: list[tuple[CycleEntity, Period, set[int], Optional[int]]],
        sales: list[Sale],
    ) -> list[LeaderboardRow]:
        scored = []
        for entity, period, agent_ids, team_id in entries:
            achievement = aggregate(
                agent_ids,
                period.start,
                period.end,
                sales,
                by_category=bool(entity.category_targets),
            )
            scored.append((entity, period, achievement, team_id))

        scored.sort(key=lambda item: (-item[2].volume, -item[2].units, item[0].name))

        rows = []
        for rank, (entity, period, achievement, team_id) in enumerate(scored, start=1):
            target_volume, target_units = effective_targets(entity)
            rows.append(
                LeaderboardRow(
                    entity_kind=entity.kind,
                    entity_id=entity.id,
                    name=entity.name,
                    rank=rank,
                    period=period,
                    target_volume=target_volume,
                    target_units=target_units,
                    achievement=achievement,
                    team_id=team_id,
                )
            )
        return rows
