"""Target cycle reset engine.

Rolls agents and teams forward through their target periods. Each elapsed
period is closed by writing one history record and advancing the stored
cycle state in a single database transaction, so a crash never loses a
period and never records one twice. A pass that finds several elapsed
periods (the process was down for a while) closes them one by one until the
entity sits in the period containing "now".
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, UTC

from salesboard.database.base import Database
from salesboard.domain.aggregation import aggregate, category_breakdown, effective_targets
from salesboard.domain.cycles import compute_current_period, next_period
from salesboard.domain.entities import (
    CycleEntity,
    CycleTransition,
    EntityKind,
    Period,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current instant as a naive UTC datetime."""
    return datetime.now(UTC).replace(tzinfo=None)


@dataclass(frozen=True)
class InitializedCycle:
    """An entity whose cycle state was established without history."""

    entity_kind: EntityKind
    entity_id: int
    period: Period

    def to_payload(self) -> dict:
        return {
            "entity_type": self.entity_kind.value,
            "entity_id": self.entity_id,
            "period_start": self.period.start,
            "period_end": self.period.end,
            "next_reset": self.period.next_reset,
        }


@dataclass(frozen=True)
class CycleFailure:
    """An entity that could not be processed during a pass."""

    entity_kind: EntityKind
    entity_id: int
    error: str


@dataclass
class ResetPassResult:
    """Outcome of one initialization or reset pass."""

    transitions: list[CycleTransition] = field(default_factory=list)
    initialized: list[InitializedCycle] = field(default_factory=list)
    failures: list[CycleFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class CycleResetEngine:
    """Detect elapsed target periods and roll entities forward."""

    def __init__(self, db: Database, clock: Clock = utc_now):
        """Initialize the reset engine.

        Args:
            db: Database instance
            clock: Callable returning the current naive UTC datetime
        """
        self.db = db
        self.clock = clock

    def cycle_entities(self) -> list[CycleEntity]:
        """Every active agent and active team."""
        entities: list[CycleEntity] = []
        entities.extend(self.db.list_agents())
        entities.extend(self.db.list_teams())
        return entities

    def initialize_target_cycles(self) -> ResetPassResult:
        """Establish period boundaries for entities that have none yet.

        Entities that already carry cycle state are left untouched, and no
        history is written, so calling this repeatedly is harmless.
        """
        now = self.clock()
        result = ResetPassResult()
        for entity in self.cycle_entities():
            if entity.current_period is not None:
                continue
            try:
                result.initialized.append(self._initialize(entity, now))
            except Exception as e:
                self.db.rollback()
                logger.exception(
                    "Failed to initialize target cycle for %s %s", entity.kind.value, entity.id
                )
                result.failures.append(CycleFailure(entity.kind, entity.id, str(e)))
        return result

    def check_and_reset(self) -> ResetPassResult:
        """Run one reset pass over every entity.

        A failure on one entity is logged and recorded in the result; the
        remaining entities are still processed and the failed one is
        re-evaluated on the next pass.
        """
        now = self.clock()
        result = ResetPassResult()
        for entity in self.cycle_entities():
            try:
                if entity.current_period is None:
                    result.initialized.append(self._initialize(entity, now))
                else:
                    self._roll_forward(entity, now, result.transitions)
            except Exception as e:
                self.db.rollback()
                logger.exception(
                    "Failed to reset target cycle for %s %s", entity.kind.value, entity.id
                )
                result.failures.append(CycleFailure(entity.kind, entity.id, str(e)))

        if result.transitions:
            logger.info("Closed %d target period(s)", len(result.transitions))
        return result

    def agent_ids_for(self, entity: CycleEntity) -> set[int]:
        """Agents whose sales count toward an entity."""
        if entity.kind == EntityKind.AGENT:
            return {entity.id}
        return {
            agent.id
            for agent in self.db.list_agents(team_id=entity.id, include_inactive=True)
        }

    def _initialize(self, entity: CycleEntity, now: datetime) -> InitializedCycle:
        period = compute_current_period(entity.cycle, now)
        self.db.update_cycle_state(entity.kind, entity.id, period.start, period.next_reset)
        logger.info(
            "Initialized target cycle for %s %s: %s -> %s",
            entity.kind.value,
            entity.id,
            period.start.isoformat(),
            period.end.isoformat(),
        )
        return InitializedCycle(entity.kind, entity.id, period)

    def _roll_forward(
        self, entity: CycleEntity, now: datetime, transitions: list[CycleTransition]
    ) -> None:
        period = entity.current_period
        if period is None or now < period.end:
            return

        agent_ids = self.agent_ids_for(entity)
        target_volume, target_units = effective_targets(entity)
        while now >= period.end:
            opened = next_period(entity.cycle, period)
            sales = self.db.list_sales(agent_ids=agent_ids, start=period.start, end=period.end)
            achievement = aggregate(
                agent_ids,
                period.start,
                period.end,
                sales,
                by_category=bool(entity.category_targets),
            )
            history_id = self.db.close_period(
                entity_kind=entity.kind,
                entity_id=entity.id,
                period_start=period.start,
                period_end=period.end,
                target_volume=target_volume,
                target_units=target_units,
                achieved_volume=achievement.volume,
                achieved_units=achievement.units,
                category_breakdown=category_breakdown(achievement, entity.category_targets),
                next_cycle_start=opened.start,
                next_reset=opened.next_reset,
            )
            transitions.append(
                CycleTransition(
                    entity_kind=entity.kind,
                    entity_id=entity.id,
                    closed=period,
                    opened=opened,
                    history_id=history_id,
                )
            )
            logger.info(
                "Closed %s %s period %s -> %s (volume %s, units %d)",
                entity.kind.value,
                entity.id,
                period.start.isoformat(),
                period.end.isoformat(),
                achievement.volume,
                achievement.units,
            )
            period = opened
