"""Domain model entities for salesboard.

These are pure data classes representing business concepts, independent of
database schema. Services and the cycle engine only ever see these types;
the ORM models stay behind the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Protocol


class EntityKind(str, Enum):
    """Kind of performance-tracked entity."""

    AGENT = "agent"
    TEAM = "team"


class CycleType(str, Enum):
    """Recurrence of a target cycle."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class CycleConfig:
    """Cycle configuration of an agent or team."""

    cycle_type: CycleType = CycleType.MONTHLY
    reset_day: int = 1
    reset_month: Optional[int] = None


@dataclass(frozen=True)
class Period:
    """One concrete occurrence of a cycle.

    ``end`` is exclusive and equals the next reset instant.
    """

    start: datetime
    end: datetime

    @property
    def next_reset(self) -> datetime:
        return self.end

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


@dataclass(frozen=True)
class Category:
    """Sale category domain entity."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Currency:
    """Currency shown next to every sales amount."""

    symbol: str
    code: str
    name: str


@dataclass(frozen=True)
class CategoryTarget:
    """Per-category sub-target attached to an agent or team."""

    id: int
    entity_kind: EntityKind
    entity_id: int
    category_id: int
    category_name: str
    volume_target: Decimal
    units_target: int


@dataclass(frozen=True)
class Team:
    """Team domain entity."""

    id: int
    name: str
    color: str
    target_volume: Decimal
    target_units: int
    cycle: CycleConfig
    cycle_start: Optional[datetime]
    next_reset: Optional[datetime]
    is_active: bool
    created_at: datetime
    category_targets: tuple[CategoryTarget, ...] = ()

    @property
    def kind(self) -> EntityKind:
        return EntityKind.TEAM

    @property
    def current_period(self) -> Optional[Period]:
        return _stored_period(self.cycle_start, self.next_reset)


@dataclass(frozen=True)
class Agent:
    """Sales agent domain entity."""

    id: int
    name: str
    team_id: int
    category: str
    target_volume: Decimal
    target_units: int
    cycle: CycleConfig
    cycle_start: Optional[datetime]
    next_reset: Optional[datetime]
    is_active: bool
    created_at: datetime
    photo: Optional[str] = None
    category_targets: tuple[CategoryTarget, ...] = ()

    @property
    def kind(self) -> EntityKind:
        return EntityKind.AGENT

    @property
    def current_period(self) -> Optional[Period]:
        return _stored_period(self.cycle_start, self.next_reset)


class CycleEntity(Protocol):
    """Anything the cycle engine can roll forward: an Agent or a Team."""

    id: int
    name: str
    target_volume: Decimal
    target_units: int
    cycle: CycleConfig
    category_targets: tuple[CategoryTarget, ...]

    @property
    def kind(self) -> EntityKind: ...

    @property
    def current_period(self) -> Optional[Period]: ...


@dataclass(frozen=True)
class Sale:
    """Sale domain entity."""

    id: int
    agent_id: int
    amount: Decimal
    units: int
    category: str
    client_name: str
    created_at: datetime
    description: Optional[str] = None


@dataclass(frozen=True)
class CategoryAchievement:
    """Achieved figures for one category within a period."""

    category: str
    volume: Decimal = Decimal("0")
    units: int = 0


@dataclass(frozen=True)
class Achievement:
    """Achieved figures of one entity for one period."""

    volume: Decimal = Decimal("0")
    units: int = 0
    by_category: dict[str, CategoryAchievement] = field(default_factory=dict)


@dataclass(frozen=True)
class TargetHistory:
    """Immutable snapshot of one completed period for one entity."""

    id: int
    entity_kind: EntityKind
    entity_id: int
    period_start: datetime
    period_end: datetime
    target_volume: Decimal
    target_units: int
    achieved_volume: Decimal
    achieved_units: int
    category_breakdown: tuple[dict, ...]
    created_at: datetime


@dataclass(frozen=True)
class CycleTransition:
    """Result of closing one elapsed period and opening the next."""

    entity_kind: EntityKind
    entity_id: int
    closed: Period
    opened: Period
    history_id: int

    def to_payload(self) -> dict:
        return {
            "entity_type": self.entity_kind.value,
            "entity_id": self.entity_id,
            "history_id": self.history_id,
            "closed_period_start": self.closed.start,
            "closed_period_end": self.closed.end,
            "period_start": self.opened.start,
            "period_end": self.opened.end,
            "next_reset": self.opened.next_reset,
        }


@dataclass(frozen=True)
class LeaderboardRow:
    """One agent or team line of the TV dashboard."""

    entity_kind: EntityKind
    entity_id: int
    name: str
    rank: int
    period: Period
    target_volume: Decimal
    target_units: int
    achievement: Achievement
    team_id: Optional[int] = None

    @property
    def volume_progress(self) -> Decimal:
        if self.target_volume <= 0:
            return Decimal("0")
        return (self.achievement.volume * 100 / self.target_volume).quantize(Decimal("0.1"))

    @property
    def units_progress(self) -> Decimal:
        if self.target_units <= 0:
            return Decimal("0")
        return (Decimal(self.achievement.units) * 100 / self.target_units).quantize(Decimal("0.1"))


def _stored_period(start: Optional[datetime], end: Optional[datetime]) -> Optional[Period]:
    if start is None or end is None:
        return None
    return Period(start=start, end=end)
