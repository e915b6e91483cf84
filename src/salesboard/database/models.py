"""SQLAlchemy models for salesboard database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every datetime column stores."""
    return datetime.now(UTC).replace(tzinfo=None)


class Team(Base):
    """Team model."""

    __tablename__ = "teams"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    color = Column(String, nullable=False, default="#2563eb")
    target_volume = Column(Numeric(12, 2), nullable=False, default=0)
    target_units = Column(Integer, nullable=False, default=0)
    target_cycle = Column(String, nullable=False, default="monthly")
    reset_day = Column(Integer, nullable=False, default=1)
    reset_month = Column(Integer, nullable=True)
    cycle_start = Column(DateTime, nullable=True)
    next_reset = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    agents = relationship("Agent", back_populates="team")


class Agent(Base):
    """Sales agent model."""

    __tablename__ = "agents"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    photo = Column(String, nullable=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    category = Column(String, nullable=False)
    target_volume = Column(Numeric(12, 2), nullable=False, default=0)
    target_units = Column(Integer, nullable=False, default=0)
    target_cycle = Column(String, nullable=False, default="monthly")
    reset_day = Column(Integer, nullable=False, default=1)
    reset_month = Column(Integer, nullable=True)
    cycle_start = Column(DateTime, nullable=True)
    next_reset = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    team = relationship("Team", back_populates="agents")
    sales = relationship("Sale", back_populates="agent")


class Category(Base):
    """Sale category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    targets = relationship("CategoryTarget", back_populates="category")


class CategoryTarget(Base):
    """Per-category target of an agent or a team."""

    __tablename__ = "category_targets"

    id = Column(Integer, primary_key=True)
    entity_kind = Column(String, nullable=False)
    entity_id = Column(Integer, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    volume_target = Column(Numeric(12, 2), nullable=False, default=0)
    units_target = Column(Integer, nullable=False, default=0)

    # At most one target per entity and category
    __table_args__ = (
        UniqueConstraint("entity_kind", "entity_id", "category_id", name="uq_entity_category"),
    )

    # Relationships
    category = relationship("Category", back_populates="targets")


class Sale(Base):
    """Sale model."""

    __tablename__ = "sales"

    id = Column(Integer, primary_key=True)
    agent_id = Column(Integer, ForeignKey("agents.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    units = Column(Integer, nullable=False, default=1)
    category = Column(String, nullable=False)
    client_name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Relationships
    agent = relationship("Agent", back_populates="sales")


class TargetHistory(Base):
    """Snapshot of one completed target period."""

    __tablename__ = "target_history"

    id = Column(Integer, primary_key=True)
    entity_kind = Column(String, nullable=False)
    entity_id = Column(Integer, nullable=False)
    period_start = Column(DateTime, nullable=False)
    period_end = Column(DateTime, nullable=False)
    target_volume = Column(Numeric(12, 2), nullable=False)
    target_units = Column(Integer, nullable=False)
    achieved_volume = Column(Numeric(12, 2), nullable=False)
    achieved_units = Column(Integer, nullable=False)
    category_breakdown = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # One record per entity and period
    __table_args__ = (
        UniqueConstraint("entity_kind", "entity_id", "period_start", name="uq_entity_period"),
    )



class SystemSetting(Base):
    """Key/value system setting, such as the display currency."""

    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True)
    key = Column(String, unique=True, nullable=False)
    value = Column(String, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # The web server touches the session from its event loop thread
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
