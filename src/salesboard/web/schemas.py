"""Request bodies accepted by the web API."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class CategoryIn(BaseModel):
    name: str


class CategoryTargetIn(BaseModel):
    category: str
    volume_target: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    units_target: int = Field(default=0, ge=0)

    def as_tuple(self) -> tuple[str, Decimal, int]:
        return (self.category, self.volume_target, self.units_target)


class CycleFields(BaseModel):
    target_volume: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    target_units: Optional[int] = Field(default=None, ge=0)
    target_cycle: Optional[str] = None
    reset_day: Optional[int] = None
    reset_month: Optional[int] = None
    category_targets: Optional[List[CategoryTargetIn]] = None

    def category_target_tuples(self) -> Optional[list[tuple[str, Decimal, int]]]:
        if self.category_targets is None:
            return None
        return [target.as_tuple() for target in self.category_targets]


class TeamIn(CycleFields):
    name: Optional[str] = None
    color: Optional[str] = None
    is_active: Optional[bool] = None


class AgentIn(CycleFields):
    name: Optional[str] = None
    team_id: Optional[int] = None
    category: Optional[str] = None
    photo: Optional[str] = None
    is_active: Optional[bool] = None


class SaleCreate(BaseModel):
    agent_id: int
    amount: Decimal = Field(ge=0, decimal_places=2)
    units: int = Field(default=1, ge=0)
    category: Optional[str] = None
    client_name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class SaleUpdate(BaseModel):
    amount: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    units: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = None
    client_name: Optional[str] = None
    description: Optional[str] = None


class TeamCreate(TeamIn):
    name: str


class AgentCreate(AgentIn):
    name: str
    team_id: int
    category: str


class CurrencyIn(BaseModel):
    symbol: Optional[str] = Field(default=None, min_length=1, max_length=5)
    code: Optional[str] = Field(default=None, pattern=r"^[A-Za-z]{3}$")
    name: Optional[str] = Field(default=None, min_length=1)
