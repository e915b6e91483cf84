"""Sale domain service."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from salesboard.database.base import Database
from salesboard.domain.entities import Sale as SaleEntity
from salesboard.domain.errors import NotFoundError, ValidationError, agent_not_found, sale_not_found
from salesboard.domain.money import validate_money


class SaleService:
    """Service for recording and correcting sales."""

    def __init__(self, db: Database):
        """Initialize sale service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_sale(
        self,
        agent_id: int,
        amount: Decimal,
        client_name: str,
        units: int = 1,
        category: Optional[str] = None,
        description: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Record a sale.

        Args:
            agent_id: Agent who made the sale
            amount: Sale amount (non-negative)
            client_name: Client name
            units: Units sold (non-negative)
            category: Sale category, defaults to the agent's category
            description: Optional description
            created_at: Optional timestamp, defaults to now

        Returns:
            Sale ID

        Raises:
            NotFoundError: If agent not found
            ValidationError: If the agent is inactive or figures are invalid
        """
        agent = self.db.get_agent(agent_id)
        if agent is None:
            raise NotFoundError(agent_not_found(agent_id))
        if not agent.is_active:
            raise ValidationError(f"Agent {agent_id} is inactive")

        _validate_figures(amount, units)
        if not client_name.strip():
            raise ValidationError("Client name is required")

        return self.db.create_sale(
            agent_id=agent_id,
            amount=amount,
            units=units,
            category=category or agent.category,
            client_name=client_name,
            description=description,
            created_at=created_at,
        )

    def get_sale(self, sale_id: int) -> Optional[SaleEntity]:
        """Get sale by ID."""
        return self.db.get_sale(sale_id)

    def list_sales(
        self,
        agent_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[SaleEntity]:
        """List sales, newest first.

        Args:
            agent_id: Optional agent filter
            start: Optional inclusive lower bound
            end: Optional exclusive upper bound
        """
        agent_ids = [agent_id] if agent_id is not None else None
        return self.db.list_sales(agent_ids=agent_ids, start=start, end=end)

    def update_sale(
        self,
        sale_id: int,
        amount: Optional[Decimal] = None,
        units: Optional[int] = None,
        category: Optional[str] = None,
        client_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> SaleEntity:
        """Correct a sale. The timestamp never changes, so the sale stays in its period.

        Raises:
            NotFoundError: If sale not found
            ValidationError: If figures are negative or finer than a cent
        """
        sale = self.db.get_sale(sale_id)
        if sale is None:
            raise NotFoundError(sale_not_found(sale_id))

        _validate_figures(
            amount if amount is not None else sale.amount,
            units if units is not None else sale.units,
        )

        changes = {
            key: value
            for key, value in {
                "amount": amount,
                "units": units,
                "category": category,
                "client_name": client_name,
                "description": description,
            }.items()
            if value is not None
        }
        if changes:
            self.db.update_sale(sale_id, **changes)
        return self.db.get_sale(sale_id)

    def delete_sale(self, sale_id: int) -> None:
        """Delete a sale.

        Raises:
            NotFoundError: If sale not found
        """
        if self.db.get_sale(sale_id) is None:
            raise NotFoundError(sale_not_found(sale_id))
        self.db.delete_sale(sale_id)


def _validate_figures(amount: Decimal, units: int) -> None:
    validate_money(amount, "Sale amount")
    if units < 0:
        raise ValidationError(f"Sale units cannot be negative, got {units}")
