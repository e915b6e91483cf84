"""System settings domain service."""

from typing import Optional

from salesboard.database.base import Database
from salesboard.domain.entities import Currency
from salesboard.domain.errors import ValidationError

DEFAULT_CURRENCY = Currency(symbol="$", code="USD", name="US Dollar")

CURRENCY_SYMBOL = "currency_symbol"
CURRENCY_CODE = "currency_code"
CURRENCY_NAME = "currency_name"


class SettingsService:
    """Service for system-wide display settings."""

    def __init__(self, db: Database):
        """Initialize settings service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_currency(self) -> Currency:
        """Current currency, falling back to US dollars for unset parts."""
        return Currency(
            symbol=self.db.get_setting(CURRENCY_SYMBOL) or DEFAULT_CURRENCY.symbol,
            code=self.db.get_setting(CURRENCY_CODE) or DEFAULT_CURRENCY.code,
            name=self.db.get_setting(CURRENCY_NAME) or DEFAULT_CURRENCY.name,
        )

    def set_currency(
        self,
        symbol: Optional[str] = None,
        code: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Currency:
        """Change the currency. Parts left as None are unchanged.

        Args:
            symbol: Symbol printed before amounts, e.g. "€"
            code: Three-letter ISO 4217 code, e.g. "EUR"
            name: Display name, e.g. "Euro"

        Returns:
            The currency after the change

        Raises:
            ValidationError: If a given part is blank or the code is malformed
        """
        values: dict[str, str] = {}
        if symbol is not None:
            symbol = symbol.strip()
            if not symbol:
                raise ValidationError("Currency symbol is required")
            values[CURRENCY_SYMBOL] = symbol
        if code is not None:
            code = code.strip().upper()
            if len(code) != 3 or not code.isalpha():
                raise ValidationError(f"Currency code must be three letters, got '{code}'")
            values[CURRENCY_CODE] = code
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Currency name is required")
            values[CURRENCY_NAME] = name

        if values:
            self.db.set_settings(values)
        return self.get_currency()
