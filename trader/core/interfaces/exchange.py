"""
Simulated exchange interface.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal

from trader.core.enums import OperationType
from trader.core.models.interval import Interval
from trader.core.models.operation import Operation
from trader.core.models.position import Position


class IExchange(ABC):
    """Abstract interface for the simulated exchange."""

    @abstractmethod
    def init(
        self, account_id: str | None, start: datetime, initial_balances: Mapping[str, Decimal]
    ) -> datetime:
        """Reset the account and move the clock to the first trading minute."""
        pass

    @abstractmethod
    def advance(self) -> datetime | None:
        """Move the clock to the next trading minute."""
        pass

    @abstractmethod
    def add_investment(
        self, account_id: str | None, timestamp: datetime, currency: str, amount: Decimal
    ) -> None:
        """Credit cash to an account."""
        pass

    @abstractmethod
    def execute_market_order(
        self,
        account_id: str | None,
        figi: str,
        operation_type: OperationType,
        lots: int,
        commission: Decimal,
    ) -> Operation:
        """Execute a market order at the last known price."""
        pass

    @abstractmethod
    def get_balance(self, account_id: str | None, currency: str) -> Decimal:
        """Get cash balance."""
        pass

    @abstractmethod
    def get_position(self, account_id: str | None, figi: str) -> Position | None:
        """Get position of an instrument."""
        pass

    @abstractmethod
    def get_operations(
        self, account_id: str | None, interval: Interval, figi: str | None = None
    ) -> list[Operation]:
        """Get operations within interval, optionally of one instrument."""
        pass
