"""
Simulated ledger core state management.

This module handles the clock and per-account state of the simulated
exchange, following the Single Responsibility Principle for state management.
"""

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from loguru import logger

from trader.core.exceptions.backtest import DataError, ValidationError
from trader.core.models.candle import TradingDay
from trader.core.models.operation import Operation
from trader.core.models.position import Position
from trader.core.types.financial import ZERO
from trader.core.utils.dates import ceiling_schedule_minute, next_schedule_minute
from trader.core.utils.validation import validate_positive_amount


@dataclass
class FakeBalance:
    """Cash of one currency and the investments it was made of."""

    investments: dict[datetime, Decimal] = field(default_factory=dict)
    current_amount: Decimal = ZERO

    def add_investment(self, timestamp: datetime, amount: Decimal) -> None:
        """Credit cash; investments at the same moment are merged."""
        self.investments[timestamp] = self.investments.get(timestamp, ZERO) + amount
        self.current_amount += amount

    def get_total_investments(self) -> dict[datetime, Decimal]:
        """Get cumulative invested amount by the moment it became effective."""
        totals: dict[datetime, Decimal] = {}
        running_total = ZERO
        for timestamp in sorted(self.investments):
            running_total += self.investments[timestamp]
            totals[timestamp] = running_total
        return totals


@dataclass
class FakeAccount:
    """State of one simulated account."""

    balances: dict[str, FakeBalance] = field(default_factory=dict)
    positions: dict[str, Position] = field(default_factory=dict)
    operations: list[Operation] = field(default_factory=list)

    def get_balance(self, currency: str) -> FakeBalance:
        """Get balance of currency, creating an empty one if absent."""
        return self.balances.setdefault(currency, FakeBalance())


@dataclass
class LedgerCore:
    """Core simulated exchange state.

    Holds the simulated clock, the remaining trading schedule and all
    accounts. Not thread-safe: every run owns its own instance.
    """

    trading_schedule: deque[TradingDay]
    current_timestamp: datetime | None = None
    accounts: dict[str | None, FakeAccount] = field(default_factory=dict)

    @classmethod
    def create(cls, trading_schedule: Iterable[TradingDay]) -> "LedgerCore":
        """Create core over a time-ascending trading schedule."""
        return cls(trading_schedule=deque(trading_schedule))

    def require_timestamp(self) -> datetime:
        """Get current simulated time.

        Raises:
            ValidationError: If the clock is not initialized
        """
        if self.current_timestamp is None:
            raise ValidationError("Simulated clock is not initialized")
        return self.current_timestamp

    def get_account(self, account_id: str | None) -> FakeAccount:
        """Get account, creating an empty one if absent."""
        return self.accounts.setdefault(account_id, FakeAccount())

    def reset(self, account_id: str | None, start: datetime) -> datetime:
        """Drop account state and move the clock to the first trading minute.

        Args:
            account_id: Account to reset
            start: Earliest allowed clock value

        Returns:
            First trading minute not before start

        Raises:
            DataError: If the schedule has no trading minute at or after start
        """
        first_minute = ceiling_schedule_minute(self.trading_schedule, start)
        if first_minute is None:
            raise DataError(f"No trading minutes in schedule after {start}")
        self.current_timestamp = first_minute
        self.accounts[account_id] = FakeAccount()
        return first_minute

    def move_to_next_minute(self) -> datetime | None:
        """Advance the clock to the next trading minute.

        Returns:
            New clock value or None when the schedule is exhausted, in which
            case the clock stays put
        """
        current = self.require_timestamp()
        # finished days are never needed again
        while self.trading_schedule and self.trading_schedule[0].end_time <= current:
            self.trading_schedule.popleft()

        next_minute = next_schedule_minute(self.trading_schedule, current)
        if next_minute is not None:
            self.current_timestamp = next_minute
        return next_minute

    def add_investment(
        self, account_id: str | None, timestamp: datetime, currency: str, amount: Decimal
    ) -> None:
        """Credit cash to account.

        Raises:
            NonPositiveAmountError: If amount is not positive
        """
        amount = validate_positive_amount(amount)
        self.get_account(account_id).get_balance(currency).add_investment(timestamp, amount)
        logger.debug(f"Added investment {amount} {currency} at {timestamp} to account {account_id}")
