"""
Simulated exchange - orchestrates all ledger components.

This module provides the FakeExchange interface by composing the focused
components: core state, trading operations and metrics.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal

from trader.core.enums import OperationType
from trader.core.interfaces.exchange import IExchange
from trader.core.interfaces.market import IInstrumentsProvider, IMarketDataService
from trader.core.models.candle import TradingDay
from trader.core.models.interval import Interval
from trader.core.models.operation import Operation
from trader.core.models.position import Position

from .ledger_core import LedgerCore
from .ledger_metrics import LedgerMetrics
from .ledger_trading import LedgerTrading


class FakeExchange(IExchange):
    """Simulated exchange implementation.

    Orchestrates simulation by composing focused components:
    - LedgerCore: Clock, schedule and account state
    - LedgerTrading: Market order execution
    - LedgerMetrics: Valuation and investment metrics

    One instance serves exactly one run; instances share nothing.
    """

    def __init__(
        self,
        market_data: IMarketDataService,
        instruments: IInstrumentsProvider,
        trading_schedule: Iterable[TradingDay],
    ) -> None:
        """Initialize FakeExchange with composition pattern.

        Args:
            market_data: Point-in-time candle and price source
            instruments: Instrument metadata source
            trading_schedule: Time-ascending trading days of the simulated period
        """
        self._core = LedgerCore.create(trading_schedule)
        self._market_data = market_data
        self._trading = LedgerTrading(self._core, market_data, instruments)
        self._metrics = LedgerMetrics(self._core, market_data)

    @property
    def current_timestamp(self) -> datetime:
        """Current simulated time (delegates to core)."""
        return self._core.require_timestamp()

    # Clock
    def init(
        self, account_id: str | None, start: datetime, initial_balances: Mapping[str, Decimal]
    ) -> datetime:
        """Reset the account and move the clock to the first trading minute.

        Args:
            account_id: Account to reset
            start: Earliest allowed clock value
            initial_balances: Cash by currency credited at the first trading minute

        Returns:
            First trading minute not before start

        Raises:
            DataError: If no trading minute exists at or after start
            NonPositiveAmountError: If any initial balance is not positive
        """
        first_minute = self._core.reset(account_id, start)
        for currency, amount in initial_balances.items():
            self._core.add_investment(account_id, first_minute, currency, amount)
        return first_minute

    def advance(self) -> datetime | None:
        """Move the clock to the next trading minute; None when the schedule ends."""
        return self._core.move_to_next_minute()

    # Ledger mutations
    def add_investment(
        self, account_id: str | None, timestamp: datetime, currency: str, amount: Decimal
    ) -> None:
        """Credit cash to account."""
        self._core.add_investment(account_id, timestamp, currency, amount)

    def execute_market_order(
        self,
        account_id: str | None,
        figi: str,
        operation_type: OperationType,
        lots: int,
        commission: Decimal,
    ) -> Operation:
        """Execute a market order."""
        return self._trading.execute_market_order(
            account_id, figi, operation_type, lots, commission
        )

    # Queries
    def get_last_price(self, figi: str) -> Decimal:
        """Get the price a market order of the instrument would fill at now."""
        return self._market_data.get_last_price(figi, self.current_timestamp)

    def get_balance(self, account_id: str | None, currency: str) -> Decimal:
        """Get cash balance."""
        return self._core.get_account(account_id).get_balance(currency).current_amount

    def get_investments(self, account_id: str | None, currency: str) -> dict[datetime, Decimal]:
        """Get investments by the moment they were made."""
        return dict(self._core.get_account(account_id).get_balance(currency).investments)

    def get_position(self, account_id: str | None, figi: str) -> Position | None:
        """Get position of an instrument."""
        return self._core.get_account(account_id).positions.get(figi)

    def get_positions(self, account_id: str | None) -> list[Position]:
        """Get all positions ordered by figi."""
        positions = self._core.get_account(account_id).positions
        return [positions[figi] for figi in sorted(positions)]

    def get_operations(
        self, account_id: str | None, interval: Interval, figi: str | None = None
    ) -> list[Operation]:
        """Get operations within interval, optionally of one instrument."""
        return [
            operation
            for operation in self._core.get_account(account_id).operations
            if interval.contains(operation.timestamp) and (figi is None or operation.figi == figi)
        ]

    # Metrics
    def get_repriced_positions(self, account_id: str | None) -> list[Position]:
        """Get positions valued at the current last price."""
        return self._metrics.get_repriced_positions(account_id)

    def get_total_savings(self, account_id: str | None, currency: str) -> Decimal:
        """Get cash plus value of positions."""
        return self._metrics.get_total_savings(account_id, currency)

    def get_initial_investment(self, account_id: str | None, currency: str) -> Decimal:
        """Get the first investment."""
        return self._metrics.get_initial_investment(account_id, currency)

    def get_total_investment(self, account_id: str | None, currency: str) -> Decimal:
        """Get sum of investments."""
        return self._metrics.get_total_investment(account_id, currency)

    def get_weighted_average_investment(
        self, account_id: str | None, currency: str, end: datetime
    ) -> Decimal:
        """Get time-weighted average of invested capital."""
        return self._metrics.get_weighted_average_investment(account_id, currency, end)
