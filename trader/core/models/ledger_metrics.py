"""
Simulated ledger metrics.

This module values accounts and summarizes investments following the
Single Responsibility Principle for metrics calculation.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from trader.core.interfaces.market import IMarketDataService
from trader.core.models.position import Position
from trader.core.utils.averages import get_weighted_average

if TYPE_CHECKING:
    from .ledger_core import LedgerCore


class LedgerMetrics:
    """Ledger valuation and investment metrics."""

    def __init__(self, ledger_core: "LedgerCore", market_data: IMarketDataService) -> None:
        """Initialize with ledger core state.

        Args:
            ledger_core: The ledger state to compute metrics for
            market_data: Source of the last known prices
        """
        self.core = ledger_core
        self.market_data = market_data

    def get_repriced_positions(self, account_id: str | None) -> list[Position]:
        """Get positions valued at the last price known at the current clock."""
        timestamp = self.core.require_timestamp()
        positions = self.core.get_account(account_id).positions
        return [
            position.reprice(self.market_data.get_last_price(figi, timestamp))
            for figi, position in sorted(positions.items())
        ]

    def get_total_savings(self, account_id: str | None, currency: str) -> Decimal:
        """Get cash plus value of positions in the currency."""
        balance = self.core.get_account(account_id).get_balance(currency).current_amount
        positions_value = sum(
            (
                position.total_price
                for position in self.get_repriced_positions(account_id)
                if position.currency == currency
            ),
            Decimal(0),
        )
        return balance + positions_value

    def get_total_investment(self, account_id: str | None, currency: str) -> Decimal:
        """Get sum of all investments."""
        investments = self.core.get_account(account_id).get_balance(currency).investments
        return sum(investments.values(), Decimal(0))

    def get_initial_investment(self, account_id: str | None, currency: str) -> Decimal:
        """Get the earliest investment, zero if none."""
        investments = self.core.get_account(account_id).get_balance(currency).investments
        if not investments:
            return Decimal(0)
        return investments[min(investments)]

    def get_weighted_average_investment(
        self, account_id: str | None, currency: str, end: datetime
    ) -> Decimal:
        """Get time-weighted average of invested capital up to end."""
        balance = self.core.get_account(account_id).get_balance(currency)
        return get_weighted_average(balance.get_total_investments(), end)
