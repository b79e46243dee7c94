"""
Simulated ledger trading operations.

This module executes market orders against the last known price
following the Single Responsibility Principle for trading logic.
"""

from decimal import Decimal
from typing import TYPE_CHECKING

from trader.core.enums import OperationType
from trader.core.interfaces.market import IInstrumentsProvider, IMarketDataService
from trader.core.models.operation import Operation
from trader.core.types.financial import multiply
from trader.core.utils.decorators import log_trades, validate_inputs

from .ledger_helpers import (
    CommissionCalculator,
    LedgerValidator,
    OperationRecorder,
    PositionManager,
)

if TYPE_CHECKING:
    from .ledger_core import LedgerCore


class LedgerTrading:
    """Simulated ledger trading operations.

    Market orders fill immediately and completely at the last known price.
    """

    def __init__(
        self,
        ledger_core: "LedgerCore",
        market_data: IMarketDataService,
        instruments: IInstrumentsProvider,
    ) -> None:
        """Initialize with ledger core state and price sources.

        Args:
            ledger_core: The ledger state to execute orders against
            market_data: Source of the last known prices
            instruments: Source of lot sizes and currencies
        """
        self.core = ledger_core
        self.market_data = market_data
        self.instruments = instruments

    @log_trades
    @validate_inputs
    def execute_market_order(
        self,
        account_id: str | None,
        figi: str,
        operation_type: OperationType,
        lots: int,
        commission: Decimal,
    ) -> Operation:
        """Execute a market order.

        - BUY: debit order value plus commission, grow the position
        - SELL: credit order value minus commission, shrink the position

        Args:
            account_id: Account to trade on
            figi: Instrument identifier
            operation_type: Order direction
            lots: Number of lots
            commission: Commission fraction of order value

        Returns:
            Recorded operation

        Raises:
            InsufficientBalanceError: If cash does not cover a buy
            InsufficientPositionError: If a sell exceeds held lots
            DataError: If no price is known
        """
        timestamp = self.core.require_timestamp()
        share = self.instruments.get_share(figi)
        LedgerValidator.validate_share(share)

        price = self.market_data.get_last_price(figi, timestamp)
        quantity = lots * share.lot
        total_price = multiply(price, quantity)
        commission_amount = CommissionCalculator.calculate(total_price, commission)

        account = self.core.get_account(account_id)
        balance = account.get_balance(share.currency)

        # all checks happen before the first mutation
        if operation_type.is_buy:
            LedgerValidator.check_sufficient_balance(
                total_price + commission_amount, balance.current_amount, share.currency
            )
            balance.current_amount -= total_price + commission_amount
            position = PositionManager.add_lots(account.positions, share, lots, price)
        else:
            LedgerValidator.check_sufficient_position(figi, lots, account.positions.get(figi))
            balance.current_amount += total_price - commission_amount
            position = PositionManager.remove_lots(account.positions, share, lots, price)

        LedgerValidator.check_invariants(balance.current_amount, position, share.currency)
        return OperationRecorder.record(
            account.operations,
            timestamp=timestamp,
            figi=figi,
            operation_type=operation_type,
            lots=lots,
            quantity=quantity,
            price=price,
            commission=commission_amount,
        )
