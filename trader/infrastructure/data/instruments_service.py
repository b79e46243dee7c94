"""
Static instruments provider.

Serves instrument metadata from a fixed set of shares and builds trading
schedules from weekday working hours.
"""

from collections.abc import Iterable
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from trader.core.exceptions.backtest import DataError, ValidationError
from trader.core.interfaces.market import IInstrumentsProvider
from trader.core.models.candle import Share, TradingDay
from trader.core.models.interval import Interval

SATURDAY = 5


class StaticInstrumentsService(IInstrumentsProvider):
    """
    Instruments provider with identical working hours on every exchange.

    Monday to Friday are trading days unless listed as holidays; weekends and
    holidays are returned as non-trading days.
    """

    def __init__(
        self,
        shares: Iterable[Share],
        open_time: time = time(10, 0),
        close_time: time = time(19, 0),
        timezone: tzinfo = UTC,
        holidays: Iterable[date] = (),
    ) -> None:
        """
        Initialize the provider.

        Args:
            shares: Known instruments
            open_time: Start of the working hours
            close_time: End of the working hours, exclusive
            timezone: Timezone of the working hours
            holidays: Weekdays without trading

        Raises:
            ValidationError: If working hours are empty
        """
        if open_time >= close_time:
            raise ValidationError(f"open_time {open_time} must be before close_time {close_time}")
        self._shares = {share.figi: share for share in shares}
        self.open_time = open_time
        self.close_time = close_time
        self.timezone = timezone
        self.holidays = frozenset(holidays)

    def get_share(self, figi: str) -> Share:
        """
        Get instrument metadata.

        Raises:
            DataError: If the instrument is unknown
        """
        share = self._shares.get(figi)
        if share is None:
            raise DataError(f"Share with figi '{figi}' not found")
        return share

    def get_trading_schedule(self, exchange: str, interval: Interval) -> list[TradingDay]:
        """Get one trading day per calendar date of the interval."""
        if interval.from_ is None or interval.to is None:
            raise ValidationError(f"Interval {interval.to_pretty_string()} must be closed")

        day = interval.from_.astimezone(self.timezone).date()
        last_day = interval.to.astimezone(self.timezone).date()
        schedule: list[TradingDay] = []
        while day <= last_day:
            schedule.append(self._get_trading_day(day))
            day += timedelta(days=1)
        return schedule

    def _get_trading_day(self, day: date) -> TradingDay:
        return TradingDay(
            date=day,
            is_trading_day=day.weekday() < SATURDAY and day not in self.holidays,
            start_time=datetime.combine(day, self.open_time, tzinfo=self.timezone),
            end_time=datetime.combine(day, self.close_time, tzinfo=self.timezone),
        )
