"""
Market data service used by the simulation.

Answers "what was known at instant T" questions over a candle provider:
the last price and the last N candles. Candles are fetched in whole-day
chunks (whole-year for daily and coarser resolutions), cached, and cut at
the requested instant so nothing after it is ever returned.
"""

from bisect import bisect_right
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from cachetools import LRUCache
from loguru import logger

from trader.core.constants import CANDLE_CACHE_SIZE, CONSECUTIVE_EMPTY_DAYS_LIMIT
from trader.core.enums import CandleInterval
from trader.core.exceptions.backtest import DataError, ValidationError
from trader.core.interfaces.market import IMarketDataProvider, IMarketDataService
from trader.core.models.candle import Candle
from trader.core.models.interval import Interval

type ChunkKey = tuple[str, CandleInterval, int, int]


class MarketDataService(IMarketDataService):
    """
    Point-in-time view over a market data provider.

    Features:
    - Backwards search bounded by consecutive empty chunks
    - LRU caching of fetched chunks
    - No look-ahead: results never contain candles after the requested instant

    Not thread-safe; every run creates its own instance.
    """

    def __init__(
        self,
        provider: IMarketDataProvider,
        consecutive_empty_days_limit: int = CONSECUTIVE_EMPTY_DAYS_LIMIT,
        cache_size: int = CANDLE_CACHE_SIZE,
    ) -> None:
        """
        Initialize the service.

        Args:
            provider: Source of historical candles
            consecutive_empty_days_limit: Empty chunks tolerated in a row while searching back
            cache_size: Maximum number of cached chunks
        """
        if consecutive_empty_days_limit <= 0:
            raise ValidationError("consecutive_empty_days_limit must be positive")
        self.provider = provider
        self.consecutive_empty_days_limit = consecutive_empty_days_limit
        self._cache: LRUCache[ChunkKey, list[Candle]] = LRUCache(maxsize=cache_size)

    def get_last_price(self, figi: str, to: datetime) -> Decimal:
        """
        Get close price of the last one-minute candle not after ``to``.

        The day of ``to`` is searched first, then up to
        ``consecutive_empty_days_limit`` earlier days.

        Raises:
            DataError: If none of the searched days has a candle
        """
        empty_chunks = 0
        chunk_start = to
        while empty_chunks <= self.consecutive_empty_days_limit:
            candles = self._get_chunk_until(figi, CandleInterval.MIN_1, chunk_start, to)
            if candles:
                return candles[-1].close
            empty_chunks += 1
            chunk_start = self._previous_chunk_start(chunk_start, CandleInterval.MIN_1)

        raise DataError(
            f"Not found last candle for figi '{figi}' on the day of {to} "
            f"and {self.consecutive_empty_days_limit} days before it"
        )

    def get_last_candles(
        self, figi: str, to: datetime, limit: int, candle_interval: CandleInterval
    ) -> list[Candle]:
        """
        Get up to ``limit`` latest candles not after ``to``.

        Args:
            figi: Instrument identifier
            to: Latest allowed candle time
            limit: Maximal number of candles
            candle_interval: Candle resolution

        Returns:
            Time-ascending candles, possibly fewer than limit or empty
        """
        if limit <= 0:
            raise ValidationError(f"limit must be positive, got {limit}")

        chunks: list[list[Candle]] = []
        collected = 0
        empty_chunks = 0
        chunk_start = to
        while collected < limit and empty_chunks <= self.consecutive_empty_days_limit:
            candles = self._get_chunk_until(figi, candle_interval, chunk_start, to)
            if candles:
                chunks.append(candles)
                collected += len(candles)
                empty_chunks = 0
            else:
                empty_chunks += 1
            chunk_start = self._previous_chunk_start(chunk_start, candle_interval)

        result = [candle for chunk in reversed(chunks) for candle in chunk]
        return result[-limit:]

    def _get_chunk_until(
        self, figi: str, candle_interval: CandleInterval, moment: datetime, to: datetime
    ) -> list[Candle]:
        """Get candles of the chunk containing ``moment``, cut at ``to``."""
        candles = self._get_chunk(figi, candle_interval, moment)
        end = bisect_right(candles, to, key=lambda candle: candle.time)
        return candles[:end]

    def _get_chunk(
        self, figi: str, candle_interval: CandleInterval, moment: datetime
    ) -> list[Candle]:
        chunk_interval = self._get_chunk_interval(candle_interval, moment)
        key = self._get_chunk_key(figi, candle_interval, moment)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        candles = sorted(
            self.provider.get_candles(figi, chunk_interval, candle_interval),
            key=lambda candle: candle.time,
        )
        self._cache[key] = candles
        logger.debug(
            f"Loaded {len(candles)} {candle_interval} candles of {figi} "
            f"for {chunk_interval.to_pretty_string()}"
        )
        return candles

    @staticmethod
    def _get_chunk_key(figi: str, candle_interval: CandleInterval, moment: datetime) -> ChunkKey:
        if candle_interval.is_intraday:
            return figi, candle_interval, moment.year, moment.timetuple().tm_yday
        return figi, candle_interval, moment.year, 0

    @staticmethod
    def _get_chunk_interval(candle_interval: CandleInterval, moment: datetime) -> Interval:
        if candle_interval.is_intraday:
            return Interval.of_day(moment)
        year_start = datetime(moment.year, 1, 1, tzinfo=moment.tzinfo)
        year_end = datetime.combine(date(moment.year, 12, 31), time.max, tzinfo=moment.tzinfo)
        return Interval.of(year_start, year_end)

    @staticmethod
    def _previous_chunk_start(moment: datetime, candle_interval: CandleInterval) -> datetime:
        if candle_interval.is_intraday:
            return moment - timedelta(days=1)
        return moment.replace(year=moment.year - 1, month=1, day=1)
