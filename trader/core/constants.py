"""
Core constants and limits.

Defines system-wide numeric constants shared by the simulation engine.
"""

# Decimal arithmetic
DEFAULT_SCALE = 5  # Scale of every rounded money value

# Time
DAYS_IN_YEAR = 365.25  # Used to annualize relative profit

# Market data
LAST_CANDLES_COUNT = 1000  # Candles fed to a strategy per decision
CONSECUTIVE_EMPTY_DAYS_LIMIT = 7  # Empty days tolerated when searching back for a price
CANDLE_CACHE_SIZE = 256  # Daily candle chunks kept per market data service

# Strategy
LAST_OPERATIONS_DAYS = 7  # Operations history window passed to strategies

# Orchestration
DEFAULT_THREAD_COUNT = 10
