"""
Data infrastructure.

This module provides the point-in-time market data service used by the
simulation and offline collaborators backed by CSV files and pandas frames.
"""

from .csv_loader import CSVCandleLoader
from .dataframe_market_data import DataFrameMarketDataService
from .instruments_service import StaticInstrumentsService
from .json_report_service import JsonReportService
from .market_data_service import MarketDataService

__all__ = [
    "CSVCandleLoader",
    "DataFrameMarketDataService",
    "JsonReportService",
    "MarketDataService",
    "StaticInstrumentsService",
]
