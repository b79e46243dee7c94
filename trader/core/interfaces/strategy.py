"""
Strategy interface definition.
"""

from abc import ABC, abstractmethod
from typing import Any

from trader.core.models.decision import Decision, DecisionData


class ITradingStrategy(ABC):
    """Abstract interface for trading strategies.

    Implementations keep no mutable state: whatever must survive between
    decisions travels in the cache returned with each ``Decision``.
    """

    @abstractmethod
    def decide(self, data: DecisionData, cache: Any) -> Decision:
        """Decide what to do with the given market window and ledger snapshot."""
        pass

    @abstractmethod
    def init_cache(self) -> Any:
        """Create the cache passed to the first decision of a run."""
        pass
