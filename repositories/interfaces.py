"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod
from typing import Any


class IReportRepository(ABC):
    """Append-only tabular store for bet report rows."""

    @abstractmethod
    def append_row(self, tab: str, row: list[Any]) -> None:
        """Append one row to the named tab. Raises on failure."""

    @abstractmethod
    def ensure_tab(self, tab: str) -> None:
        """Create the tab with its header row if it does not exist yet."""
