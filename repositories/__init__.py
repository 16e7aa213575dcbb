"""
Repository layer for data access abstraction.
"""

from repositories.interfaces import IReportRepository
from repositories.report_repository import SheetsReportRepository

__all__ = ["IReportRepository", "SheetsReportRepository"]
