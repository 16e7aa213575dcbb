"""
Application services layer.

Services hold the bot's in-memory state and decisions; Discord and
spreadsheet I/O stay at the edges.
"""

from services.cashout_service import CashOutService
from services.group_bet_vote_service import GroupBetVoteService
from services.report_service import ReportService
from services.resolution_service import ResolutionLedger

# Result type for consistent error handling
from services.result import Result

__all__ = [
    "CashOutService",
    "GroupBetVoteService",
    "ReportService",
    "ResolutionLedger",
    "Result",
]
