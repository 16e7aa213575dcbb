"""
Domain models - pure data structures representing bets and proposals.

ReportEvent lives in domain.models.report_event and is imported from there
(it depends on utils.bet_parsing, which depends on this package).
"""

from domain.models.bet import BetAnnouncement, BetKind
from domain.models.proposal import ProposalState, ProposalStatus

__all__ = ["BetAnnouncement", "BetKind", "ProposalState", "ProposalStatus"]
