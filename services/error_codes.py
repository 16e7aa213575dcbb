"""
Standard error codes for the service layer.

Usage:
    from services.error_codes import ALREADY_VOTED
    from services.result import Result

    return Result.fail("Already voted", code=ALREADY_VOTED)
"""

# General errors
VALIDATION_ERROR = "validation_error"
EXTERNAL_API_ERROR = "external_api_error"

# Group bet voting
PROPOSAL_NOT_FOUND = "proposal_not_found"
PROPOSAL_CLOSED = "proposal_closed"
SELF_VOTE = "self_vote"
ALREADY_VOTED = "already_voted"

# Reporting
REPORTING_DISABLED = "reporting_disabled"
BEFORE_CUTOFF = "before_cutoff"
