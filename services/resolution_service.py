"""
Resolution ledger.

Remembers which bet messages already had their success/fail outcome
forwarded, so several qualifying reactions on one message forward once.
"""

import logging

logger = logging.getLogger("bet_bot.services.resolution")


class ResolutionLedger:
    """
    In-memory set of resolved message IDs.

    Entries live for the process lifetime: once an ID is marked it blocks
    forwarding for good. The check and the insert happen in one synchronous
    call, so two coroutines can never both see an ID as unresolved.
    """

    def __init__(self):
        self._resolved: set[int] = set()

    def mark_if_unresolved(self, message_id: int) -> bool:
        """
        Mark a message as resolved.

        Returns:
            True on the first call for this ID, False on every later call
        """
        if message_id in self._resolved:
            logger.debug(f"Message {message_id} already resolved, skipping forward")
            return False
        self._resolved.add(message_id)
        return True

    def is_resolved(self, message_id: int) -> bool:
        return message_id in self._resolved

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._resolved

    def __len__(self) -> int:
        return len(self._resolved)
