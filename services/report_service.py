"""
Spreadsheet reporting service.

Turns bet events into 17-column rows and appends them with a bounded,
growing-delay retry. Reporting is fire-and-forget: it runs after the
user-visible chat action and a dropped row never fails that action.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from config import (
    LOGGING_START,
    REPORT_BACKOFF_FACTOR,
    REPORT_INITIAL_DELAY_MS,
    REPORT_MAX_ATTEMPTS,
)
from domain.models.bet import BetKind
from domain.models.report_event import TAB_GROUP, TAB_INDIVIDUAL, ReportEvent
from repositories.interfaces import IReportRepository
from services import error_codes
from services.result import Result
from utils.bet_parsing import extract_returns_amount
from utils.formatting import round_money

logger = logging.getLogger("bet_bot.services.report")


def _as_utc(when: datetime) -> datetime:
    return when.replace(tzinfo=timezone.utc) if when.tzinfo is None else when


def format_timestamp(when: datetime) -> str:
    """UTC with millisecond precision and a Z suffix, e.g. 2025-11-15T18:30:00.000Z."""
    return _as_utc(when).astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class ReportService:
    """
    Appends report rows through an IReportRepository.

    A None repository means reporting is not configured; events are then
    dropped quietly.
    """

    def __init__(
        self,
        report_repo: IReportRepository | None,
        cutoff: datetime | None = None,
        max_attempts: int | None = None,
        initial_delay_seconds: float | None = None,
        backoff_factor: float | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.report_repo = report_repo
        self.cutoff = _as_utc(cutoff if cutoff is not None else LOGGING_START)
        self.max_attempts = max_attempts if max_attempts is not None else REPORT_MAX_ATTEMPTS
        self.initial_delay_seconds = (
            initial_delay_seconds
            if initial_delay_seconds is not None
            else REPORT_INITIAL_DELAY_MS / 1000
        )
        self.backoff_factor = backoff_factor if backoff_factor is not None else REPORT_BACKOFF_FACTOR
        self._sleep = sleep
        self._pending: set[asyncio.Task] = set()

    @property
    def enabled(self) -> bool:
        return self.report_repo is not None

    def is_reportable(self, when: datetime | None) -> bool:
        """Only events on or after the cutoff are logged; no backfill."""
        if when is None:
            return False
        return _as_utc(when) >= self.cutoff

    @staticmethod
    def build_row(event: ReportEvent) -> tuple[str, list[Any]]:
        """
        Returns:
            (tab name, row values in header order)
        """
        bet = event.bet
        if bet is not None:
            returns = round_money(bet.returns_amount)
        else:
            # Free-form bets still get the returns column when the label is present
            raw_returns = extract_returns_amount(event.full_text)
            returns = round_money(float(raw_returns)) if raw_returns else ""

        row = [
            format_timestamp(event.timestamp),
            event.event,
            event.kind.value,
            bet.initials if bet else "",
            bet.bettor if bet else "",
            bet.market if bet else "",
            bet.odds if bet else "",
            round_money(bet.stake) if bet else "",
            returns,
            round_money(event.cashout) if event.cashout is not None else "",
            round_money(event.gain_loss) if event.gain_loss is not None else "",
            event.channel,
            event.full_text,
            event.author_tag,
            event.author_id,
            event.link,
            event.message_id,
        ]
        tab = TAB_GROUP if event.kind is BetKind.GROUP else TAB_INDIVIDUAL
        return tab, row

    async def ensure_tabs(self) -> Result[None]:
        """Create both report tabs up front so the first append is not slowed down."""
        if self.report_repo is None:
            return Result.fail("Reporting is not configured.", code=error_codes.REPORTING_DISABLED)
        try:
            for tab in (TAB_INDIVIDUAL, TAB_GROUP):
                await asyncio.to_thread(self.report_repo.ensure_tab, tab)
        except Exception as exc:
            logger.warning(f"Could not prepare report tabs: {exc}")
            return Result.fail(f"Tab setup failed: {exc}", code=error_codes.EXTERNAL_API_ERROR, hard=True)
        return Result.ok()

    async def log_event(self, event: ReportEvent) -> Result[int]:
        """
        Append one event, retrying with a growing delay.

        Never raises.

        Returns:
            Result with the number of attempts used on success
        """
        if self.report_repo is None:
            return Result.fail("Reporting is not configured.", code=error_codes.REPORTING_DISABLED)
        if not self.is_reportable(event.timestamp):
            logger.debug(f"Skipping {event.event} for message {event.message_id}: before cutoff")
            return Result.fail("Event is before the reporting cutoff.", code=error_codes.BEFORE_CUTOFF)

        tab, row = self.build_row(event)
        delay = self.initial_delay_seconds
        for attempt in range(1, self.max_attempts + 1):
            try:
                await asyncio.to_thread(self.report_repo.append_row, tab, row)
                logger.info(f"Logged {event.event} for message {event.message_id} to '{tab}'")
                return Result.ok(attempt)
            except Exception as exc:
                if attempt == self.max_attempts:
                    logger.warning(
                        f"Report append failed after {attempt} attempts for message "
                        f"{event.message_id}: {exc}"
                    )
                    return Result.fail(
                        f"Append failed: {exc}", code=error_codes.EXTERNAL_API_ERROR, hard=True
                    )
                logger.debug(f"Report append attempt {attempt} failed, retrying in {delay:.2f}s: {exc}")
                await self._sleep(delay)
                delay *= self.backoff_factor

        return Result.fail("No append attempts configured.", code=error_codes.VALIDATION_ERROR)

    def schedule(self, event: ReportEvent) -> asyncio.Task | None:
        """
        Run log_event in the background. Must be called from a running event loop.

        Returns:
            The task, or None when reporting is disabled
        """
        if self.report_repo is None:
            return None
        task = asyncio.create_task(self.log_event(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for all scheduled appends to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
