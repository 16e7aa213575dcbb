"""
Service container for dependency injection and initialization.

Usage:
    container = ServiceContainer()
    container.initialize()
    container.expose_to_bot(bot)

    vote_service = container.vote_service
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

import config
from infrastructure.discord_notifier import DiscordNotifier
from repositories.interfaces import IReportRepository
from repositories.report_repository import SheetsReportRepository
from services.cashout_service import CashOutService
from services.group_bet_vote_service import GroupBetVoteService
from services.report_service import ReportService
from services.resolution_service import ResolutionLedger
from utils.keyed_lock import KeyedLock
from utils.tracking import TrackingSettings

logger = logging.getLogger("bet_bot.infrastructure.container")


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    # Channels and bet markers
    tracking: TrackingSettings = field(
        default_factory=lambda: TrackingSettings(
            bet_channel_name=config.BET_CHANNEL_NAME,
            discussion_channel_name=config.DISCUSSION_CHANNEL_NAME,
            bet_channel_id=config.BET_CHANNEL_ID,
            discussion_channel_id=config.DISCUSSION_CHANNEL_ID,
            group_initials=config.GROUP_INITIALS,
            individual_initials=config.INDIVIDUAL_INITIALS,
        )
    )

    # Voting
    vote_pass_threshold: int = config.VOTE_PASS_THRESHOLD
    vote_reject_threshold: int = config.VOTE_REJECT_THRESHOLD
    proposal_ttl_seconds: int = config.PROPOSAL_TTL_SECONDS

    # Reporting
    spreadsheet_id: str = config.GOOGLE_SHEETS_SPREADSHEET_ID
    credentials_json: str = config.GOOGLE_CREDENTIALS_JSON
    service_account_email: str = config.GOOGLE_SERVICE_ACCOUNT_EMAIL
    private_key: str = config.GOOGLE_PRIVATE_KEY
    logging_start: datetime = config.LOGGING_START
    report_max_attempts: int = config.REPORT_MAX_ATTEMPTS
    report_initial_delay_seconds: float = config.REPORT_INITIAL_DELAY_MS / 1000
    report_backoff_factor: float = config.REPORT_BACKOFF_FACTOR


class ServiceContainer:
    """
    Central container for the bot's services.

    Example:
        container = ServiceContainer(ServiceConfig(vote_pass_threshold=2))
        container.initialize()
    """

    def __init__(self, config: ServiceConfig | None = None, report_repo: IReportRepository | None = None):
        """
        Args:
            config: Service configuration (uses defaults if None)
            report_repo: Report repository override; built from config when None
        """
        self.config = config or ServiceConfig()
        self._report_repo_override = report_repo
        self._initialized = False

        self.report_repo: IReportRepository | None = None
        self.report_service: ReportService | None = None
        self.vote_service: GroupBetVoteService | None = None
        self.resolution_ledger: ResolutionLedger | None = None
        self.cashout_service: CashOutService | None = None
        self.message_locks: KeyedLock | None = None

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """
        Build repositories and services. Idempotent.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")
        cfg = self.config

        if self._report_repo_override is not None:
            self.report_repo = self._report_repo_override
        else:
            self.report_repo = SheetsReportRepository.from_config(
                cfg.spreadsheet_id,
                credentials_json=cfg.credentials_json,
                service_account_email=cfg.service_account_email,
                private_key=cfg.private_key,
            )

        self.report_service = ReportService(
            self.report_repo,
            cutoff=cfg.logging_start,
            max_attempts=cfg.report_max_attempts,
            initial_delay_seconds=cfg.report_initial_delay_seconds,
            backoff_factor=cfg.report_backoff_factor,
        )
        self.vote_service = GroupBetVoteService(
            pass_threshold=cfg.vote_pass_threshold,
            reject_threshold=cfg.vote_reject_threshold,
            proposal_ttl_seconds=cfg.proposal_ttl_seconds,
        )
        self.resolution_ledger = ResolutionLedger()
        self.cashout_service = CashOutService()
        self.message_locks = KeyedLock()

        self._initialized = True
        logger.info(
            f"ServiceContainer initialization complete (reporting "
            f"{'enabled' if self.report_service.enabled else 'disabled'})"
        )

    def expose_to_bot(self, bot) -> None:
        """
        Attach services to the bot so cog setup() functions can find them.
        """
        if not self._initialized:
            self.initialize()
        bot.tracking_settings = self.config.tracking
        bot.notifier = DiscordNotifier(bot)
        bot.report_service = self.report_service
        bot.vote_service = self.vote_service
        bot.resolution_ledger = self.resolution_ledger
        bot.cashout_service = self.cashout_service
        bot.message_locks = self.message_locks
