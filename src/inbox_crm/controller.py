"""
CRM controller.

Single owner of the CrmStore and the DealExtractor. Tracks which email is
open and the pending AI suggestion for it, and exposes the operations the
presentation layer calls: select an email, request analysis, accept a
suggestion, add contacts/deals, move deals.

Analysis requests are tagged with the id of the email they were issued for.
When a result arrives after the user has opened a different email, it is
returned to the caller but NOT installed as the pending suggestion, so a
suggestion for email A can never be accepted against email B.
"""

from collections import Counter

from .errors import EmailNotFoundError
from .logging import get_logger, logging_context
from .models.crm import Contact, Deal, Email, PipelineStage
from .models.extraction import ExtractedDealData
from .pipeline.analytics import PipelineSummary, summarize_pipeline
from .pipeline.extractor import DealExtractor
from .pipeline.reconciler import (
    ReconciliationResult,
    get_active_contact,
    get_active_deals,
    reconcile_suggestion,
)
from .store import CrmStore
from .utils import uuid7

logger = get_logger(__name__)


class CrmController:
    """
    Applies user intents to the CRM state.

    All mutations run synchronously on the event loop thread; only the
    provider call inside request_analysis() suspends.
    """

    def __init__(self, store: CrmStore, extractor: DealExtractor):
        """
        Initialize the controller.

        Args:
            store: The CRM collections
            extractor: Deal extraction service (may be unconfigured)
        """
        self.store = store
        self.extractor = extractor

        self._open_email_id: str | None = None
        self._pending: ExtractedDealData | None = None
        self._in_flight: Counter[str] = Counter()

    # =========================================================================
    # Selection and Projections
    # =========================================================================

    @property
    def open_email(self) -> Email | None:
        if self._open_email_id is None:
            return None
        return self.store.get_email(self._open_email_id)

    @property
    def active_contact(self) -> Contact | None:
        return get_active_contact(self.open_email, self.store.contacts)

    @property
    def active_deals(self) -> list[Deal]:
        return get_active_deals(self.active_contact, self.store.deals)

    @property
    def pending_suggestion(self) -> ExtractedDealData | None:
        return self._pending

    def is_analyzing(self, email_id: str) -> bool:
        return self._in_flight[email_id] > 0

    def select_email(self, email_id: str) -> Email | None:
        """
        Open an email: mark it read and drop any pending suggestion.

        Returns:
            The opened Email, or None if the id is unknown (nothing changes)
        """
        email = self.store.mark_email_read(email_id)
        if email is None:
            logger.info('controller.select_unknown_email', email_id=email_id)
            return None

        self._open_email_id = email.id
        self._pending = None
        logger.info('controller.email_selected', email_id=email.id)
        return email

    # =========================================================================
    # Analysis
    # =========================================================================

    async def request_analysis(self, email_id: str | None = None) -> ExtractedDealData:
        """
        Analyze an email (the open one by default).

        The result becomes the pending suggestion only if its email is still
        open when the provider answers.

        Args:
            email_id: Email to analyze; defaults to the open email

        Returns:
            ExtractedDealData (possibly the fallback payload)

        Raises:
            EmailNotFoundError: Unknown id, or no id and no open email
            ConfigurationError: The provider API key is missing
        """
        email = self._resolve_email(email_id)

        with logging_context(trace_id=uuid7().hex, email_id=email.id):
            logger.info('controller.analysis_requested')
            self._in_flight[email.id] += 1
            try:
                result = await self.extractor.analyze_email(email)
            finally:
                self._in_flight[email.id] -= 1
                if self._in_flight[email.id] <= 0:
                    del self._in_flight[email.id]

            if self._open_email_id == email.id:
                self._pending = result
                logger.info(
                    'controller.suggestion_pending',
                    confidence_score=result.confidence_score,
                )
            else:
                logger.info(
                    'analysis.discarded_stale',
                    open_email_id=self._open_email_id,
                )

        return result

    def accept_suggestion(
        self,
        suggestion: ExtractedDealData | None = None,
    ) -> ReconciliationResult | None:
        """
        Turn a suggestion into a new deal for the open email's sender.

        Creates the sender's contact first when none exists. Never modifies
        existing records. The pending suggestion is consumed.

        Args:
            suggestion: Suggestion to accept; defaults to the pending one

        Returns:
            ReconciliationResult, or None when no email is open or there is
            no suggestion (nothing changes)
        """
        email = self.open_email
        suggestion = suggestion or self._pending
        if email is None or suggestion is None:
            logger.info(
                'controller.accept_noop',
                has_email=email is not None,
                has_suggestion=suggestion is not None,
            )
            return None

        result = reconcile_suggestion(
            suggestion=suggestion,
            email=email,
            existing_contact=self.active_contact,
        )

        if result.contact_created:
            self.store.add_contact(result.contact)
        self.store.add_deal(result.deal)
        self._pending = None

        logger.info(
            'controller.suggestion_accepted',
            email_id=email.id,
            contact_id=result.contact.id,
            contact_created=result.contact_created,
            deal_id=result.deal.id,
        )
        return result

    # =========================================================================
    # Manual Edits and Pipeline
    # =========================================================================

    def add_contact(self, contact: Contact) -> Contact:
        return self.store.add_contact(contact)

    def add_deal(self, deal: Deal) -> Deal:
        return self.store.add_deal(deal)

    def move_deal(self, deal_id: str, new_stage: PipelineStage) -> Deal | None:
        return self.store.move_deal(deal_id, new_stage)

    def pipeline_summary(self) -> PipelineSummary:
        return summarize_pipeline(self.store.deals)

    def _resolve_email(self, email_id: str | None) -> Email:
        if email_id is None:
            email = self.open_email
            if email is None:
                raise EmailNotFoundError('No email is open')
            return email

        email = self.store.get_email(email_id)
        if email is None:
            raise EmailNotFoundError(
                f'Email not found: {email_id}',
                context={'email_id': email_id},
            )
        return email
