"""
In-memory CRM store for contacts, deals and emails.

Key design decisions:
- Collections are tuples; every mutation rebinds a new tuple (copy-on-write).
  A reader holding a snapshot never sees a partial update, and concurrent
  analysis requests that finish in any order only ever append.
- Records are frozen; a stage move replaces one Deal with a model_copy.
- Unknown ids are no-ops, not errors (stale ids from the UI are expected).
- No persistence: state lives for the life of the process.
"""

from collections.abc import Iterable

from .logging import get_logger
from .models.crm import Contact, Deal, Email, PipelineStage

logger = get_logger(__name__)


class CrmStore:
    """Authoritative contact, deal and email collections."""

    def __init__(
        self,
        contacts: Iterable[Contact] = (),
        deals: Iterable[Deal] = (),
        emails: Iterable[Email] = (),
    ):
        self._contacts: tuple[Contact, ...] = tuple(contacts)
        self._deals: tuple[Deal, ...] = tuple(deals)
        self._emails: tuple[Email, ...] = tuple(emails)

    @property
    def contacts(self) -> tuple[Contact, ...]:
        return self._contacts

    @property
    def deals(self) -> tuple[Deal, ...]:
        return self._deals

    @property
    def emails(self) -> tuple[Email, ...]:
        return self._emails

    # =========================================================================
    # Contact Operations
    # =========================================================================

    def add_contact(self, contact: Contact) -> Contact:
        """
        Append a contact.

        A second contact sharing an email address is accepted; lookups by
        email keep returning the first one.
        """
        if any(c.email == contact.email for c in self._contacts):
            logger.warning(
                'store.duplicate_contact_email',
                contact_id=contact.id,
                email=contact.email,
            )
        self._contacts = (*self._contacts, contact)
        logger.info('store.contact_added', contact_id=contact.id)
        return contact

    def get_contact(self, contact_id: str) -> Contact | None:
        return next((c for c in self._contacts if c.id == contact_id), None)

    # =========================================================================
    # Deal Operations
    # =========================================================================

    def add_deal(self, deal: Deal) -> Deal:
        """Append a deal. Orphaned contact ids are tolerated."""
        if self.get_contact(deal.contact_id) is None:
            logger.warning(
                'store.orphaned_deal',
                deal_id=deal.id,
                contact_id=deal.contact_id,
            )
        self._deals = (*self._deals, deal)
        logger.info('store.deal_added', deal_id=deal.id, stage=deal.stage.value)
        return deal

    def get_deal(self, deal_id: str) -> Deal | None:
        return next((d for d in self._deals if d.id == deal_id), None)

    def move_deal(self, deal_id: str, new_stage: PipelineStage) -> Deal | None:
        """
        Set a deal's stage. Any stage may follow any other.

        Args:
            deal_id: Id of the deal to move
            new_stage: Target stage

        Returns:
            The updated Deal, or None if no deal has this id (collection unchanged)
        """
        current = self.get_deal(deal_id)
        if current is None:
            logger.info('store.move_deal_unknown', deal_id=deal_id)
            return None

        moved = current.model_copy(update={'stage': PipelineStage(new_stage)})
        self._deals = tuple(moved if d.id == deal_id else d for d in self._deals)

        logger.info(
            'store.deal_moved',
            deal_id=deal_id,
            from_stage=current.stage.value,
            to_stage=moved.stage.value,
        )
        return moved

    # =========================================================================
    # Email Operations
    # =========================================================================

    def get_email(self, email_id: str) -> Email | None:
        return next((e for e in self._emails if e.id == email_id), None)

    def mark_email_read(self, email_id: str) -> Email | None:
        """Set is_read on an email. Read state never reverts."""
        current = self.get_email(email_id)
        if current is None or current.is_read:
            return current

        updated = current.model_copy(update={'is_read': True})
        self._emails = tuple(updated if e.id == email_id else e for e in self._emails)
        return updated
