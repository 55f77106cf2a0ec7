"""
Reconciliation of emails, contacts and deals.

Maps an email's sender onto an existing contact (or none), projects that
contact's deals, and turns an accepted ExtractedDealData into a new
Contact/Deal pair:
- Existing contact for the sender -> one new Deal attached to it
- No contact -> one new placeholder Contact, then one new Deal attached to it

Everything here is pure: inputs are never mutated, callers apply the
result to the store.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from ..models.crm import Contact, Deal, Email, PipelineStage
from ..models.extraction import ExtractedDealData
from ..utils import new_contact_id, new_deal_id

PLACEHOLDER_COMPANY = 'Unknown Company'
NEW_LEAD_TAGS = ('New Lead',)


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Records produced by accepting one suggestion.

    contact is always the contact the deal is attached to; contact_created
    tells whether it is new and still has to be added to the store.
    """

    contact: Contact
    deal: Deal
    contact_created: bool


# =============================================================================
# Projections
# =============================================================================


def get_active_contact(
    email: Email | None,
    contacts: Iterable[Contact],
) -> Contact | None:
    """
    Find the contact for an email's sender.

    Duplicate contact emails are not rejected anywhere; the first match in
    collection order wins.

    Args:
        email: The open email, or None
        contacts: Contact collection in store order

    Returns:
        First contact whose email equals email.sender_email, or None
    """
    if email is None:
        return None
    return next((c for c in contacts if c.email == email.sender_email), None)


def get_active_deals(
    contact: Contact | None,
    deals: Iterable[Deal],
) -> list[Deal]:
    """Deals owned by the contact, in original order. Empty without a contact."""
    if contact is None:
        return []
    return [d for d in deals if d.contact_id == contact.id]


# =============================================================================
# Suggestion Acceptance
# =============================================================================


def build_placeholder_contact(email: Email) -> Contact:
    """New-lead contact synthesized from the sender of an email."""
    return Contact(
        id=new_contact_id(),
        name=email.sender,
        email=email.sender_email,
        company=PLACEHOLDER_COMPANY,
        tags=list(NEW_LEAD_TAGS),
    )


def reconcile_suggestion(
    suggestion: ExtractedDealData,
    email: Email,
    existing_contact: Contact | None,
    now: datetime | None = None,
) -> ReconciliationResult:
    """
    Build the records for accepting a suggestion.

    The deal always starts at the first pipeline stage, whatever the
    confidence score. Every call generates fresh ids: accepting the same
    suggestion twice yields two distinct deals.

    Args:
        suggestion: The analysis result being accepted
        email: The email the suggestion was produced for
        existing_contact: The sender's contact, if one exists
        now: Creation timestamp override (defaults to current UTC time)

    Returns:
        ReconciliationResult with the resolved contact and the new deal
    """
    contact = existing_contact
    contact_created = False
    if contact is None:
        contact = build_placeholder_contact(email)
        contact_created = True

    deal = Deal(
        id=new_deal_id(),
        title=suggestion.deal_title,
        value=suggestion.estimated_value,
        stage=PipelineStage.LEAD,
        contact_id=contact.id,
        created_at=now or datetime.now(tz=timezone.utc),
        notes=suggestion.summary,
    )

    return ReconciliationResult(
        contact=contact,
        deal=deal,
        contact_created=contact_created,
    )
