"""
Contact, Deal, Email and PipelineStage models for the inbox CRM.

All records are immutable (frozen pydantic models). The only field the CRM
ever changes after creation is Deal.stage, and that change is made by
building a new Deal with model_copy(update=...), never by assignment.

Key design decisions:
- Contact.email is the join key to Email.sender_email (exact match)
- Deal.contact_id references exactly one Contact; an unresolved reference is
  an "orphaned" deal, tolerated for display rather than rejected
- PipelineStage declaration order is the display order of the pipeline board
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, WithJsonSchema

# Currency: exact Decimal in Python, plain number on the wire.
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(v), return_type=float, when_used='json'),
    WithJsonSchema({'type': 'number'}),
]


class PipelineStage(str, Enum):
    """Deal pipeline stages. Any stage is reachable from any other."""

    LEAD = 'Lead'
    QUALIFIED = 'Qualified'
    PROPOSAL = 'Proposal'
    NEGOTIATION = 'Negotiation'
    WON = 'Won'
    LOST = 'Lost'

    @property
    def is_closed(self) -> bool:
        """Won and Lost are conventionally terminal (not enforced)."""
        return self in (PipelineStage.WON, PipelineStage.LOST)


class Contact(BaseModel):
    """A person or organization record, linked to deals via its id."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description='Unique contact id, immutable once created')
    name: str = Field(..., description='Display name')
    email: str = Field(..., description='Join key to Email.sender_email')
    company: str = Field(default='', description='Company name')
    tags: list[str] = Field(default_factory=list, description='Free-text labels, ordered')
    avatar: str | None = Field(default=None, description='Avatar image URL')
    phone: str | None = Field(default=None, description='Phone number')


class Deal(BaseModel):
    """
    A tracked sales opportunity.

    Created by manual add or by accepting an AI suggestion. Only `stage`
    changes afterwards, via the pipeline move operation.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description='Unique deal id')
    title: str = Field(..., description='Deal title')
    value: Money = Field(default=Decimal('0'), ge=0, description='Deal value in currency units')
    stage: PipelineStage = Field(default=PipelineStage.LEAD, description='Current pipeline stage')
    contact_id: str = Field(..., description='Id of the owning Contact')
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc),
        description='When the deal was created',
    )
    notes: str = Field(default='', description='Free-text notes')
    expected_close_date: date | None = Field(default=None, description='Projected close date')


class Email(BaseModel):
    """An inbox message. Read state is set on selection and never reverts."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description='Unique email id')
    sender: str = Field(..., description='Sender display name')
    sender_email: str = Field(..., description='Sender address, join key to Contact.email')
    subject: str = Field(default='', description='Subject line')
    body: str = Field(default='', description='Raw body text')
    timestamp: str = Field(default='', description='Display timestamp, not necessarily sortable')
    is_read: bool = Field(default=False, description='Whether the email has been opened')
