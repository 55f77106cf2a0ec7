"""
Demo data for the inbox CRM.

Three contacts with one deal each, and three inbox emails: two from known
contacts and one from a sender with no contact record yet.
"""

from datetime import datetime, timezone

from .models.crm import Contact, Deal, Email, PipelineStage
from .store import CrmStore

DEMO_CONTACTS = (
    Contact(
        id='c1',
        name='Alice Chen',
        email='alice@techstart.io',
        company='TechStart Inc.',
        tags=['VIP', 'SaaS'],
        avatar='https://picsum.photos/seed/alice/200/200',
    ),
    Contact(
        id='c2',
        name='Bob Smith',
        email='bob@enterprise.com',
        company='Big Enterprise Corp',
        tags=['Enterprise', 'Slow'],
        avatar='https://picsum.photos/seed/bob/200/200',
    ),
    Contact(
        id='c3',
        name='Sarah Jones',
        email='sarah@designstudio.co',
        company='Design Studio',
        tags=['Creative', 'Partner'],
        avatar='https://picsum.photos/seed/sarah/200/200',
    ),
)

DEMO_DEALS = (
    Deal(
        id='d1',
        title='Q3 Enterprise License',
        value=45000,
        stage=PipelineStage.NEGOTIATION,
        contact_id='c2',
        created_at=datetime(2023, 10, 1, tzinfo=timezone.utc),
        notes='Waiting on legal review.',
    ),
    Deal(
        id='d2',
        title='Design Partnership',
        value=12000,
        stage=PipelineStage.PROPOSAL,
        contact_id='c3',
        created_at=datetime(2023, 10, 15, tzinfo=timezone.utc),
        notes='Sent initial draft.',
    ),
    Deal(
        id='d3',
        title='Startup Plan - TechStart',
        value=5000,
        stage=PipelineStage.QUALIFIED,
        contact_id='c1',
        created_at=datetime(2023, 10, 20, tzinfo=timezone.utc),
        notes='Demo scheduled for Tuesday.',
    ),
)

DEMO_EMAILS = (
    Email(
        id='e1',
        sender='Alice Chen',
        sender_email='alice@techstart.io',
        subject='Re: Demo Scheduling',
        timestamp='10:30 AM',
        is_read=True,
        body=(
            'Hi Team,\n\n'
            'Thanks for the info yesterday. We are very interested in the Startup Plan.\n'
            'Could we schedule a demo for next Tuesday at 2 PM?\n\n'
            'We have a budget of around $5,000 for this quarter.\n\n'
            'Best,\nAlice'
        ),
    ),
    Email(
        id='e2',
        sender='Bob Smith',
        sender_email='bob@enterprise.com',
        subject='Contract Review Redlines',
        timestamp='Yesterday',
        is_read=False,
        body=(
            'Hello,\n\n'
            'Our legal team has returned the contract with a few redlines regarding '
            'the data privacy clause.\n'
            'The deal value of $45k looks correct, but we need to finalize the terms '
            'before end of month.\n\n'
            "Let's discuss.\n\nRegards,\nBob"
        ),
    ),
    Email(
        id='e3',
        sender='New Lead (David)',
        sender_email='david@innovate.net',
        subject='Inquiry about Enterprise Solution',
        timestamp='2 Days ago',
        is_read=True,
        body=(
            'Hi there,\n\n'
            'I saw your product at the conference. We are looking to migrate our '
            'current CRM to something lighter.\n'
            'We have about 50 seats needed. Estimated annual spend would be roughly $25,000.\n\n'
            'Are you available for a call?\n\nDavid'
        ),
    ),
)


def build_demo_store() -> CrmStore:
    """A fresh store holding the demo contacts, deals and emails."""
    return CrmStore(contacts=DEMO_CONTACTS, deals=DEMO_DEALS, emails=DEMO_EMAILS)
