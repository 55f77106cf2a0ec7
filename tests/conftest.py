"""
Pytest configuration and shared fixtures.

Key fixtures:
- openai_api_key: OpenAI API key from environment (live tests only)
- mock_openai: AsyncMock standing in for OpenAIClient
- contacts / deals / emails: small CRM fixtures
- store / controller: in-memory CRM wired to the mocked client

No API keys are needed except for tests that request openai_api_key.
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

# Load environment variables
from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)

from inbox_crm.controller import CrmController
from inbox_crm.models.crm import Contact, Deal, Email, PipelineStage
from inbox_crm.models.extraction import ExtractedDealData
from inbox_crm.pipeline.extractor import DealExtractor
from inbox_crm.store import CrmStore


@pytest.fixture
def openai_api_key() -> str:
    """Get OpenAI API key from environment."""
    key = os.getenv('OPENAI_API_KEY')
    if not key:
        pytest.skip('OPENAI_API_KEY not set')
    return key


@pytest.fixture
def contacts() -> list[Contact]:
    return [
        Contact(
            id='c1',
            name='Alice Chen',
            email='alice@techstart.io',
            company='TechStart Inc.',
            tags=['VIP', 'SaaS'],
        ),
        Contact(
            id='c2',
            name='Bob Smith',
            email='bob@enterprise.com',
            company='Big Enterprise Corp',
            tags=['Enterprise'],
        ),
    ]


@pytest.fixture
def deals() -> list[Deal]:
    return [
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
            title='Startup Plan - TechStart',
            value=5000,
            stage=PipelineStage.QUALIFIED,
            contact_id='c1',
            created_at=datetime(2023, 10, 20, tzinfo=timezone.utc),
            notes='Demo scheduled for Tuesday.',
        ),
        Deal(
            id='d3',
            title='Startup Plan Add-on',
            value=1500,
            stage=PipelineStage.LEAD,
            contact_id='c1',
            created_at=datetime(2023, 10, 22, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def emails() -> list[Email]:
    return [
        Email(
            id='e1',
            sender='Alice Chen',
            sender_email='alice@techstart.io',
            subject='Re: Demo Scheduling',
            body='We have a budget of around $5,000 for this quarter.',
            timestamp='10:30 AM',
            is_read=True,
        ),
        Email(
            id='e3',
            sender='New Lead (David)',
            sender_email='david@innovate.net',
            subject='Inquiry about Enterprise Solution',
            body='Estimated annual spend would be roughly $25,000.',
            timestamp='2 Days ago',
            is_read=False,
        ),
    ]


@pytest.fixture
def suggestion() -> ExtractedDealData:
    return ExtractedDealData(
        deal_title='Innovate CRM Migration',
        estimated_value=25000,
        summary='David wants to migrate 50 seats to a lighter CRM.',
        confidence_score=88,
        suggested_next_steps=['Book a call', 'Send pricing'],
    )


@pytest.fixture
def mock_openai(suggestion):
    """Create a mocked OpenAI client that returns the sample suggestion."""
    client = AsyncMock()
    client.chat_completion_structured = AsyncMock(return_value=suggestion)
    return client


@pytest.fixture
def store(contacts, deals, emails) -> CrmStore:
    return CrmStore(contacts=contacts, deals=deals, emails=emails)


@pytest.fixture
def controller(store, mock_openai) -> CrmController:
    return CrmController(store=store, extractor=DealExtractor(openai_client=mock_openai))
