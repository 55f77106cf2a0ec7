"""
Tests for the deal extraction service with mocked OpenAI calls.

Tests cover:
- Successful analysis: structured call shape, prompt content, result passthrough
- Degraded analysis: timeout, malformed JSON, empty payload, refusal -> fallback
- Raw provider payloads: the SDK parser over a mocked HTTP transport
- Missing credential: ConfigurationError before any provider call

Run with: pytest tests/test_extractor.py -v

No API keys required; all OpenAI calls are mocked.
"""

import json
from decimal import Decimal
from unittest.mock import AsyncMock

import httpx
import openai
import pytest
from openai import AsyncOpenAI
from pydantic import ValidationError

from inbox_crm.clients.openai_client import OpenAIClient
from inbox_crm.errors import ConfigurationError, OpenAIModelError
from inbox_crm.models.crm import Email
from inbox_crm.models.extraction import ExtractedDealData
from inbox_crm.pipeline.extractor import DealExtractor

SENDER = 'New Lead (David)'

FALLBACK = {
    'dealTitle': 'New Opportunity from New Lead (David)',
    'estimatedValue': 0,
    'summary': 'Could not analyze with AI. Please review manually.',
    'confidenceScore': 0,
    'suggestedNextSteps': ['Reply to email', 'Schedule call'],
}


def _malformed_json_error() -> ValidationError:
    try:
        ExtractedDealData.model_validate_json('{"dealTitle": "Half a respon')
    except ValidationError as e:
        return e
    raise AssertionError('expected a ValidationError')


@pytest.fixture
def extractor(mock_openai):
    """Create a DealExtractor with mocked OpenAI client."""
    return DealExtractor(openai_client=mock_openai)


class TestSuccessfulAnalysis:
    """The provider answers with a schema-conforming payload."""

    @pytest.mark.asyncio
    async def test_returns_provider_result(self, extractor, suggestion):
        result = await extractor.analyze(
            email_body='Estimated annual spend would be roughly $25,000.',
            sender=SENDER,
            subject='Inquiry about Enterprise Solution',
        )

        assert result == suggestion
        assert not result.is_fallback

    @pytest.mark.asyncio
    async def test_structured_call_uses_response_model(self, extractor, mock_openai):
        await extractor.analyze(
            email_body='We have about 50 seats needed.',
            sender=SENDER,
            subject='Inquiry about Enterprise Solution',
        )

        call_args = mock_openai.chat_completion_structured.call_args
        assert call_args.kwargs['response_model'] is ExtractedDealData
        messages = call_args.kwargs['messages']
        assert len(messages) == 2
        assert messages[0]['role'] == 'system'
        assert messages[1]['role'] == 'user'

    @pytest.mark.asyncio
    async def test_prompt_embeds_email_verbatim(self, extractor, mock_openai):
        body = 'Hi there,\n\nWe have about 50 seats needed. "Quoted" {braces} too.'
        await extractor.analyze(email_body=body, sender=SENDER, subject='Re: Seats')

        user_prompt = mock_openai.chat_completion_structured.call_args.kwargs['messages'][1]['content']
        assert body in user_prompt
        assert 'Sender: New Lead (David)' in user_prompt
        assert 'Subject: Re: Seats' in user_prompt

    @pytest.mark.asyncio
    async def test_analyze_email_uses_record_fields(self, extractor, mock_openai, emails):
        email: Email = emails[1]
        await extractor.analyze_email(email)

        user_prompt = mock_openai.chat_completion_structured.call_args.kwargs['messages'][1]['content']
        assert email.body in user_prompt
        assert email.sender in user_prompt
        assert email.subject in user_prompt


class TestDegradedAnalysis:
    """Any provider failure resolves to the fixed fallback payload."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'failure',
        [
            openai.APITimeoutError(
                request=httpx.Request('POST', 'https://api.openai.com/v1/chat/completions')
            ),
            _malformed_json_error(),
            OpenAIModelError('Failed to parse structured response'),
            OpenAIModelError('Model refused request', context={'refusal': 'no'}),
            RuntimeError('connection reset'),
        ],
        ids=['timeout', 'malformed_json', 'empty_payload', 'refusal', 'network'],
    )
    async def test_failure_returns_fallback(self, extractor, mock_openai, failure):
        mock_openai.chat_completion_structured.side_effect = failure

        result = await extractor.analyze(
            email_body='Are you available for a call?',
            sender=SENDER,
            subject='Inquiry',
        )

        assert result.model_dump(by_alias=True) == FALLBACK
        assert result.is_fallback

    @pytest.mark.asyncio
    async def test_fallback_title_uses_sender_display_name(self, extractor, mock_openai):
        mock_openai.chat_completion_structured.side_effect = RuntimeError('boom')

        result = await extractor.analyze(email_body='', sender='Alice Chen', subject='')

        assert result.deal_title == 'New Opportunity from Alice Chen'


def _completion_body(content: str) -> dict:
    return {
        'id': 'chatcmpl-test',
        'object': 'chat.completion',
        'created': 1700000000,
        'model': 'gpt-test',
        'choices': [
            {
                'index': 0,
                'finish_reason': 'stop',
                'message': {'role': 'assistant', 'content': content, 'refusal': None},
            }
        ],
    }


def _http_backed_extractor(content: str, requests: list) -> DealExtractor:
    """DealExtractor over a real OpenAIClient whose HTTP layer returns `content`."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=_completion_body(content))

    client = OpenAIClient(api_key='sk-test', chat_model='gpt-test')
    client._client = AsyncOpenAI(
        api_key='sk-test',
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return DealExtractor(openai_client=client)


class TestProviderResponses:
    """Raw chat completion payloads through the real structured-output parser."""

    @pytest.mark.asyncio
    async def test_valid_payload_is_parsed(self):
        requests = []
        content = json.dumps(
            {
                'dealTitle': 'Innovate CRM Migration',
                'estimatedValue': 25000.5,
                'summary': 'Migrating 50 seats.',
                'confidenceScore': 88,
                'suggestedNextSteps': ['Book a call'],
            }
        )
        extractor = _http_backed_extractor(content, requests)

        result = await extractor.analyze(email_body='50 seats', sender=SENDER, subject='Inquiry')

        assert result.deal_title == 'Innovate CRM Migration'
        assert result.estimated_value == Decimal('25000.5')
        assert len(requests) == 1
        sent = json.loads(requests[0].content)
        assert sent['response_format']['type'] == 'json_schema'

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'content',
        [
            '{"dealTitle": "Half a respon',
            '',
            json.dumps(
                {
                    'dealTitle': 'Overconfident',
                    'estimatedValue': 100,
                    'summary': 's',
                    'confidenceScore': 150,
                    'suggestedNextSteps': [],
                }
            ),
        ],
        ids=['malformed_json', 'empty_content', 'score_out_of_range'],
    )
    async def test_bad_payload_returns_fallback_without_retry(self, content):
        requests = []
        extractor = _http_backed_extractor(content, requests)

        result = await extractor.analyze(email_body='body', sender=SENDER, subject='Inquiry')

        assert result.model_dump(by_alias=True) == FALLBACK
        assert len(requests) == 1


class TestMissingCredential:
    """No API key is fatal to analysis and is not masked by the fallback."""

    @pytest.mark.asyncio
    async def test_raises_configuration_error(self):
        extractor = DealExtractor(openai_client=None)

        assert extractor.is_configured is False
        with pytest.raises(ConfigurationError):
            await extractor.analyze(email_body='body', sender=SENDER, subject='subject')

    @pytest.mark.asyncio
    async def test_no_provider_call_attempted(self, monkeypatch):
        from inbox_crm.pipeline import extractor as extractor_module

        spy = AsyncMock()
        monkeypatch.setattr(extractor_module.DealExtractor, '_call_provider', spy)

        with pytest.raises(ConfigurationError):
            await DealExtractor(openai_client=None).analyze(
                email_body='body', sender=SENDER, subject='subject'
            )

        spy.assert_not_called()
