"""
Deal extraction from email content.

Sends one email (sender, subject, body) to OpenAI with ExtractedDealData as
the structured response model and returns the parsed deal candidate.

Error policy:
- Missing credential -> ConfigurationError, raised before any network call
- Anything else (network, rate limit, refusal, empty or malformed payload,
  schema or range mismatch) -> AnalysisDegradedError, logged and replaced by
  the fixed fallback payload. analyze() never raises for these.
"""

from ..clients.openai_client import OpenAIClient
from ..errors import AnalysisDegradedError, ConfigurationError, wrap_openai_error
from ..logging import PipelineTimer, get_logger
from ..models.crm import Email
from ..models.extraction import ExtractedDealData
from ..prompts.analyze_email import build_email_analysis_prompt

logger = get_logger(__name__)


class DealExtractor:
    """
    Proposes a new sales opportunity from the content of one email.

    The OpenAI client is optional so the rest of the CRM can run without a
    configured key; analyze() then fails with ConfigurationError.
    """

    def __init__(self, openai_client: OpenAIClient | None = None):
        """
        Initialize the extractor.

        Args:
            openai_client: OpenAI client for LLM calls, or None when the
                API key is not configured
        """
        self.openai = openai_client

    @property
    def is_configured(self) -> bool:
        return self.openai is not None

    async def analyze(
        self,
        email_body: str,
        sender: str,
        subject: str,
    ) -> ExtractedDealData:
        """
        Analyze an email and propose a deal.

        Args:
            email_body: Raw email body text
            sender: Sender display name
            subject: Email subject line

        Returns:
            The provider's ExtractedDealData, or the fallback payload if the
            analysis could not be completed

        Raises:
            ConfigurationError: If no OpenAI client (API key) is configured
        """
        if not self.is_configured:
            raise ConfigurationError(
                'API key is missing; deal analysis is unavailable',
                context={'missing': ['OPENAI_API_KEY']},
            )

        log = logger.bind(sender=sender, subject=subject)
        timer = PipelineTimer()

        try:
            with timer.stage('provider_call'):
                result = await self._call_provider(email_body, sender, subject)
        except AnalysisDegradedError as e:
            log.warning(
                'deal_analysis.degraded',
                error=e.message,
                error_type=e.context.get('error_type'),
                timing=timer.summary(),
            )
            return ExtractedDealData.fallback(sender)

        log.info(
            'deal_analysis.complete',
            deal_title=result.deal_title,
            estimated_value=result.estimated_value,
            confidence_score=result.confidence_score,
            timing=timer.summary(),
        )
        return result

    async def analyze_email(self, email: Email) -> ExtractedDealData:
        """Analyze an Email record. See analyze()."""
        return await self.analyze(
            email_body=email.body,
            sender=email.sender,
            subject=email.subject,
        )

    async def _call_provider(
        self,
        email_body: str,
        sender: str,
        subject: str,
    ) -> ExtractedDealData:
        """
        Run the structured-output call.

        Raises:
            AnalysisDegradedError: On any provider or validation failure
        """
        messages = build_email_analysis_prompt(
            email_body=email_body,
            sender=sender,
            subject=subject,
        )

        try:
            return await self.openai.chat_completion_structured(
                messages=messages,
                response_model=ExtractedDealData,
            )
        except Exception as e:
            error = wrap_openai_error(e, context={'sender': sender})
            raise AnalysisDegradedError(
                f'Deal analysis failed: {error.message}',
                context={**error.context, 'error_type': type(e).__name__},
            ) from e
