"""
OpenAI client wrapper for the inbox CRM.

Handles:
- Chat completions with structured output (Pydantic model parsing)
- Retry logic with exponential backoff
- Fail-fast on a missing API key (ConfigurationError, before any request)
"""

from typing import TypeVar

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config import config
from ..errors import ConfigurationError, OpenAIModelError

# Type variable for structured output parsing
T = TypeVar('T', bound=BaseModel)

# Transport, rate-limit and 5xx failures; nothing else is retried
TRANSIENT_ERRORS = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class OpenAIClient:
    """
    Async OpenAI client with structured output support.

    Configuration via environment variables:
    - OPENAI_API_KEY: Required API key
    - OPENAI_CHAT_MODEL: Chat model (default: gpt-4.1-mini)
    - OPENAI_TIMEOUT_SECONDS: Per-request timeout (default: 30)
    """

    def __init__(
        self,
        api_key: str | None = None,
        chat_model: str | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize the OpenAI client.

        Args:
            api_key: OpenAI API key (defaults to OPENAI_API_KEY env var)
            chat_model: Model for chat completions (defaults to OPENAI_CHAT_MODEL or gpt-4.1-mini)
            timeout: Request timeout in seconds (defaults to OPENAI_TIMEOUT_SECONDS)

        Raises:
            ConfigurationError: If no API key is given or configured
        """
        self.api_key = api_key or config.OPENAI_API_KEY
        if not self.api_key:
            raise ConfigurationError(
                'OPENAI_API_KEY environment variable is required',
                context={'missing': ['OPENAI_API_KEY']},
            )

        self.chat_model = chat_model or config.OPENAI_CHAT_MODEL
        self.timeout = timeout or config.OPENAI_TIMEOUT_SECONDS

        # Retries are owned by the tenacity policy below
        self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    @retry(
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def chat_completion_structured(
        self,
        messages: list[dict[str, str]],
        response_model: type[T],
        model: str | None = None,
        temperature: float = 0.0,
    ) -> T:
        """
        Get a chat completion with structured output (Pydantic model).

        Uses OpenAI's native structured output via response_format. The
        response is validated against response_model; any mismatch raises.

        Args:
            messages: List of message dicts with 'role' and 'content'
            response_model: Pydantic model class for the response
            model: Override the default chat model
            temperature: Sampling temperature

        Returns:
            Parsed Pydantic model instance

        Raises:
            OpenAIModelError: If the model refused or returned no parsable payload
        """
        response = await self._client.chat.completions.parse(
            model=model or self.chat_model,
            messages=messages,  # type: ignore
            response_format=response_model,
            temperature=temperature,
        )

        message = response.choices[0].message
        if message.refusal:
            raise OpenAIModelError(
                'Model refused request',
                context={'refusal': message.refusal},
            )
        if message.parsed is None:
            raise OpenAIModelError('Failed to parse structured response')
        return message.parsed

    async def health_check(self) -> dict[str, bool | str]:
        """
        Verify API connectivity with a minimal request.

        Returns:
            Dict with 'healthy' bool and optional 'error' message
        """
        try:
            await self._client.models.retrieve(self.chat_model)
            return {'healthy': True, 'chat_model': self.chat_model}
        except Exception as e:
            return {'healthy': False, 'error': str(e)}

    async def close(self):
        """Close the client connection."""
        await self._client.close()
