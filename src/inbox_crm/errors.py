"""
Custom exceptions and error handling for the inbox CRM.

Provides:
- Typed exception hierarchy for different failure modes
- Error context preservation for debugging
- Wrapping of raw provider exceptions into the hierarchy

Two kinds matter to callers of the analysis feature:
- ConfigurationError is fatal and always propagates.
- AnalysisDegradedError never reaches callers; the extractor recovers from it
  by substituting the fallback payload.
"""

from typing import Any


class InboxCrmError(Exception):
    """Base exception for all inbox CRM errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message


class ConfigurationError(InboxCrmError):
    """Required configuration (e.g. the provider API key) is missing."""

    pass


# =============================================================================
# Client Errors
# =============================================================================


class ClientError(InboxCrmError):
    """Base class for client-related errors."""

    pass


class OpenAIError(ClientError):
    """Error from OpenAI API calls."""

    pass


class OpenAIRateLimitError(OpenAIError):
    """Rate limit exceeded on OpenAI API."""

    pass


class OpenAIModelError(OpenAIError):
    """Model refused request or returned invalid response."""

    pass


# =============================================================================
# Pipeline Errors
# =============================================================================


class PipelineError(InboxCrmError):
    """Base class for CRM pipeline errors."""

    pass


class AnalysisDegradedError(PipelineError):
    """Deal analysis could not complete; the fallback payload is used instead."""

    pass


class EmailNotFoundError(PipelineError):
    """No email matches the requested id, or no email is open."""

    pass


# =============================================================================
# Error Handling Utilities
# =============================================================================


def wrap_openai_error(exc: Exception, context: dict[str, Any] | None = None) -> OpenAIError:
    """
    Wrap an OpenAI exception in our typed error hierarchy.

    Args:
        exc: The original exception
        context: Additional context for debugging

    Returns:
        Typed OpenAIError subclass
    """
    if isinstance(exc, OpenAIError):
        return exc

    error_str = str(exc).lower()
    ctx = context or {}
    ctx['original_error'] = str(exc)
    ctx['error_type'] = type(exc).__name__

    if 'rate limit' in error_str or 'rate_limit' in error_str:
        return OpenAIRateLimitError(
            f"OpenAI rate limit exceeded: {exc}",
            context=ctx,
        )
    elif 'content policy' in error_str or 'refused' in error_str:
        return OpenAIModelError(
            f"OpenAI model refused request: {exc}",
            context=ctx,
        )
    else:
        return OpenAIError(
            f"OpenAI API error: {exc}",
            context=ctx,
        )
