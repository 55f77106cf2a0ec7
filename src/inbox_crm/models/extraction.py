"""
LLM structured output model for email deal analysis.

ExtractedDealData is the response_format target for the OpenAI structured
output call. Its JSON schema uses the camelCase wire names (dealTitle,
estimatedValue, summary, confidenceScore, suggestedNextSteps), all required,
no extra fields. Range constraints are enforced on parse, so an out-of-range
provider answer fails validation like any other malformed response.

It is transient: produced for one email at a time, consumed at most once to
create a Contact/Deal pair, never stored.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .crm import Money

FALLBACK_TITLE_PREFIX = 'New Opportunity from '
FALLBACK_SUMMARY = 'Could not analyze with AI. Please review manually.'
FALLBACK_NEXT_STEPS = ('Reply to email', 'Schedule call')


class ExtractedDealData(BaseModel):
    """A deal candidate proposed from a single email."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='forbid',
        frozen=True,
    )

    deal_title: str = Field(..., description='A concise title for the potential deal')
    estimated_value: Money = Field(
        ...,
        ge=0,
        description='Estimated value in USD; 0 if no amount is stated or inferable',
    )
    summary: str = Field(..., description='Brief summary of the email intent')
    confidence_score: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description='Confidence (0-100) that this email is a sales opportunity',
    )
    suggested_next_steps: list[str] = Field(
        ..., description='2-3 short, actionable next steps'
    )

    @classmethod
    def fallback(cls, sender: str) -> 'ExtractedDealData':
        """The fixed payload substituted when analysis cannot complete."""
        return cls(
            deal_title=f'{FALLBACK_TITLE_PREFIX}{sender}',
            estimated_value=0,
            summary=FALLBACK_SUMMARY,
            confidence_score=0,
            suggested_next_steps=list(FALLBACK_NEXT_STEPS),
        )

    @property
    def is_fallback(self) -> bool:
        """Soft signal only: a genuine result may also score 0."""
        return self.confidence_score == 0
