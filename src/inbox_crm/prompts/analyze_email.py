"""
Email deal analysis prompts.

Provides the system prompt and user prompt template for turning one email
into a single deal candidate. The response model is defined in
inbox_crm.models.extraction.
"""


# =============================================================================
# System Prompt
# =============================================================================

EMAIL_ANALYSIS_SYSTEM_PROMPT = """You are an Expert Sales Analyst working inside a CRM that sits next to an email inbox.

Your task is to read one email and describe the sales opportunity it may represent.

## Output Fields

- **dealTitle**: A concise title for the potential deal (e.g., "Startup Plan - TechStart")
- **estimatedValue**: Estimated value in USD as a plain number. Use an amount stated in the email; otherwise estimate from context; use 0 if no amount is stated or inferable
- **summary**: One or two sentences on what the sender wants
- **confidenceScore**: 0-100, how likely this email is a genuine sales opportunity
- **suggestedNextSteps**: 2-3 short, actionable next steps for the sales rep

## Rules

- Base every field on the email content; do not invent names, companies or amounts
- Casual or internal emails get a low confidenceScore
- Keep next steps short (under ten words each)"""


# =============================================================================
# User Prompt
# =============================================================================

EMAIL_ANALYSIS_USER_PROMPT_TEMPLATE = """Analyze the following email to extract potential CRM deal information.

Sender: {sender}
Subject: {subject}

<email_body>
{body}
</email_body>

Extract the potential deal title, estimated value (if mentioned, otherwise estimate based on context or put 0), a short summary, a confidence score (0-100) that this is a sales opportunity, and 2-3 suggested next steps."""


# =============================================================================
# Builder Functions
# =============================================================================


def build_email_analysis_prompt(
    email_body: str,
    sender: str,
    subject: str,
) -> list[dict[str, str]]:
    """
    Build analysis prompt messages for one email.

    Sender, subject and body are embedded verbatim.

    Args:
        email_body: Raw email body text
        sender: Sender display name
        subject: Email subject line

    Returns:
        List of message dicts for OpenAI chat completion
    """
    user_prompt = EMAIL_ANALYSIS_USER_PROMPT_TEMPLATE.format(
        sender=sender,
        subject=subject,
        body=email_body,
    )

    return [
        {'role': 'system', 'content': EMAIL_ANALYSIS_SYSTEM_PROMPT},
        {'role': 'user', 'content': user_prompt},
    ]
