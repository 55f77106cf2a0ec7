"""
LLM prompts for the inbox CRM.

Provides system and user prompts for email deal analysis.
"""

from .analyze_email import (
    EMAIL_ANALYSIS_SYSTEM_PROMPT,
    EMAIL_ANALYSIS_USER_PROMPT_TEMPLATE,
    build_email_analysis_prompt,
)

__all__ = [
    'EMAIL_ANALYSIS_SYSTEM_PROMPT',
    'EMAIL_ANALYSIS_USER_PROMPT_TEMPLATE',
    'build_email_analysis_prompt',
]
