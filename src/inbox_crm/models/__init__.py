"""
Data models for the inbox CRM.

Provides the CRM records (Contact, Deal, Email, PipelineStage) plus the
LLM structured output model for email deal analysis.
"""

from .crm import Contact, Deal, Email, Money, PipelineStage
from .extraction import ExtractedDealData

__all__ = [
    # CRM records
    'Contact',
    'Deal',
    'Email',
    'Money',
    'PipelineStage',
    # LLM structured output models
    'ExtractedDealData',
]
