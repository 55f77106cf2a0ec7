"""
Inbox CRM

A lightweight CRM beside an email inbox: contact and deal context for the
sender of the open email, AI-assisted deal extraction from email content
via OpenAI structured output, and a drag-and-drop style deal pipeline with
an analytics rollup. State is in memory only.
"""

__version__ = '0.1.0'

# Re-export key classes for convenience
from .config import Config, config
from .controller import CrmController
from .store import CrmStore
from .models import Contact, Deal, Email, ExtractedDealData, PipelineStage
from .pipeline import (
    DealExtractor,
    PipelineSummary,
    ReconciliationResult,
    get_active_contact,
    get_active_deals,
    reconcile_suggestion,
    summarize_pipeline,
)
from .logging import (
    configure_logging,
    get_logger,
    logging_context,
    PipelineTimer,
)
from .errors import (
    InboxCrmError,
    ConfigurationError,
    PipelineError,
    AnalysisDegradedError,
    EmailNotFoundError,
    OpenAIError,
)

__all__ = [
    # Version
    '__version__',
    # Config
    'Config',
    'config',
    # Controller and state
    'CrmController',
    'CrmStore',
    # Models
    'Contact',
    'Deal',
    'Email',
    'ExtractedDealData',
    'PipelineStage',
    # Pipeline
    'DealExtractor',
    'PipelineSummary',
    'ReconciliationResult',
    'get_active_contact',
    'get_active_deals',
    'reconcile_suggestion',
    'summarize_pipeline',
    # Logging
    'configure_logging',
    'get_logger',
    'logging_context',
    'PipelineTimer',
    # Errors
    'InboxCrmError',
    'ConfigurationError',
    'PipelineError',
    'AnalysisDegradedError',
    'EmailNotFoundError',
    'OpenAIError',
]
