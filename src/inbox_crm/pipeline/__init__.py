"""
CRM pipeline components: deal extraction, reconciliation and analytics.
"""

from .analytics import (
    PipelineSummary,
    active_deal_count,
    deals_by_stage,
    stage_values,
    summarize_pipeline,
    total_pipeline_value,
    win_rate,
)
from .extractor import DealExtractor
from .reconciler import (
    ReconciliationResult,
    get_active_contact,
    get_active_deals,
    reconcile_suggestion,
)

__all__ = [
    # Extraction
    'DealExtractor',
    # Reconciliation
    'ReconciliationResult',
    'get_active_contact',
    'get_active_deals',
    'reconcile_suggestion',
    # Analytics
    'PipelineSummary',
    'active_deal_count',
    'deals_by_stage',
    'stage_values',
    'summarize_pipeline',
    'total_pipeline_value',
    'win_rate',
]
