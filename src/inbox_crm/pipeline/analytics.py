"""
Derived pipeline views: grouping, stage totals, win rate.

Computed on demand from a deal collection, never stored.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from ..models.crm import Deal, PipelineStage


@dataclass
class PipelineSummary:
    """Analytics rollup over a deal collection."""

    total_value: Decimal
    active_count: int
    won_count: int
    lost_count: int
    win_rate: int
    stage_counts: dict[PipelineStage, int] = field(default_factory=dict)
    stage_values: dict[PipelineStage, Decimal] = field(default_factory=dict)

    @property
    def closed_count(self) -> int:
        return self.won_count + self.lost_count

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'total_value': self.total_value,
            'active_count': self.active_count,
            'won_count': self.won_count,
            'lost_count': self.lost_count,
            'closed_count': self.closed_count,
            'win_rate': self.win_rate,
            'stages': [
                {
                    'stage': stage.value,
                    'count': self.stage_counts.get(stage, 0),
                    'value': self.stage_values.get(stage, Decimal('0')),
                }
                for stage in PipelineStage
            ],
        }


def deals_by_stage(deals: Iterable[Deal]) -> dict[PipelineStage, list[Deal]]:
    """Group deals by stage. Every stage is present, in display order."""
    grouped: dict[PipelineStage, list[Deal]] = {stage: [] for stage in PipelineStage}
    for deal in deals:
        grouped[deal.stage].append(deal)
    return grouped


def stage_values(deals: Iterable[Deal]) -> dict[PipelineStage, Decimal]:
    """Total deal value per stage, every stage present."""
    return {
        stage: sum((d.value for d in stage_deals), Decimal('0'))
        for stage, stage_deals in deals_by_stage(deals).items()
    }


def total_pipeline_value(deals: Iterable[Deal]) -> Decimal:
    return sum((d.value for d in deals), Decimal('0'))


def active_deal_count(deals: Iterable[Deal]) -> int:
    """Deals that are neither Won nor Lost."""
    return sum(1 for d in deals if not d.stage.is_closed)


def win_rate(deals: Sequence[Deal]) -> int:
    """
    Won / (won + lost) as a whole percent, 0 when nothing has closed.

    Rounds half up (12.5% -> 13%), not to even.
    """
    won = sum(1 for d in deals if d.stage == PipelineStage.WON)
    lost = sum(1 for d in deals if d.stage == PipelineStage.LOST)
    return _percent(won, won + lost)


def summarize_pipeline(deals: Sequence[Deal]) -> PipelineSummary:
    """Build the analytics rollup for a deal collection."""
    grouped = deals_by_stage(deals)
    won = len(grouped[PipelineStage.WON])
    lost = len(grouped[PipelineStage.LOST])

    return PipelineSummary(
        total_value=total_pipeline_value(deals),
        active_count=active_deal_count(deals),
        won_count=won,
        lost_count=lost,
        win_rate=_percent(won, won + lost),
        stage_counts={stage: len(items) for stage, items in grouped.items()},
        stage_values=stage_values(deals),
    )


def _percent(numerator: int, denominator: int) -> int:
    if denominator == 0:
        return 0
    ratio = Decimal(numerator * 100) / Decimal(denominator)
    return int(ratio.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
