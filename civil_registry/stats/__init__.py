"""
Registrar dashboard statistics.

    - StatsAggregator: read-only metric queries over the registration tables
    - assemble: merges aggregator results into the response payload
"""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from civil_registry.core.config import settings
from civil_registry.schemas.stats import DashboardStats
from civil_registry.stats.aggregator import AggregateResults, StatsAggregator
from civil_registry.stats.assembler import assemble


def get_dashboard_stats(db: Session, now: Optional[datetime] = None) -> DashboardStats:
    """Aggregate and assemble the dashboard payload as of ``now``."""
    aggregator = StatsAggregator(
        db,
        now=now,
        first_weekday=settings.FIRST_WEEKDAY,
        regions=settings.REGIONS,
    )
    return assemble(aggregator.run())


__all__ = [
    'AggregateResults',
    'StatsAggregator',
    'assemble',
    'get_dashboard_stats',
]
