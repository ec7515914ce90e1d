"""
Merges aggregator outputs into the dashboard response model.
"""
from __future__ import annotations

from civil_registry.schemas.stats import (
    DashboardStats,
    ProcessingTimes,
    RecentRegistration,
    RegionalCount,
    RegistrationTrends,
    StatusCounts,
    TimelineStats,
    TypeCounts,
)
from civil_registry.stats.aggregator import AggregateResults


def assemble(results: AggregateResults) -> DashboardStats:
    """Copy aggregate results into a ``DashboardStats`` payload."""
    timeline = results.timeline
    return DashboardStats(
        pending_birth=results.pending["births"],
        pending_death=results.pending["deaths"],
        approved_this_month=results.approved_this_month,
        total_registrations=results.total_registrations,
        recent_activity=TypeCounts(**results.recent_activity),
        monthly_growth=results.monthly_growth,
        registrations_by_status=StatusCounts(**results.by_status),
        timeline_stats=TimelineStats(
            today=TypeCounts(**timeline["today"]),
            this_week=TypeCounts(**timeline["this_week"]),
            this_month=TypeCounts(**timeline["this_month"]),
        ),
        processing_times=ProcessingTimes(**results.processing_times),
        registration_trends=RegistrationTrends(**results.trends),
        recent_registrations=[RecentRegistration(**item) for item in results.recent_registrations],
        regional_data=[RegionalCount(**item) for item in results.regional],
    )
