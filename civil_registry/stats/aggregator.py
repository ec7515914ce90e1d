"""
Registration statistics aggregator.

Runs a fixed set of independent, read-only queries over the birth and death
registration tables for one "as of" instant. Any database failure aborts the
whole run with ``StatsUnavailableError``; partial results are never returned.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from civil_registry.core.exceptions import StatsUnavailableError
from civil_registry.models.registration import (
    BirthRegistration,
    DeathRegistration,
    RegistrationStatus,
)
from civil_registry.utils.dates import (
    hours_between,
    start_of_day,
    start_of_month,
    start_of_previous_month,
    start_of_week,
    utcnow,
)

logger = logging.getLogger(__name__)

TREND_DAYS = 7
RECENT_LIMIT = 5
TREND_LABEL_FORMAT = "%b %d"


@dataclass
class AggregateResults:
    """Raw outputs of one aggregation run, keyed by metric."""
    as_of: datetime
    pending: Dict[str, int] = field(default_factory=dict)
    approved_this_month: int = 0
    total_registrations: int = 0
    recent_activity: Dict[str, int] = field(default_factory=dict)
    monthly_growth: float = 0.0
    by_status: Dict[str, int] = field(default_factory=dict)
    timeline: Dict[str, Dict[str, int]] = field(default_factory=dict)
    processing_times: Dict[str, float] = field(default_factory=dict)
    trends: Dict[str, List[Any]] = field(default_factory=dict)
    recent_registrations: List[Dict[str, Any]] = field(default_factory=list)
    regional: List[Dict[str, Any]] = field(default_factory=list)


class StatsAggregator:
    """
    Computes dashboard metrics for the registrar view.

    Args:
        db: Session used for every query; the aggregator never writes.
        now: The "as of" instant (naive UTC). Defaults to the current time.
        first_weekday: First day of the week, 0 = Monday ... 6 = Sunday.
        regions: Region names matched as case-insensitive substrings of the
            birth/death place fields.
    """

    models: Tuple[Type, Type] = (BirthRegistration, DeathRegistration)

    def __init__(
        self,
        db: Session,
        now: Optional[datetime] = None,
        first_weekday: int = 6,
        regions: Sequence[str] = (),
    ):
        self.db = db
        self.now = now or utcnow()
        self.first_weekday = first_weekday
        self.regions = list(regions)
        self.today = start_of_day(self.now)
        self.tomorrow = self.today + timedelta(days=1)

    def run(self) -> AggregateResults:
        """Run every metric query; raises StatsUnavailableError on any failure."""
        try:
            pending_birth, pending_death = self.pending_counts()
            results = AggregateResults(
                as_of=self.now,
                pending={"births": pending_birth, "deaths": pending_death},
                approved_this_month=self.approved_this_month(),
                total_registrations=self.total_registrations(),
                recent_activity=self.recent_activity(),
                monthly_growth=self.monthly_growth(),
                by_status=self.registrations_by_status(),
                timeline=self.timeline_stats(),
                processing_times=self.processing_times(),
                trends=self.registration_trends(),
                recent_registrations=self.recent_registrations(),
                regional=self.regional_data(),
            )
        except SQLAlchemyError as e:
            logger.error(f"Statistics aggregation failed: {str(e)}")
            raise StatsUnavailableError() from e
        logger.debug(f"Statistics aggregated as of {self.now.isoformat()}")
        return results

    # Counting helpers

    def _count(self, model, *criteria) -> int:
        query = self.db.query(func.count(model.id))
        if criteria:
            query = query.filter(*criteria)
        return int(query.scalar() or 0)

    def _created_between(self, model, start: datetime, end: datetime) -> int:
        return self._count(model, model.created_at >= start, model.created_at < end)

    def _per_type(self, start: datetime, end: datetime) -> Dict[str, int]:
        return {
            "births": self._created_between(BirthRegistration, start, end),
            "deaths": self._created_between(DeathRegistration, start, end),
        }

    def _approved_between(self, model, start: datetime, end: datetime) -> int:
        return self._count(
            model,
            model.status == RegistrationStatus.APPROVED.value,
            model.approved_at >= start,
            model.approved_at < end,
        )

    # Metrics

    def pending_counts(self) -> Tuple[int, int]:
        pending = RegistrationStatus.PENDING.value
        return (
            self._count(BirthRegistration, BirthRegistration.status == pending),
            self._count(DeathRegistration, DeathRegistration.status == pending),
        )

    def approved_this_month(self) -> int:
        month_start = start_of_month(self.now)
        return sum(
            self._approved_between(model, month_start, self.tomorrow) for model in self.models
        )

    def total_registrations(self) -> int:
        return sum(self._count(model) for model in self.models)

    def recent_activity(self) -> Dict[str, int]:
        """Registrations created in the trailing trend window."""
        return self._per_type(self.today - timedelta(days=TREND_DAYS - 1), self.tomorrow)

    def registrations_by_status(self) -> Dict[str, int]:
        counts = Counter({status.value: 0 for status in RegistrationStatus})
        for model in self.models:
            rows = self.db.query(model.status, func.count(model.id)).group_by(model.status).all()
            for status, total in rows:
                counts[status] += int(total)
        return {status.value: counts[status.value] for status in RegistrationStatus}

    def timeline_stats(self) -> Dict[str, Dict[str, int]]:
        return {
            "today": self._per_type(self.today, self.tomorrow),
            "this_week": self._per_type(
                start_of_week(self.now, self.first_weekday), self.tomorrow
            ),
            "this_month": self._per_type(start_of_month(self.now), self.tomorrow),
        }

    def processing_times(self) -> Dict[str, float]:
        """Hours from submission to approval, pooled over both record types."""
        durations: List[float] = []
        for model in self.models:
            rows = self.db.query(model.created_at, model.approved_at).filter(
                model.status == RegistrationStatus.APPROVED.value,
                model.approved_at.isnot(None),
            ).all()
            durations.extend(hours_between(created, approved) for created, approved in rows)

        if not durations:
            return {"average_approval_time": 0, "fastest_approval": 0}
        return {
            "average_approval_time": round(sum(durations) / len(durations), 1),
            "fastest_approval": round(min(durations), 1),
        }

    def monthly_growth(self) -> float:
        """
        Percent change in birth approvals, this calendar month against the last.

        A previous month with no approvals is treated as one approval, so growth
        from zero reads as ``current * 100``.
        """
        month_start = start_of_month(self.now)
        current = self._approved_between(BirthRegistration, month_start, self.tomorrow)
        previous = self._approved_between(
            BirthRegistration, start_of_previous_month(self.now), month_start
        )
        return round((current - previous) / max(previous, 1) * 100, 1)

    def registration_trends(self) -> Dict[str, List[Any]]:
        """Per-day created counts for the last seven days, oldest first."""
        window_start = self.today - timedelta(days=TREND_DAYS - 1)
        days: List[date] = [(window_start + timedelta(days=i)).date() for i in range(TREND_DAYS)]

        series: Dict[str, List[int]] = {}
        for model, key in zip(self.models, ("births", "deaths")):
            created = self.db.query(model.created_at).filter(
                model.created_at >= window_start, model.created_at < self.tomorrow
            ).all()
            per_day = Counter(row[0].date() for row in created)
            series[key] = [per_day.get(day, 0) for day in days]

        return {
            "labels": [day.strftime(TREND_LABEL_FORMAT) for day in days],
            "births": series["births"],
            "deaths": series["deaths"],
        }

    def recent_registrations(self, limit: int = RECENT_LIMIT) -> List[Dict[str, Any]]:
        """The most recently created records across both tables, newest first."""
        combined = []
        for model in self.models:
            records = self.db.query(model).order_by(
                model.created_at.desc(), model.id.desc()
            ).limit(limit).all()
            combined.extend(
                {
                    "id": record.application_id,
                    "type": model.REGISTRATION_TYPE,
                    "name": record.display_name,
                    "date": record.created_at,
                    "status": record.status,
                    "location": record.place,
                }
                for record in records
            )
        # sorted() is stable, so ties keep births ahead of deaths
        return sorted(combined, key=lambda item: item["date"], reverse=True)[:limit]

    def regional_data(self) -> List[Dict[str, Any]]:
        """Counts per region by case-insensitive substring match on place."""
        regional = []
        for region in self.regions:
            counts = {
                key: self._count(model, model.place_column().icontains(region, autoescape=True))
                for model, key in zip(self.models, ("births", "deaths"))
            }
            regional.append({"region": region, **counts})
        return regional
