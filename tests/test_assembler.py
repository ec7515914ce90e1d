"""Tests for merging aggregator results into the dashboard payload."""

from datetime import datetime

from civil_registry.stats import assemble
from civil_registry.stats.aggregator import AggregateResults


def make_results():
    return AggregateResults(
        as_of=datetime(2026, 10, 14, 15, 30),
        pending={"births": 2, "deaths": 1},
        approved_this_month=4,
        total_registrations=9,
        recent_activity={"births": 3, "deaths": 1},
        monthly_growth=50.0,
        by_status={"approved": 4, "pending": 3, "rejected": 2},
        timeline={
            "today": {"births": 1, "deaths": 0},
            "this_week": {"births": 2, "deaths": 1},
            "this_month": {"births": 5, "deaths": 2},
        },
        processing_times={"average_approval_time": 3.5, "fastest_approval": 2.0},
        trends={
            "labels": ["Oct 08", "Oct 09", "Oct 10", "Oct 11", "Oct 12", "Oct 13", "Oct 14"],
            "births": [0, 1, 0, 0, 1, 0, 1],
            "deaths": [0, 0, 0, 1, 0, 0, 0],
        },
        recent_registrations=[
            {
                "id": "BR-2026-000001",
                "type": "birth",
                "name": "Ama Mensah",
                "date": datetime(2026, 10, 14, 9),
                "status": "pending",
                "location": "Ridge Hospital, Accra",
            }
        ],
        regional=[{"region": "Greater Accra", "births": 1, "deaths": 0}],
    )


class TestAssemble:
    def test_top_level_field_names(self):
        payload = assemble(make_results()).model_dump(by_alias=True)
        assert set(payload) == {
            "pendingBirth",
            "pendingDeath",
            "approvedThisMonth",
            "totalRegistrations",
            "recentActivity",
            "monthlyGrowth",
            "registrationsByStatus",
            "timelineStats",
            "processingTimes",
            "registrationTrends",
            "recentRegistrations",
            "regionalData",
        }

    def test_nested_field_names(self):
        payload = assemble(make_results()).model_dump(by_alias=True)
        assert set(payload["timelineStats"]) == {"today", "thisWeek", "thisMonth"}
        assert payload["timelineStats"]["thisWeek"] == {"births": 2, "deaths": 1}
        assert payload["processingTimes"] == {"averageApprovalTime": 3.5, "fastestApproval": 2.0}
        assert payload["registrationsByStatus"] == {"approved": 4, "pending": 3, "rejected": 2}
        assert set(payload["recentRegistrations"][0]) == {"id", "type", "name", "date", "status", "location"}
        assert payload["regionalData"] == [{"region": "Greater Accra", "births": 1, "deaths": 0}]

    def test_values_copied_unchanged(self):
        stats = assemble(make_results())
        assert stats.pending_birth == 2
        assert stats.pending_death == 1
        assert stats.approved_this_month == 4
        assert stats.total_registrations == 9
        assert stats.monthly_growth == 50.0
        assert stats.recent_activity.births == 3
        assert stats.registration_trends.births == [0, 1, 0, 0, 1, 0, 1]
        assert stats.recent_registrations[0].id == "BR-2026-000001"
