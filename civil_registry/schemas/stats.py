"""Response models for the registrar dashboard statistics endpoint.

Attributes are snake_case; the serialized payload uses the camelCase names the
dashboard client reads (``pendingBirth``, ``timelineStats`` ...).
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class StatsModel(BaseModel):
    class Config:
        populate_by_name = True


class TypeCounts(StatsModel):
    births: int = 0
    deaths: int = 0


class StatusCounts(StatsModel):
    approved: int = 0
    pending: int = 0
    rejected: int = 0


class TimelineStats(StatsModel):
    today: TypeCounts
    this_week: TypeCounts = Field(alias="thisWeek")
    this_month: TypeCounts = Field(alias="thisMonth")


class ProcessingTimes(StatsModel):
    average_approval_time: float = Field(0, alias="averageApprovalTime")
    fastest_approval: float = Field(0, alias="fastestApproval")


class RegistrationTrends(StatsModel):
    labels: List[str]
    births: List[int]
    deaths: List[int]


class RecentRegistration(StatsModel):
    id: str
    type: str
    name: str
    date: datetime
    status: str
    location: str


class RegionalCount(StatsModel):
    region: str
    births: int = 0
    deaths: int = 0


class DashboardStats(StatsModel):
    pending_birth: int = Field(alias="pendingBirth")
    pending_death: int = Field(alias="pendingDeath")
    approved_this_month: int = Field(alias="approvedThisMonth")
    total_registrations: int = Field(alias="totalRegistrations")
    recent_activity: TypeCounts = Field(alias="recentActivity")
    monthly_growth: float = Field(alias="monthlyGrowth")
    registrations_by_status: StatusCounts = Field(alias="registrationsByStatus")
    timeline_stats: TimelineStats = Field(alias="timelineStats")
    processing_times: ProcessingTimes = Field(alias="processingTimes")
    registration_trends: RegistrationTrends = Field(alias="registrationTrends")
    recent_registrations: List[RecentRegistration] = Field(alias="recentRegistrations")
    regional_data: List[RegionalCount] = Field(alias="regionalData")
