from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from civil_registry.api import deps
from civil_registry.models.user import User
from civil_registry.schemas.stats import DashboardStats
from civil_registry.stats import get_dashboard_stats

router = APIRouter()

@router.get("", response_model=DashboardStats)
def read_stats(
    db: Session = Depends(deps.get_db),
    current_user: User = Depends(
        deps.require_roles(*deps.REVIEWER_ROLES, action="view statistics")
    ),
) -> Any:
    """Dashboard statistics, recomputed on every request"""
    return get_dashboard_stats(db)
