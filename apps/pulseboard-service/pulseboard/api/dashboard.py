"""
Dashboard API endpoints: headline metrics, chart series and recent activity.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from pulseboard.db import schemas
from pulseboard.db.database import get_db
from pulseboard.services import activity_service, metrics_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/metrics", response_model=schemas.DashboardMetrics)
def dashboard_metrics(db: Session = Depends(get_db)):
    try:
        return metrics_service.get_dashboard_metrics(db)
    except Exception as e:
        logger.error("Error computing dashboard metrics: %s", e)
        raise HTTPException(status_code=500, detail=f"Error computing dashboard metrics: {e}")


@router.get("/charts", response_model=schemas.DashboardCharts)
def dashboard_charts(db: Session = Depends(get_db)):
    try:
        return metrics_service.get_dashboard_charts(db)
    except Exception as e:
        logger.error("Error computing dashboard charts: %s", e)
        raise HTTPException(status_code=500, detail=f"Error computing dashboard charts: {e}")


@router.get("/activity", response_model=List[schemas.ActivityItem])
def dashboard_activity(
    limit: int = Query(default=activity_service.DEFAULT_ACTIVITY_LIMIT, ge=1, le=50),
    db: Session = Depends(get_db),
):
    try:
        return activity_service.get_recent_activity(db, limit=limit)
    except Exception as e:
        logger.error("Error loading recent activity: %s", e)
        raise HTTPException(status_code=500, detail=f"Error loading recent activity: {e}")
