"""
Reports API endpoints: analytics, document exports and rendered charts.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from pulseboard.api.deps import require_feature
from pulseboard.db import schemas
from pulseboard.db.database import get_db
from pulseboard.services import metrics_service
from pulseboard.services.chart_service import CHART_NAMES, ChartService, UnknownChartError
from pulseboard.services.export_service import EXPORT_FORMATS, ExportService, report_filename
from pulseboard.utils.dates import VALID_RANGES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])


def _check_range(range_key: str) -> str:
    if range_key not in VALID_RANGES:
        raise HTTPException(status_code=400, detail=f"range must be one of: {', '.join(VALID_RANGES)}")
    return range_key


@router.get("/analytics", response_model=schemas.Analytics)
def analytics(range_key: str = Query(default="7days", alias="range"), db: Session = Depends(get_db)):
    _check_range(range_key)
    try:
        return metrics_service.get_analytics(db, range_key)
    except Exception as e:
        logger.error("Error computing analytics: %s", e)
        raise HTTPException(status_code=500, detail=f"Error computing analytics: {e}")


@router.get("/export", dependencies=[Depends(require_feature("exports_enabled"))])
def export_report(
    format: str = Query(default="csv"),
    range_key: str = Query(default="7days", alias="range"),
    db: Session = Depends(get_db),
):
    fmt = (format or "").lower()
    if fmt not in EXPORT_FORMATS:
        raise HTTPException(status_code=400, detail=f"format must be one of: {', '.join(EXPORT_FORMATS)}")
    _check_range(range_key)
    try:
        service = ExportService(
            metrics_service.get_dashboard_metrics(db),
            metrics_service.get_analytics(db, range_key),
        )
        buffer = service.export(fmt)
    except Exception as e:
        logger.error("Error exporting %s report: %s", fmt, e)
        raise HTTPException(status_code=500, detail=f"Error exporting report: {e}")
    filename = report_filename(fmt, service.generated_at)
    return StreamingResponse(
        buffer,
        media_type=EXPORT_FORMATS[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/charts/{chart}.png", dependencies=[Depends(require_feature("chart_rendering_enabled"))])
def chart_image(
    chart: str,
    range_key: str = Query(default="7days", alias="range"),
    db: Session = Depends(get_db),
):
    if chart not in CHART_NAMES:
        raise HTTPException(status_code=404, detail=f"Unknown chart: {chart}")
    _check_range(range_key)
    try:
        service = ChartService(
            metrics_service.get_analytics(db, range_key),
            metrics_service.get_dashboard_charts(db),
        )
        buffer = service.render(chart)
    except UnknownChartError:
        raise HTTPException(status_code=404, detail=f"Unknown chart: {chart}")
    except Exception as e:
        logger.error("Error rendering chart %s: %s", chart, e)
        raise HTTPException(status_code=500, detail=f"Error rendering chart: {e}")
    return StreamingResponse(buffer, media_type="image/png")
