import io
from datetime import datetime, timezone

import pytest
from openpyxl import load_workbook

from pulseboard.services.export_service import ExportService, UnsupportedFormatError, report_filename

METRICS = {
    "total_tasks": 3,
    "active_tasks": 2,
    "completed_tasks": 1,
    "completion_rate": 33,
    "total_points": 16,
    "active_users": 3,
    "avg_time_per_task": "144.0h",
}
ANALYTICS = {
    "range": "30days",
    "category_breakdown": [
        {"id": 1, "name": "UAT", "color": "#E6E6FA", "task_count": 1, "total_points": 8,
         "avg_points": 8.0, "completion_rate": 0},
        {"id": 3, "name": "Training", "color": "#FFB6C1", "task_count": 1, "total_points": 3,
         "avg_points": 3.0, "completion_rate": 100},
    ],
    "priority_distribution": {"low": 0, "medium": 1, "high": 2, "urgent": 0},
}
GENERATED = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def service():
    return ExportService(METRICS, ANALYTICS, generated_at=GENERATED)


def test_csv_has_all_sections(service):
    text = service.export_csv().getvalue().decode("utf-8-sig")
    assert text.startswith("Productivity Management System Report\n")
    assert "Date Range:,30days" in text
    assert "Completion Rate,33%" in text
    assert "Category,Tasks,Total Points,Avg Points,Completion Rate" in text
    assert "Training,1,3,3.0,100%" in text
    assert "Priority Distribution" in text and "High,2" in text


def test_excel_sheets(service):
    wb = load_workbook(io.BytesIO(service.export_excel().getvalue()))
    assert wb.sheetnames == ["Summary", "Categories", "Priority Distribution"]
    categories = list(wb["Categories"].iter_rows(values_only=True))
    assert categories[0] == ("Category", "Tasks", "Total Points", "Avg Points", "Completion Rate")
    assert categories[1][0] == "UAT"
    summary_labels = [row[0] for row in wb["Summary"].iter_rows(values_only=True)]
    assert "Avg Time/Task" in summary_labels


def test_pdf_is_a_pdf_document(service):
    data = service.export_pdf().getvalue()
    assert data.startswith(b"%PDF")


def test_pdf_with_no_categories(service):
    empty = ExportService(METRICS, dict(ANALYTICS, category_breakdown=[]), generated_at=GENERATED)
    assert empty.export("pdf").getvalue().startswith(b"%PDF")


def test_unknown_format(service):
    with pytest.raises(UnsupportedFormatError):
        service.export("docx")


def test_report_filename():
    assert report_filename("xlsx", GENERATED) == f"productivity-report-{int(GENERATED.timestamp() * 1000)}.xlsx"
