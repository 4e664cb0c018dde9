"""
Report downloads in CSV, Excel and PDF formats.

CSV and Excel go through pandas (openpyxl engine for .xlsx); the PDF is laid
out as matplotlib tables and written with ``PdfPages``.
"""
import io
import logging
from datetime import datetime
from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.backends.backend_pdf import PdfPages

from pulseboard.db.models import now_utc

logger = logging.getLogger(__name__)

REPORT_TITLE = "Productivity Management System Report"
EXPORT_FORMATS = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}
CATEGORY_COLUMNS = ["Category", "Tasks", "Total Points", "Avg Points", "Completion Rate"]


class UnsupportedFormatError(ValueError):
    pass


def report_filename(fmt: str, when: Optional[datetime] = None) -> str:
    stamp = int((when or now_utc()).timestamp() * 1000)
    return f"productivity-report-{stamp}.{fmt}"


class ExportService:
    """Builds downloadable productivity reports from metrics and analytics."""

    def __init__(self, metrics: dict, analytics: dict, generated_at: Optional[datetime] = None):
        self.metrics = metrics
        self.analytics = analytics
        self.generated_at = generated_at or now_utc()

    @property
    def date_range(self) -> str:
        return self.analytics.get("range", "all")

    def _metrics_frame(self) -> pd.DataFrame:
        m = self.metrics
        return pd.DataFrame(
            [
                ["Total Tasks", m["total_tasks"]],
                ["Completed Tasks", m["completed_tasks"]],
                ["Completion Rate", f"{m['completion_rate']}%"],
                ["Total Points", m["total_points"]],
                ["Active Users", m["active_users"]],
                ["Avg Time/Task", m["avg_time_per_task"]],
            ],
            columns=["Metric", "Value"],
        )

    def _category_frame(self) -> pd.DataFrame:
        rows = [
            [c["name"], c["task_count"], c["total_points"], c["avg_points"], f"{c['completion_rate']}%"]
            for c in self.analytics["category_breakdown"]
        ]
        return pd.DataFrame(rows, columns=CATEGORY_COLUMNS)

    def _priority_frame(self) -> pd.DataFrame:
        dist = self.analytics["priority_distribution"]
        return pd.DataFrame(
            [[p.capitalize(), dist.get(p, 0)] for p in ("low", "medium", "high", "urgent")],
            columns=["Priority", "Task Count"],
        )

    def export(self, fmt: str) -> io.BytesIO:
        builders = {"csv": self.export_csv, "xlsx": self.export_excel, "pdf": self.export_pdf}
        builder = builders.get((fmt or "").lower())
        if builder is None:
            raise UnsupportedFormatError(f"Unsupported export format: {fmt}")
        return builder()

    def export_csv(self) -> io.BytesIO:
        """Sectioned CSV: header block, key metrics, category and priority tables."""
        out = io.StringIO()
        out.write(f"{REPORT_TITLE}\n")
        out.write(f"Generated:,{self.generated_at.strftime('%Y-%m-%d %H:%M:%S')}\n")
        out.write(f"Date Range:,{self.date_range}\n\n")
        out.write("Key Metrics\n")
        self._metrics_frame().to_csv(out, index=False, header=False)
        out.write("\nCategory Breakdown\n")
        self._category_frame().to_csv(out, index=False)
        out.write("\nPriority Distribution\n")
        self._priority_frame().to_csv(out, index=False)

        buffer = io.BytesIO(out.getvalue().encode("utf-8-sig"))
        logger.info("report_exported: format=csv range=%s", self.date_range)
        return buffer

    def export_excel(self) -> io.BytesIO:
        summary = pd.concat(
            [
                pd.DataFrame(
                    [
                        [REPORT_TITLE, ""],
                        ["Generated:", self.generated_at.strftime("%Y-%m-%d %H:%M:%S")],
                        ["Date Range:", self.date_range],
                        ["", ""],
                        ["Key Metrics", ""],
                    ],
                    columns=["Metric", "Value"],
                ),
                self._metrics_frame(),
            ],
            ignore_index=True,
        )

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            summary.to_excel(writer, sheet_name="Summary", index=False, header=False)
            self._category_frame().to_excel(writer, sheet_name="Categories", index=False)
            self._priority_frame().to_excel(writer, sheet_name="Priority Distribution", index=False)
        buffer.seek(0)
        logger.info("report_exported: format=xlsx range=%s", self.date_range)
        return buffer

    def export_pdf(self) -> io.BytesIO:
        buffer = io.BytesIO()
        with PdfPages(buffer) as pdf:
            fig = plt.figure(figsize=(8.27, 11.69))  # A4 portrait
            fig.text(0.07, 0.95, "Productivity Management System", fontsize=20, fontweight="bold")
            fig.text(0.07, 0.925, f"Report Generated: {self.generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
                     fontsize=11)
            fig.text(0.07, 0.905, f"Date Range: {self.date_range}", fontsize=11)

            sections = [
                ("Key Metrics", self._metrics_frame(), [0.07, 0.66, 0.86, 0.2]),
                ("Category Performance", self._category_frame(), [0.07, 0.34, 0.86, 0.26]),
                ("Priority Distribution", self._priority_frame(), [0.07, 0.1, 0.86, 0.18]),
            ]
            for title, frame, rect in sections:
                ax = fig.add_axes(rect)
                ax.axis("off")
                ax.set_title(title, loc="left", fontsize=14, fontweight="bold")
                if frame.empty:
                    ax.text(0, 0.8, "No data", fontsize=10, color="#888888")
                    continue
                table = ax.table(
                    cellText=frame.astype(str).values.tolist(),
                    colLabels=list(frame.columns),
                    loc="upper left",
                    cellLoc="left",
                )
                table.auto_set_font_size(False)
                table.set_fontsize(9)
                table.scale(1, 1.3)
            pdf.savefig(fig)
            plt.close(fig)
        buffer.seek(0)
        logger.info("report_exported: format=pdf range=%s", self.date_range)
        return buffer
