"""Reports module for CSV and flat-row analytics exports."""

from app.features.reports.flatten import flatten_metrics
from app.features.reports.routes import router
from app.features.reports.schemas import ReportRow, ReportType
from app.features.reports.service import ReportService

__all__ = [
    "ReportRow",
    "ReportService",
    "ReportType",
    "flatten_metrics",
    "router",
]
