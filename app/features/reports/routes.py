"""API routes for report exports."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from app.core.logging import get_logger
from app.features.analytics.period import utc_now
from app.features.analytics.routes import AnalyticsWindow, analytics_window
from app.features.reports.schemas import ReportRow, ReportType
from app.features.reports.service import ReportService

logger = get_logger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get(
    "/{report_type}",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}, "description": "CSV report attachment"}},
    summary="Download a CSV report",
    description="""
Export analytics for a window as a CSV attachment.

**Report Types**:
- `repairs`, `ticket-summary`: tickets, diagnostics and quotes
- `inventory`, `sales`: catalog, purchasing and product revenue
- `customers`: customer activity, bookings and reviews
- `communications`, `call-metrics`: calls, emails, texts and notifications
- `financial`: overview, bills, payroll and trends
- `locations`: one block per active location
- `staff-performance`: one block per staff member with tickets in the window
- `comprehensive`: every metric of every domain, flattened

**Format**: `Metric,Value` rows. Metric names are title-cased with spaces.
""",
)
async def download_report(
    report_type: ReportType,
    window: AnalyticsWindow = Depends(analytics_window),
) -> Response:
    """Generate a CSV report.

    Args:
        report_type: Report to generate.
        window: Period token and optional custom range.

    Returns:
        CSV attachment.
    """
    service = ReportService()
    content = await service.generate_csv_report(
        report_type, window.period, window.start_date, window.end_date
    )
    filename = f"{report_type.value}-report-{utc_now().date().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/{report_type}/rows",
    response_model=list[ReportRow],
    summary="Report as flat rows",
    description="""
Return a report as flattened `{metric, value}` rows instead of CSV.

Nested metrics are joined with `_` (for example `calls_total`), lists are
JSON-encoded and every value is a string.
""",
)
async def get_report_rows(
    report_type: ReportType,
    window: AnalyticsWindow = Depends(analytics_window),
) -> list[ReportRow]:
    service = ReportService()
    return await service.generate_rows(
        report_type, window.period, window.start_date, window.end_date
    )
