"""Service layer for report exports.

Each report type picks named fields from one domain's analytics and renders
them as a two-column ``Metric,Value`` CSV. Locations and staff performance
render one block per entity instead. The comprehensive report flattens the
whole analytics tree.
"""

import csv
import io
from collections.abc import Awaitable, Callable
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from app.core.logging import get_logger
from app.features.analytics.period import AnalyticsPeriod, utc_now
from app.features.analytics.schemas import (
    CommunicationsMetrics,
    CustomerMetrics,
    FinancialMetrics,
    InventoryMetrics,
    LocationMetrics,
    RepairMetrics,
)
from app.features.analytics.service import AnalyticsService
from app.features.reports.flatten import flatten_metrics, format_value
from app.features.reports.schemas import ReportRow, ReportType

logger = get_logger(__name__)

HEADER = "Metric,Value\n"

NO_LOCATION_DATA = "No location data available for the selected period."
NO_STAFF_DATA = "No staff performance data available for the selected period."


# =============================================================================
# CSV rendering
# =============================================================================


def format_key(key: str) -> str:
    """Display label for a metric key: ``total_tickets`` -> ``Total Tickets``."""
    return " ".join(word[:1].upper() + word[1:] for word in key.split("_"))


def _csv_cell(value: Any) -> Any:
    # Numbers stay bare, strings are quoted, None is an empty unquoted cell
    if isinstance(value, bool) or not isinstance(value, str | int | float | Decimal | None):
        return format_value(value)
    return value


def render_two_column(data: dict[str, Any]) -> str:
    """Render a mapping as ``Metric,Value`` rows, one per key."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_STRINGS, lineterminator="\n")
    buffer.write(HEADER)
    for key, value in data.items():
        writer.writerow([format_key(key), _csv_cell(value)])
    return buffer.getvalue()


def render_sections(
    metadata: list[tuple[str, str]],
    section_title: str,
    sections: list[list[tuple[str, str]]],
) -> str:
    """Render a metadata block followed by one block per entity.

    Every cell is quoted and blocks are separated by a blank line.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    buffer.write(HEADER)
    writer.writerows(metadata)
    writer.writerow([])
    writer.writerow([section_title, ""])
    writer.writerow([])
    for section in sections:
        writer.writerows(section)
        writer.writerow([])
    return buffer.getvalue()


def render_status(message: str) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    buffer.write(HEADER)
    writer.writerow(["Status", message])
    return buffer.getvalue()


# =============================================================================
# Field selections
# =============================================================================


def repairs_report(metrics: RepairMetrics, generated: str) -> dict[str, Any]:
    return {
        "report_type": "Repairs & Services",
        "period": metrics.period,
        "total_tickets": metrics.tickets.total,
        "completed_tickets": metrics.tickets.completed,
        "pending_tickets": metrics.tickets.pending,
        "cancelled_tickets": metrics.tickets.cancelled,
        "completion_rate": metrics.tickets.completion_rate,
        "diagnostics_total": metrics.diagnostics.total,
        "diagnostics_completed": metrics.diagnostics.completed,
        "diagnostics_completion_rate": metrics.diagnostics.completion_rate,
        "quotes_total": metrics.quotes.total,
        "quotes_accepted": metrics.quotes.accepted,
        "quotes_conversion_rate": metrics.quotes.conversion_rate,
        "total_repair_revenue": metrics.total_repair_revenue,
        "total_service_revenue": metrics.total_service_revenue,
        "date_generated": generated,
    }


def ticket_summary_report(metrics: RepairMetrics, generated: str) -> dict[str, Any]:
    return {
        "report_type": "Ticket Summary",
        "period": metrics.period,
        "total_tickets": metrics.tickets.total,
        "pending_tickets": metrics.tickets.pending,
        "completed_tickets": metrics.tickets.completed,
        "cancelled_tickets": metrics.tickets.cancelled,
        "completion_rate": metrics.tickets.completion_rate,
        "date_generated": generated,
    }


def inventory_report(metrics: InventoryMetrics, generated: str) -> dict[str, Any]:
    # Out-of-stock levels are listed by /analytics/stock/out, not counted per window
    return {
        "report_type": "Inventory",
        "period": metrics.period,
        "total_items": metrics.inventory.items.total,
        "total_value": metrics.inventory.total_value,
        "low_stock_items": metrics.inventory.low_stock_items,
        "out_of_stock_items": 0,
        "total_suppliers": metrics.suppliers.total,
        "active_suppliers": metrics.suppliers.active,
        "purchase_orders_total": metrics.purchase_orders.total,
        "purchase_orders_pending": metrics.purchase_orders.pending,
        "purchase_orders_received": metrics.purchase_orders.received,
        "purchase_orders_total_spent": metrics.purchase_orders.total_spent,
        "date_generated": generated,
    }


def sales_report(metrics: InventoryMetrics, generated: str) -> dict[str, Any]:
    return {
        "report_type": "Sales",
        "period": metrics.period,
        "total_value": metrics.inventory.total_value,
        "total_revenue": metrics.inventory.total_revenue,
        "low_stock_items": metrics.inventory.low_stock_items,
        "total_adjustments": metrics.inventory.total_adjustments,
        "purchase_orders_total": metrics.purchase_orders.total,
        "purchase_orders_total_spent": metrics.purchase_orders.total_spent,
        "date_generated": generated,
    }


def customers_report(metrics: CustomerMetrics, generated: str) -> dict[str, Any]:
    customers = metrics.customers
    return {
        "report_type": "Customers",
        "period": metrics.period,
        "total_customers": customers.total_customers,
        "active_customers": customers.active_customers,
        "new_customers": customers.new_customers,
        "activity_rate": customers.activity_rate,
        "total_bookings": customers.bookings.total,
        "total_tickets": customers.tickets.total,
        "ticket_completion_rate": customers.tickets.completion_rate,
        "average_review_rating": customers.reviews.average_rating,
        "total_reviews": customers.reviews.total,
        "customer_growth_rate": customers.activity_rate,
        "customer_retention_rate": customers.activity_rate,
        "date_generated": generated,
    }


def communications_report(metrics: CommunicationsMetrics, generated: str) -> dict[str, Any]:
    return {
        "report_type": "Communications",
        "period": metrics.period,
        "total_calls": metrics.calls.total,
        "answered_calls": metrics.calls.answered,
        "missed_calls": metrics.calls.missed,
        "answer_rate": metrics.calls.answer_rate,
        "total_emails": metrics.emails.total,
        "sent_emails": metrics.emails.sent,
        "email_open_rate": metrics.emails.open_rate,
        "total_texts": metrics.texts.total,
        "sent_texts": metrics.texts.sent,
        "received_texts": metrics.texts.received,
        "text_delivery_rate": metrics.texts.delivery_rate,
        "total_notifications": metrics.notifications.total,
        "read_notifications": metrics.notifications.read,
        "date_generated": generated,
    }


def call_metrics_report(metrics: CommunicationsMetrics, generated: str) -> dict[str, Any]:
    return {
        "report_type": "Call Metrics",
        "period": metrics.period,
        "total_calls": metrics.calls.total,
        "answered_calls": metrics.calls.answered,
        "missed_calls": metrics.calls.missed,
        "answer_rate": metrics.calls.answer_rate,
        "date_generated": generated,
    }


def financial_report(metrics: FinancialMetrics, generated: str) -> dict[str, Any]:
    return {
        "report_type": "Financial",
        "period": metrics.period,
        "total_income": metrics.overview.income,
        "total_expenses": metrics.overview.expenses,
        "profit": metrics.overview.profit,
        "profit_margin": metrics.overview.profit_margin,
        "income_change": metrics.trends.income_change,
        "expense_change": metrics.trends.expense_change,
        "total_bills": metrics.bills.total,
        "paid_bills": metrics.bills.paid,
        "unpaid_bills": metrics.bills.unpaid,
        "overdue_bills": metrics.bills.overdue,
        "total_payroll": metrics.payroll.total_payroll,
        "date_generated": generated,
    }


def location_sections(metrics: LocationMetrics) -> list[list[tuple[str, str]]]:
    return [
        [
            (f"Location {index}", loc.location_name),
            ("Location ID", str(loc.location_id)),
            ("Total Value", str(loc.total_value)),
            ("Ticket Count", str(metrics.tickets_by_location.get(loc.location_name, 0))),
        ]
        for index, loc in enumerate(metrics.inventory_by_location, start=1)
    ]


def staff_sections(metrics: CustomerMetrics) -> list[list[tuple[str, str]]]:
    return [
        [
            (f"Staff {index}", staff.staff_name),
            ("Staff ID", format_value(staff.staff_id)),
            ("Ticket Count", str(staff.ticket_count)),
            ("Role", staff.role),
            ("Availability", staff.availability),
            ("Comment Count", str(staff.comment_count)),
            ("Note Count", str(staff.note_count)),
        ]
        for index, staff in enumerate(metrics.staff.productivity, start=1)
    ]


# =============================================================================
# Service
# =============================================================================


class ReportService:
    """Service for exporting analytics as CSV or flat rows."""

    def __init__(self, analytics: AnalyticsService | None = None) -> None:
        """Initialize report service.

        Args:
            analytics: Analytics service to read metrics from.
        """
        self.analytics = analytics or AnalyticsService()

    def _selections(
        self,
    ) -> dict[ReportType, tuple[Callable[..., Awaitable[Any]], Callable[[Any, str], dict]]]:
        return {
            ReportType.REPAIRS: (self.analytics.get_repair_analytics, repairs_report),
            ReportType.TICKET_SUMMARY: (self.analytics.get_repair_analytics, ticket_summary_report),
            ReportType.INVENTORY: (self.analytics.get_inventory_analytics, inventory_report),
            ReportType.SALES: (self.analytics.get_inventory_analytics, sales_report),
            ReportType.CUSTOMERS: (self.analytics.get_customer_analytics, customers_report),
            ReportType.COMMUNICATIONS: (
                self.analytics.get_communication_analytics,
                communications_report,
            ),
            ReportType.CALL_METRICS: (
                self.analytics.get_communication_analytics,
                call_metrics_report,
            ),
            ReportType.FINANCIAL: (self.analytics.get_financial_analytics, financial_report),
        }

    async def generate_csv_report(
        self,
        report_type: ReportType,
        period: str = AnalyticsPeriod.MONTHLY.value,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        today: date | None = None,
    ) -> str:
        """Generate a CSV export for a report type.

        Args:
            report_type: Report to generate.
            period: Period token.
            start_date: Custom window start.
            end_date: Custom window end.
            today: Generation date (defaults to the current UTC date).

        Returns:
            CSV document.
        """
        generated = (today or utc_now().date()).isoformat()
        window = (period, start_date, end_date)

        if report_type == ReportType.LOCATIONS:
            locations = await self.analytics.get_location_analytics(*window)
            if locations.inventory_by_location:
                content = render_sections(
                    [
                        ("Report Type", "Locations"),
                        ("Period", period),
                        ("Date Generated", generated),
                        ("Total Locations", str(len(locations.inventory_by_location))),
                    ],
                    "Location Data",
                    location_sections(locations),
                )
            else:
                content = render_status(NO_LOCATION_DATA)
        elif report_type == ReportType.STAFF_PERFORMANCE:
            customers = await self.analytics.get_customer_analytics(*window)
            if customers.staff.productivity:
                content = render_sections(
                    [
                        ("Report Type", "Staff Performance"),
                        ("Period", period),
                        ("Date Generated", generated),
                        ("Total Staff", str(len(customers.staff.productivity))),
                    ],
                    "Staff Data",
                    staff_sections(customers),
                )
            else:
                content = render_status(NO_STAFF_DATA)
        elif report_type == ReportType.COMPREHENSIVE:
            report = await self.analytics.get_comprehensive_analytics(*window)
            data: dict[str, Any] = {"report_type": "Comprehensive", "date_generated": generated}
            data.update((row.metric, row.value) for row in flatten_metrics(report))
            content = render_two_column(data)
        else:
            fetch, select_fields = self._selections()[report_type]
            content = render_two_column(select_fields(await fetch(*window), generated))

        logger.info(
            "reports.csv_generated",
            report_type=report_type.value,
            period=period,
            size_bytes=len(content.encode()),
        )
        return content

    async def generate_rows(
        self,
        report_type: ReportType,
        period: str = AnalyticsPeriod.MONTHLY.value,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        today: date | None = None,
    ) -> list[ReportRow]:
        """Flatten a report into metric/value rows.

        Two-column reports return their selected fields. Locations, staff
        performance and comprehensive reports return their whole metrics tree.
        """
        generated = (today or utc_now().date()).isoformat()
        window = (period, start_date, end_date)

        if report_type == ReportType.LOCATIONS:
            rows = flatten_metrics(await self.analytics.get_location_analytics(*window))
        elif report_type == ReportType.STAFF_PERFORMANCE:
            customers = await self.analytics.get_customer_analytics(*window)
            rows = flatten_metrics(customers.staff, prefix="staff")
        elif report_type == ReportType.COMPREHENSIVE:
            rows = flatten_metrics(await self.analytics.get_comprehensive_analytics(*window))
        else:
            fetch, select_fields = self._selections()[report_type]
            rows = flatten_metrics(select_fields(await fetch(*window), generated))

        logger.info("reports.rows_generated", report_type=report_type.value, rows=len(rows))
        return rows
