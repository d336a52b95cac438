"""API routes for analytics endpoints.

These endpoints expose per-domain analytics, the comprehensive report, the
dashboard KPI summary and stock health listings. All of them are read-only.
"""

from dataclasses import dataclass
from datetime import datetime

from fastapi import APIRouter, Depends, Query

from app.core.exceptions import BadRequestError
from app.core.logging import get_logger
from app.features.analytics.period import ensure_aware, utc_now
from app.features.analytics.schemas import (
    CommunicationsMetrics,
    ComprehensiveReport,
    CustomerMetrics,
    DashboardSummary,
    FinancialMetrics,
    InventoryMetrics,
    LocationMetrics,
    RepairMetrics,
    RevenueBreakdown,
    StockHealthMetrics,
    StockLevelRow,
    TransactionMetrics,
)
from app.features.analytics.service import AnalyticsService

logger = get_logger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


# =============================================================================
# Query parameters
# =============================================================================


@dataclass(frozen=True)
class AnalyticsWindow:
    """Period token and optional custom range shared by the analytics endpoints."""

    period: str
    start_date: datetime | None
    end_date: datetime | None


def validate_range(
    start_date: datetime | None, end_date: datetime | None
) -> tuple[datetime | None, datetime | None]:
    """Normalise both bounds to UTC-aware values and reject an inverted window.

    Naive bounds are taken as UTC. A start without an end is checked against
    the current time, since the window then ends now.
    """
    start = ensure_aware(start_date) if start_date is not None else None
    end = ensure_aware(end_date) if end_date is not None else None
    if start is None:
        return start, end

    effective_end = end or utc_now()
    if effective_end < start:
        message = (
            "end_date must not be before start_date"
            if end is not None
            else "start_date must not be in the future"
        )
        raise BadRequestError(
            message=message,
            details={"start_date": start.isoformat(), "end_date": effective_end.isoformat()},
        )
    return start, end


def analytics_window(
    period: str = Query(
        "monthly",
        description=(
            "Period token: weekly, monthly, quarterly, yearly or custom. "
            "Unrecognised tokens fall back to the current month."
        ),
    ),
    start_date: datetime | None = Query(
        None,
        description="Custom window start (ISO-8601). Used when period=custom.",
    ),
    end_date: datetime | None = Query(
        None,
        description="Custom window end (ISO-8601). Defaults to now when period=custom.",
    ),
) -> AnalyticsWindow:
    start_date, end_date = validate_range(start_date, end_date)
    return AnalyticsWindow(period=period, start_date=start_date, end_date=end_date)


# =============================================================================
# Revenue
# =============================================================================


@router.get(
    "/revenue",
    response_model=RevenueBreakdown,
    summary="Classify paid-order revenue",
    description="""
Split income from PAID orders created in the window into business lines.

**Buckets** (by order line `item_type`):
- `repair`, `service`, `custom`: their own bucket
- `product`, missing or unknown types: product bucket

Each line contributes `price * quantity`. Profit fields are always zero.
""",
)
async def get_revenue(window: AnalyticsWindow = Depends(analytics_window)) -> RevenueBreakdown:
    """Classify revenue for the window.

    Args:
        window: Period token and optional custom range.

    Returns:
        Revenue breakdown.
    """
    service = AnalyticsService()
    return await service.calculate_revenue(window.period, window.start_date, window.end_date)


# =============================================================================
# Domain Endpoints
# =============================================================================


@router.get(
    "/repairs",
    response_model=RepairMetrics,
    summary="Repairs & services analytics",
    description="""
Ticket, quote and diagnostic analytics for the window, with repair and
service revenue.

**Notes**:
- Rates are strings with two decimals (`"0"` when there is nothing to count)
- A quote is accepted once converted, expired once past `expires_at`,
  pending otherwise
""",
)
async def get_repairs(window: AnalyticsWindow = Depends(analytics_window)) -> RepairMetrics:
    service = AnalyticsService()
    return await service.get_repair_analytics(window.period, window.start_date, window.end_date)


@router.get(
    "/communications",
    response_model=CommunicationsMetrics,
    summary="Communications analytics",
    description="""
Calls, texts, emails, notifications and announcements for the window.

**Notes**:
- Text delivery rate is measured over outbound messages only
- Email open and click rates count emails opened or clicked at least once
- `announcements.latest` holds the most recent announcements, newest first
""",
)
async def get_communications(
    window: AnalyticsWindow = Depends(analytics_window),
) -> CommunicationsMetrics:
    service = AnalyticsService()
    return await service.get_communication_analytics(
        window.period, window.start_date, window.end_date
    )


@router.get(
    "/inventory",
    response_model=InventoryMetrics,
    summary="Inventory & POS analytics",
    description="""
Catalog, stock movement, purchasing, rentals, special parts, warranty and
point-of-sale analytics for the window.

**Notes**:
- `avg_product_value` is `null` when the window holds no variations
- `low_stock_items` counts stock levels at or below the configured threshold
""",
)
async def get_inventory(window: AnalyticsWindow = Depends(analytics_window)) -> InventoryMetrics:
    service = AnalyticsService()
    return await service.get_inventory_analytics(window.period, window.start_date, window.end_date)


@router.get(
    "/customers",
    response_model=CustomerMetrics,
    summary="Customer & staff analytics",
    description="""
Customer activity, bookings, mail-ins, loyalty, store credit, reviews and
staff productivity for the window.

**Notes**:
- Loyalty `monthly_stats` covers January through the current month
- Tickets whose assignee is missing are grouped under "Unknown"
""",
)
async def get_customers(window: AnalyticsWindow = Depends(analytics_window)) -> CustomerMetrics:
    service = AnalyticsService()
    return await service.get_customer_analytics(window.period, window.start_date, window.end_date)


@router.get(
    "/financial",
    response_model=FinancialMetrics,
    summary="Financial analytics",
    description="""
Bills, payroll and goals for the window, with a comparison against the
preceding window of the same length.
""",
)
async def get_financial(window: AnalyticsWindow = Depends(analytics_window)) -> FinancialMetrics:
    service = AnalyticsService()
    return await service.get_financial_analytics(window.period, window.start_date, window.end_date)


@router.get(
    "/locations",
    response_model=LocationMetrics,
    summary="Location analytics",
    description="""
Tickets, paid sales and stock per active store location.

**Notes**:
- Sales from orders without a location are reported under "Unknown"
- Per-location low stock counts levels strictly below the threshold
""",
)
async def get_locations(window: AnalyticsWindow = Depends(analytics_window)) -> LocationMetrics:
    service = AnalyticsService()
    return await service.get_location_analytics(window.period, window.start_date, window.end_date)


@router.get(
    "/transactions",
    response_model=TransactionMetrics,
    summary="Transaction analytics",
    description="Ledger transactions are not tracked. Returns zeroed totals for the window.",
)
async def get_transactions(
    window: AnalyticsWindow = Depends(analytics_window),
) -> TransactionMetrics:
    service = AnalyticsService()
    return await service.get_transaction_analytics(
        window.period, window.start_date, window.end_date
    )


@router.get(
    "/comprehensive",
    response_model=ComprehensiveReport,
    summary="Comprehensive analytics report",
    description="""
Every domain's analytics for one window, plus business metrics.

**Business metrics**:
- `total_revenue`: sum of the four revenue buckets
- `service_distribution`: each bucket's share of total revenue (all zero
  without revenue)

The domains are computed concurrently. Any failure fails the whole report.
""",
)
async def get_comprehensive(
    window: AnalyticsWindow = Depends(analytics_window),
) -> ComprehensiveReport:
    """Compute the comprehensive report.

    Args:
        window: Period token and optional custom range.

    Returns:
        Comprehensive report.
    """
    service = AnalyticsService()
    return await service.get_comprehensive_analytics(
        window.period, window.start_date, window.end_date
    )


# =============================================================================
# Dashboard
# =============================================================================


@router.get(
    "/dashboard",
    response_model=DashboardSummary,
    summary="Dashboard KPI summary",
    description="""
Headline KPIs for the staff dashboard over a custom window (the current
month when no start date is given), combined with live counters such as
open tickets, unread notifications and visible inventory.
""",
)
async def get_dashboard(
    start_date: datetime | None = Query(None, description="Window start (ISO-8601)."),
    end_date: datetime | None = Query(None, description="Window end (ISO-8601)."),
) -> DashboardSummary:
    start_date, end_date = validate_range(start_date, end_date)
    service = AnalyticsService()
    return await service.get_dashboard_summary(start_date, end_date)


# =============================================================================
# Stock Health
# =============================================================================


@router.get(
    "/stock/low",
    response_model=list[StockLevelRow],
    summary="List low stock",
    description="""
Stock levels at active locations with `0 <= stock <= threshold`, lowest
stock first. Each row is valued at purchase cost.
""",
)
async def get_low_stock(
    threshold: int | None = Query(
        None, ge=0, description="Low stock threshold. Defaults to the configured threshold."
    ),
    limit: int | None = Query(
        None, ge=1, le=500, description="Maximum rows. Defaults to the configured limit."
    ),
) -> list[StockLevelRow]:
    service = AnalyticsService()
    return await service.get_low_stock_items(threshold=threshold, limit=limit)


@router.get(
    "/stock/out",
    response_model=list[StockLevelRow],
    summary="List out-of-stock levels",
    description="Stock levels at active locations with no stock, most recently updated first.",
)
async def get_out_of_stock(
    limit: int | None = Query(
        None, ge=1, le=500, description="Maximum rows. Defaults to the configured limit."
    ),
) -> list[StockLevelRow]:
    service = AnalyticsService()
    return await service.get_out_of_stock_items(limit=limit)


@router.get(
    "/stock/metrics",
    response_model=StockHealthMetrics,
    summary="Stock health totals",
    description="""
Catalog-wide totals: items, variations, units in stock and stock value at
purchase cost, with low stock (`0 < stock <= threshold`) and out-of-stock
counts.
""",
)
async def get_stock_metrics(
    threshold: int | None = Query(
        None, ge=0, description="Low stock threshold. Defaults to the configured threshold."
    ),
) -> StockHealthMetrics:
    service = AnalyticsService()
    return await service.get_stock_metrics(threshold=threshold)
