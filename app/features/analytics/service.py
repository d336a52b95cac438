"""Service layer for analytics operations.

Resolves the analytics window, runs the domain fetchers and hands the records
to the pure reducers. The comprehensive report fans out over every domain
concurrently, each branch on its own session.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import get_settings
from app.core.database import get_session_maker
from app.core.logging import get_logger
from app.features.analytics import fetchers, reducers
from app.features.analytics.period import AnalyticsPeriod, Period, resolve_period, utc_now
from app.features.analytics.revenue import classify_revenue
from app.features.analytics.schemas import (
    CommunicationsMetrics,
    ComprehensiveReport,
    CustomerMetrics,
    DashboardSummary,
    DateRange,
    FinancialMetrics,
    InventoryMetrics,
    LocationMetrics,
    RepairMetrics,
    RevenueBreakdown,
    StockHealthMetrics,
    StockLevelRow,
    TransactionMetrics,
)

logger = get_logger(__name__)

T = TypeVar("T")

PeriodToken = str | AnalyticsPeriod


class AnalyticsService:
    """Service for computing repair-shop analytics.

    Every public ``get_*`` method takes a period token plus an optional
    custom range and resolves the window itself. Database errors propagate
    to the caller.
    """

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        """Initialize analytics service.

        Args:
            session_maker: Session factory for per-branch sessions. Defaults
                to the application session maker.
        """
        self.settings = get_settings()
        self._session_maker = session_maker

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        if self._session_maker is None:
            self._session_maker = get_session_maker()
        return self._session_maker

    async def _run(self, fetch: Callable[[AsyncSession], Awaitable[T]]) -> T:
        async with self.session_maker() as session:
            return await fetch(session)

    # =========================================================================
    # Revenue
    # =========================================================================

    async def _revenue(self, period: Period) -> RevenueBreakdown:
        orders = await self._run(lambda s: fetchers.fetch_paid_orders(s, period))
        return classify_revenue(orders)

    async def calculate_revenue(
        self,
        period: PeriodToken = AnalyticsPeriod.MONTHLY,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        now: datetime | None = None,
    ) -> RevenueBreakdown:
        """Classify paid-order income for the window.

        Args:
            period: Period token.
            start_date: Custom window start.
            end_date: Custom window end.
            now: Reference instant (defaults to current UTC time).

        Returns:
            Revenue breakdown.
        """
        resolved = resolve_period(period, start_date, end_date, now)
        revenue = await self._revenue(resolved)

        logger.info(
            "analytics.revenue_computed",
            period=resolved.token.value,
            total_income=float(revenue.total_income),
        )
        return revenue

    # =========================================================================
    # Domain analytics
    # =========================================================================

    async def _repairs(self, period: Period, now: datetime) -> RepairMetrics:
        async def fetch(session: AsyncSession) -> RepairMetrics:
            records = await fetchers.fetch_repair_records(session, period)
            orders = await fetchers.fetch_paid_orders(session, period)
            return reducers.reduce_repairs(records, classify_revenue(orders), period, now)

        metrics = await self._run(fetch)
        logger.info(
            "analytics.repairs_computed",
            period=period.token.value,
            tickets=metrics.tickets.total,
            quotes=metrics.quotes.total,
        )
        return metrics

    async def get_repair_analytics(
        self,
        period: PeriodToken = AnalyticsPeriod.MONTHLY,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        now: datetime | None = None,
    ) -> RepairMetrics:
        """Compute repairs & services analytics."""
        now = now or utc_now()
        return await self._repairs(resolve_period(period, start_date, end_date, now), now)

    async def _communications(self, period: Period) -> CommunicationsMetrics:
        records = await self._run(lambda s: fetchers.fetch_communication_records(s, period))
        metrics = reducers.reduce_communications(
            records,
            period,
            latest_limit=self.settings.analytics_latest_announcements_limit,
        )
        logger.info(
            "analytics.communications_computed",
            period=period.token.value,
            calls=metrics.calls.total,
            emails=metrics.emails.total,
        )
        return metrics

    async def get_communication_analytics(
        self,
        period: PeriodToken = AnalyticsPeriod.MONTHLY,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        now: datetime | None = None,
    ) -> CommunicationsMetrics:
        """Compute calls, texts, emails, notifications and announcements analytics."""
        return await self._communications(resolve_period(period, start_date, end_date, now))

    async def _inventory(self, period: Period) -> InventoryMetrics:
        async def fetch(session: AsyncSession) -> InventoryMetrics:
            records = await fetchers.fetch_inventory_records(
                session, period, self.settings.analytics_low_stock_threshold
            )
            orders = await fetchers.fetch_paid_orders(session, period)
            return reducers.reduce_inventory(
                records,
                classify_revenue(orders),
                period,
                top_suppliers_limit=self.settings.analytics_top_suppliers_limit,
            )

        metrics = await self._run(fetch)
        logger.info(
            "analytics.inventory_computed",
            period=period.token.value,
            items=metrics.inventory.items.total,
            low_stock_items=metrics.inventory.low_stock_items,
        )
        return metrics

    async def get_inventory_analytics(
        self,
        period: PeriodToken = AnalyticsPeriod.MONTHLY,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        now: datetime | None = None,
    ) -> InventoryMetrics:
        """Compute inventory, purchasing and point-of-sale analytics."""
        return await self._inventory(resolve_period(period, start_date, end_date, now))

    async def _customers(self, period: Period, now: datetime) -> CustomerMetrics:
        records = await self._run(lambda s: fetchers.fetch_customer_records(s, period))
        metrics = reducers.reduce_customers(
            records,
            period,
            now,
            top_performers_limit=self.settings.analytics_top_performers_limit,
        )
        logger.info(
            "analytics.customers_computed",
            period=period.token.value,
            total_customers=metrics.customers.total_customers,
            staff=len(metrics.staff.productivity),
        )
        return metrics

    async def get_customer_analytics(
        self,
        period: PeriodToken = AnalyticsPeriod.MONTHLY,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        now: datetime | None = None,
    ) -> CustomerMetrics:
        """Compute customer programs, reviews and staff productivity analytics."""
        now = now or utc_now()
        return await self._customers(resolve_period(period, start_date, end_date, now), now)

    async def _financial(self, period: Period) -> FinancialMetrics:
        records = await self._run(lambda s: fetchers.fetch_financial_records(s, period))
        metrics = reducers.reduce_financial(records, period)
        logger.info(
            "analytics.financial_computed",
            period=period.token.value,
            bills=metrics.bills.total,
            goals=metrics.goals.total,
        )
        return metrics

    async def get_financial_analytics(
        self,
        period: PeriodToken = AnalyticsPeriod.MONTHLY,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        now: datetime | None = None,
    ) -> FinancialMetrics:
        """Compute bills, payroll, goals and trend analytics."""
        return await self._financial(resolve_period(period, start_date, end_date, now))

    async def _locations(self, period: Period) -> LocationMetrics:
        records = await self._run(lambda s: fetchers.fetch_location_records(s, period))
        metrics = reducers.reduce_locations(
            records,
            period,
            low_stock_threshold=self.settings.analytics_location_low_stock_threshold,
        )
        logger.info(
            "analytics.locations_computed",
            period=period.token.value,
            location_count=metrics.location_count,
        )
        return metrics

    async def get_location_analytics(
        self,
        period: PeriodToken = AnalyticsPeriod.MONTHLY,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        now: datetime | None = None,
    ) -> LocationMetrics:
        """Compute per-location ticket, sales and stock analytics."""
        return await self._locations(resolve_period(period, start_date, end_date, now))

    async def _transactions(self, period: Period) -> TransactionMetrics:
        return reducers.empty_transaction_analytics(period)

    async def get_transaction_analytics(
        self,
        period: PeriodToken = AnalyticsPeriod.MONTHLY,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        now: datetime | None = None,
    ) -> TransactionMetrics:
        """Transaction analytics. Always zeroed for the resolved window."""
        return await self._transactions(resolve_period(period, start_date, end_date, now))

    # =========================================================================
    # Comprehensive report
    # =========================================================================

    async def get_comprehensive_analytics(
        self,
        period: PeriodToken = AnalyticsPeriod.MONTHLY,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        now: datetime | None = None,
    ) -> ComprehensiveReport:
        """Compute every domain's analytics for one window.

        The domains run concurrently, each on its own session. The first
        failure fails the whole report.

        Args:
            period: Period token.
            start_date: Custom window start.
            end_date: Custom window end.
            now: Reference instant (defaults to current UTC time).

        Returns:
            Comprehensive report with business metrics.
        """
        now = now or utc_now()
        resolved = resolve_period(period, start_date, end_date, now)

        (
            repairs,
            communications,
            inventory,
            customers,
            financial,
            locations,
            transactions,
            revenue,
        ) = await asyncio.gather(
            self._repairs(resolved, now),
            self._communications(resolved),
            self._inventory(resolved),
            self._customers(resolved, now),
            self._financial(resolved),
            self._locations(resolved),
            self._transactions(resolved),
            self._revenue(resolved),
        )

        business_metrics = reducers.compose_business_metrics(revenue)

        # A caller-supplied range is echoed as given, end defaulting to now
        if start_date is not None:
            date_range = DateRange(start_date=start_date, end_date=end_date or now)
        else:
            date_range = repairs.date_range

        logger.info(
            "analytics.comprehensive_computed",
            period=resolved.token.value,
            total_revenue=float(business_metrics.total_revenue),
        )

        return ComprehensiveReport(
            repairs=repairs,
            communications=communications,
            inventory=inventory,
            customers=customers,
            financial=financial,
            locations=locations,
            transactions=transactions,
            business_metrics=business_metrics,
            period=resolved.token.value,
            date_range=date_range,
        )

    # =========================================================================
    # Dashboard
    # =========================================================================

    async def get_dashboard_summary(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        now: datetime | None = None,
    ) -> DashboardSummary:
        """Compute the dashboard KPIs for a window.

        Without a start date the window is the current month.

        Args:
            start_date: Window start.
            end_date: Window end (defaults to now).
            now: Reference instant (defaults to current UTC time).

        Returns:
            Dashboard summary.
        """
        now = now or utc_now()
        resolved = resolve_period(AnalyticsPeriod.CUSTOM, start_date, end_date, now)

        report, counters = await asyncio.gather(
            self.get_comprehensive_analytics(AnalyticsPeriod.CUSTOM, start_date, end_date, now),
            self._run(
                lambda s: fetchers.fetch_dashboard_counters(
                    s,
                    resolved.start_date,
                    resolved.end_date,
                    self.settings.analytics_low_stock_threshold,
                )
            ),
        )

        distribution = report.business_metrics.service_distribution
        summary = DashboardSummary(
            total_revenue=report.business_metrics.total_revenue,
            active_repairs=report.repairs.tickets.pending,
            repair_completion_rate=float(report.repairs.tickets.completion_rate),
            inventory_count=counters.inventory_count,
            inventory_value=counters.inventory_value,
            low_stock_count=counters.low_stock_count,
            active_customers=counters.active_customers,
            new_customers=counters.new_customers,
            repair_division_percent=distribution.repairs,
            service_division_percent=distribution.service_division,
            sales_division_percent=distribution.sales_division,
            revenue_change=report.financial.trends.income_change,
            pending_tickets=counters.pending_tickets,
            active_tickets=counters.active_tickets,
            open_notifications=counters.open_notifications,
            booking_count=counters.booking_count,
            booking_schedule=counters.booking_schedule,
            quote_count=counters.quote_count,
        )

        logger.info(
            "analytics.dashboard_computed",
            start_date=resolved.start_date.isoformat(),
            end_date=resolved.end_date.isoformat(),
            total_revenue=float(summary.total_revenue),
        )
        return summary

    # =========================================================================
    # Stock health
    # =========================================================================

    async def get_low_stock_items(
        self,
        threshold: int | None = None,
        limit: int | None = None,
    ) -> list[StockLevelRow]:
        """List stock levels at or below the threshold, lowest stock first."""
        threshold = self.settings.analytics_low_stock_threshold if threshold is None else threshold
        limit = limit or self.settings.analytics_stock_list_limit

        levels = await self._run(
            lambda s: fetchers.fetch_low_stock_levels(s, threshold=threshold, limit=limit)
        )
        rows = [reducers.stock_level_row(level, threshold) for level in levels]

        logger.info("analytics.low_stock_listed", threshold=threshold, count=len(rows))
        return rows

    async def get_out_of_stock_items(self, limit: int | None = None) -> list[StockLevelRow]:
        """List stock levels with no stock, most recently updated first."""
        limit = limit or self.settings.analytics_stock_list_limit

        levels = await self._run(lambda s: fetchers.fetch_out_of_stock_levels(s, limit=limit))
        rows = [reducers.stock_level_row(level) for level in levels]

        logger.info("analytics.out_of_stock_listed", count=len(rows))
        return rows

    async def get_stock_metrics(self, threshold: int | None = None) -> StockHealthMetrics:
        """Catalog-wide stock totals with low and out-of-stock counts."""
        threshold = self.settings.analytics_low_stock_threshold if threshold is None else threshold

        items = await self._run(fetchers.fetch_inventory_catalog)
        metrics = reducers.reduce_stock_health(items, threshold)

        logger.info(
            "analytics.stock_metrics_computed",
            total_items=metrics.total_items,
            low_stock_count=metrics.low_stock_count,
            out_of_stock_count=metrics.out_of_stock_count,
        )
        return metrics
