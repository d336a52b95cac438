"""Pydantic schemas for analytics responses.

One metrics tree per business domain, plus the comprehensive report that
bundles them. Every metrics object echoes the resolved ``period`` token and
the ``date_range`` it was computed over.

Money is ``Decimal`` (summed from ``Numeric(12, 2)`` columns). Rates and
percentages are ``float``. Repair-domain rates are strings formatted to two
decimals, ``"0"`` when there is nothing to divide by.
"""

import math
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class AnalyticsModel(BaseModel):
    """Base for analytics outputs. Metrics are immutable once computed."""

    model_config = ConfigDict(frozen=True)


class DateRange(AnalyticsModel):
    """Closed time window echoed back with every metrics object."""

    start_date: datetime
    end_date: datetime


ZERO = Decimal("0")


# =============================================================================
# Revenue
# =============================================================================


class RevenueBreakdown(AnalyticsModel):
    """Paid-order income split into business lines.

    Profit fields are kept for response-shape stability. Order lines carry
    no cost data, so they are always zero.
    """

    income_from_repairs: Decimal = Field(default=ZERO, description="Income from repair lines")
    income_from_services: Decimal = Field(default=ZERO, description="Income from service lines")
    income_from_products: Decimal = Field(
        default=ZERO, description="Income from product lines (and untyped lines)"
    )
    income_from_custom: Decimal = Field(default=ZERO, description="Income from custom lines")
    total_income: Decimal = Field(default=ZERO, description="Sum of the four income buckets")
    total_profit: Decimal = ZERO
    profit_from_repairs: Decimal = ZERO
    profit_from_services: Decimal = ZERO
    profit_from_products: Decimal = ZERO
    profit_from_custom: Decimal = ZERO


# =============================================================================
# Repairs
# =============================================================================


class TicketStats(AnalyticsModel):
    """Ticket workflow counts for the window."""

    total: int
    completed: int = Field(..., description="Tickets with status DONE")
    pending: int = Field(..., description="Tickets with status PENDING")
    cancelled: int = Field(..., description="Tickets with status CANCELLED")
    completion_rate: str = Field(..., description='Completed share, 2 decimals or "0"')
    brand_distribution: dict[str, int] = Field(default_factory=dict)
    repair_types: dict[str, int] = Field(default_factory=dict)


class QuoteStats(AnalyticsModel):
    """Quote outcomes. accepted + expired + pending == total."""

    total: int
    accepted: int
    expired: int
    pending: int
    conversion_rate: str
    brand_distribution: dict[str, int] = Field(default_factory=dict)


class DiagnosticStats(AnalyticsModel):
    total: int
    completed: int
    pending: int
    completion_rate: str


class RepairMetrics(AnalyticsModel):
    """Repairs & services analytics."""

    tickets: TicketStats
    quotes: QuoteStats
    diagnostics: DiagnosticStats
    total_repair_revenue: Decimal
    total_service_revenue: Decimal
    period: str
    date_range: DateRange


# =============================================================================
# Communications
# =============================================================================


class CallStats(AnalyticsModel):
    total: int
    answered: int
    missed: int
    answer_rate: float


class TextStats(AnalyticsModel):
    total: int
    sent: int = Field(..., description="OUTBOUND messages")
    received: int = Field(..., description="INBOUND messages")
    delivery_rate: float = Field(..., description="Delivered share of outbound messages")


class EmailStats(AnalyticsModel):
    total: int
    sent: int
    failed: int
    open_rate: float = Field(..., description="Share of emails opened at least once")
    click_rate: float = Field(..., description="Share of emails clicked at least once")


class NotificationStats(AnalyticsModel):
    total: int
    read: int
    unread: int
    read_rate: float
    by_type: dict[str, int] = Field(default_factory=dict)
    by_priority: dict[str, int] = Field(default_factory=dict)


class AnnouncementSummary(AnalyticsModel):
    id: int
    content: str
    is_active: bool
    created_at: datetime


class AnnouncementStats(AnalyticsModel):
    total: int
    active: int
    inactive: int
    active_rate: float
    latest: list[AnnouncementSummary] = Field(
        default_factory=list, description="Most recent announcements, newest first"
    )


class CommunicationsMetrics(AnalyticsModel):
    """Calls, texts, emails, notifications and announcements."""

    calls: CallStats
    texts: TextStats
    emails: EmailStats
    notifications: NotificationStats
    announcements: AnnouncementStats
    period: str
    date_range: DateRange


# =============================================================================
# Inventory & POS
# =============================================================================


class ItemStats(AnalyticsModel):
    total: int
    by_category: dict[str, int] = Field(default_factory=dict)


class ReturnStats(AnalyticsModel):
    total: int
    by_reason: dict[str, int] = Field(default_factory=dict)


class TransferStats(AnalyticsModel):
    total: int
    quantity: int


class ExchangeStats(AnalyticsModel):
    total: int


class InventoryStats(AnalyticsModel):
    """Catalog, stock movement and stock health figures.

    ``avg_product_value`` is a plain division and becomes NaN or infinity
    when the window holds no variations (serialised as ``null`` in JSON).
    """

    items: ItemStats
    total_value: Decimal = Field(..., description="Sum of variation selling prices")
    avg_product_value: float
    total_revenue: Decimal = Field(..., description="Product income from paid orders")
    product_profit_margin: float
    total_adjustments: int
    adjustment_reasons: dict[str, int] = Field(default_factory=dict)
    discrepancies: int = Field(..., description="Sum of absolute audit discrepancies")
    low_stock_items: int = Field(..., description="Stock levels at or below the threshold")
    returns: ReturnStats
    transfers: TransferStats
    exchanges: ExchangeStats

    @field_serializer("avg_product_value", when_used="json")
    def _serialize_avg_product_value(self, value: float) -> float | None:
        return value if math.isfinite(value) else None


class PurchaseOrderStats(AnalyticsModel):
    total: int
    pending: int
    approved: int
    received: int
    cancelled: int
    total_spent: Decimal
    by_supplier: dict[str, int] = Field(default_factory=dict)


class SupplierSummary(AnalyticsModel):
    name: str
    order_count: int
    item_count: int


class SupplierStats(AnalyticsModel):
    total: int
    active: int = Field(..., description="Suppliers with a purchase order in the window")
    top_suppliers: list[SupplierSummary] = Field(default_factory=list)


class RentalStats(AnalyticsModel):
    total: int
    available: int
    active_rentals: int
    revenue: Decimal


class SpecialPartStats(AnalyticsModel):
    total: int
    pending: int
    completed: int
    total_value: Decimal


class WarrantyStats(AnalyticsModel):
    total_policies: int
    active_policies: int
    claims: int
    revenue: Decimal


class OrderStats(AnalyticsModel):
    total: int
    pending: int
    completed: int
    cancelled: int
    completion_rate: float


class RefundStats(AnalyticsModel):
    total: int
    approved: int
    pending: int
    denied: int
    total_amount: Decimal
    refund_rate: float


class DiscountStats(AnalyticsModel):
    total: int
    active: int
    usage_count: int
    by_type: dict[str, int] = Field(default_factory=dict)


class InvoiceStats(AnalyticsModel):
    """Invoicing is not tracked. Kept zeroed for response-shape stability."""

    total: int = 0
    paid: int = 0
    pending: int = 0
    total_amount: Decimal = ZERO
    collection_rate: float = 0.0


class PosStats(AnalyticsModel):
    orders: OrderStats
    refunds: RefundStats
    discounts: DiscountStats
    invoices: InvoiceStats = Field(default_factory=InvoiceStats)


class InventoryMetrics(AnalyticsModel):
    """Inventory, purchasing and point-of-sale analytics."""

    inventory: InventoryStats
    purchase_orders: PurchaseOrderStats
    suppliers: SupplierStats
    rental_devices: RentalStats
    special_parts: SpecialPartStats
    warranty: WarrantyStats
    pos: PosStats
    period: str
    date_range: DateRange


# =============================================================================
# Customers & Staff
# =============================================================================


class BookingStats(AnalyticsModel):
    total: int
    by_status: dict[str, int] = Field(default_factory=dict)
    by_type: dict[str, int] = Field(default_factory=dict)
    conversion_rate: float


class MailInStats(AnalyticsModel):
    total: int
    by_status: dict[str, int] = Field(default_factory=dict)
    conversion_rate: float


class CustomerTicketStats(AnalyticsModel):
    total: int
    by_status: dict[str, int] = Field(default_factory=dict)
    completion_rate: float = Field(..., description="Share of tickets flagged completed")


class ReferralStats(AnalyticsModel):
    """Referrals are not tracked. Kept zeroed for response-shape stability."""

    total: int = 0
    successful: int = 0
    conversion_rate: float = 0.0
    rewards_earned: int = 0
    rewards_redeemed: int = 0


class LoyaltyMonth(AnalyticsModel):
    month: str = Field(..., description="Three-letter month name")
    points_earned: int
    points_redeemed: int


class LoyaltyStats(AnalyticsModel):
    total_points: int
    active_members: int
    redemption_rate: int = Field(..., description="Rounded share of members who redeemed")
    points_redeemed: int
    monthly_stats: list[LoyaltyMonth] = Field(
        default_factory=list, description="January through the current month of this year"
    )


class StoreCreditTransactionStats(AnalyticsModel):
    total: int
    earned: int
    deducted: int


class StoreCreditStats(AnalyticsModel):
    accounts: int
    total_balance: Decimal
    average_balance: Decimal
    transactions: StoreCreditTransactionStats


class ReviewStats(AnalyticsModel):
    total: int
    average_rating: float
    by_source: dict[str, int] = Field(default_factory=dict)
    by_rating: dict[str, int] = Field(default_factory=dict)


class CustomerStats(AnalyticsModel):
    total_customers: int
    new_customers: int
    active_customers: int = Field(
        ..., description="Customers with a ticket or an order in the window"
    )
    activity_rate: float
    bookings: BookingStats
    mail_ins: MailInStats
    tickets: CustomerTicketStats
    referrals: ReferralStats = Field(default_factory=ReferralStats)
    loyalty: LoyaltyStats
    store_credit: StoreCreditStats
    reviews: ReviewStats


class StaffProductivity(AnalyticsModel):
    """Per-staff ticket load for the window.

    Tickets whose assignee cannot be found are reported under "Unknown".
    """

    staff_id: int | None
    staff_name: str
    role: str
    availability: str
    ticket_count: int
    comment_count: int
    note_count: int
    experience_years: int


class StaffStats(AnalyticsModel):
    productivity: list[StaffProductivity] = Field(default_factory=list)
    role_distribution: dict[str, int] = Field(default_factory=dict)
    availability_distribution: dict[str, int] = Field(default_factory=dict)
    top_performers: list[StaffProductivity] = Field(default_factory=list)


class CustomerMetrics(AnalyticsModel):
    """Customer programs and staff productivity."""

    customers: CustomerStats
    staff: StaffStats
    period: str
    date_range: DateRange


# =============================================================================
# Financial
# =============================================================================


class FinancialOverview(AnalyticsModel):
    income: Decimal
    expenses: Decimal
    profit: Decimal
    profit_margin: float


class BillSummary(AnalyticsModel):
    id: int
    name: str
    amount: Decimal
    status: str
    due_date: datetime | None = None


class BillStats(AnalyticsModel):
    total: int
    paid: int
    unpaid: int
    overdue: int
    total_amount: Decimal
    items: list[BillSummary] = Field(default_factory=list)


class PayrollStats(AnalyticsModel):
    total_payroll: Decimal = Field(..., description="Sum of net pay")
    employee_count: int = Field(..., description="Distinct staff paid in the window")


class GoalCategoryStats(AnalyticsModel):
    count: int
    total_target: Decimal
    total_current: Decimal


class GoalSummary(AnalyticsModel):
    id: int
    title: str
    target_amount: Decimal
    current_amount: Decimal
    progress: float
    archived_at: datetime | None = None
    category: str


class GoalStats(AnalyticsModel):
    total: int
    completed: int = Field(..., description="Goals at 100% progress or more")
    active: int = Field(..., description="Unarchived goals below 100% progress")
    archived: int
    average_progress: float
    by_category: dict[str, GoalCategoryStats] = Field(default_factory=dict)
    items: list[GoalSummary] = Field(default_factory=list)


class PeriodCompare(AnalyticsModel):
    current: DateRange
    previous: DateRange


class FinancialTrends(AnalyticsModel):
    income_change: float
    expense_change: float
    period_compare: PeriodCompare


class FinancialMetrics(AnalyticsModel):
    """Bills, payroll, goals and period-over-period trends."""

    overview: FinancialOverview
    bills: BillStats
    payroll: PayrollStats
    goals: GoalStats
    expenses_by_category: dict[str, Decimal] = Field(default_factory=dict)
    trends: FinancialTrends
    period: str
    date_range: DateRange


# =============================================================================
# Locations
# =============================================================================


class LocationInventory(AnalyticsModel):
    location_id: int
    location_name: str
    total_stock: int
    total_value: Decimal = Field(..., description="Stock valued at selling price")
    low_stock_count: int = Field(..., description="Stock levels strictly below the threshold")


class LocationMetrics(AnalyticsModel):
    """Per-location tickets, sales and stock."""

    tickets_by_location: dict[str, int] = Field(default_factory=dict)
    sales_by_location: dict[str, Decimal] = Field(default_factory=dict)
    inventory_by_location: list[LocationInventory] = Field(default_factory=list)
    location_count: int
    period: str
    date_range: DateRange


# =============================================================================
# Transactions
# =============================================================================


class TransactionSummary(AnalyticsModel):
    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    net_profit: Decimal = ZERO
    transaction_count: int = 0
    income_count: int = 0
    expense_count: int = 0


class TransactionMetrics(AnalyticsModel):
    """Ledger transactions are not tracked. Always zeroed."""

    transactions: list[dict[str, str]] = Field(default_factory=list)
    summary: TransactionSummary = Field(default_factory=TransactionSummary)
    category_breakdown: dict[str, Decimal] = Field(default_factory=dict)
    location_breakdown: dict[str, Decimal] = Field(default_factory=dict)
    period: str
    date_range: DateRange


# =============================================================================
# Comprehensive report
# =============================================================================


class ServiceDistribution(AnalyticsModel):
    """Percentage of total revenue per business line. All zero without revenue."""

    repairs: float = 0.0
    service_division: float = 0.0
    sales_division: float = 0.0
    custom_division: float = 0.0


class BusinessMetrics(AnalyticsModel):
    total_revenue: Decimal
    service_distribution: ServiceDistribution


class ComprehensiveReport(AnalyticsModel):
    """All domain metrics for one window."""

    repairs: RepairMetrics
    communications: CommunicationsMetrics
    inventory: InventoryMetrics
    customers: CustomerMetrics
    financial: FinancialMetrics
    locations: LocationMetrics
    transactions: TransactionMetrics
    business_metrics: BusinessMetrics
    period: str
    date_range: DateRange


# =============================================================================
# Stock health & dashboard
# =============================================================================


class StockLevelRow(AnalyticsModel):
    """One stock level in a low- or out-of-stock listing."""

    id: int
    name: str = Field(..., description='"<item> - <variation>"')
    sku: str
    category: str
    location: str
    stock: int
    value: Decimal = Field(..., description="Stock valued at purchase cost")
    threshold: int | None = None


class StockHealthMetrics(AnalyticsModel):
    total_items: int
    total_variations: int
    total_stock: int
    total_value: Decimal
    low_stock_count: int = Field(..., description="Levels above zero and at or below threshold")
    out_of_stock_count: int


class DashboardSummary(AnalyticsModel):
    """Headline KPIs for the staff dashboard."""

    total_revenue: Decimal
    active_repairs: int
    repair_completion_rate: float
    inventory_count: int = Field(..., description="Visible variations")
    inventory_value: Decimal
    low_stock_count: int
    active_customers: int
    new_customers: int
    repair_division_percent: float
    service_division_percent: float
    sales_division_percent: float
    revenue_change: float
    pending_tickets: int
    active_tickets: int
    open_notifications: int
    booking_count: int
    booking_schedule: int
    quote_count: int
