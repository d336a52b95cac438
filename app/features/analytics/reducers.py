"""Pure reducers that collapse fetched records into domain metrics.

Reducers never touch the database. They take the record bundles produced by
``fetchers`` (plus the revenue breakdown where a domain reports income) and
return immutable metrics objects. Zero-denominator handling is per field:

- Repair rates are strings with two decimals, ``"0"`` when empty.
- Other rates are floats, ``0.0`` when empty.
- ``avg_product_value`` is a plain division (NaN / infinity when empty).
"""

import calendar
import math
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from app.features.analytics.fetchers import (
    CommunicationRecords,
    CustomerRecords,
    FinancialRecords,
    InventoryRecords,
    LocationRecords,
    RepairRecords,
    StaffProfile,
)
from app.features.analytics.period import Period
from app.features.analytics.revenue import line_total
from app.features.analytics.schemas import (
    ZERO,
    AnnouncementStats,
    AnnouncementSummary,
    BillStats,
    BillSummary,
    BookingStats,
    BusinessMetrics,
    CallStats,
    CommunicationsMetrics,
    CustomerMetrics,
    CustomerStats,
    CustomerTicketStats,
    DateRange,
    DiagnosticStats,
    DiscountStats,
    EmailStats,
    ExchangeStats,
    FinancialMetrics,
    FinancialOverview,
    FinancialTrends,
    GoalCategoryStats,
    GoalStats,
    GoalSummary,
    InventoryMetrics,
    InventoryStats,
    ItemStats,
    LocationInventory,
    LocationMetrics,
    LoyaltyMonth,
    LoyaltyStats,
    MailInStats,
    NotificationStats,
    OrderStats,
    PayrollStats,
    PeriodCompare,
    PosStats,
    PurchaseOrderStats,
    QuoteStats,
    RefundStats,
    RentalStats,
    RepairMetrics,
    ReturnStats,
    RevenueBreakdown,
    ReviewStats,
    ServiceDistribution,
    SpecialPartStats,
    StaffProductivity,
    StaffStats,
    StockHealthMetrics,
    StockLevelRow,
    StoreCreditStats,
    StoreCreditTransactionStats,
    SupplierStats,
    SupplierSummary,
    TextStats,
    TicketStats,
    TransactionMetrics,
    TransferStats,
    WarrantyStats,
)
from app.features.shop.models import InventoryItem, InventoryStockLevel

UNKNOWN = "Unknown"
UNCATEGORIZED = "Uncategorized"


# =============================================================================
# Helpers
# =============================================================================


def rate(numerator: float, denominator: float) -> float:
    """Percentage ``numerator / denominator * 100``, 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return numerator / denominator * 100


def rate_str(numerator: int, denominator: int) -> str:
    """Percentage formatted to two decimals, ``"0"`` when the denominator is 0."""
    if not denominator:
        return "0"
    return f"{numerator / denominator * 100:.2f}"


def unguarded_ratio(numerator: float, denominator: float) -> float:
    """IEEE-style division: NaN for 0/0 and signed infinity for x/0."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def percent_change(current: Decimal, previous: Decimal) -> float:
    """Period-over-period change.

    ``(current - previous) / previous * 100`` when there is a previous value,
    100 when only the current period has a value, otherwise 0.
    """
    if previous > 0:
        return float((current - previous) / previous * 100)
    if current > 0:
        return 100.0
    return 0.0


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def count_by(values: Iterable[object], default: str = UNKNOWN) -> dict[str, int]:
    """Frequency count in first-seen order. ``None`` keys become ``default``."""
    counts: dict[str, int] = {}
    for value in values:
        key = default if value is None else str(value)
        counts[key] = counts.get(key, 0) + 1
    return counts


def decimal_sum(values: Iterable[Decimal | None]) -> Decimal:
    return sum((v or ZERO for v in values), ZERO)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def date_range(period: Period) -> DateRange:
    return DateRange(start_date=period.start_date, end_date=period.end_date)


# =============================================================================
# Repairs
# =============================================================================


def reduce_repairs(
    records: RepairRecords,
    revenue: RevenueBreakdown,
    period: Period,
    now: datetime,
) -> RepairMetrics:
    """Reduce tickets, quotes and diagnostics into repair metrics.

    A quote that was not converted is expired once ``expires_at`` is before
    ``now`` and pending otherwise, so every quote lands in exactly one of
    accepted, expired or pending.

    Args:
        records: Repair records for the window.
        revenue: Revenue breakdown for the same window.
        period: Resolved window.
        now: Reference instant for quote expiry.

    Returns:
        Repair metrics.
    """
    tickets = records.tickets
    completed = sum(1 for t in tickets if t.status == "DONE")

    devices = [device for ticket in tickets for device in ticket.repair_devices]
    repair_types = count_by(
        option.repair_type.name for device in devices for option in device.repair_options
    )

    quotes = records.quotes
    accepted = sum(1 for q in quotes if q.converted_to_ticket)
    expired = sum(1 for q in quotes if not q.converted_to_ticket and as_utc(q.expires_at) < now)
    pending_quotes = sum(
        1 for q in quotes if not q.converted_to_ticket and as_utc(q.expires_at) >= now
    )

    diagnostics = records.diagnostics
    diagnostics_completed = sum(1 for d in diagnostics if d.status == "COMPLETED")

    return RepairMetrics(
        tickets=TicketStats(
            total=len(tickets),
            completed=completed,
            pending=sum(1 for t in tickets if t.status == "PENDING"),
            cancelled=sum(1 for t in tickets if t.status == "CANCELLED"),
            completion_rate=rate_str(completed, len(tickets)),
            brand_distribution=count_by(device.brand for device in devices),
            repair_types=repair_types,
        ),
        quotes=QuoteStats(
            total=len(quotes),
            accepted=accepted,
            expired=expired,
            pending=pending_quotes,
            conversion_rate=rate_str(accepted, len(quotes)),
            brand_distribution=count_by(q.brand for q in quotes),
        ),
        diagnostics=DiagnosticStats(
            total=len(diagnostics),
            completed=diagnostics_completed,
            pending=sum(1 for d in diagnostics if d.status == "PENDING"),
            completion_rate=rate_str(diagnostics_completed, len(diagnostics)),
        ),
        total_repair_revenue=revenue.income_from_repairs,
        total_service_revenue=revenue.income_from_services,
        period=period.token.value,
        date_range=date_range(period),
    )


# =============================================================================
# Communications
# =============================================================================


def reduce_communications(
    records: CommunicationRecords,
    period: Period,
    latest_limit: int = 5,
) -> CommunicationsMetrics:
    """Reduce calls, texts, emails, notifications and announcements."""
    calls = records.calls
    answered = sum(1 for c in calls if c.answered)

    texts = records.texts
    outbound = [t for t in texts if t.direction == "OUTBOUND"]
    delivered = sum(1 for t in outbound if t.status == "DELIVERED")

    emails = records.emails
    opened = sum(1 for e in emails if e.analytics is not None and e.analytics.opens > 0)
    clicked = sum(1 for e in emails if e.analytics is not None and e.analytics.clicks > 0)

    notifications = records.notifications
    read = sum(1 for n in notifications if n.is_read)

    announcements = records.announcements
    active_announcements = sum(1 for a in announcements if a.is_active)
    latest = sorted(announcements, key=lambda a: as_utc(a.created_at), reverse=True)[:latest_limit]

    return CommunicationsMetrics(
        calls=CallStats(
            total=len(calls),
            answered=answered,
            missed=len(calls) - answered,
            answer_rate=rate(answered, len(calls)),
        ),
        texts=TextStats(
            total=len(texts),
            sent=len(outbound),
            received=sum(1 for t in texts if t.direction == "INBOUND"),
            delivery_rate=rate(delivered, len(outbound)),
        ),
        emails=EmailStats(
            total=len(emails),
            sent=sum(1 for e in emails if e.status == "SENT"),
            failed=sum(1 for e in emails if e.status == "FAILED"),
            open_rate=rate(opened, len(emails)),
            click_rate=rate(clicked, len(emails)),
        ),
        notifications=NotificationStats(
            total=len(notifications),
            read=read,
            unread=len(notifications) - read,
            read_rate=rate(read, len(notifications)),
            by_type=count_by(n.type for n in notifications),
            by_priority=count_by(n.priority for n in notifications),
        ),
        announcements=AnnouncementStats(
            total=len(announcements),
            active=active_announcements,
            inactive=len(announcements) - active_announcements,
            active_rate=rate(active_announcements, len(announcements)),
            latest=[
                AnnouncementSummary(
                    id=a.id, content=a.content, is_active=a.is_active, created_at=a.created_at
                )
                for a in latest
            ],
        ),
        period=period.token.value,
        date_range=date_range(period),
    )


# =============================================================================
# Inventory & POS
# =============================================================================


def reduce_inventory(
    records: InventoryRecords,
    revenue: RevenueBreakdown,
    period: Period,
    top_suppliers_limit: int = 5,
) -> InventoryMetrics:
    """Reduce catalog, purchasing, rental, warranty and POS records.

    Args:
        records: Inventory records for the window.
        revenue: Revenue breakdown for the same window.
        period: Resolved window.
        top_suppliers_limit: Number of suppliers in the ranking.

    Returns:
        Inventory metrics.
    """
    items = records.items
    variations = [v for item in items for v in item.variations]
    total_value = decimal_sum(v.selling_price for v in variations)

    product_income = revenue.income_from_products
    product_profit_margin = (
        float(revenue.profit_from_products / product_income * 100) if product_income > 0 else 0.0
    )

    purchase_orders = records.purchase_orders
    suppliers = records.suppliers
    ranked_suppliers = sorted(suppliers, key=lambda s: len(s.purchase_orders), reverse=True)

    rental_orders = [o for device in records.rental_devices for o in device.rental_orders]

    orders = records.orders
    completed_orders = sum(1 for o in orders if o.status == "COMPLETED")
    refunds = records.refunds
    discounts = records.discounts

    policies = records.policies

    return InventoryMetrics(
        inventory=InventoryStats(
            items=ItemStats(
                total=len(items),
                by_category=count_by(c.name for item in items for c in item.categories),
            ),
            total_value=total_value,
            avg_product_value=unguarded_ratio(float(total_value), len(variations)),
            total_revenue=product_income,
            product_profit_margin=product_profit_margin,
            total_adjustments=len(records.adjustments),
            adjustment_reasons=count_by(a.reason for a in records.adjustments),
            discrepancies=sum(abs(a.discrepancy) for a in records.audits),
            low_stock_items=records.low_stock_count,
            returns=ReturnStats(
                total=len(records.returns),
                by_reason=count_by(r.reason for r in records.returns),
            ),
            transfers=TransferStats(
                total=len(records.transfers),
                quantity=sum(t.quantity for t in records.transfers),
            ),
            exchanges=ExchangeStats(total=len(records.exchanges)),
        ),
        purchase_orders=PurchaseOrderStats(
            total=len(purchase_orders),
            pending=sum(1 for po in purchase_orders if po.status == "PENDING"),
            approved=sum(1 for po in purchase_orders if po.status == "APPROVED"),
            received=sum(1 for po in purchase_orders if po.status == "RECEIVED"),
            cancelled=sum(1 for po in purchase_orders if po.status == "CANCELLED"),
            total_spent=decimal_sum(po.total_cost for po in purchase_orders),
            by_supplier=count_by(po.supplier.name for po in purchase_orders),
        ),
        suppliers=SupplierStats(
            total=len(suppliers),
            active=sum(1 for s in suppliers if s.purchase_orders),
            top_suppliers=[
                SupplierSummary(
                    name=s.name,
                    order_count=len(s.purchase_orders),
                    item_count=len(s.inventory_items),
                )
                for s in ranked_suppliers[:top_suppliers_limit]
            ],
        ),
        rental_devices=RentalStats(
            total=len(records.rental_devices),
            available=sum(1 for d in records.rental_devices if d.is_available),
            active_rentals=sum(1 for o in rental_orders if o.status == "ACTIVE"),
            revenue=decimal_sum(p.amount for o in rental_orders for p in o.payments),
        ),
        special_parts=SpecialPartStats(
            total=len(records.special_parts),
            pending=sum(1 for sp in records.special_parts if sp.status == "PENDING"),
            completed=sum(1 for sp in records.special_parts if sp.status == "COMPLETED"),
            total_value=decimal_sum(sp.total for sp in records.special_parts),
        ),
        warranty=WarrantyStats(
            total_policies=len(policies),
            active_policies=sum(1 for p in policies if p.status == "active"),
            claims=sum(len(p.claims) for p in policies),
            revenue=decimal_sum(p.premium_amount for p in policies),
        ),
        pos=PosStats(
            orders=OrderStats(
                total=len(orders),
                pending=sum(1 for o in orders if o.status == "PENDING"),
                completed=completed_orders,
                cancelled=sum(1 for o in orders if o.status == "CANCELLED"),
                completion_rate=rate(completed_orders, len(orders)),
            ),
            refunds=RefundStats(
                total=len(refunds),
                approved=sum(1 for r in refunds if r.status == "APPROVED"),
                pending=sum(1 for r in refunds if r.status == "PENDING"),
                denied=sum(1 for r in refunds if r.status == "DENIED"),
                total_amount=decimal_sum(r.amount for r in refunds),
                refund_rate=rate(len(refunds), len(orders)),
            ),
            discounts=DiscountStats(
                total=len(discounts),
                active=sum(1 for d in discounts if d.is_active),
                usage_count=sum(d.count for d in discounts),
                by_type=count_by(d.type for d in discounts),
            ),
        ),
        period=period.token.value,
        date_range=date_range(period),
    )


# =============================================================================
# Customers & Staff
# =============================================================================


def _loyalty_monthly_stats(records: CustomerRecords, now: datetime) -> list[LoyaltyMonth]:
    # January through the current month of the current year, whatever the window
    earned: dict[int, int] = defaultdict(int)
    redeemed: dict[int, int] = defaultdict(int)
    for program in records.loyalty_programs:
        for activity in program.activities:
            created = as_utc(activity.created_at)
            if created.year != now.year:
                continue
            if activity.type == "EARNED":
                earned[created.month] += activity.points
            elif activity.type == "REDEEMED":
                redeemed[created.month] += activity.points

    return [
        LoyaltyMonth(
            month=calendar.month_abbr[month],
            points_earned=earned[month],
            points_redeemed=redeemed[month],
        )
        for month in range(1, now.month + 1)
    ]


def _staff_productivity(
    records: CustomerRecords,
    now: datetime,
) -> list[StaffProductivity]:
    ticket_counts: dict[int | None, int] = {}
    for ticket in records.tickets:
        ticket_counts[ticket.staff_id] = ticket_counts.get(ticket.staff_id, 0) + 1

    profiles: dict[int, StaffProfile] = {p.staff.id: p for p in records.staff_profiles}
    productivity = []
    for staff_id, ticket_count in ticket_counts.items():
        profile = profiles.get(staff_id) if staff_id is not None else None
        if profile is None:
            productivity.append(
                StaffProductivity(
                    staff_id=staff_id,
                    staff_name=UNKNOWN,
                    role=UNKNOWN,
                    availability=UNKNOWN,
                    ticket_count=ticket_count,
                    comment_count=0,
                    note_count=0,
                    experience_years=0,
                )
            )
            continue

        staff = profile.staff
        tenure = now - as_utc(staff.created_at)
        productivity.append(
            StaffProductivity(
                staff_id=staff_id,
                staff_name=f"{staff.first_name} {staff.last_name}",
                role=staff.role or UNKNOWN,
                availability=staff.availability or UNKNOWN,
                ticket_count=ticket_count,
                comment_count=profile.comment_count,
                note_count=profile.note_count,
                experience_years=math.floor(tenure / timedelta(days=365)),
            )
        )
    return productivity


def reduce_customers(
    records: CustomerRecords,
    period: Period,
    now: datetime,
    top_performers_limit: int = 5,
) -> CustomerMetrics:
    """Reduce customer programs, reviews and staff activity.

    The loyalty monthly breakdown always covers January through the current
    month of the current year, using the activities loaded for the window.

    Args:
        records: Customer records for the window.
        period: Resolved window.
        now: Reference instant for tenure and the loyalty year.
        top_performers_limit: Number of staff in the top performer list.

    Returns:
        Customer metrics.
    """
    bookings = records.bookings
    mail_ins = records.mail_ins
    tickets = records.tickets

    credits = records.store_credits
    total_balance = decimal_sum(c.balance for c in credits)
    credit_transactions = [t for c in credits for t in c.transactions]

    programs = records.loyalty_programs
    activities = [a for p in programs for a in p.activities]
    members_redeemed = sum(1 for p in programs if p.redemptions)

    reviews = records.reviews

    productivity = _staff_productivity(records, now)
    top_performers = sorted(productivity, key=lambda p: p.ticket_count, reverse=True)

    return CustomerMetrics(
        customers=CustomerStats(
            total_customers=records.total_customers,
            new_customers=records.new_customers,
            active_customers=records.active_customers,
            activity_rate=rate(records.active_customers, records.total_customers),
            bookings=BookingStats(
                total=len(bookings),
                by_status=count_by(b.status for b in bookings),
                by_type=count_by(b.booking_type for b in bookings),
                conversion_rate=rate(
                    sum(1 for b in bookings if b.converted_to_ticket), len(bookings)
                ),
            ),
            mail_ins=MailInStats(
                total=len(mail_ins),
                by_status=count_by(m.status for m in mail_ins),
                conversion_rate=rate(
                    sum(1 for m in mail_ins if m.converted_to_ticket), len(mail_ins)
                ),
            ),
            tickets=CustomerTicketStats(
                total=len(tickets),
                by_status=count_by(t.status for t in tickets),
                completion_rate=rate(sum(1 for t in tickets if t.completed), len(tickets)),
            ),
            loyalty=LoyaltyStats(
                total_points=sum(p.points for p in programs),
                active_members=len(programs),
                redemption_rate=(
                    round_half_up(members_redeemed / len(programs) * 100) if programs else 0
                ),
                points_redeemed=sum(a.points for a in activities if a.type == "REDEEMED"),
                monthly_stats=_loyalty_monthly_stats(records, now),
            ),
            store_credit=StoreCreditStats(
                accounts=len(credits),
                total_balance=total_balance,
                average_balance=total_balance / len(credits) if credits else ZERO,
                transactions=StoreCreditTransactionStats(
                    total=len(credit_transactions),
                    earned=sum(1 for t in credit_transactions if t.transaction_type == "earn"),
                    deducted=sum(1 for t in credit_transactions if t.transaction_type == "deduct"),
                ),
            ),
            reviews=ReviewStats(
                total=len(reviews),
                average_rating=sum(r.rating for r in reviews) / len(reviews) if reviews else 0.0,
                by_source=count_by(r.review_source.name for r in reviews),
                by_rating=count_by(r.rating for r in reviews),
            ),
        ),
        staff=StaffStats(
            productivity=productivity,
            role_distribution=count_by(s.role for s in records.active_staff),
            availability_distribution=count_by(s.availability for s in records.active_staff),
            top_performers=top_performers[:top_performers_limit],
        ),
        period=period.token.value,
        date_range=date_range(period),
    )


# =============================================================================
# Financial
# =============================================================================


def reduce_financial(records: FinancialRecords, period: Period) -> FinancialMetrics:
    """Reduce bills, payroll and goals, and compare against the previous window.

    Ledger transactions are not tracked, so income and expenses (current and
    previous) are zero and only bills, payroll and goals carry signal.
    """
    income = ZERO
    expenses = ZERO
    previous_income = ZERO
    previous_expenses = ZERO

    bills = records.bills
    payroll = records.payroll
    goals = records.goals

    categories: dict[str, dict[str, Decimal | int]] = {}
    for goal in goals:
        name = goal.goal_category.name if goal.goal_category else UNCATEGORIZED
        bucket = categories.setdefault(
            name, {"count": 0, "total_target": ZERO, "total_current": ZERO}
        )
        bucket["count"] += 1
        bucket["total_target"] += goal.target_amount
        bucket["total_current"] += goal.current_amount

    previous = period.previous()

    return FinancialMetrics(
        overview=FinancialOverview(
            income=income,
            expenses=expenses,
            profit=income - expenses,
            profit_margin=float((income - expenses) / income * 100) if income > 0 else 0.0,
        ),
        bills=BillStats(
            total=len(bills),
            paid=sum(1 for b in bills if b.status == "PAID"),
            unpaid=sum(1 for b in bills if b.status == "UNPAID"),
            overdue=sum(1 for b in bills if b.status == "OVERDUE"),
            total_amount=decimal_sum(b.amount for b in bills),
            items=[
                BillSummary(
                    id=b.id, name=b.name, amount=b.amount, status=b.status, due_date=b.due_date
                )
                for b in bills
            ],
        ),
        payroll=PayrollStats(
            total_payroll=decimal_sum(p.net_pay for p in payroll),
            employee_count=len({p.staff_id for p in payroll}),
        ),
        goals=GoalStats(
            total=len(goals),
            completed=sum(1 for g in goals if g.progress >= 100),
            active=sum(1 for g in goals if g.progress < 100 and g.archived_at is None),
            archived=sum(1 for g in goals if g.archived_at is not None),
            average_progress=sum(g.progress for g in goals) / len(goals) if goals else 0.0,
            by_category={
                name: GoalCategoryStats.model_validate(bucket)
                for name, bucket in categories.items()
            },
            items=[
                GoalSummary(
                    id=g.id,
                    title=g.title,
                    target_amount=g.target_amount,
                    current_amount=g.current_amount,
                    progress=g.progress,
                    archived_at=g.archived_at,
                    category=g.goal_category.name if g.goal_category else UNCATEGORIZED,
                )
                for g in goals
            ],
        ),
        trends=FinancialTrends(
            income_change=percent_change(income, previous_income),
            expense_change=percent_change(expenses, previous_expenses),
            period_compare=PeriodCompare(
                current=date_range(period),
                previous=date_range(previous),
            ),
        ),
        period=period.token.value,
        date_range=date_range(period),
    )


# =============================================================================
# Locations
# =============================================================================


def reduce_locations(
    records: LocationRecords,
    period: Period,
    low_stock_threshold: int = 5,
) -> LocationMetrics:
    """Reduce tickets, paid orders and stock per location.

    Per-location inventory keeps the order of ``records.locations``. Low stock
    here is strictly below ``low_stock_threshold``.
    """
    sales: dict[str, Decimal] = {}
    for order in records.paid_orders:
        name = order.store_location.name if order.store_location else UNKNOWN
        order_total = decimal_sum(line_total(i.price, i.quantity) for i in order.items)
        sales[name] = sales.get(name, ZERO) + order_total

    levels_by_location: dict[int, list[InventoryStockLevel]] = defaultdict(list)
    for level in records.stock_levels:
        levels_by_location[level.location_id].append(level)

    inventory = []
    for location in records.locations:
        levels = levels_by_location.get(location.id, [])
        inventory.append(
            LocationInventory(
                location_id=location.id,
                location_name=location.name,
                total_stock=sum(sl.stock for sl in levels),
                total_value=decimal_sum(
                    sl.stock * (sl.variation.selling_price or ZERO) for sl in levels
                ),
                low_stock_count=sum(1 for sl in levels if sl.stock < low_stock_threshold),
            )
        )

    return LocationMetrics(
        tickets_by_location=count_by(t.location for t in records.tickets),
        sales_by_location=sales,
        inventory_by_location=inventory,
        location_count=len(records.locations),
        period=period.token.value,
        date_range=date_range(period),
    )


# =============================================================================
# Transactions
# =============================================================================


def empty_transaction_analytics(period: Period) -> TransactionMetrics:
    """Zeroed transaction analytics. Ledger transactions are not tracked."""
    return TransactionMetrics(period=period.token.value, date_range=date_range(period))


# =============================================================================
# Business metrics
# =============================================================================


def compose_business_metrics(revenue: RevenueBreakdown) -> BusinessMetrics:
    """Total revenue and each business line's share of it."""
    total = (
        revenue.income_from_repairs
        + revenue.income_from_services
        + revenue.income_from_products
        + revenue.income_from_custom
    )
    if total > 0:
        distribution = ServiceDistribution(
            repairs=float(revenue.income_from_repairs / total * 100),
            service_division=float(revenue.income_from_services / total * 100),
            sales_division=float(revenue.income_from_products / total * 100),
            custom_division=float(revenue.income_from_custom / total * 100),
        )
    else:
        distribution = ServiceDistribution()
    return BusinessMetrics(total_revenue=total, service_distribution=distribution)


# =============================================================================
# Stock health
# =============================================================================


def stock_level_row(level: InventoryStockLevel, threshold: int | None = None) -> StockLevelRow:
    """Listing row for a stock level, valued at purchase cost."""
    variation = level.variation
    item = variation.inventory_item
    item_name = item.name if item else "Unknown Item"
    category = item.categories[0].name if item and item.categories else UNCATEGORIZED
    return StockLevelRow(
        id=level.id,
        name=f"{item_name} - {variation.name}",
        sku=variation.sku,
        category=category,
        location=level.location.name,
        stock=level.stock,
        value=level.stock * (level.purchase_cost or ZERO),
        threshold=threshold,
    )


def reduce_stock_health(items: Sequence[InventoryItem], threshold: int = 5) -> StockHealthMetrics:
    """Catalog-wide stock totals.

    A level with no stock counts as out of stock. A level above zero and at
    or below ``threshold`` counts as low stock.
    """
    variations = [v for item in items for v in item.variations]
    levels = [sl for v in variations for sl in v.stock_levels]
    return StockHealthMetrics(
        total_items=len(items),
        total_variations=len(variations),
        total_stock=sum(sl.stock for sl in levels),
        total_value=decimal_sum(sl.stock * (sl.purchase_cost or ZERO) for sl in levels),
        low_stock_count=sum(1 for sl in levels if 0 < sl.stock <= threshold),
        out_of_stock_count=sum(1 for sl in levels if sl.stock == 0),
    )
