"""Read-only data access for analytics.

Each fetcher takes an ``AsyncSession`` and a resolved ``Period`` and returns
fully materialised records (relationships eagerly loaded) so the reducers can
stay pure. Query failures are not caught here.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.features.analytics.period import Period
from app.features.shop.models import (
    Announcement,
    Bill,
    Booking,
    Call,
    Customer,
    Diagnostic,
    Discount,
    EmailLog,
    Goal,
    InsurancePolicy,
    InventoryAdjustment,
    InventoryAudit,
    InventoryExchange,
    InventoryItem,
    InventoryReturn,
    InventoryStockLevel,
    InventoryTransfer,
    InventoryVariation,
    LoyaltyActivity,
    LoyaltyProgram,
    LoyaltyRedemption,
    MailIn,
    Notification,
    Order,
    Payroll,
    PurchaseOrder,
    Quote,
    Refund,
    RentalDevice,
    RentalOrder,
    RepairDevice,
    RepairOption,
    Review,
    SpecialPart,
    Staff,
    StaffNote,
    StoreCredit,
    StoreCreditTransaction,
    StoreLocation,
    TextMessage,
    Ticket,
    TicketComment,
    Vendor,
)

PAID_STATUS = "PAID"


def in_window(column: Any, period: Period) -> ColumnElement[bool]:
    """Inclusive ``start_date <= column <= end_date`` filter."""
    return column.between(period.start_date, period.end_date)


async def _count(session: AsyncSession, stmt: Any) -> int:
    result = await session.execute(stmt)
    return int(result.scalar_one())


# =============================================================================
# Record bundles
# =============================================================================


@dataclass
class RepairRecords:
    """Tickets (with devices, options and repair types), quotes and diagnostics."""

    tickets: Sequence[Ticket] = field(default_factory=list)
    quotes: Sequence[Quote] = field(default_factory=list)
    diagnostics: Sequence[Diagnostic] = field(default_factory=list)


@dataclass
class CommunicationRecords:
    calls: Sequence[Call] = field(default_factory=list)
    texts: Sequence[TextMessage] = field(default_factory=list)
    emails: Sequence[EmailLog] = field(default_factory=list)
    notifications: Sequence[Notification] = field(default_factory=list)
    announcements: Sequence[Announcement] = field(default_factory=list)


@dataclass
class InventoryRecords:
    """Catalog, stock movements, purchasing and POS records for a window.

    ``suppliers`` and ``rental_devices`` cover all rows; their
    ``purchase_orders``/``inventory_items``/``rental_orders`` collections are
    loaded for the window only. ``low_stock_count`` is not window-scoped.
    """

    items: Sequence[InventoryItem] = field(default_factory=list)
    adjustments: Sequence[InventoryAdjustment] = field(default_factory=list)
    audits: Sequence[InventoryAudit] = field(default_factory=list)
    purchase_orders: Sequence[PurchaseOrder] = field(default_factory=list)
    suppliers: Sequence[Vendor] = field(default_factory=list)
    returns: Sequence[InventoryReturn] = field(default_factory=list)
    transfers: Sequence[InventoryTransfer] = field(default_factory=list)
    exchanges: Sequence[InventoryExchange] = field(default_factory=list)
    rental_devices: Sequence[RentalDevice] = field(default_factory=list)
    special_parts: Sequence[SpecialPart] = field(default_factory=list)
    policies: Sequence[InsurancePolicy] = field(default_factory=list)
    orders: Sequence[Order] = field(default_factory=list)
    refunds: Sequence[Refund] = field(default_factory=list)
    discounts: Sequence[Discount] = field(default_factory=list)
    low_stock_count: int = 0


@dataclass
class StaffProfile:
    """Staff identity with all-time comment and note counts."""

    staff: Staff
    comment_count: int = 0
    note_count: int = 0


@dataclass
class CustomerRecords:
    """Customer counters, programs, reviews and staff for a window."""

    total_customers: int = 0
    new_customers: int = 0
    active_customers: int = 0
    bookings: Sequence[Booking] = field(default_factory=list)
    mail_ins: Sequence[MailIn] = field(default_factory=list)
    tickets: Sequence[Ticket] = field(default_factory=list)
    store_credits: Sequence[StoreCredit] = field(default_factory=list)
    loyalty_programs: Sequence[LoyaltyProgram] = field(default_factory=list)
    reviews: Sequence[Review] = field(default_factory=list)
    staff_profiles: Sequence[StaffProfile] = field(default_factory=list)
    active_staff: Sequence[Staff] = field(default_factory=list)


@dataclass
class FinancialRecords:
    bills: Sequence[Bill] = field(default_factory=list)
    payroll: Sequence[Payroll] = field(default_factory=list)
    goals: Sequence[Goal] = field(default_factory=list)


@dataclass
class LocationRecords:
    """Active locations and the records grouped per location.

    ``stock_levels`` holds the stock of every active location, fetched in a
    single query.
    """

    locations: Sequence[StoreLocation] = field(default_factory=list)
    tickets: Sequence[Ticket] = field(default_factory=list)
    paid_orders: Sequence[Order] = field(default_factory=list)
    stock_levels: Sequence[InventoryStockLevel] = field(default_factory=list)


@dataclass
class DashboardCounters:
    """Live counters for the dashboard that are not part of any domain report."""

    pending_tickets: int = 0
    active_tickets: int = 0
    open_notifications: int = 0
    inventory_count: int = 0
    low_stock_count: int = 0
    active_customers: int = 0
    new_customers: int = 0
    booking_count: int = 0
    booking_schedule: int = 0
    quote_count: int = 0
    inventory_value: Decimal = Decimal("0")


# =============================================================================
# Revenue
# =============================================================================


async def fetch_paid_orders(
    session: AsyncSession,
    period: Period,
    with_location: bool = False,
) -> Sequence[Order]:
    """Fetch PAID orders created in the window, with their items.

    Args:
        session: Database session.
        period: Resolved window.
        with_location: Also load the store location of each order.

    Returns:
        Paid orders.
    """
    options = [selectinload(Order.items)]
    if with_location:
        options.append(selectinload(Order.store_location))

    stmt = (
        select(Order)
        .where(Order.status == PAID_STATUS, in_window(Order.created_at, period))
        .options(*options)
        .order_by(Order.id)
    )
    result = await session.execute(stmt)
    return result.scalars().all()


# =============================================================================
# Domain fetchers
# =============================================================================


async def fetch_repair_records(session: AsyncSession, period: Period) -> RepairRecords:
    """Fetch tickets, quotes and diagnostics created in the window."""
    tickets = await session.execute(
        select(Ticket)
        .where(in_window(Ticket.created_at, period))
        .options(
            selectinload(Ticket.repair_devices)
            .selectinload(RepairDevice.repair_options)
            .selectinload(RepairOption.repair_type)
        )
        .order_by(Ticket.id)
    )
    quotes = await session.execute(
        select(Quote).where(in_window(Quote.created_at, period)).order_by(Quote.id)
    )
    diagnostics = await session.execute(
        select(Diagnostic).where(in_window(Diagnostic.created_at, period)).order_by(Diagnostic.id)
    )
    return RepairRecords(
        tickets=tickets.scalars().all(),
        quotes=quotes.scalars().all(),
        diagnostics=diagnostics.scalars().all(),
    )


async def fetch_communication_records(
    session: AsyncSession, period: Period
) -> CommunicationRecords:
    """Fetch calls (by call date), texts, emails (by send time), notifications and announcements."""
    calls = await session.execute(
        select(Call).where(in_window(Call.date, period)).order_by(Call.id)
    )
    texts = await session.execute(
        select(TextMessage)
        .where(in_window(TextMessage.created_at, period))
        .order_by(TextMessage.id)
    )
    emails = await session.execute(
        select(EmailLog)
        .where(in_window(EmailLog.sent_at, period))
        .options(selectinload(EmailLog.analytics))
        .order_by(EmailLog.id)
    )
    notifications = await session.execute(
        select(Notification)
        .where(in_window(Notification.created_at, period))
        .order_by(Notification.id)
    )
    announcements = await session.execute(
        select(Announcement)
        .where(in_window(Announcement.created_at, period))
        .order_by(Announcement.id)
    )
    return CommunicationRecords(
        calls=calls.scalars().all(),
        texts=texts.scalars().all(),
        emails=emails.scalars().all(),
        notifications=notifications.scalars().all(),
        announcements=announcements.scalars().all(),
    )


async def fetch_inventory_records(
    session: AsyncSession,
    period: Period,
    low_stock_threshold: int = 5,
) -> InventoryRecords:
    """Fetch catalog, purchasing, rental, warranty and POS records for the window.

    Args:
        session: Database session.
        period: Resolved window.
        low_stock_threshold: Stock at or below this counts as low (all time).

    Returns:
        Inventory record bundle.
    """
    items = await session.execute(
        select(InventoryItem)
        .where(in_window(InventoryItem.created_at, period))
        .options(selectinload(InventoryItem.categories), selectinload(InventoryItem.variations))
        .order_by(InventoryItem.id)
    )
    adjustments = await session.execute(
        select(InventoryAdjustment)
        .where(in_window(InventoryAdjustment.created_at, period))
        .order_by(InventoryAdjustment.id)
    )
    audits = await session.execute(
        select(InventoryAudit)
        .where(in_window(InventoryAudit.created_at, period))
        .order_by(InventoryAudit.id)
    )
    purchase_orders = await session.execute(
        select(PurchaseOrder)
        .where(in_window(PurchaseOrder.created_at, period))
        .options(selectinload(PurchaseOrder.supplier))
        .order_by(PurchaseOrder.id)
    )
    suppliers = await session.execute(
        select(Vendor)
        .options(
            selectinload(Vendor.purchase_orders.and_(in_window(PurchaseOrder.created_at, period))),
            selectinload(Vendor.inventory_items.and_(in_window(InventoryItem.created_at, period))),
        )
        .order_by(Vendor.id)
    )
    returns = await session.execute(
        select(InventoryReturn)
        .where(in_window(InventoryReturn.returned_at, period))
        .order_by(InventoryReturn.id)
    )
    transfers = await session.execute(
        select(InventoryTransfer)
        .where(in_window(InventoryTransfer.transfer_date, period))
        .order_by(InventoryTransfer.id)
    )
    exchanges = await session.execute(
        select(InventoryExchange)
        .where(in_window(InventoryExchange.exchanged_at, period))
        .order_by(InventoryExchange.id)
    )
    rental_devices = await session.execute(
        select(RentalDevice)
        .options(
            selectinload(
                RentalDevice.rental_orders.and_(in_window(RentalOrder.created_at, period))
            ).selectinload(RentalOrder.payments)
        )
        .order_by(RentalDevice.id)
    )
    special_parts = await session.execute(
        select(SpecialPart)
        .where(in_window(SpecialPart.created_at, period))
        .order_by(SpecialPart.id)
    )
    policies = await session.execute(
        select(InsurancePolicy)
        .where(in_window(InsurancePolicy.start_date, period))
        .options(selectinload(InsurancePolicy.claims))
        .order_by(InsurancePolicy.id)
    )
    orders = await session.execute(
        select(Order).where(in_window(Order.created_at, period)).order_by(Order.id)
    )
    refunds = await session.execute(
        select(Refund).where(in_window(Refund.created_at, period)).order_by(Refund.id)
    )
    discounts = await session.execute(
        select(Discount).where(in_window(Discount.created_at, period)).order_by(Discount.id)
    )
    low_stock_count = await _count(
        session,
        select(func.count())
        .select_from(InventoryStockLevel)
        .where(InventoryStockLevel.stock <= low_stock_threshold),
    )

    return InventoryRecords(
        items=items.scalars().all(),
        adjustments=adjustments.scalars().all(),
        audits=audits.scalars().all(),
        purchase_orders=purchase_orders.scalars().all(),
        suppliers=suppliers.scalars().all(),
        returns=returns.scalars().all(),
        transfers=transfers.scalars().all(),
        exchanges=exchanges.scalars().all(),
        rental_devices=rental_devices.scalars().all(),
        special_parts=special_parts.scalars().all(),
        policies=policies.scalars().all(),
        orders=orders.scalars().all(),
        refunds=refunds.scalars().all(),
        discounts=discounts.scalars().all(),
        low_stock_count=low_stock_count,
    )


async def fetch_staff_profiles(
    session: AsyncSession,
    staff_ids: Sequence[int],
) -> Sequence[StaffProfile]:
    """Fetch staff with their all-time ticket comment and note counts."""
    if not staff_ids:
        return []

    comment_count = (
        select(func.count(TicketComment.id))
        .where(TicketComment.staff_id == Staff.id)
        .correlate(Staff)
        .scalar_subquery()
    )
    note_count = (
        select(func.count(StaffNote.id))
        .where(StaffNote.staff_id == Staff.id)
        .correlate(Staff)
        .scalar_subquery()
    )
    result = await session.execute(
        select(Staff, comment_count.label("comment_count"), note_count.label("note_count"))
        .where(Staff.id.in_(staff_ids))
        .order_by(Staff.id)
    )
    return [
        StaffProfile(staff=row.Staff, comment_count=row.comment_count, note_count=row.note_count)
        for row in result.all()
    ]


async def fetch_customer_records(session: AsyncSession, period: Period) -> CustomerRecords:
    """Fetch customer counters, programs, reviews and staff for the window."""
    total_customers = await _count(session, select(func.count()).select_from(Customer))
    new_customers = await _count(
        session,
        select(func.count()).select_from(Customer).where(in_window(Customer.created_at, period)),
    )
    active_customers = await _count(
        session,
        select(func.count())
        .select_from(Customer)
        .where(
            or_(
                Customer.tickets.any(in_window(Ticket.created_at, period)),
                Customer.orders.any(in_window(Order.created_at, period)),
            )
        ),
    )

    bookings = await session.execute(
        select(Booking).where(in_window(Booking.date, period)).order_by(Booking.id)
    )
    mail_ins = await session.execute(
        select(MailIn).where(in_window(MailIn.ship_datestamp, period)).order_by(MailIn.id)
    )
    tickets = (
        (
            await session.execute(
                select(Ticket).where(in_window(Ticket.created_at, period)).order_by(Ticket.id)
            )
        )
        .scalars()
        .all()
    )
    store_credits = await session.execute(
        select(StoreCredit)
        .options(
            selectinload(
                StoreCredit.transactions.and_(in_window(StoreCreditTransaction.created_at, period))
            )
        )
        .order_by(StoreCredit.id)
    )
    loyalty_programs = await session.execute(
        select(LoyaltyProgram)
        .options(
            selectinload(
                LoyaltyProgram.activities.and_(in_window(LoyaltyActivity.created_at, period))
            ),
            selectinload(
                LoyaltyProgram.redemptions.and_(in_window(LoyaltyRedemption.redeemed_at, period))
            ),
        )
        .order_by(LoyaltyProgram.id)
    )
    reviews = await session.execute(
        select(Review)
        .where(in_window(Review.review_date, period))
        .options(selectinload(Review.review_source))
        .order_by(Review.id)
    )

    staff_ids = sorted({t.staff_id for t in tickets if t.staff_id is not None})
    staff_profiles = await fetch_staff_profiles(session, staff_ids)
    active_staff = await session.execute(
        select(Staff).where(Staff.is_active.is_(True)).order_by(Staff.id)
    )

    return CustomerRecords(
        total_customers=total_customers,
        new_customers=new_customers,
        active_customers=active_customers,
        bookings=bookings.scalars().all(),
        mail_ins=mail_ins.scalars().all(),
        tickets=tickets,
        store_credits=store_credits.scalars().all(),
        loyalty_programs=loyalty_programs.scalars().all(),
        reviews=reviews.scalars().all(),
        staff_profiles=staff_profiles,
        active_staff=active_staff.scalars().all(),
    )


async def fetch_financial_records(session: AsyncSession, period: Period) -> FinancialRecords:
    """Fetch bills, payroll entries and goals created in the window."""
    bills = await session.execute(
        select(Bill).where(in_window(Bill.created_at, period)).order_by(Bill.id)
    )
    payroll = await session.execute(
        select(Payroll).where(in_window(Payroll.created_at, period)).order_by(Payroll.id)
    )
    goals = await session.execute(
        select(Goal)
        .where(in_window(Goal.created_at, period))
        .options(selectinload(Goal.goal_category))
        .order_by(Goal.id)
    )
    return FinancialRecords(
        bills=bills.scalars().all(),
        payroll=payroll.scalars().all(),
        goals=goals.scalars().all(),
    )


async def fetch_location_records(session: AsyncSession, period: Period) -> LocationRecords:
    """Fetch active locations with their tickets, paid orders and stock levels."""
    locations = (
        (
            await session.execute(
                select(StoreLocation)
                .where(StoreLocation.is_active.is_(True))
                .order_by(StoreLocation.id)
            )
        )
        .scalars()
        .all()
    )
    tickets = await session.execute(
        select(Ticket).where(in_window(Ticket.created_at, period)).order_by(Ticket.id)
    )
    paid_orders = await fetch_paid_orders(session, period, with_location=True)

    stock_levels: Sequence[InventoryStockLevel] = []
    if locations:
        result = await session.execute(
            select(InventoryStockLevel)
            .where(InventoryStockLevel.location_id.in_([loc.id for loc in locations]))
            .options(selectinload(InventoryStockLevel.variation))
            .order_by(InventoryStockLevel.id)
        )
        stock_levels = result.scalars().all()

    return LocationRecords(
        locations=locations,
        tickets=tickets.scalars().all(),
        paid_orders=paid_orders,
        stock_levels=stock_levels,
    )


# =============================================================================
# Stock health & dashboard
# =============================================================================


def _stock_level_options() -> list[Any]:
    return [
        selectinload(InventoryStockLevel.variation)
        .selectinload(InventoryVariation.inventory_item)
        .selectinload(InventoryItem.categories),
        selectinload(InventoryStockLevel.location),
    ]


async def fetch_low_stock_levels(
    session: AsyncSession,
    threshold: int,
    limit: int,
) -> Sequence[InventoryStockLevel]:
    """Stock levels at active locations with ``0 <= stock <= threshold``, lowest first."""
    result = await session.execute(
        select(InventoryStockLevel)
        .join(InventoryStockLevel.location)
        .where(
            InventoryStockLevel.stock >= 0,
            InventoryStockLevel.stock <= threshold,
            StoreLocation.is_active.is_(True),
        )
        .options(*_stock_level_options())
        .order_by(InventoryStockLevel.stock.asc(), InventoryStockLevel.id)
        .limit(limit)
    )
    return result.scalars().all()


async def fetch_out_of_stock_levels(
    session: AsyncSession,
    limit: int,
) -> Sequence[InventoryStockLevel]:
    """Stock levels at active locations with no stock, most recently updated first."""
    result = await session.execute(
        select(InventoryStockLevel)
        .join(InventoryStockLevel.location)
        .where(InventoryStockLevel.stock == 0, StoreLocation.is_active.is_(True))
        .options(*_stock_level_options())
        .order_by(InventoryStockLevel.updated_at.desc(), InventoryStockLevel.id)
        .limit(limit)
    )
    return result.scalars().all()


async def fetch_inventory_catalog(session: AsyncSession) -> Sequence[InventoryItem]:
    """All inventory items with variations and their stock levels."""
    result = await session.execute(
        select(InventoryItem)
        .options(
            selectinload(InventoryItem.variations).selectinload(InventoryVariation.stock_levels)
        )
        .order_by(InventoryItem.id)
    )
    return result.scalars().all()


async def fetch_dashboard_counters(
    session: AsyncSession,
    start_date: datetime,
    end_date: datetime,
    low_stock_threshold: int = 5,
) -> DashboardCounters:
    """Fetch the live counters shown next to the dashboard KPIs.

    Ticket, notification, inventory and active-customer counters cover all
    rows. Customer sign-ups, bookings and quotes are counted on creation
    time within ``[start_date, end_date]``.
    """

    def created_between(column: Any) -> ColumnElement[bool]:
        return column.between(start_date, end_date)

    pending_tickets = await _count(
        session, select(func.count()).select_from(Ticket).where(Ticket.status != "DONE")
    )
    active_tickets = await _count(
        session,
        select(func.count())
        .select_from(Ticket)
        .where(Ticket.status.not_in(["DONE", "CANCELLED"])),
    )
    open_notifications = await _count(
        session,
        select(func.count()).select_from(Notification).where(Notification.is_read.is_(False)),
    )
    inventory_count = await _count(
        session,
        select(func.count())
        .select_from(InventoryVariation)
        .where(InventoryVariation.visible.is_(True)),
    )
    low_stock_count = await _count(
        session,
        select(func.count())
        .select_from(InventoryStockLevel)
        .where(InventoryStockLevel.stock <= low_stock_threshold),
    )
    active_customers = await _count(
        session, select(func.count()).select_from(Customer).where(Customer.is_active.is_(True))
    )
    new_customers = await _count(
        session,
        select(func.count()).select_from(Customer).where(created_between(Customer.created_at)),
    )
    booking_count = await _count(
        session,
        select(func.count()).select_from(Booking).where(created_between(Booking.created_at)),
    )
    booking_schedule = await _count(
        session,
        select(func.count())
        .select_from(Booking)
        .where(Booking.status == "SCHEDULED", created_between(Booking.created_at)),
    )
    quote_count = await _count(
        session,
        select(func.count()).select_from(Quote).where(created_between(Quote.created_at)),
    )
    inventory_value = await session.execute(
        select(func.coalesce(func.sum(InventoryVariation.selling_price), 0))
    )

    return DashboardCounters(
        pending_tickets=pending_tickets,
        active_tickets=active_tickets,
        open_notifications=open_notifications,
        inventory_count=inventory_count,
        low_stock_count=low_stock_count,
        active_customers=active_customers,
        new_customers=new_customers,
        booking_count=booking_count,
        booking_schedule=booking_schedule,
        quote_count=quote_count,
        inventory_value=Decimal(str(inventory_value.scalar_one())),
    )
