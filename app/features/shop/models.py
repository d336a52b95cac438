"""Repair-shop ORM models read by the analytics engine.

Tables are grouped by the back-office area that owns them:
- Locations & people: StoreLocation, Customer, Staff
- Repairs: Ticket, RepairDevice, RepairOption, RepairType, Quote, Diagnostic
- Communications: Call, TextMessage, EmailLog, Notification, Announcement
- Point of sale: Order, OrderItem, Refund, Discount
- Inventory: InventoryItem, InventoryVariation, InventoryStockLevel and the
  movement tables (adjustments, audits, returns, transfers, exchanges)
- Customer programs: Booking, MailIn, StoreCredit, LoyaltyProgram, Review
- Finance: Bill, Payroll, Goal

Analytics only ever reads these tables. Writes belong to the CRUD screens.
"""

import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.shared.models import TimestampMixin

# ============================================================================
# LOCATIONS & PEOPLE
# ============================================================================


class StoreLocation(TimestampMixin, Base):
    """Physical shop location.

    Attributes:
        id: Primary key.
        name: Display name (also used as the grouping key for sales).
        address: Street address.
        is_active: Inactive locations are excluded from location analytics.
    """

    __tablename__ = "store_location"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    stock_levels: Mapped[list["InventoryStockLevel"]] = relationship(back_populates="location")
    orders: Mapped[list["Order"]] = relationship(back_populates="store_location")


class Customer(TimestampMixin, Base):
    """Shop customer.

    A customer is "active" for a window when they have at least one ticket or
    one order created inside it.
    """

    __tablename__ = "customer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    tickets: Mapped[list["Ticket"]] = relationship(back_populates="customer")
    orders: Mapped[list["Order"]] = relationship(back_populates="customer")


class Staff(TimestampMixin, Base):
    """Staff member.

    Attributes:
        id: Primary key.
        first_name: Given name.
        last_name: Family name.
        role: Job role (e.g. "TECHNICIAN", "MANAGER").
        availability: Current availability (e.g. "AVAILABLE", "ON_LEAVE").
        is_active: Only active staff appear in role/availability distributions.
        created_at: Hire date proxy used for experience years.
    """

    __tablename__ = "staff"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100))
    last_name: Mapped[str] = mapped_column(String(100))
    role: Mapped[str | None] = mapped_column(String(50), nullable=True)
    availability: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    tickets: Mapped[list["Ticket"]] = relationship(back_populates="staff")
    ticket_comments: Mapped[list["TicketComment"]] = relationship(back_populates="staff")
    notes: Mapped[list["StaffNote"]] = relationship(back_populates="staff")


class TicketComment(TimestampMixin, Base):
    """Comment left by a staff member on a ticket."""

    __tablename__ = "ticket_comment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_id: Mapped[int] = mapped_column(Integer, ForeignKey("ticket.id"), index=True)
    staff_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("staff.id"), index=True, nullable=True
    )
    body: Mapped[str] = mapped_column(Text)

    ticket: Mapped["Ticket"] = relationship(back_populates="comments")
    staff: Mapped["Staff | None"] = relationship(back_populates="ticket_comments")


class StaffNote(TimestampMixin, Base):
    """Free-form note attached to a staff member."""

    __tablename__ = "staff_note"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    staff_id: Mapped[int] = mapped_column(Integer, ForeignKey("staff.id"), index=True)
    body: Mapped[str] = mapped_column(Text)

    staff: Mapped["Staff"] = relationship(back_populates="notes")


# ============================================================================
# REPAIRS
# ============================================================================


class Ticket(TimestampMixin, Base):
    """Repair ticket.

    Attributes:
        id: Primary key.
        code: Human-facing ticket code.
        status: Workflow status ("PENDING", "IN_PROGRESS", "DONE", "CANCELLED", ...).
        completed: Completion flag set by the technician (independent of status).
        location: Free-text shop location name the ticket was opened at.
        contact_email: Contact email captured at intake.
        contact_number: Contact phone captured at intake.
        customer_id: Customer (FK, optional for walk-ins).
        staff_id: Assigned staff member (FK, optional).
    """

    __tablename__ = "ticket"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str | None] = mapped_column(String(30), nullable=True, unique=True)
    status: Mapped[str] = mapped_column(String(30), index=True)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    location: Mapped[str | None] = mapped_column(String(100), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    customer_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("customer.id"), index=True, nullable=True
    )
    staff_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("staff.id"), index=True, nullable=True
    )

    customer: Mapped["Customer | None"] = relationship(back_populates="tickets")
    staff: Mapped["Staff | None"] = relationship(back_populates="tickets")
    repair_devices: Mapped[list["RepairDevice"]] = relationship(back_populates="ticket")
    comments: Mapped[list["TicketComment"]] = relationship(back_populates="ticket")


class RepairDevice(TimestampMixin, Base):
    """Device checked in on a ticket."""

    __tablename__ = "repair_device"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_id: Mapped[int] = mapped_column(Integer, ForeignKey("ticket.id"), index=True)
    brand: Mapped[str] = mapped_column(String(100))
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)

    ticket: Mapped["Ticket"] = relationship(back_populates="repair_devices")
    repair_options: Mapped[list["RepairOption"]] = relationship(back_populates="repair_device")


class RepairType(TimestampMixin, Base):
    """Kind of repair (e.g. "Screen Replacement")."""

    __tablename__ = "repair_type"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)


class RepairOption(TimestampMixin, Base):
    """A repair selected for a device, priced at intake."""

    __tablename__ = "repair_option"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    repair_device_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("repair_device.id"), index=True
    )
    repair_type_id: Mapped[int] = mapped_column(Integer, ForeignKey("repair_type.id"))
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    repair_device: Mapped["RepairDevice"] = relationship(back_populates="repair_options")
    repair_type: Mapped["RepairType"] = relationship()


class Quote(TimestampMixin, Base):
    """Repair quote sent to a prospective customer.

    A quote that was not converted to a ticket is "expired" once
    ``expires_at`` is in the past, otherwise "pending".
    """

    __tablename__ = "quote"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    brand: Mapped[str] = mapped_column(String(100))
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    converted_to_ticket: Mapped[bool] = mapped_column(Boolean, default=False)
    expires_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True))


class Diagnostic(TimestampMixin, Base):
    """Diagnostic check ("PENDING" or "COMPLETED")."""

    __tablename__ = "diagnostic"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    status: Mapped[str] = mapped_column(String(30))
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)


# ============================================================================
# COMMUNICATIONS
# ============================================================================


class Call(TimestampMixin, Base):
    """Phone call log entry. Windowed on ``date``, not ``created_at``."""

    __tablename__ = "call"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), index=True)
    answered: Mapped[bool] = mapped_column(Boolean, default=False)
    direction: Mapped[str | None] = mapped_column(String(20), nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)


class TextMessage(TimestampMixin, Base):
    """SMS message. ``direction`` is "INBOUND" or "OUTBOUND"."""

    __tablename__ = "text_message"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    direction: Mapped[str] = mapped_column(String(20))
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)


class EmailLog(TimestampMixin, Base):
    """Outgoing email. Windowed on ``sent_at``."""

    __tablename__ = "email_log"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    recipient: Mapped[str] = mapped_column(String(255))
    subject: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20))
    sent_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), index=True)

    analytics: Mapped["EmailAnalytics | None"] = relationship(
        back_populates="email", uselist=False
    )


class EmailAnalytics(TimestampMixin, Base):
    """Engagement counters for one email (absent until tracking fires)."""

    __tablename__ = "email_analytics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email_id: Mapped[int] = mapped_column(Integer, ForeignKey("email_log.id"), unique=True)
    opens: Mapped[int] = mapped_column(Integer, default=0)
    clicks: Mapped[int] = mapped_column(Integer, default=0)

    email: Mapped["EmailLog"] = relationship(back_populates="analytics")


class Notification(TimestampMixin, Base):
    """In-app notification."""

    __tablename__ = "notification"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    type: Mapped[str] = mapped_column(String(50))
    priority: Mapped[str] = mapped_column(String(20))
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)


class Announcement(TimestampMixin, Base):
    """Staff-facing announcement."""

    __tablename__ = "announcement"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    content: Mapped[str] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


# ============================================================================
# POINT OF SALE
# ============================================================================


class Order(TimestampMixin, Base):
    """POS / online order.

    Attributes:
        id: Primary key.
        status: "PENDING", "PAID", "COMPLETED", "CANCELLED", ...
        customer_id: Customer (FK, optional).
        store_location_id: Location where the sale happened (FK, optional).
    """

    __tablename__ = "sales_order"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    status: Mapped[str] = mapped_column(String(30), index=True)
    customer_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("customer.id"), index=True, nullable=True
    )
    store_location_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("store_location.id"), index=True, nullable=True
    )

    customer: Mapped["Customer | None"] = relationship(back_populates="orders")
    store_location: Mapped["StoreLocation | None"] = relationship(back_populates="orders")
    items: Mapped[list["OrderItem"]] = relationship(back_populates="order")
    refunds: Mapped[list["Refund"]] = relationship(back_populates="order")

    __table_args__ = (Index("ix_sales_order_status_created", "status", "created_at"),)


class OrderItem(TimestampMixin, Base):
    """Order line.

    ``item_type`` selects the revenue bucket: "repair", "service", "product"
    or "custom". Lines without a recognised type count as products.
    """

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(Integer, ForeignKey("sales_order.id"), index=True)
    name: Mapped[str] = mapped_column(String(200))
    item_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    quantity: Mapped[int] = mapped_column(Integer, default=1)

    order: Mapped["Order"] = relationship(back_populates="items")

    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_order_item_quantity_positive"),)


class Refund(TimestampMixin, Base):
    """Refund against an order ("PENDING", "APPROVED", "DENIED")."""

    __tablename__ = "refund"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(Integer, ForeignKey("sales_order.id"), index=True)
    status: Mapped[str] = mapped_column(String(20))
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    reason: Mapped[str | None] = mapped_column(String(255), nullable=True)

    order: Mapped["Order"] = relationship(back_populates="refunds")


class Discount(TimestampMixin, Base):
    """Discount code. ``count`` is the number of times it was applied."""

    __tablename__ = "discount"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(50))
    type: Mapped[str] = mapped_column(String(30))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    count: Mapped[int] = mapped_column(Integer, default=0)


# ============================================================================
# INVENTORY
# ============================================================================

inventory_item_category = Table(
    "inventory_item_category",
    Base.metadata,
    Column("inventory_item_id", ForeignKey("inventory_item.id"), primary_key=True),
    Column("category_id", ForeignKey("inventory_category.id"), primary_key=True),
)


class Vendor(TimestampMixin, Base):
    """Supplier of inventory."""

    __tablename__ = "vendor"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))

    purchase_orders: Mapped[list["PurchaseOrder"]] = relationship(back_populates="supplier")
    inventory_items: Mapped[list["InventoryItem"]] = relationship(back_populates="supplier")


class InventoryCategory(TimestampMixin, Base):
    """Inventory category (many-to-many with items)."""

    __tablename__ = "inventory_category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)


class InventoryItem(TimestampMixin, Base):
    """Catalog item. Sellable units are its variations."""

    __tablename__ = "inventory_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    supplier_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("vendor.id"), index=True, nullable=True
    )

    supplier: Mapped["Vendor | None"] = relationship(back_populates="inventory_items")
    categories: Mapped[list["InventoryCategory"]] = relationship(
        secondary=inventory_item_category
    )
    variations: Mapped[list["InventoryVariation"]] = relationship(
        back_populates="inventory_item"
    )


class InventoryVariation(TimestampMixin, Base):
    """Sellable variation of an item (size, colour, capacity...).

    Attributes:
        id: Primary key.
        inventory_item_id: Parent item (FK).
        name: Variation name.
        sku: Stock keeping unit.
        selling_price: Shelf price. NULL for unpriced variations.
        visible: Whether the variation is listed in the catalog.
    """

    __tablename__ = "inventory_variation"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    inventory_item_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("inventory_item.id"), index=True
    )
    name: Mapped[str] = mapped_column(String(200))
    sku: Mapped[str] = mapped_column(String(50), index=True)
    selling_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    visible: Mapped[bool] = mapped_column(Boolean, default=True)

    inventory_item: Mapped["InventoryItem"] = relationship(back_populates="variations")
    stock_levels: Mapped[list["InventoryStockLevel"]] = relationship(back_populates="variation")


class InventoryStockLevel(TimestampMixin, Base):
    """On-hand stock of one variation at one location."""

    __tablename__ = "inventory_stock_level"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    variation_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("inventory_variation.id"), index=True
    )
    location_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("store_location.id"), index=True
    )
    stock: Mapped[int] = mapped_column(Integer, default=0)
    purchase_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)

    variation: Mapped["InventoryVariation"] = relationship(back_populates="stock_levels")
    location: Mapped["StoreLocation"] = relationship(back_populates="stock_levels")

    __table_args__ = (Index("ix_stock_level_location_stock", "location_id", "stock"),)


class InventoryAdjustment(TimestampMixin, Base):
    """Manual stock correction with a reason."""

    __tablename__ = "inventory_adjustment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    inventory_item_id: Mapped[int] = mapped_column(Integer, ForeignKey("inventory_item.id"))
    variation_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("inventory_variation.id"), nullable=True
    )
    location_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("store_location.id"), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer)
    reason: Mapped[str] = mapped_column(String(100))


class InventoryAudit(TimestampMixin, Base):
    """Stock count. ``discrepancy`` is counted minus expected (signed)."""

    __tablename__ = "inventory_audit"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    inventory_item_id: Mapped[int] = mapped_column(Integer, ForeignKey("inventory_item.id"))
    variation_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("inventory_variation.id"), nullable=True
    )
    location_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("store_location.id"), nullable=True
    )
    expected: Mapped[int] = mapped_column(Integer, default=0)
    counted: Mapped[int] = mapped_column(Integer, default=0)
    discrepancy: Mapped[int] = mapped_column(Integer, default=0)


class PurchaseOrder(TimestampMixin, Base):
    """Purchase order to a supplier ("PENDING", "APPROVED", "RECEIVED", "CANCELLED")."""

    __tablename__ = "purchase_order"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    supplier_id: Mapped[int] = mapped_column(Integer, ForeignKey("vendor.id"), index=True)
    status: Mapped[str] = mapped_column(String(20))
    total_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))

    supplier: Mapped["Vendor"] = relationship(back_populates="purchase_orders")


class InventoryReturn(TimestampMixin, Base):
    """Item returned to stock. Windowed on ``returned_at``."""

    __tablename__ = "inventory_return"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    inventory_item_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("inventory_item.id"), nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    reason: Mapped[str] = mapped_column(String(100))
    returned_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), index=True)


class InventoryTransfer(TimestampMixin, Base):
    """Stock moved between locations. Windowed on ``transfer_date``."""

    __tablename__ = "inventory_transfer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    inventory_item_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("inventory_item.id"), nullable=True
    )
    from_location_id: Mapped[int] = mapped_column(Integer, ForeignKey("store_location.id"))
    to_location_id: Mapped[int] = mapped_column(Integer, ForeignKey("store_location.id"))
    quantity: Mapped[int] = mapped_column(Integer)
    transfer_date: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), index=True
    )

    from_location: Mapped["StoreLocation"] = relationship(foreign_keys=[from_location_id])
    to_location: Mapped["StoreLocation"] = relationship(foreign_keys=[to_location_id])


class InventoryExchange(TimestampMixin, Base):
    """Customer exchange of one item for another. Windowed on ``exchanged_at``."""

    __tablename__ = "inventory_exchange"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("customer.id"), nullable=True
    )
    returned_item_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("inventory_item.id"), nullable=True
    )
    new_item_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("inventory_item.id"), nullable=True
    )
    exchanged_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), index=True)


class RentalDevice(TimestampMixin, Base):
    """Loaner/rental device."""

    __tablename__ = "rental_device"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)

    rental_orders: Mapped[list["RentalOrder"]] = relationship(back_populates="rental_device")


class RentalOrder(TimestampMixin, Base):
    """Rental of a device ("ACTIVE", "RETURNED", ...)."""

    __tablename__ = "rental_order"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    rental_device_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rental_device.id"), index=True
    )
    status: Mapped[str] = mapped_column(String(20))

    rental_device: Mapped["RentalDevice"] = relationship(back_populates="rental_orders")
    payments: Mapped[list["RentalPayment"]] = relationship(back_populates="rental_order")


class RentalPayment(TimestampMixin, Base):
    """Payment collected for a rental order."""

    __tablename__ = "rental_payment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    rental_order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rental_order.id"), index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))

    rental_order: Mapped["RentalOrder"] = relationship(back_populates="payments")


class SpecialPart(TimestampMixin, Base):
    """Part ordered specially for a customer ("PENDING", "COMPLETED")."""

    __tablename__ = "special_part"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    status: Mapped[str] = mapped_column(String(20))
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    order_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sales_order.id"), nullable=True
    )


class InsuranceType(TimestampMixin, Base):
    """Warranty/insurance product."""

    __tablename__ = "insurance_type"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))


class InsurancePolicy(TimestampMixin, Base):
    """Warranty policy sold to a customer. Windowed on ``start_date``."""

    __tablename__ = "insurance_policy"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("customer.id"), nullable=True
    )
    insurance_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("insurance_type.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(String(20))
    start_date: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), index=True)
    premium_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))

    insurance_type: Mapped["InsuranceType | None"] = relationship()
    claims: Mapped[list["InsuranceClaim"]] = relationship(back_populates="policy")


class InsuranceClaim(TimestampMixin, Base):
    """Claim filed against a warranty policy."""

    __tablename__ = "insurance_claim"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    policy_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("insurance_policy.id"), index=True
    )
    status: Mapped[str] = mapped_column(String(20))

    policy: Mapped["InsurancePolicy"] = relationship(back_populates="claims")


# ============================================================================
# CUSTOMER PROGRAMS
# ============================================================================


class Booking(TimestampMixin, Base):
    """Appointment booking. Windowed on ``date``."""

    __tablename__ = "booking"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), index=True)
    status: Mapped[str] = mapped_column(String(20))
    booking_type: Mapped[str] = mapped_column(String(30))
    converted_to_ticket: Mapped[bool] = mapped_column(Boolean, default=False)


class MailIn(TimestampMixin, Base):
    """Mail-in repair request. Windowed on ``ship_datestamp``."""

    __tablename__ = "mail_in"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    status: Mapped[str] = mapped_column(String(30))
    converted_to_ticket: Mapped[bool] = mapped_column(Boolean, default=False)
    ship_datestamp: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), index=True
    )


class StoreCredit(TimestampMixin, Base):
    """Store credit account of a customer."""

    __tablename__ = "store_credit"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(Integer, ForeignKey("customer.id"), index=True)
    balance: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))

    transactions: Mapped[list["StoreCreditTransaction"]] = relationship(
        back_populates="store_credit"
    )


class StoreCreditTransaction(TimestampMixin, Base):
    """Credit movement. ``transaction_type`` is "earn" or "deduct"."""

    __tablename__ = "store_credit_transaction"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    store_credit_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("store_credit.id"), index=True
    )
    transaction_type: Mapped[str] = mapped_column(String(20))
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))

    store_credit: Mapped["StoreCredit"] = relationship(back_populates="transactions")


class LoyaltyProgram(TimestampMixin, Base):
    """Loyalty membership of one customer."""

    __tablename__ = "loyalty_program"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(Integer, ForeignKey("customer.id"), index=True)
    points: Mapped[int] = mapped_column(Integer, default=0)

    activities: Mapped[list["LoyaltyActivity"]] = relationship(back_populates="program")
    redemptions: Mapped[list["LoyaltyRedemption"]] = relationship(back_populates="program")


class LoyaltyActivity(TimestampMixin, Base):
    """Points movement. ``type`` is "EARNED" or "REDEEMED"."""

    __tablename__ = "loyalty_activity"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    program_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("loyalty_program.id"), index=True
    )
    type: Mapped[str] = mapped_column(String(20))
    points: Mapped[int] = mapped_column(Integer)

    program: Mapped["LoyaltyProgram"] = relationship(back_populates="activities")


class LoyaltyRedemption(TimestampMixin, Base):
    """Reward redemption. Windowed on ``redeemed_at``."""

    __tablename__ = "loyalty_redemption"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    program_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("loyalty_program.id"), index=True
    )
    points: Mapped[int] = mapped_column(Integer)
    redeemed_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True))

    program: Mapped["LoyaltyProgram"] = relationship(back_populates="redemptions")


class ReviewSource(TimestampMixin, Base):
    """Where a review was posted (Google, Yelp, ...)."""

    __tablename__ = "review_source"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)


class Review(TimestampMixin, Base):
    """Customer review. Windowed on ``review_date``."""

    __tablename__ = "review"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    review_source_id: Mapped[int] = mapped_column(Integer, ForeignKey("review_source.id"))
    rating: Mapped[int] = mapped_column(Integer)
    review_date: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), index=True)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)

    review_source: Mapped["ReviewSource"] = relationship()

    __table_args__ = (CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating"),)


# ============================================================================
# FINANCE
# ============================================================================


class Bill(TimestampMixin, Base):
    """Payable bill ("PAID", "UNPAID", "OVERDUE")."""

    __tablename__ = "bill"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    status: Mapped[str] = mapped_column(String(20))
    due_date: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class Payroll(TimestampMixin, Base):
    """Payroll run entry for one staff member."""

    __tablename__ = "payroll"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    staff_id: Mapped[int] = mapped_column(Integer, ForeignKey("staff.id"), index=True)
    gross_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    net_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2))


class GoalCategory(TimestampMixin, Base):
    """Grouping for goals."""

    __tablename__ = "goal_category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))


class Goal(TimestampMixin, Base):
    """Business goal.

    Attributes:
        id: Primary key.
        title: Goal title.
        target_amount: Target value.
        current_amount: Value reached so far.
        progress: Completion percentage (>= 100 means completed).
        archived_at: Set when the goal was archived.
        goal_category_id: Optional category (FK).
        staff_id: Optional owner (FK).
    """

    __tablename__ = "goal"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    target_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    current_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"))
    progress: Mapped[float] = mapped_column(Float, default=0.0)
    archived_at: Mapped[datetime.datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    goal_category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("goal_category.id"), nullable=True
    )
    staff_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("staff.id"), nullable=True)

    goal_category: Mapped["GoalCategory | None"] = relationship()
    staff: Mapped["Staff | None"] = relationship()
