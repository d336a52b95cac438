"""Shop domain: the repair-shop back-office tables read by analytics.

Tables are grouped as:
- Locations, customers and staff
- Repairs: tickets, devices, quotes and diagnostics
- Communications: calls, texts, emails, notifications and announcements
- Sales and inventory: orders, catalog, stock, purchasing, rentals and warranty
- Programs: bookings, mail-ins, store credit, loyalty and reviews
- Finance: bills, payroll and goals
"""

from app.features.shop.models import (
    Announcement,
    Bill,
    Booking,
    Call,
    Customer,
    Diagnostic,
    Discount,
    EmailAnalytics,
    EmailLog,
    Goal,
    GoalCategory,
    InsuranceClaim,
    InsurancePolicy,
    InsuranceType,
    InventoryAdjustment,
    InventoryAudit,
    InventoryCategory,
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
    OrderItem,
    Payroll,
    PurchaseOrder,
    Quote,
    Refund,
    RentalDevice,
    RentalOrder,
    RentalPayment,
    RepairDevice,
    RepairOption,
    RepairType,
    Review,
    ReviewSource,
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

__all__ = [
    "Announcement",
    "Bill",
    "Booking",
    "Call",
    "Customer",
    "Diagnostic",
    "Discount",
    "EmailAnalytics",
    "EmailLog",
    "Goal",
    "GoalCategory",
    "InsuranceClaim",
    "InsurancePolicy",
    "InsuranceType",
    "InventoryAdjustment",
    "InventoryAudit",
    "InventoryCategory",
    "InventoryExchange",
    "InventoryItem",
    "InventoryReturn",
    "InventoryStockLevel",
    "InventoryTransfer",
    "InventoryVariation",
    "LoyaltyActivity",
    "LoyaltyProgram",
    "LoyaltyRedemption",
    "MailIn",
    "Notification",
    "Order",
    "OrderItem",
    "Payroll",
    "PurchaseOrder",
    "Quote",
    "Refund",
    "RentalDevice",
    "RentalOrder",
    "RentalPayment",
    "RepairDevice",
    "RepairOption",
    "RepairType",
    "Review",
    "ReviewSource",
    "SpecialPart",
    "Staff",
    "StaffNote",
    "StoreCredit",
    "StoreCreditTransaction",
    "StoreLocation",
    "TextMessage",
    "Ticket",
    "TicketComment",
    "Vendor",
]
