"""Tests for the pure domain reducers."""

import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.features.analytics import reducers
from app.features.analytics.fetchers import (
    CommunicationRecords,
    CustomerRecords,
    FinancialRecords,
    InventoryRecords,
    LocationRecords,
    RepairRecords,
    StaffProfile,
)
from app.features.analytics.revenue import classify_revenue
from app.features.analytics.schemas import RevenueBreakdown
from app.features.analytics.tests.factories import (
    make_order,
    make_quote,
    make_stock_level,
    make_ticket,
)
from app.features.shop.models import (
    Announcement,
    Bill,
    Booking,
    Call,
    EmailAnalytics,
    EmailLog,
    Goal,
    GoalCategory,
    InsuranceClaim,
    InsurancePolicy,
    InventoryAudit,
    InventoryCategory,
    InventoryItem,
    InventoryVariation,
    LoyaltyActivity,
    LoyaltyProgram,
    LoyaltyRedemption,
    MailIn,
    Notification,
    Payroll,
    PurchaseOrder,
    Refund,
    RentalDevice,
    RentalOrder,
    RentalPayment,
    RepairDevice,
    RepairOption,
    RepairType,
    Review,
    ReviewSource,
    Staff,
    StoreCredit,
    StoreCreditTransaction,
    StoreLocation,
    TextMessage,
    Vendor,
)


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# =============================================================================
# Helpers
# =============================================================================


class TestRateHelpers:
    """Tests for the shared arithmetic helpers."""

    def test_rate_guards_zero_denominator(self):
        assert reducers.rate(3, 0) == 0.0
        assert reducers.rate(1, 4) == 25.0

    def test_rate_str_formats_two_decimals(self):
        assert reducers.rate_str(0, 0) == "0"
        assert reducers.rate_str(1, 3) == "33.33"
        assert reducers.rate_str(0, 5) == "0.00"

    def test_unguarded_ratio(self):
        """Test division by zero yields NaN or infinity instead of raising."""
        assert math.isnan(reducers.unguarded_ratio(0, 0))
        assert reducers.unguarded_ratio(5, 0) == math.inf
        assert reducers.unguarded_ratio(-5, 0) == -math.inf
        assert reducers.unguarded_ratio(6, 3) == 2

    @pytest.mark.parametrize(
        ("current", "previous", "expected"),
        [
            (Decimal("50"), Decimal("0"), 100.0),
            (Decimal("0"), Decimal("0"), 0.0),
            (Decimal("150"), Decimal("100"), 50.0),
            (Decimal("50"), Decimal("100"), -50.0),
        ],
    )
    def test_percent_change(self, current, previous, expected):
        assert reducers.percent_change(current, previous) == expected

    def test_count_by_keeps_first_seen_order(self):
        counts = reducers.count_by(["b", "a", "b", None])

        assert list(counts) == ["b", "a", "Unknown"]
        assert counts == {"b": 2, "a": 1, "Unknown": 1}


# =============================================================================
# Repairs
# =============================================================================


class TestReduceRepairs:
    """Tests for reduce_repairs."""

    def test_completion_rate_sixty_percent(self, period, now):
        """Test 6 of 10 tickets done gives "60.00"."""
        tickets = (
            [make_ticket("DONE") for _ in range(6)]
            + [make_ticket("PENDING") for _ in range(2)]
            + [make_ticket("CANCELLED"), make_ticket("IN_PROGRESS")]
        )

        metrics = reducers.reduce_repairs(
            RepairRecords(tickets=tickets), RevenueBreakdown(), period, now
        )

        stats = metrics.tickets
        assert stats.total == 10
        assert stats.completion_rate == "60.00"
        assert stats.completed + stats.pending + stats.cancelled == 9

    def test_empty_window_rates_are_string_zero(self, period, now):
        """Test empty sets give "0" rather than failing."""
        metrics = reducers.reduce_repairs(RepairRecords(), RevenueBreakdown(), period, now)

        assert metrics.tickets.completion_rate == "0"
        assert metrics.quotes.conversion_rate == "0"
        assert metrics.diagnostics.completion_rate == "0"

    def test_quotes_classified_exactly_once(self, period, now):
        """Test accepted, expired and pending partition the quotes."""
        quotes = [
            make_quote(now - timedelta(days=1)),
            make_quote(now + timedelta(days=3)),
            make_quote(now - timedelta(days=10), converted=True),
            make_quote(now + timedelta(days=1), converted=True, brand="Samsung"),
        ]

        metrics = reducers.reduce_repairs(
            RepairRecords(quotes=quotes), RevenueBreakdown(), period, now
        )

        stats = metrics.quotes
        assert (stats.accepted, stats.expired, stats.pending) == (2, 1, 1)
        assert stats.accepted + stats.expired + stats.pending == stats.total
        assert stats.conversion_rate == "50.00"
        assert stats.brand_distribution == {"Apple": 3, "Samsung": 1}

    def test_unconverted_past_quote_is_expired(self, period, now):
        """Test a stale, unconverted quote is expired and not pending."""
        metrics = reducers.reduce_repairs(
            RepairRecords(quotes=[make_quote(now - timedelta(hours=1))]),
            RevenueBreakdown(),
            period,
            now,
        )

        assert metrics.quotes.expired == 1
        assert metrics.quotes.pending == 0

    def test_brand_and_repair_type_distribution(self, period, now):
        screen = RepairType(name="Screen")
        battery = RepairType(name="Battery")
        ticket = make_ticket(
            "DONE",
            repair_devices=[
                RepairDevice(
                    brand="Apple",
                    repair_options=[
                        RepairOption(repair_type=screen),
                        RepairOption(repair_type=battery),
                    ],
                ),
                RepairDevice(brand="Apple", repair_options=[RepairOption(repair_type=screen)]),
            ],
        )

        metrics = reducers.reduce_repairs(
            RepairRecords(tickets=[ticket]), RevenueBreakdown(), period, now
        )

        assert metrics.tickets.brand_distribution == {"Apple": 2}
        assert metrics.tickets.repair_types == {"Screen": 2, "Battery": 1}

    def test_revenue_and_period_echo(self, period, now):
        revenue = classify_revenue([make_order(("repair", "80.00", 1), ("service", "20.00", 1))])

        metrics = reducers.reduce_repairs(RepairRecords(), revenue, period, now)

        assert metrics.total_repair_revenue == Decimal("80.00")
        assert metrics.total_service_revenue == Decimal("20.00")
        assert metrics.period == "monthly"
        assert metrics.date_range.start_date == period.start_date


# =============================================================================
# Communications
# =============================================================================


class TestReduceCommunications:
    """Tests for reduce_communications."""

    def test_rates(self, period):
        records = CommunicationRecords(
            calls=[Call(answered=True), Call(answered=True), Call(answered=False)],
            texts=[
                TextMessage(direction="OUTBOUND", status="DELIVERED"),
                TextMessage(direction="OUTBOUND", status="FAILED"),
                TextMessage(direction="INBOUND", status="DELIVERED"),
            ],
            emails=[
                EmailLog(status="SENT", analytics=EmailAnalytics(opens=2, clicks=1)),
                EmailLog(status="SENT", analytics=EmailAnalytics(opens=0, clicks=0)),
                EmailLog(status="FAILED", analytics=None),
                EmailLog(status="SENT", analytics=EmailAnalytics(opens=1, clicks=0)),
            ],
            notifications=[
                Notification(type="TICKET", priority="HIGH", is_read=True),
                Notification(type="TICKET", priority="LOW", is_read=False),
            ],
        )

        metrics = reducers.reduce_communications(records, period)

        assert metrics.calls.missed == 1
        assert metrics.calls.answer_rate == pytest.approx(200 / 3)
        assert metrics.texts.sent == 2
        assert metrics.texts.received == 1
        assert metrics.texts.delivery_rate == 50.0
        assert metrics.emails.open_rate == 50.0
        assert metrics.emails.click_rate == 25.0
        assert metrics.emails.failed == 1
        assert metrics.notifications.read_rate == 50.0
        assert metrics.notifications.by_type == {"TICKET": 2}

    def test_latest_announcements_newest_first(self, period):
        announcements = [
            Announcement(
                id=i, content=f"note {i}", is_active=i % 2 == 0, created_at=utc(2024, 6, i)
            )
            for i in range(1, 8)
        ]

        metrics = reducers.reduce_communications(
            CommunicationRecords(announcements=announcements), period, latest_limit=5
        )

        assert [a.id for a in metrics.announcements.latest] == [7, 6, 5, 4, 3]
        assert metrics.announcements.active == 3
        assert metrics.announcements.inactive == 4

    def test_empty_window(self, period):
        metrics = reducers.reduce_communications(CommunicationRecords(), period)

        assert metrics.calls.answer_rate == 0.0
        assert metrics.texts.delivery_rate == 0.0
        assert metrics.announcements.latest == []


# =============================================================================
# Inventory & POS
# =============================================================================


class TestReduceInventory:
    """Tests for reduce_inventory."""

    def test_empty_window_average_is_nan(self, period):
        """Test the average is an unguarded division."""
        metrics = reducers.reduce_inventory(InventoryRecords(), RevenueBreakdown(), period)

        assert math.isnan(metrics.inventory.avg_product_value)
        assert metrics.inventory.total_value == Decimal("0")
        assert metrics.pos.orders.completion_rate == 0.0
        assert metrics.pos.refunds.refund_rate == 0.0

    def test_nan_average_serializes_as_null(self, period):
        metrics = reducers.reduce_inventory(InventoryRecords(), RevenueBreakdown(), period)

        dumped = metrics.model_dump(mode="json")

        assert dumped["inventory"]["avg_product_value"] is None

    def test_catalog_values(self, period):
        """Test missing selling prices count as zero in totals."""
        screens = InventoryCategory(name="Screens")
        items = [
            InventoryItem(
                name="Screen",
                categories=[screens],
                variations=[
                    InventoryVariation(name="Black", sku="A", selling_price=Decimal("10.00")),
                    InventoryVariation(name="White", sku="B", selling_price=None),
                ],
            ),
            InventoryItem(name="Cable", categories=[], variations=[]),
        ]
        records = InventoryRecords(
            items=items,
            audits=[InventoryAudit(discrepancy=-3), InventoryAudit(discrepancy=2)],
            low_stock_count=4,
        )

        metrics = reducers.reduce_inventory(records, RevenueBreakdown(), period)

        assert metrics.inventory.items.total == 2
        assert metrics.inventory.items.by_category == {"Screens": 1}
        assert metrics.inventory.total_value == Decimal("10.00")
        assert metrics.inventory.avg_product_value == 5.0
        assert metrics.inventory.discrepancies == 5
        assert metrics.inventory.low_stock_items == 4
        assert metrics.inventory.product_profit_margin == 0.0

    def test_supplier_ranking_is_stable(self, period):
        first = Vendor(name="First", inventory_items=[])
        second = Vendor(name="Second", inventory_items=[])
        idle = Vendor(name="Idle", inventory_items=[])
        busy = Vendor(name="Busy", inventory_items=[])
        orders = [
            PurchaseOrder(supplier=first, status="PENDING", total_cost=Decimal("100.00")),
            PurchaseOrder(supplier=second, status="RECEIVED", total_cost=Decimal("50.00")),
            PurchaseOrder(supplier=busy, status="APPROVED", total_cost=Decimal("25.00")),
            PurchaseOrder(supplier=busy, status="CANCELLED", total_cost=Decimal("5.00")),
        ]

        metrics = reducers.reduce_inventory(
            InventoryRecords(purchase_orders=orders, suppliers=[first, second, idle, busy]),
            RevenueBreakdown(),
            period,
            top_suppliers_limit=3,
        )

        assert [s.name for s in metrics.suppliers.top_suppliers] == ["Busy", "First", "Second"]
        assert metrics.suppliers.active == 3
        assert metrics.purchase_orders.total_spent == Decimal("180.00")
        assert metrics.purchase_orders.by_supplier == {"First": 1, "Second": 1, "Busy": 2}

    def test_rentals_warranty_and_pos(self, period):
        device = RentalDevice(
            name="Loaner",
            is_available=False,
            rental_orders=[
                RentalOrder(status="ACTIVE", payments=[RentalPayment(amount=Decimal("20.00"))]),
                RentalOrder(status="RETURNED", payments=[RentalPayment(amount=Decimal("15.00"))]),
            ],
        )
        policies = [
            InsurancePolicy(
                status="active",
                premium_amount=Decimal("9.99"),
                claims=[InsuranceClaim(status="OPEN")],
            ),
            InsurancePolicy(status="expired", premium_amount=Decimal("9.99"), claims=[]),
        ]
        orders = [make_order(status="COMPLETED"), make_order(status="PENDING")]
        refunds = [Refund(status="APPROVED", amount=Decimal("12.00"))]

        metrics = reducers.reduce_inventory(
            InventoryRecords(
                rental_devices=[device], policies=policies, orders=orders, refunds=refunds
            ),
            RevenueBreakdown(),
            period,
        )

        assert metrics.rental_devices.active_rentals == 1
        assert metrics.rental_devices.revenue == Decimal("35.00")
        assert metrics.warranty.active_policies == 1
        assert metrics.warranty.claims == 1
        assert metrics.warranty.revenue == Decimal("19.98")
        assert metrics.pos.orders.completion_rate == 50.0
        assert metrics.pos.refunds.refund_rate == 50.0
        assert metrics.pos.invoices.total == 0


# =============================================================================
# Customers & Staff
# =============================================================================


class TestReduceCustomers:
    """Tests for reduce_customers."""

    def test_programs_and_reviews(self, period, now):
        programs = [
            LoyaltyProgram(
                points=100,
                activities=[
                    LoyaltyActivity(type="EARNED", points=50, created_at=utc(2024, 2, 3)),
                    LoyaltyActivity(type="REDEEMED", points=20, created_at=utc(2024, 6, 1)),
                    LoyaltyActivity(type="EARNED", points=5, created_at=utc(2023, 12, 1)),
                ],
                redemptions=[LoyaltyRedemption(points=20, redeemed_at=utc(2024, 6, 1))],
            ),
            LoyaltyProgram(points=10, activities=[], redemptions=[]),
            LoyaltyProgram(points=0, activities=[], redemptions=[]),
        ]
        records = CustomerRecords(
            total_customers=4,
            new_customers=1,
            active_customers=1,
            bookings=[
                Booking(status="SCHEDULED", booking_type="REPAIR", converted_to_ticket=True),
                Booking(status="CANCELLED", booking_type="REPAIR", converted_to_ticket=False),
            ],
            mail_ins=[MailIn(status="RECEIVED", converted_to_ticket=False)],
            tickets=[make_ticket("DONE", completed=True), make_ticket("PENDING")],
            store_credits=[
                StoreCredit(
                    balance=Decimal("30.00"),
                    transactions=[
                        StoreCreditTransaction(transaction_type="earn", amount=Decimal("40.00")),
                        StoreCreditTransaction(transaction_type="deduct", amount=Decimal("10.00")),
                    ],
                ),
                StoreCredit(balance=Decimal("10.00"), transactions=[]),
            ],
            loyalty_programs=programs,
            reviews=[
                Review(rating=5, review_source=ReviewSource(name="Google")),
                Review(rating=4, review_source=ReviewSource(name="Yelp")),
            ],
        )

        metrics = reducers.reduce_customers(records, period, now)
        customers = metrics.customers

        assert customers.activity_rate == 25.0
        assert customers.bookings.conversion_rate == 50.0
        assert customers.bookings.by_type == {"REPAIR": 2}
        assert customers.mail_ins.conversion_rate == 0.0
        assert customers.tickets.completion_rate == 50.0
        assert customers.store_credit.average_balance == Decimal("20.00")
        assert customers.store_credit.transactions.earned == 1
        assert customers.loyalty.total_points == 110
        assert customers.loyalty.points_redeemed == 20
        assert customers.loyalty.redemption_rate == 33
        assert customers.reviews.average_rating == 4.5
        assert customers.reviews.by_rating == {"5": 1, "4": 1}
        assert customers.referrals.total == 0

    def test_loyalty_months_run_through_current_month(self, period, now):
        program = LoyaltyProgram(
            points=0,
            activities=[
                LoyaltyActivity(type="EARNED", points=50, created_at=utc(2024, 2, 3)),
                LoyaltyActivity(type="REDEEMED", points=20, created_at=utc(2024, 6, 1)),
                LoyaltyActivity(type="EARNED", points=5, created_at=utc(2023, 12, 1)),
            ],
            redemptions=[],
        )

        metrics = reducers.reduce_customers(
            CustomerRecords(loyalty_programs=[program]), period, now
        )

        months = metrics.customers.loyalty.monthly_stats
        assert [m.month for m in months] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
        assert months[1].points_earned == 50
        assert months[5].points_redeemed == 20
        assert sum(m.points_earned for m in months) == 50

    def test_empty_programs_are_guarded(self, period, now):
        metrics = reducers.reduce_customers(CustomerRecords(), period, now)

        assert metrics.customers.activity_rate == 0.0
        assert metrics.customers.loyalty.redemption_rate == 0
        assert metrics.customers.store_credit.average_balance == Decimal("0")
        assert metrics.customers.reviews.average_rating == 0.0

    def test_staff_productivity(self, period, now):
        ana = Staff(
            id=1,
            first_name="Ana",
            last_name="Lopez",
            role="Technician",
            availability=None,
            created_at=now - timedelta(days=800),
        )
        ben = Staff(
            id=2,
            first_name="Ben",
            last_name="Ode",
            role="Manager",
            availability="AVAILABLE",
            created_at=now - timedelta(days=30),
        )
        tickets = [
            make_ticket("DONE", staff_id=1),
            make_ticket("DONE", staff_id=2),
            make_ticket("DONE", staff_id=2),
            make_ticket("PENDING", staff_id=99),
        ]
        records = CustomerRecords(
            tickets=tickets,
            staff_profiles=[
                StaffProfile(staff=ana, comment_count=3, note_count=1),
                StaffProfile(staff=ben),
            ],
            active_staff=[ana, ben],
        )

        metrics = reducers.reduce_customers(records, period, now, top_performers_limit=2)
        staff = metrics.staff

        assert [p.staff_id for p in staff.productivity] == [1, 2, 99]
        assert staff.productivity[0].staff_name == "Ana Lopez"
        assert staff.productivity[0].availability == "Unknown"
        assert staff.productivity[0].experience_years == 2
        assert staff.productivity[0].comment_count == 3
        assert staff.productivity[2].staff_name == "Unknown"
        assert staff.productivity[2].experience_years == 0
        assert [p.staff_id for p in staff.top_performers] == [2, 1]
        assert staff.role_distribution == {"Technician": 1, "Manager": 1}
        assert staff.availability_distribution == {"Unknown": 1, "AVAILABLE": 1}


# =============================================================================
# Financial
# =============================================================================


class TestReduceFinancial:
    """Tests for reduce_financial."""

    def test_bills_payroll_goals(self, period):
        sales = GoalCategory(name="Sales")
        records = FinancialRecords(
            bills=[
                Bill(id=1, name="Rent", amount=Decimal("1000.00"), status="PAID"),
                Bill(id=2, name="Power", amount=Decimal("120.50"), status="OVERDUE"),
            ],
            payroll=[
                Payroll(staff_id=1, gross_pay=Decimal("900"), net_pay=Decimal("700.00")),
                Payroll(staff_id=1, gross_pay=Decimal("900"), net_pay=Decimal("700.00")),
                Payroll(staff_id=2, gross_pay=Decimal("500"), net_pay=Decimal("400.00")),
            ],
            goals=[
                Goal(
                    id=1,
                    title="Q2 sales",
                    target_amount=Decimal("100"),
                    current_amount=Decimal("100"),
                    progress=100.0,
                    goal_category=sales,
                ),
                Goal(
                    id=2,
                    title="Upsell",
                    target_amount=Decimal("50"),
                    current_amount=Decimal("10"),
                    progress=20.0,
                    goal_category=sales,
                ),
                Goal(
                    id=3,
                    title="Old",
                    target_amount=Decimal("10"),
                    current_amount=Decimal("0"),
                    progress=0.0,
                    archived_at=utc(2024, 1, 1),
                ),
            ],
        )

        metrics = reducers.reduce_financial(records, period)

        assert metrics.bills.total_amount == Decimal("1120.50")
        assert (metrics.bills.paid, metrics.bills.overdue, metrics.bills.unpaid) == (1, 1, 0)
        assert metrics.payroll.total_payroll == Decimal("1800.00")
        assert metrics.payroll.employee_count == 2
        assert (metrics.goals.completed, metrics.goals.active, metrics.goals.archived) == (1, 1, 1)
        assert metrics.goals.average_progress == pytest.approx(40.0)
        assert metrics.goals.by_category["Sales"].count == 2
        assert metrics.goals.by_category["Sales"].total_target == Decimal("150")
        assert metrics.goals.by_category["Uncategorized"].count == 1

    def test_overview_and_trends_without_ledger(self, period):
        metrics = reducers.reduce_financial(FinancialRecords(), period)

        assert metrics.overview.income == Decimal("0")
        assert metrics.overview.profit_margin == 0.0
        assert metrics.trends.income_change == 0.0
        assert metrics.trends.period_compare.previous.end_date == (
            period.start_date - timedelta(days=1)
        )


# =============================================================================
# Locations
# =============================================================================


class TestReduceLocations:
    """Tests for reduce_locations."""

    @pytest.fixture
    def records(self) -> LocationRecords:
        main = StoreLocation(id=1, name="Main", is_active=True)
        mall = StoreLocation(id=2, name="Mall", is_active=True)
        return LocationRecords(
            locations=[main, mall],
            tickets=[
                make_ticket("DONE", location="Main"),
                make_ticket("DONE", location="Main"),
                make_ticket("DONE", location=None),
            ],
            paid_orders=[
                make_order(("repair", "50.00", 1), store_location=main),
                make_order((None, "5.00", 2), store_location=main),
                make_order(("product", "7.00", 1)),
            ],
            stock_levels=[
                make_stock_level(3, location=main, level_id=1),
                make_stock_level(10, location=main, level_id=2),
                make_stock_level(5, selling_price=None, location=mall, level_id=3),
            ],
        )

    def test_per_location_inventory(self, records, period):
        metrics = reducers.reduce_locations(records, period)

        main, mall = metrics.inventory_by_location
        assert (main.location_name, main.total_stock, main.total_value) == (
            "Main",
            13,
            Decimal("325.00"),
        )
        assert main.low_stock_count == 1
        assert mall.total_value == Decimal("0")
        assert mall.low_stock_count == 0
        assert metrics.location_count == 2

    def test_location_stock_sums_to_global(self, records, period):
        metrics = reducers.reduce_locations(records, period)

        assert sum(loc.total_stock for loc in metrics.inventory_by_location) == sum(
            sl.stock for sl in records.stock_levels
        )

    def test_sales_and_tickets_by_location(self, records, period):
        metrics = reducers.reduce_locations(records, period)

        assert metrics.sales_by_location == {"Main": Decimal("60.00"), "Unknown": Decimal("7.00")}
        assert metrics.tickets_by_location == {"Main": 2, "Unknown": 1}


# =============================================================================
# Transactions & stock health
# =============================================================================


class TestTransactions:
    def test_empty_transaction_analytics(self, period):
        metrics = reducers.empty_transaction_analytics(period)

        assert metrics.transactions == []
        assert metrics.summary.transaction_count == 0
        assert metrics.period == "monthly"


class TestStockHealth:
    """Tests for stock rows and stock totals."""

    def test_zero_stock_row_has_zero_value(self):
        row = reducers.stock_level_row(make_stock_level(0), threshold=5)

        assert row.stock == 0
        assert row.value == Decimal("0")
        assert row.name == "iPhone 13 Screen - Black"
        assert row.category == "Screens"
        assert row.location == "Main Street"
        assert row.threshold == 5

    def test_row_defaults(self):
        row = reducers.stock_level_row(
            make_stock_level(2, purchase_cost=None, item_name=None, category=None)
        )

        assert row.name == "Unknown Item - Black"
        assert row.category == "Uncategorized"
        assert row.value == Decimal("0")

    def test_low_is_not_out_of_stock(self):
        """Test stock 3 with threshold 5 is low stock only."""
        item = InventoryItem(
            name="Battery",
            variations=[
                InventoryVariation(
                    name="Std",
                    sku="BAT",
                    stock_levels=[
                        make_stock_level(3, level_id=1),
                        make_stock_level(0, level_id=2),
                        make_stock_level(8, level_id=3),
                    ],
                )
            ],
        )

        metrics = reducers.reduce_stock_health([item], threshold=5)

        assert metrics.low_stock_count == 1
        assert metrics.out_of_stock_count == 1
        assert metrics.total_stock == 11
        assert metrics.total_value == Decimal("110.00")
        assert metrics.total_items == 1
        assert metrics.total_variations == 1
