"""Integration tests for analytics fetchers (requires PostgreSQL).

Run with: uv run pytest app/features/analytics/tests/test_fetchers_integration.py -v -m integration
"""

from decimal import Decimal

import pytest

from app.features.analytics import fetchers
from app.features.analytics.period import resolve_period
from app.features.analytics.revenue import classify_revenue
from app.features.shop.models import (
    InventoryItem,
    InventoryStockLevel,
    InventoryVariation,
    Order,
    OrderItem,
    StoreLocation,
)

pytestmark = pytest.mark.integration


async def _seed_catalog(db_session) -> tuple[StoreLocation, StoreLocation]:
    open_shop = StoreLocation(name="Main Street", is_active=True)
    closed_shop = StoreLocation(name="Old Mall", is_active=False)
    item = InventoryItem(name="iPhone 13 Screen")
    db_session.add_all([open_shop, closed_shop, item])
    await db_session.flush()

    for sku, stock, location in [
        ("SCR-1", 0, open_shop),
        ("SCR-2", 3, open_shop),
        ("SCR-3", 9, open_shop),
        ("SCR-4", 1, closed_shop),
    ]:
        variation = InventoryVariation(
            inventory_item_id=item.id, name=sku, sku=sku, selling_price=Decimal("25.00")
        )
        db_session.add(variation)
        await db_session.flush()
        db_session.add(
            InventoryStockLevel(
                variation_id=variation.id,
                location_id=location.id,
                stock=stock,
                purchase_cost=Decimal("10.00"),
            )
        )
    await db_session.flush()
    return open_shop, closed_shop


@pytest.mark.asyncio
async def test_paid_orders_feed_revenue(db_session):
    paid = Order(status="PAID")
    paid.items = [
        OrderItem(name="Screen repair", item_type="repair", price=Decimal("100.00"), quantity=1),
        OrderItem(name="Case", item_type=None, price=Decimal("15.00"), quantity=2),
    ]
    pending = Order(status="PENDING")
    pending.items = [OrderItem(name="Battery", item_type="repair", price=Decimal("80.00"))]
    db_session.add_all([paid, pending])
    await db_session.flush()

    orders = await fetchers.fetch_paid_orders(db_session, resolve_period("monthly"))
    revenue = classify_revenue(orders)

    assert [order.id for order in orders] == [paid.id]
    assert revenue.income_from_repairs == Decimal("100.00")
    assert revenue.income_from_products == Decimal("30.00")


@pytest.mark.asyncio
async def test_low_stock_levels_skip_inactive_locations(db_session):
    open_shop, _ = await _seed_catalog(db_session)

    levels = await fetchers.fetch_low_stock_levels(db_session, threshold=5, limit=20)

    assert [level.stock for level in levels] == [0, 3]
    assert all(level.location_id == open_shop.id for level in levels)
    assert levels[0].variation.inventory_item.name == "iPhone 13 Screen"


@pytest.mark.asyncio
async def test_out_of_stock_levels(db_session):
    await _seed_catalog(db_session)

    levels = await fetchers.fetch_out_of_stock_levels(db_session, limit=20)

    assert [level.variation.sku for level in levels] == ["SCR-1"]
