"""Factories for transient ORM records used by analytics tests."""

from datetime import datetime
from decimal import Decimal

from app.features.shop.models import (
    InventoryCategory,
    InventoryItem,
    InventoryStockLevel,
    InventoryVariation,
    Order,
    OrderItem,
    Quote,
    StoreLocation,
    Ticket,
)


def make_order(*lines: tuple[str | None, str, int], status: str = "PAID", **kwargs) -> Order:
    """Build an order from ``(item_type, price, quantity)`` lines."""
    return Order(
        status=status,
        items=[
            OrderItem(name=f"line-{i}", item_type=item_type, price=Decimal(price), quantity=qty)
            for i, (item_type, price, qty) in enumerate(lines)
        ],
        **kwargs,
    )


def make_ticket(status: str, completed: bool = False, **kwargs) -> Ticket:
    """Build a ticket with no devices unless given."""
    kwargs.setdefault("repair_devices", [])
    return Ticket(status=status, completed=completed, **kwargs)


def make_quote(expires_at: datetime, converted: bool = False, brand: str = "Apple") -> Quote:
    return Quote(brand=brand, converted_to_ticket=converted, expires_at=expires_at)


def make_stock_level(
    stock: int,
    purchase_cost: str | None = "10.00",
    selling_price: str | None = "25.00",
    item_name: str | None = "iPhone 13 Screen",
    variation_name: str = "Black",
    category: str | None = "Screens",
    location: StoreLocation | None = None,
    level_id: int = 1,
) -> InventoryStockLevel:
    """Build a stock level with its variation, item and location attached."""
    location = location or StoreLocation(id=1, name="Main Street", is_active=True)
    item = None
    if item_name is not None:
        item = InventoryItem(
            name=item_name,
            categories=[InventoryCategory(name=category)] if category else [],
        )
    variation = InventoryVariation(
        name=variation_name,
        sku=f"SKU-{level_id}",
        selling_price=Decimal(selling_price) if selling_price is not None else None,
        visible=True,
        inventory_item=item,
    )
    return InventoryStockLevel(
        id=level_id,
        stock=stock,
        purchase_cost=Decimal(purchase_cost) if purchase_cost is not None else None,
        variation=variation,
        location=location,
        location_id=location.id,
    )
