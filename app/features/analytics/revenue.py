"""Revenue classification for paid orders."""

from collections.abc import Iterable
from decimal import Decimal

from app.features.analytics.schemas import RevenueBreakdown
from app.features.shop.models import Order

REVENUE_BUCKETS = ("repair", "service", "product", "custom")

# Lines with no (or an unknown) item type are sold goods
DEFAULT_BUCKET = "product"


def line_total(price: Decimal | None, quantity: int | None) -> Decimal:
    """Extended price of an order line."""
    return (price or Decimal("0")) * (quantity or 0)


def classify_revenue(orders: Iterable[Order]) -> RevenueBreakdown:
    """Split paid-order income into repair, service, product and custom buckets.

    Args:
        orders: Paid orders for the window, with their items loaded.

    Returns:
        Revenue breakdown. Profit fields stay zero.
    """
    totals = dict.fromkeys(REVENUE_BUCKETS, Decimal("0"))

    for order in orders:
        for item in order.items:
            bucket = item.item_type if item.item_type in totals else DEFAULT_BUCKET
            totals[bucket] += line_total(item.price, item.quantity)

    return RevenueBreakdown(
        income_from_repairs=totals["repair"],
        income_from_services=totals["service"],
        income_from_products=totals["product"],
        income_from_custom=totals["custom"],
        total_income=sum(totals.values(), Decimal("0")),
    )
