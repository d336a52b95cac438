#!/usr/bin/env python
"""Walk through the analytics and report endpoints.

Usage:
    uv run python examples/analytics_demo.py

This script demonstrates:
1. Revenue and per-domain analytics for a period
2. The comprehensive snapshot and dashboard summary
3. Stock health listings
4. CSV and flat-row report exports

Prerequisites:
    - PostgreSQL running (docker-compose up -d)
    - API running (uv run uvicorn app.main:app --reload --port 8123)
"""

import json
import sys
from typing import Any

import httpx

API_BASE = "http://localhost:8123"


def print_section(title: str) -> None:
    """Print a section header."""
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}\n")


def print_response(response: httpx.Response, label: str = "") -> Any:
    """Print HTTP response details."""
    content_type = response.headers.get("content-type", "")
    data = response.json() if "json" in content_type else {}
    status_mark = "✓" if response.status_code < 400 else "✗"
    print(f"{status_mark} {label} [{response.status_code}]")
    if data:
        print(json.dumps(data, indent=2, default=str)[:1200])
    return data


def main() -> int:
    """Run the analytics demo."""
    print_section("RepairDesk - Analytics Demo")

    client = httpx.Client(base_url=API_BASE, timeout=30)

    try:
        health = client.get("/health")
        if health.status_code != 200:
            print(f"API not healthy: {health.status_code}")
            return 1
    except httpx.ConnectError:
        print(f"Cannot connect to API at {API_BASE}")
        print("Start the API with: uv run uvicorn app.main:app --reload --port 8123")
        return 1

    print("✓ API is healthy\n")

    # ==========================================================================
    # Step 1: Revenue and repairs
    # ==========================================================================
    print_section("Step 1: Revenue and Repairs (monthly)")

    revenue = print_response(client.get("/analytics/revenue"), "GET /analytics/revenue")
    print(f"\n→ Total income: {revenue.get('total_income')}")

    repairs = print_response(client.get("/analytics/repairs"), "GET /analytics/repairs")
    if repairs:
        print(f"\n→ Completion rate: {repairs['tickets']['completion_rate']}%")

    # ==========================================================================
    # Step 2: Custom window
    # ==========================================================================
    print_section("Step 2: Financial Analytics for a Custom Window")

    response = client.get(
        "/analytics/financial",
        params={
            "period": "custom",
            "start_date": "2024-01-01T00:00:00Z",
            "end_date": "2024-03-31T23:59:59Z",
        },
    )
    financial = print_response(response, "GET /analytics/financial?period=custom")
    if financial:
        print(f"\n→ Profit margin: {financial['overview']['profit_margin']:.2f}%")

    # ==========================================================================
    # Step 3: Comprehensive snapshot and dashboard
    # ==========================================================================
    print_section("Step 3: Comprehensive Snapshot")

    response = client.get("/analytics/comprehensive", params={"period": "quarterly"})
    report = print_response(response, "GET /analytics/comprehensive")
    if report:
        distribution = report["business_metrics"]["service_distribution"]
        print(f"\n→ Repairs share: {distribution['repairs']:.1f}%")
        print(f"→ Sales share: {distribution['sales_division']:.1f}%")

    dashboard = print_response(client.get("/analytics/dashboard"), "GET /analytics/dashboard")
    if dashboard:
        print(f"\n→ Active tickets: {dashboard['active_tickets']}")
        print(f"→ Low stock: {dashboard['low_stock_count']}")

    # ==========================================================================
    # Step 4: Stock health
    # ==========================================================================
    print_section("Step 4: Stock Health")

    low = client.get("/analytics/stock/low", params={"threshold": 3, "limit": 5})
    for row in print_response(low, "GET /analytics/stock/low") or []:
        print(f"  {row['name']:<40} {row['location']:<20} stock={row['stock']}")

    print_response(client.get("/analytics/stock/metrics"), "GET /analytics/stock/metrics")

    # ==========================================================================
    # Step 5: Reports
    # ==========================================================================
    print_section("Step 5: Report Exports")

    response = client.get("/reports/repairs")
    print(f"GET /reports/repairs [{response.status_code}]")
    print(f"→ {response.headers.get('content-disposition')}\n")
    print(response.text)

    response = client.get("/reports/call-metrics/rows", params={"period": "weekly"})
    for row in print_response(response, "GET /reports/call-metrics/rows") or []:
        print(f"  {row['key']} = {row['value']}")

    print_section("Demo Complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
