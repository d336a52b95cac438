"""Analytics module for repair-shop back-office reporting.

This module resolves analytics windows, classifies paid-order revenue and
reduces each business domain (repairs, communications, inventory & POS,
customers & staff, financial, locations) into metrics.
"""

from app.features.analytics.period import AnalyticsPeriod, Period, resolve_period
from app.features.analytics.revenue import classify_revenue
from app.features.analytics.routes import router
from app.features.analytics.schemas import ComprehensiveReport, RevenueBreakdown
from app.features.analytics.service import AnalyticsService

__all__ = [
    "AnalyticsPeriod",
    "AnalyticsService",
    "ComprehensiveReport",
    "Period",
    "RevenueBreakdown",
    "classify_revenue",
    "resolve_period",
    "router",
]
