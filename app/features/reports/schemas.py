"""Pydantic schemas for the reports feature."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ReportType(str, Enum):
    """Exportable report types."""

    REPAIRS = "repairs"
    INVENTORY = "inventory"
    CUSTOMERS = "customers"
    COMMUNICATIONS = "communications"
    FINANCIAL = "financial"
    LOCATIONS = "locations"
    SALES = "sales"
    STAFF_PERFORMANCE = "staff-performance"
    TICKET_SUMMARY = "ticket-summary"
    CALL_METRICS = "call-metrics"
    COMPREHENSIVE = "comprehensive"


class ReportRow(BaseModel):
    """One flattened metric, ready for a spreadsheet cell."""

    model_config = ConfigDict(frozen=True)

    metric: str = Field(description="Underscore-joined path to the metric")
    value: str = Field(description="Stringified metric value")
