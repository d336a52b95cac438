"""Shared building blocks used across features."""

from app.shared.models import TimestampMixin

__all__ = ["TimestampMixin"]
