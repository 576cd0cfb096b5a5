"""Shared test fixtures."""

from .records import AuditEntry, DemoStruct, FakeClock, Session, Widget

__all__ = [
    "DemoStruct",
    "Widget",
    "AuditEntry",
    "Session",
    "FakeClock",
]
