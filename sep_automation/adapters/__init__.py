"""Adapters for external systems (issue tracker, notifications)."""
