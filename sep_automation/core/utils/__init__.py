"""Shared helpers for SEP automation."""

from sep_automation.core.utils.dates import days_between, parse_timestamp, utcnow
from sep_automation.core.utils.logging_filters import SecretRedactingFilter, configure_logging

__all__ = [
    "days_between",
    "parse_timestamp",
    "utcnow",
    "SecretRedactingFilter",
    "configure_logging",
]
