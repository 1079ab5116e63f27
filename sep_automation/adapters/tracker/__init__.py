"""Item tracker adapters."""

from sep_automation.adapters.tracker.base import (
    Team,
    TrackerClient,
    TrackerError,
    TrackerNotFoundError,
)
from sep_automation.adapters.tracker.github import GitHubTracker

__all__ = [
    "GitHubTracker",
    "Team",
    "TrackerClient",
    "TrackerError",
    "TrackerNotFoundError",
]
