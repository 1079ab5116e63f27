"""
SEP Automation - lifecycle governance for Specification Enhancement Proposals.

Pings authors and sponsors of stalled SEPs and closes proposals that went
dormant.
"""

__version__ = "0.1.0"

from sep_automation.config import Config, ConfigError, SponsorMode, Thresholds, load_config
from sep_automation.core import (
    BOT_COMMENT_MARKER,
    Comment,
    Event,
    PingTarget,
    SEPAnalyzer,
    SEPItem,
    SEPState,
    SponsorResolver,
    StaleAnalysis,
    StaleSweep,
    UnownedItemError,
    UserActivity,
    build_sponsor_resolver,
)
from sep_automation.adapters.tracker import GitHubTracker, TrackerClient, TrackerError

__all__ = [
    # Version
    "__version__",
    # Config
    "Config",
    "ConfigError",
    "SponsorMode",
    "Thresholds",
    "load_config",
    # Analysis
    "SEPAnalyzer",
    "UnownedItemError",
    "StaleSweep",
    # Sponsors
    "SponsorResolver",
    "build_sponsor_resolver",
    # Models
    "BOT_COMMENT_MARKER",
    "Comment",
    "Event",
    "PingTarget",
    "SEPItem",
    "SEPState",
    "StaleAnalysis",
    "UserActivity",
    # Adapters
    "GitHubTracker",
    "TrackerClient",
    "TrackerError",
]
