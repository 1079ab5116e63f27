"""Staleness analysis and sponsor resolution."""

from sep_automation.core.analyzer import SEPAnalyzer, UnownedItemError
from sep_automation.core.models import (
    BOT_COMMENT_MARKER,
    Comment,
    Event,
    PingTarget,
    SEPItem,
    SEPState,
    StaleAnalysis,
    UserActivity,
)
from sep_automation.core.policies import (
    AcceptedPolicy,
    DraftPolicy,
    ProposalPolicy,
    build_state_policies,
)
from sep_automation.core.sponsors import (
    MembershipCheckSource,
    SponsorDiscoveryError,
    SponsorResolver,
    SponsorSet,
    SponsorSetState,
    SponsorSource,
    StaticSponsorSource,
    TeamHierarchySource,
    build_sponsor_resolver,
)
from sep_automation.core.sweep import ActionKind, StaleSweep, SweepAction, SweepReport

__all__ = [
    # Analysis
    "SEPAnalyzer",
    "UnownedItemError",
    "AcceptedPolicy",
    "DraftPolicy",
    "ProposalPolicy",
    "build_state_policies",
    # Models
    "BOT_COMMENT_MARKER",
    "Comment",
    "Event",
    "PingTarget",
    "SEPItem",
    "SEPState",
    "StaleAnalysis",
    "UserActivity",
    # Sponsors
    "MembershipCheckSource",
    "SponsorDiscoveryError",
    "SponsorResolver",
    "SponsorSet",
    "SponsorSetState",
    "SponsorSource",
    "StaticSponsorSource",
    "TeamHierarchySource",
    "build_sponsor_resolver",
    # Sweep
    "ActionKind",
    "StaleSweep",
    "SweepAction",
    "SweepReport",
]
