"""Per-state staleness policies.

Each lifecycle state that the automation acts on has its own policy object
carrying only the thresholds it needs. States without a policy are left
alone.
"""

from dataclasses import dataclass
from typing import Union

from sep_automation.config import Thresholds
from sep_automation.core.models import PingTarget, SEPItem, SEPState, StaleAnalysis


@dataclass(frozen=True)
class ProposalPolicy:
    """Proposals without progress are pinged, then closed as dormant."""

    ping_days: int
    dormant_days: int

    def evaluate(self, item: SEPItem, days_since_activity: int) -> StaleAnalysis:
        # Dormancy first: a proposal past both thresholds is closed, not pinged.
        if days_since_activity >= self.dormant_days:
            return StaleAnalysis.dormant(
                item,
                days_since_activity,
                f"Proposal inactive for {days_since_activity} days (threshold: {self.dormant_days})",
            )
        if days_since_activity >= self.ping_days:
            return StaleAnalysis.ping(
                item,
                days_since_activity,
                PingTarget.AUTHOR,
                f"Proposal inactive for {days_since_activity} days (threshold: {self.ping_days})",
            )
        return StaleAnalysis.no_action(item, days_since_activity)


@dataclass(frozen=True)
class DraftPolicy:
    """Drafts are driven by their sponsor."""

    ping_days: int

    def evaluate(self, item: SEPItem, days_since_activity: int) -> StaleAnalysis:
        if days_since_activity >= self.ping_days:
            return StaleAnalysis.ping(
                item,
                days_since_activity,
                PingTarget.SPONSOR,
                f"Draft inactive for {days_since_activity} days (threshold: {self.ping_days})",
            )
        return StaleAnalysis.no_action(item, days_since_activity)


@dataclass(frozen=True)
class AcceptedPolicy:
    """Accepted SEPs wait on the author's reference implementation."""

    ping_days: int

    def evaluate(self, item: SEPItem, days_since_activity: int) -> StaleAnalysis:
        if days_since_activity >= self.ping_days:
            return StaleAnalysis.ping(
                item,
                days_since_activity,
                PingTarget.AUTHOR,
                f"Accepted SEP inactive for {days_since_activity} days - "
                "awaiting reference implementation",
            )
        return StaleAnalysis.no_action(item, days_since_activity)


StatePolicy = Union[ProposalPolicy, DraftPolicy, AcceptedPolicy]


def build_state_policies(thresholds: Thresholds) -> dict[SEPState, StatePolicy]:
    """Map each actionable state to its policy."""
    return {
        SEPState.PROPOSAL: ProposalPolicy(
            ping_days=thresholds.proposal_ping_days,
            dormant_days=thresholds.proposal_dormant_days,
        ),
        SEPState.DRAFT: DraftPolicy(ping_days=thresholds.draft_ping_days),
        SEPState.ACCEPTED: AcceptedPolicy(ping_days=thresholds.accepted_ping_days),
    }
