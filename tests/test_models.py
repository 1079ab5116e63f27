"""Tests for SEP models and per-state policies."""

from datetime import UTC, datetime

import pytest

from sep_automation.config import Thresholds
from sep_automation.core.models import PingTarget, SEPItem, SEPState, StaleAnalysis
from sep_automation.core.policies import (
    AcceptedPolicy,
    DraftPolicy,
    ProposalPolicy,
    build_state_policies,
)

ITEM = SEPItem(
    number=7,
    title="SEP-7",
    state=SEPState.PROPOSAL,
    author="alice",
    assignees=(),
    created_at=datetime(2025, 1, 1, tzinfo=UTC),
)


class TestSEPState:
    def test_from_labels_matches_case_insensitively(self):
        assert SEPState.from_labels(["SEP", "Draft"]) is SEPState.DRAFT
        assert SEPState.from_labels(["in-review"]) is SEPState.IN_REVIEW

    def test_unlabeled_sep_is_proposal(self):
        assert SEPState.from_labels(["SEP", "enhancement"]) is SEPState.PROPOSAL


class TestStaleAnalysisValidation:
    def test_dormant_requires_close(self):
        with pytest.raises(ValueError):
            StaleAnalysis(item=ITEM, days_since_activity=1, should_mark_dormant=True)

    def test_ping_cannot_accompany_close(self):
        with pytest.raises(ValueError):
            StaleAnalysis(
                item=ITEM,
                days_since_activity=1,
                should_ping=True,
                should_mark_dormant=True,
                should_close=True,
                ping_target=PingTarget.AUTHOR,
            )

    def test_ping_requires_target(self):
        with pytest.raises(ValueError):
            StaleAnalysis(item=ITEM, days_since_activity=1, should_ping=True)

    def test_negative_days_rejected(self):
        with pytest.raises(ValueError):
            StaleAnalysis.no_action(ITEM, -1)

    def test_constructors(self):
        assert StaleAnalysis.dormant(ITEM, 200, "r").requires_action is True
        assert StaleAnalysis.ping(ITEM, 100, PingTarget.AUTHOR, "r").should_ping is True
        assert StaleAnalysis.no_action(ITEM, 3).requires_action is False


class TestPolicies:
    def test_build_state_policies_carries_thresholds(self):
        policies = build_state_policies(
            Thresholds(proposal_ping_days=10, proposal_dormant_days=20, draft_ping_days=5, accepted_ping_days=3)
        )

        assert policies[SEPState.PROPOSAL] == ProposalPolicy(ping_days=10, dormant_days=20)
        assert policies[SEPState.DRAFT] == DraftPolicy(ping_days=5)
        assert policies[SEPState.ACCEPTED] == AcceptedPolicy(ping_days=3)
        assert SEPState.FINAL not in policies

    def test_proposal_dormant_checked_before_ping(self):
        # Misconfigured thresholds: dormant below ping still closes.
        policy = ProposalPolicy(ping_days=100, dormant_days=50)

        assert policy.evaluate(ITEM, 120).should_close is True

    def test_draft_below_threshold(self):
        assert DraftPolicy(ping_days=90).evaluate(ITEM, 89).requires_action is False
