"""Stale SEP sweep: fetch, analyze, act.

The sweep is the caller of the analyzer. It fetches every open SEP with its
comments and events, asks :class:`SEPAnalyzer` for a decision and carries
the decision out through the tracker (or only records it in dry-run mode).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from sep_automation.adapters.tracker.base import TrackerClient, TrackerError
from sep_automation.config import Config
from sep_automation.core.analyzer import SEPAnalyzer, UnownedItemError
from sep_automation.core.messages import build_dormant_comment, build_ping_comment
from sep_automation.core.models import PingTarget, SEPItem, StaleAnalysis
from sep_automation.core.sponsors import SponsorResolver

logger = logging.getLogger(__name__)


class ActionKind(Enum):
    PING = "ping"
    DORMANT = "dormant"


@dataclass
class SweepAction:
    """One action taken (or planned, in dry-run) for a SEP."""

    number: int
    kind: ActionKind
    reason: str | None
    target: str | None = None
    comment_url: str | None = None
    dry_run: bool = False


@dataclass
class SweepReport:
    analyzed: int = 0
    actions: list[SweepAction] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    dry_run: bool = False

    def count(self, kind: ActionKind) -> int:
        return sum(1 for action in self.actions if action.kind is kind)


class ReportNotifier(Protocol):
    async def send_report(self, report: SweepReport) -> None: ...


class StaleSweep:
    """Run the staleness policy over all open SEPs."""

    def __init__(
        self,
        config: Config,
        tracker: TrackerClient,
        analyzer: SEPAnalyzer,
        resolver: SponsorResolver,
        notifier: ReportNotifier | None = None,
    ):
        self.config = config
        self.tracker = tracker
        self.analyzer = analyzer
        self.resolver = resolver
        self.notifier = notifier

    async def run(self) -> SweepReport:
        report = SweepReport(dry_run=self.config.dry_run)
        items = await self.tracker.list_sep_items(self.config.sep_label)
        logger.info("Checking %d open SEPs in %s", len(items), self.config.repo)

        for item in items:
            report.analyzed += 1
            try:
                action = await self.process_item(item)
            except (TrackerError, UnownedItemError) as exc:
                logger.error("SEP #%s: %s", item.number, exc)
                report.errors.append(f"#{item.number}: {exc}")
                continue
            if action is not None:
                report.actions.append(action)

        logger.info(
            "Sweep finished: %d analyzed, %d pinged, %d closed, %d errors",
            report.analyzed,
            report.count(ActionKind.PING),
            report.count(ActionKind.DORMANT),
            len(report.errors),
        )

        if self.notifier is not None and report.actions:
            try:
                await self.notifier.send_report(report)
            except Exception as exc:
                logger.warning("Failed to send sweep report: %s", exc)
        return report

    async def analyze_item(self, item: SEPItem) -> StaleAnalysis:
        comments, events = await asyncio.gather(
            self.tracker.get_comments(item.number),
            self.tracker.get_events(item.number),
        )
        return self.analyzer.analyze(item, comments, events)

    async def process_item(self, item: SEPItem) -> SweepAction | None:
        analysis = await self.analyze_item(item)
        if not analysis.requires_action:
            if analysis.reason:
                logger.debug("SEP #%s: %s", item.number, analysis.reason)
            return None
        if analysis.should_close:
            return await self._close_dormant(analysis)
        return await self._ping(analysis)

    async def resolve_ping_recipient(self, analysis: StaleAnalysis) -> str | None:
        item = analysis.item
        if analysis.ping_target is PingTarget.AUTHOR:
            return item.author
        sponsor = await self.resolver.get_sponsor(item.assignees)
        if sponsor is None and item.assignees:
            logger.warning(
                "SEP #%s: no assignee is an eligible sponsor, pinging %s",
                item.number,
                item.assignees[0],
            )
            return item.assignees[0]
        return sponsor

    async def _ping(self, analysis: StaleAnalysis) -> SweepAction | None:
        item = analysis.item
        recipient = await self.resolve_ping_recipient(analysis)
        if not recipient:
            # Nothing is posted, so this repeats every sweep; keep it out of the report.
            logger.warning("SEP #%s: nobody to ping (%s)", item.number, analysis.ping_target)
            return None

        action = SweepAction(
            item.number, ActionKind.PING, analysis.reason, target=recipient, dry_run=self.config.dry_run
        )
        if self.config.dry_run:
            logger.info("[dry-run] would ping @%s on SEP #%s: %s", recipient, item.number, analysis.reason)
            return action

        body = build_ping_comment(analysis, recipient, self.config.thresholds.proposal_dormant_days)
        action.comment_url = await self.tracker.add_comment(item.number, body)
        logger.info("Pinged @%s on SEP #%s", recipient, item.number)
        return action

    async def _close_dormant(self, analysis: StaleAnalysis) -> SweepAction:
        item = analysis.item
        action = SweepAction(item.number, ActionKind.DORMANT, analysis.reason, dry_run=self.config.dry_run)
        if self.config.dry_run:
            logger.info("[dry-run] would close SEP #%s as dormant: %s", item.number, analysis.reason)
            return action

        # Close first: until it succeeds the item keeps its state label and
        # carries no marker comment, so the next sweep retries the close.
        await self.tracker.close_issue(item.number)
        action.comment_url = await self.tracker.add_comment(
            item.number, build_dormant_comment(analysis, self.config.dormant_label)
        )
        await self.tracker.add_labels(item.number, [self.config.dormant_label])
        for label in item.labels:
            if label.lower() == item.state.value:
                await self.tracker.remove_label(item.number, label)
        logger.info("Closed SEP #%s as dormant", item.number)
        return action
