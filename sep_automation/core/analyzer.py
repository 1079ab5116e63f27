"""SEP state and staleness analysis.

The analyzer is pure: it works on pre-fetched comments and events and never
talks to the tracker. Staleness is measured from the *responsible person's*
last activity rather than the issue's ``updated_at``, which bot pings and
label changes would keep resetting.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from sep_automation.config import Thresholds
from sep_automation.core.models import (
    BOT_COMMENT_MARKER,
    Comment,
    Event,
    SEPItem,
    SEPState,
    StaleAnalysis,
    UserActivity,
)
from sep_automation.core.policies import StatePolicy, build_state_policies
from sep_automation.core.utils.dates import days_between, utcnow

logger = logging.getLogger(__name__)


class UnownedItemError(ValueError):
    """Raised when a SEP has neither an assignee nor an author."""

    def __init__(self, item: SEPItem):
        super().__init__(f"SEP #{item.number} has no assignees and no author")
        self.item = item


class SEPAnalyzer:
    """Decide whether a SEP needs a ping, or should be closed as dormant.

    Example usage::

        analyzer = SEPAnalyzer(config.thresholds)
        analysis = analyzer.analyze(item, comments, events)
        if analysis.should_ping:
            ...
    """

    def __init__(
        self,
        thresholds: Thresholds,
        *,
        marker: str = BOT_COMMENT_MARKER,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.thresholds = thresholds
        self.marker = marker
        self._clock = clock
        self._policies: dict[SEPState, StatePolicy] = build_state_policies(thresholds)

    def analyze(
        self,
        item: SEPItem,
        comments: Sequence[Comment],
        events: Sequence[Event],
        now: datetime | None = None,
    ) -> StaleAnalysis:
        """Analyze a SEP for staleness and determine required actions.

        Raises:
            UnownedItemError: If no responsible person can be determined.
        """
        now = now or self._clock()

        responsible = self.responsible_username(item)
        last_active = self.last_user_activity(responsible, events, comments) or item.created_at
        days_since_activity = days_between(last_active, now)

        last_ping = self.last_bot_ping(comments)
        if last_ping is not None:
            days_since_ping = days_between(last_ping, now)
            cooldown = self.thresholds.ping_cooldown_days
            if days_since_ping < cooldown:
                logger.debug("SEP #%s: ping cooldown active (%s days)", item.number, days_since_ping)
                return StaleAnalysis.no_action(
                    item,
                    days_since_activity,
                    f"Recently pinged {days_since_ping} days ago (cooldown: {cooldown} days)",
                )

        policy = self._policies.get(item.state)
        if policy is None:
            return StaleAnalysis.no_action(item, days_since_activity)
        return policy.evaluate(item, days_since_activity)

    def check_user_activity(
        self,
        item: SEPItem,
        username: str,
        comments: Sequence[Comment],
        events: Sequence[Event],
        now: datetime | None = None,
    ) -> UserActivity:
        """Check how long a specific participant has been quiet on a SEP."""
        now = now or self._clock()
        last_active = self.last_user_activity(username, events, comments)
        days_since_activity = days_between(last_active or item.created_at, now)
        return UserActivity(
            username=username,
            days_since_activity=days_since_activity,
            should_ping=days_since_activity >= self.thresholds.maintainer_inactivity_days,
            last_active_at=last_active,
        )

    @staticmethod
    def responsible_username(item: SEPItem) -> str:
        """Accepted SEPs belong to the author; otherwise the first assignee leads."""
        if item.state is SEPState.ACCEPTED:
            candidate = item.author
        else:
            candidate = item.assignees[0] if item.assignees else item.author
        if not candidate:
            raise UnownedItemError(item)
        return candidate

    def last_user_activity(
        self,
        username: str,
        events: Sequence[Event],
        comments: Sequence[Comment],
    ) -> datetime | None:
        """Most recent event or non-bot comment by *username*."""
        wanted = username.lower()
        timestamps = [
            event.created_at for event in events if event.actor and event.actor.lower() == wanted
        ]
        timestamps.extend(
            comment.created_at
            for comment in comments
            if self.marker not in (comment.body or "")
            and comment.author
            and comment.author.lower() == wanted
        )
        return max(timestamps, default=None)

    def last_bot_ping(self, comments: Sequence[Comment]) -> datetime | None:
        """Timestamp of the newest marker-bearing comment (comments are oldest first)."""
        for comment in reversed(comments):
            if self.marker in (comment.body or ""):
                return comment.created_at
        return None
