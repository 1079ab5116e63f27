"""Core data models for SEP lifecycle automation."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

# Embedded in every comment the automation posts. Comments carrying it are
# never counted as human activity and mark the last ping for cooldown.
BOT_COMMENT_MARKER = "<!-- sep-automation-bot -->"


class SEPState(Enum):
    """Lifecycle state of a SEP."""

    PROPOSAL = "proposal"
    DRAFT = "draft"
    IN_REVIEW = "in-review"
    ACCEPTED = "accepted"
    FINAL = "final"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    SUPERSEDED = "superseded"
    DORMANT = "dormant"

    @classmethod
    def from_labels(cls, labels: Iterable[str]) -> "SEPState":
        """Derive the state from issue labels; unlabeled SEPs are proposals."""
        by_value = {state.value: state for state in cls}
        for label in labels:
            state = by_value.get(str(label).strip().lower())
            if state is not None:
                return state
        return cls.PROPOSAL


class PingTarget(Enum):
    """Who a ping comment is addressed to."""

    AUTHOR = "author"
    SPONSOR = "sponsor"


@dataclass(frozen=True)
class SEPItem:
    """A SEP issue/PR snapshot taken for one analysis pass."""

    number: int
    title: str
    state: SEPState
    author: str | None
    assignees: tuple[str, ...]
    created_at: datetime
    url: str = ""
    labels: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Comment:
    """Issue comment."""

    author: str | None
    body: str
    created_at: datetime


@dataclass(frozen=True)
class Event:
    """Issue timeline event (labeled, assigned, referenced, ...)."""

    actor: str | None
    created_at: datetime
    event: str = ""


@dataclass(frozen=True)
class StaleAnalysis:
    """Decision for one SEP.

    ``should_mark_dormant`` and ``should_close`` always travel together, and a
    ping never accompanies them.
    """

    item: SEPItem
    days_since_activity: int
    should_ping: bool = False
    should_mark_dormant: bool = False
    should_close: bool = False
    ping_target: PingTarget | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        if self.days_since_activity < 0:
            raise ValueError("days_since_activity must be >= 0")
        if self.should_mark_dormant != self.should_close:
            raise ValueError("should_mark_dormant and should_close must be set together")
        if self.should_ping and self.should_close:
            raise ValueError("a SEP being closed cannot also be pinged")
        if self.should_ping != (self.ping_target is not None):
            raise ValueError("ping_target must be set exactly when should_ping is true")

    @classmethod
    def no_action(
        cls, item: SEPItem, days_since_activity: int, reason: str | None = None
    ) -> "StaleAnalysis":
        return cls(item=item, days_since_activity=days_since_activity, reason=reason)

    @classmethod
    def ping(
        cls, item: SEPItem, days_since_activity: int, target: PingTarget, reason: str
    ) -> "StaleAnalysis":
        return cls(
            item=item,
            days_since_activity=days_since_activity,
            should_ping=True,
            ping_target=target,
            reason=reason,
        )

    @classmethod
    def dormant(cls, item: SEPItem, days_since_activity: int, reason: str) -> "StaleAnalysis":
        return cls(
            item=item,
            days_since_activity=days_since_activity,
            should_mark_dormant=True,
            should_close=True,
            reason=reason,
        )

    @property
    def requires_action(self) -> bool:
        return self.should_ping or self.should_close


@dataclass(frozen=True)
class UserActivity:
    """Activity summary for a specific participant on a SEP."""

    username: str
    days_since_activity: int
    should_ping: bool
    last_active_at: datetime | None = None
