"""Base interface for the SEP item tracker (GitHub issues and teams)."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from sep_automation.core.models import Comment, Event, SEPItem


class TrackerError(RuntimeError):
    """Raised when a tracker call fails."""


class TrackerNotFoundError(TrackerError):
    """Raised when the requested resource does not exist (HTTP 404)."""


@dataclass(frozen=True)
class Team:
    """Organization team with its parent link."""

    slug: str
    name: str = ""
    parent_slug: str | None = None


class TrackerClient(ABC):
    """Capabilities the automation needs from the item tracker."""

    @abstractmethod
    async def list_sep_items(self, label: str) -> list[SEPItem]:
        """List open SEP items: labelled with *label* or titled with it, each once."""
        pass

    @abstractmethod
    async def get_item(self, number: int) -> SEPItem:
        """Fetch a single item by number."""
        pass

    @abstractmethod
    async def get_comments(self, number: int) -> list[Comment]:
        """All comments on an item, oldest first."""
        pass

    @abstractmethod
    async def get_events(self, number: int) -> list[Event]:
        """All timeline events on an item."""
        pass

    @abstractmethod
    async def is_team_member(self, org: str, team: str, username: str) -> bool:
        """Direct, active membership of *username* in *team*."""
        pass

    @abstractmethod
    async def list_teams(self, org: str) -> list[Team]:
        """Every team in *org*, with parent links."""
        pass

    @abstractmethod
    async def list_team_members(self, org: str, team: str) -> list[str]:
        """Logins of the direct members of *team*."""
        pass

    @abstractmethod
    async def add_comment(self, number: int, body: str) -> str:
        """Post a comment; returns its URL."""
        pass

    @abstractmethod
    async def add_labels(self, number: int, labels: list[str]) -> None:
        """Add labels to an item."""
        pass

    @abstractmethod
    async def remove_label(self, number: int, label: str) -> None:
        """Remove a label; a label that is not present is ignored."""
        pass

    @abstractmethod
    async def close_issue(self, number: int) -> None:
        """Close an item."""
        pass
