"""Sponsor eligibility resolution.

A sponsor is a maintainer assigned to a SEP. Eligibility comes from a
pluggable :class:`SponsorSource` chosen at construction time:

- :class:`TeamHierarchySource` walks the maintainers team and every team
  nested under it (via parent links) and caches the union of their members.
- :class:`MembershipCheckSource` asks the tracker about one login at a time.
- :class:`StaticSponsorSource` uses a fixed allow-list from configuration.

Set-backed sources load lazily through :class:`SponsorSet`, which keeps a
single pending task so concurrent first queries share one discovery walk.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Awaitable, Callable, Iterable, Sequence
from enum import Enum
from typing import TYPE_CHECKING

from sep_automation.config import Config, SponsorMode

if TYPE_CHECKING:
    from sep_automation.adapters.tracker.base import Team, TrackerClient

logger = logging.getLogger(__name__)


class SponsorDiscoveryError(RuntimeError):
    """Raised when no sponsor could be collected from the authoritative source."""


class SponsorSetState(Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


def normalize_login(login: str) -> str:
    return login.strip().lstrip("@").lower()


class SponsorSet:
    """Lazily built, memoized set of sponsor logins.

    The first :meth:`get` starts the loader; every caller, concurrent or
    later, awaits that same task. A failed load yields an empty set and is
    not retried until :meth:`clear`.
    """

    def __init__(self, loader: Callable[[], Awaitable[Iterable[str]]]):
        self._loader = loader
        # Each task resolves to (members, failed) so a load abandoned by
        # clear() cannot mark its successor as failed.
        self._task: asyncio.Task[tuple[frozenset[str], bool]] | None = None

    @property
    def state(self) -> SponsorSetState:
        if self._task is None:
            return SponsorSetState.UNLOADED
        if not self._task.done():
            return SponsorSetState.LOADING
        _, failed = self._task.result()
        return SponsorSetState.FAILED if failed else SponsorSetState.LOADED

    async def get(self) -> frozenset[str]:
        if self._task is None:
            self._task = asyncio.ensure_future(self._load())
        # Shielded so one cancelled caller does not cancel the shared load.
        members, _ = await asyncio.shield(self._task)
        return members

    def clear(self) -> None:
        """Forget the cached set; the next :meth:`get` rebuilds it."""
        self._task = None

    async def _load(self) -> tuple[frozenset[str], bool]:
        try:
            members = frozenset(normalize_login(login) for login in await self._loader())
        except Exception as exc:
            logger.error("Sponsor set build failed: %s", exc)
            return frozenset(), True
        logger.info("Loaded %d sponsors", len(members))
        return members, False


class SponsorSource(ABC):
    """Answers whether a login may sponsor a SEP."""

    name: str = "sponsor-source"

    @abstractmethod
    async def is_sponsor(self, username: str) -> bool:
        pass

    @abstractmethod
    def clear_cache(self) -> None:
        pass


class _SetSponsorSource(SponsorSource):
    """Source backed by a cached :class:`SponsorSet`."""

    def __init__(self) -> None:
        self.members = SponsorSet(self._collect)

    @abstractmethod
    async def _collect(self) -> Iterable[str]:
        pass

    async def is_sponsor(self, username: str) -> bool:
        return normalize_login(username) in await self.members.get()

    def clear_cache(self) -> None:
        self.members.clear()


class StaticSponsorSource(_SetSponsorSource):
    """Fixed allow-list; must be kept in sync with the maintainers team by hand."""

    name = "static"

    def __init__(self, logins: Iterable[str]):
        self._logins = tuple(logins)
        super().__init__()

    async def _collect(self) -> Iterable[str]:
        return self._logins


class TeamHierarchySource(_SetSponsorSource):
    """Members of a root team and every team nested beneath it.

    Nested teams are found from the org-wide team listing and its parent
    links, which only needs read access to the org rather than permission to
    list a team's children. A team whose member listing fails is skipped;
    if nothing at all is collected, the fallback logins are used when
    configured, otherwise the set stays empty for the session.
    """

    name = "team-hierarchy"

    def __init__(
        self,
        tracker: TrackerClient,
        org: str,
        root_team: str,
        fallback: Iterable[str] | None = None,
    ):
        self._tracker = tracker
        self._org = org
        self._root_team = root_team
        self._fallback = tuple(fallback or ())
        super().__init__()

    async def _collect(self) -> Iterable[str]:
        try:
            return await self._discover()
        except SponsorDiscoveryError as exc:
            if not self._fallback:
                raise
            logger.warning("%s; using %d fallback sponsors", exc, len(self._fallback))
            return self._fallback

    async def _discover(self) -> set[str]:
        slugs = await self.reachable_teams()
        results = await asyncio.gather(
            *(self._tracker.list_team_members(self._org, slug) for slug in slugs),
            return_exceptions=True,
        )

        members: set[str] = set()
        for slug, result in zip(slugs, results):
            if isinstance(result, BaseException):
                logger.warning("Skipping team %s/%s: %s", self._org, slug, result)
                continue
            members.update(result)

        if not members:
            raise SponsorDiscoveryError(
                f"No sponsors found under {self._org}/{self._root_team} ({len(slugs)} teams)"
            )
        return members

    async def reachable_teams(self) -> list[str]:
        """Root team first, then descendants in breadth-first order."""
        try:
            teams = await self._tracker.list_teams(self._org)
        except Exception as exc:
            logger.warning("Could not list teams for %s, using root team only: %s", self._org, exc)
            return [self._root_team]
        return team_descendants(teams, self._root_team)


def team_descendants(teams: Sequence[Team], root: str) -> list[str]:
    """Slugs of *root* and all teams whose parent chain leads to it."""
    children: dict[str, list[str]] = {}
    for team in teams:
        if team.parent_slug:
            children.setdefault(team.parent_slug, []).append(team.slug)

    ordered = [root]
    seen = {root}
    queue = deque([root])
    while queue:
        for child in children.get(queue.popleft(), []):
            if child not in seen:
                seen.add(child)
                ordered.append(child)
                queue.append(child)
    return ordered


class MembershipCheckSource(SponsorSource):
    """One membership lookup per login, memoized for the session."""

    name = "membership"

    def __init__(self, tracker: TrackerClient, org: str, team: str):
        self._tracker = tracker
        self._org = org
        self._team = team
        self._checks: dict[str, asyncio.Task[bool]] = {}

    async def is_sponsor(self, username: str) -> bool:
        login = normalize_login(username)
        task = self._checks.get(login)
        if task is None:
            task = asyncio.ensure_future(self._tracker.is_team_member(self._org, self._team, login))
            self._checks[login] = task
        return await asyncio.shield(task)

    def clear_cache(self) -> None:
        self._checks.clear()


class SponsorResolver:
    """Decide which assignee, if any, sponsors a SEP."""

    def __init__(self, source: SponsorSource):
        self.source = source

    async def can_sponsor(self, username: str) -> bool:
        """True when *username* may sponsor; source failures count as False."""
        if not username:
            return False
        try:
            return await self.source.is_sponsor(username)
        except Exception as exc:
            logger.error("Sponsor check for %s via %s failed: %s", username, self.source.name, exc)
            return False

    async def get_sponsor(self, assignees: Sequence[str]) -> str | None:
        """First assignee, in assignment order, who can sponsor."""
        for assignee in assignees:
            if await self.can_sponsor(assignee):
                return assignee
        return None

    def clear_cache(self) -> None:
        self.source.clear_cache()


def build_sponsor_resolver(config: Config, tracker: TrackerClient) -> SponsorResolver:
    """Select the sponsor source configured for this deployment."""
    if config.sponsor_mode is SponsorMode.STATIC:
        source: SponsorSource = StaticSponsorSource(config.fallback_sponsors)
    elif config.sponsor_mode is SponsorMode.MEMBERSHIP:
        source = MembershipCheckSource(tracker, config.target_owner, config.maintainers_team)
    else:
        source = TeamHierarchySource(
            tracker,
            config.target_owner,
            config.maintainers_team,
            fallback=config.fallback_sponsors,
        )
    logger.debug("Sponsor resolution via %s", source.name)
    return SponsorResolver(source)
