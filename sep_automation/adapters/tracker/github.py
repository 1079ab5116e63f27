"""GitHub tracker adapter using the gh CLI."""

import asyncio
import json
import logging
import os
import subprocess
from typing import Any

from sep_automation.adapters.tracker.base import (
    Team,
    TrackerClient,
    TrackerError,
    TrackerNotFoundError,
)
from sep_automation.core.models import Comment, Event, SEPItem, SEPState
from sep_automation.core.utils.dates import parse_timestamp

logger = logging.getLogger(__name__)

_ISSUE_FIELDS = (
    "{number, title, author: .user.login, assignees: [.assignees[].login], "
    "labels: [.labels[].name], created_at, html_url}"
)
_ISSUE_JQ = f".[] | {_ISSUE_FIELDS}"
_SEARCH_JQ = f".items[] | {_ISSUE_FIELDS}"
_COMMENT_JQ = ".[] | {author: .user.login, body, created_at}"
_EVENT_JQ = ".[] | {actor: .actor.login, event, created_at}"
_TEAM_JQ = ".[] | {slug, name, parent: .parent.slug}"


class GitHubTracker(TrackerClient):
    """GitHub issues/teams through ``gh api``."""

    def __init__(self, repo: str, token: str | None = None, timeout: int = 60):
        """
        Args:
            repo: Repository in format "owner/name".
            token: Optional GitHub token (uses gh CLI auth if not provided).
            timeout: Seconds allowed for a single gh invocation.
        """
        self.repo = repo
        self.token = token
        self.timeout = timeout

    # ------------------------------------------------------------------
    # gh helpers (sync + asyncio.to_thread wrapper)
    # ------------------------------------------------------------------

    def _sync_gh(self, args: list[str]) -> str:
        env = None
        if self.token:
            env = os.environ.copy()
            env["GH_TOKEN"] = self.token

        cmd = ["gh", "api", *args]
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=self.timeout, check=True, env=env
            )
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            if "HTTP 404" in stderr:
                raise TrackerNotFoundError(stderr) from exc
            logger.error("gh api %s failed: %s", args[-1] if args else "", stderr)
            raise TrackerError(f"GitHub CLI error: {stderr}") from exc
        except subprocess.TimeoutExpired as exc:
            logger.error("gh api timed out after %ss", self.timeout)
            raise TrackerError("GitHub CLI command timed out") from exc
        except FileNotFoundError as exc:
            raise TrackerError("gh CLI not found. Install from https://cli.github.com/") from exc
        return result.stdout.strip()

    async def _gh(self, *args: str) -> str:
        return await asyncio.to_thread(self._sync_gh, list(args))

    async def _gh_lines(self, path: str, jq: str, *extra: str) -> list[Any]:
        """Paginated GET whose ``--jq`` projection emits one JSON value per line."""
        output = await self._gh("--method", "GET", "--paginate", path, *extra, "--jq", jq)
        return [json.loads(line) for line in output.splitlines() if line.strip()]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_sep_items(self, label: str) -> list[SEPItem]:
        """Open items labelled *label*, plus open items with *label* in the title."""
        labeled, titled = await asyncio.gather(
            self._gh_lines(
                f"/repos/{self.repo}/issues",
                _ISSUE_JQ,
                "-f", f"labels={label}",
                "-f", "state=open",
                "-f", "per_page=100",
            ),
            self._gh_lines(
                "search/issues",
                _SEARCH_JQ,
                "-f", f"q=repo:{self.repo} {label} in:title is:open",
                "-f", "per_page=100",
            ),
        )
        items: dict[int, SEPItem] = {}
        for row in [*labeled, *titled]:
            item = self._to_item(row)
            items.setdefault(item.number, item)
        logger.debug("Found %d labelled and %d titled SEPs", len(labeled), len(titled))
        return list(items.values())

    async def get_item(self, number: int) -> SEPItem:
        output = await self._gh(f"/repos/{self.repo}/issues/{number}", "--jq", _ISSUE_FIELDS)
        return self._to_item(json.loads(output))

    async def get_comments(self, number: int) -> list[Comment]:
        rows = await self._gh_lines(
            f"/repos/{self.repo}/issues/{number}/comments", _COMMENT_JQ, "-f", "per_page=100"
        )
        comments = [
            Comment(
                author=row.get("author"),
                body=row.get("body") or "",
                created_at=parse_timestamp(row["created_at"]),
            )
            for row in rows
        ]
        comments.sort(key=lambda comment: comment.created_at)
        return comments

    async def get_events(self, number: int) -> list[Event]:
        rows = await self._gh_lines(
            f"/repos/{self.repo}/issues/{number}/events", _EVENT_JQ, "-f", "per_page=100"
        )
        return [
            Event(
                actor=row.get("actor"),
                created_at=parse_timestamp(row["created_at"]),
                event=row.get("event") or "",
            )
            for row in rows
        ]

    async def is_team_member(self, org: str, team: str, username: str) -> bool:
        try:
            state = await self._gh(
                f"/orgs/{org}/teams/{team}/memberships/{username}", "--jq", ".state"
            )
        except TrackerNotFoundError:
            return False
        return state == "active"

    async def list_teams(self, org: str) -> list[Team]:
        rows = await self._gh_lines(f"/orgs/{org}/teams", _TEAM_JQ, "-f", "per_page=100")
        return [
            Team(slug=row["slug"], name=row.get("name") or "", parent_slug=row.get("parent"))
            for row in rows
        ]

    async def list_team_members(self, org: str, team: str) -> list[str]:
        rows = await self._gh_lines(
            f"/orgs/{org}/teams/{team}/members", ".[].login", "-f", "per_page=100"
        )
        return [str(login) for login in rows]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_comment(self, number: int, body: str) -> str:
        return await self._gh(
            "--method", "POST",
            f"/repos/{self.repo}/issues/{number}/comments",
            "-f", f"body={body}",
            "--jq", ".html_url",
        )

    async def add_labels(self, number: int, labels: list[str]) -> None:
        args = ["--method", "POST", f"/repos/{self.repo}/issues/{number}/labels"]
        for label in labels:
            args.extend(["-f", f"labels[]={label}"])
        await self._gh(*args, "--silent")

    async def remove_label(self, number: int, label: str) -> None:
        try:
            await self._gh(
                "--method", "DELETE", f"/repos/{self.repo}/issues/{number}/labels/{label}", "--silent"
            )
        except TrackerNotFoundError:
            logger.debug("Label %s not present on #%s", label, number)

    async def close_issue(self, number: int) -> None:
        await self._gh(
            "--method", "PATCH", f"/repos/{self.repo}/issues/{number}", "-f", "state=closed", "--silent"
        )

    # ------------------------------------------------------------------
    # Model converters
    # ------------------------------------------------------------------

    @staticmethod
    def _to_item(data: dict[str, Any]) -> SEPItem:
        labels = tuple(data.get("labels") or ())
        return SEPItem(
            number=int(data["number"]),
            title=data.get("title") or "",
            state=SEPState.from_labels(labels),
            author=data.get("author"),
            assignees=tuple(data.get("assignees") or ()),
            created_at=parse_timestamp(data["created_at"]),
            url=data.get("html_url") or "",
            labels=labels,
        )
