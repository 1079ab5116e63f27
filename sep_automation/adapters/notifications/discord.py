"""Discord webhook notifier for sweep summaries."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiohttp

if TYPE_CHECKING:
    from sep_automation.core.sweep import SweepReport

logger = logging.getLogger(__name__)

# Discord embed colours (decimal)
_COLOUR_ACTIONS = 0xFFB347
_COLOUR_ERRORS = 0xFF6B35

_MAX_LINES = 20


class DiscordWebhookNotifier:
    """Post a sweep summary to a Discord incoming webhook.

    Args:
        webhook_url: Discord incoming webhook URL.
        repo: ``owner/name`` used to build issue links.
    """

    def __init__(self, webhook_url: str, repo: str, timeout: float = 15.0):
        if not webhook_url:
            raise ValueError("webhook_url must be provided.")
        self._webhook_url = webhook_url
        self._repo = repo
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def name(self) -> str:
        return "discord"

    def build_payload(self, report: SweepReport) -> dict:
        lines = []
        for action in report.actions[:_MAX_LINES]:
            link = f"[#{action.number}](https://github.com/{self._repo}/issues/{action.number})"
            target = f" → @{action.target}" if action.target else ""
            reason = f": {action.reason}" if action.reason else ""
            lines.append(f"• {action.kind.value} {link}{target}{reason}")
        if len(report.actions) > _MAX_LINES:
            lines.append(f"… and {len(report.actions) - _MAX_LINES} more")
        for error in report.errors[:_MAX_LINES]:
            lines.append(f"⚠️ {error}")

        title = f"SEP sweep: {report.analyzed} analyzed, {len(report.actions)} actions"
        if report.dry_run:
            title += " (dry run)"
        return {
            "embeds": [
                {
                    "title": title,
                    "description": "\n".join(lines) or "No actions.",
                    "color": _COLOUR_ERRORS if report.errors else _COLOUR_ACTIONS,
                }
            ]
        }

    async def send_report(self, report: SweepReport) -> None:
        await self._post_webhook(self.build_payload(report))

    def _get_session(self) -> aiohttp.ClientSession:
        """Return a shared aiohttp session, creating it on first use."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def aclose(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()

    async def _post_webhook(self, payload: dict) -> None:
        session = self._get_session()
        try:
            async with session.post(
                self._webhook_url,
                json=payload,
                headers={"Content-Type": "application/json"},
            ) as resp:
                resp.raise_for_status()
        except Exception:
            # The webhook URL is a credential; SecretRedactingFilter masks it.
            logger.error("Discord webhook post failed for %s", self._webhook_url)
            raise
