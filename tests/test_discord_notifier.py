"""Tests for the Discord sweep-report notifier."""

from unittest.mock import AsyncMock

import pytest

from sep_automation.adapters.notifications.discord import DiscordWebhookNotifier
from sep_automation.core.sweep import ActionKind, SweepAction, SweepReport


def _notifier():
    return DiscordWebhookNotifier("https://discord.com/api/webhooks/1/abc", "owner/repo")


def test_requires_webhook_url():
    with pytest.raises(ValueError):
        DiscordWebhookNotifier("", "owner/repo")


def test_payload_lists_actions():
    report = SweepReport(
        analyzed=4,
        actions=[
            SweepAction(3, ActionKind.PING, "Draft inactive for 95 days (threshold: 90)", target="carol"),
            SweepAction(5, ActionKind.DORMANT, "Proposal inactive for 200 days (threshold: 180)"),
        ],
    )

    embed = _notifier().build_payload(report)["embeds"][0]

    assert embed["title"] == "SEP sweep: 4 analyzed, 2 actions"
    lines = embed["description"].splitlines()
    assert lines[0] == (
        "• ping [#3](https://github.com/owner/repo/issues/3) → @carol: "
        "Draft inactive for 95 days (threshold: 90)"
    )
    assert lines[1].startswith("• dormant [#5]")
    assert "@" not in lines[1]


def test_payload_truncates_and_flags_errors():
    report = SweepReport(
        analyzed=30,
        actions=[SweepAction(n, ActionKind.PING, None, target="alice") for n in range(25)],
        errors=["#99: boom"],
        dry_run=True,
    )

    embed = _notifier().build_payload(report)["embeds"][0]
    lines = embed["description"].splitlines()

    assert embed["title"].endswith("(dry run)")
    assert "… and 5 more" in lines
    assert lines[-1] == "⚠️ #99: boom"
    assert len([line for line in lines if line.startswith("•")]) == 20


@pytest.mark.asyncio
async def test_send_report_posts_payload():
    notifier = _notifier()
    notifier._post_webhook = AsyncMock()
    report = SweepReport(analyzed=1, actions=[SweepAction(1, ActionKind.PING, "r", target="a")])

    await notifier.send_report(report)

    notifier._post_webhook.assert_awaited_once_with(notifier.build_payload(report))


@pytest.mark.asyncio
async def test_aclose_without_session_is_noop():
    await _notifier().aclose()
