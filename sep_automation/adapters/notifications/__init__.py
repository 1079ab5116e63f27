"""Notification adapters."""

from sep_automation.adapters.notifications.discord import DiscordWebhookNotifier

__all__ = ["DiscordWebhookNotifier"]
