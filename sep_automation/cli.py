import argparse
import asyncio
import sys
from dataclasses import replace

from dotenv import load_dotenv

from sep_automation.adapters.notifications import DiscordWebhookNotifier
from sep_automation.adapters.tracker import GitHubTracker
from sep_automation.config import Config, ConfigError, load_config
from sep_automation.core.analyzer import SEPAnalyzer
from sep_automation.core.sponsors import build_sponsor_resolver
from sep_automation.core.sweep import StaleSweep
from sep_automation.core.utils.logging_filters import configure_logging


async def _run_sweep(config: Config) -> int:
    tracker = GitHubTracker(config.repo, token=config.github_token)
    notifier = None
    if config.discord_webhook_url:
        notifier = DiscordWebhookNotifier(config.discord_webhook_url, config.repo)
    sweep = StaleSweep(
        config,
        tracker,
        SEPAnalyzer(config.thresholds),
        build_sponsor_resolver(config, tracker),
        notifier=notifier,
    )
    try:
        report = await sweep.run()
    finally:
        if notifier is not None:
            await notifier.aclose()

    prefix = "[dry-run] " if report.dry_run else ""
    for action in report.actions:
        target = f" @{action.target}" if action.target else ""
        print(f"{prefix}#{action.number} {action.kind.value}{target}: {action.reason}")
    print(f"{report.analyzed} SEPs analyzed, {len(report.actions)} actions, {len(report.errors)} errors")
    return 1 if report.errors else 0


async def _run_analyze(config: Config, number: int) -> int:
    tracker = GitHubTracker(config.repo, token=config.github_token)
    item = await tracker.get_item(number)
    comments, events = await asyncio.gather(tracker.get_comments(number), tracker.get_events(number))
    analysis = SEPAnalyzer(config.thresholds).analyze(item, comments, events)
    print(f"SEP #{item.number} ({item.state.value}): {item.title}")
    print(f"  days since activity: {analysis.days_since_activity}")
    print(f"  ping: {analysis.should_ping} ({analysis.ping_target.value if analysis.ping_target else '-'})")
    print(f"  dormant/close: {analysis.should_close}")
    print(f"  reason: {analysis.reason or '-'}")
    return 0


async def _run_check_user(config: Config, number: int, username: str) -> int:
    tracker = GitHubTracker(config.repo, token=config.github_token)
    item = await tracker.get_item(number)
    comments, events = await asyncio.gather(tracker.get_comments(number), tracker.get_events(number))
    activity = SEPAnalyzer(config.thresholds).check_user_activity(item, username, comments, events)
    print(
        f"@{activity.username} on SEP #{number}: {activity.days_since_activity} days inactive"
        f"{' (stale)' if activity.should_ping else ''}"
    )
    return 0


async def _run_can_sponsor(config: Config, username: str) -> int:
    resolver = build_sponsor_resolver(config, GitHubTracker(config.repo, token=config.github_token))
    allowed = await resolver.can_sponsor(username)
    print(f"@{username} {'can' if allowed else 'cannot'} sponsor SEPs")
    return 0 if allowed else 1


def main(argv=None):
    parser = argparse.ArgumentParser(description="SEP lifecycle automation")
    parser.add_argument("--config", help="YAML settings file (overrides SEP_AUTOMATION_CONFIG)")
    parser.add_argument("--log-level", help="Logging level (default: LOG_LEVEL or INFO)")
    subparsers = parser.add_subparsers(dest="command")

    sweep_parser = subparsers.add_parser("sweep", help="Ping stale SEPs and close dormant proposals")
    sweep_parser.add_argument("--dry-run", action="store_true", help="Report actions without applying them")

    analyze_parser = subparsers.add_parser("analyze", help="Show the staleness decision for one SEP")
    analyze_parser.add_argument("number", type=int)

    user_parser = subparsers.add_parser("check-user", help="Show a participant's inactivity on a SEP")
    user_parser.add_argument("number", type=int)
    user_parser.add_argument("username")

    sponsor_parser = subparsers.add_parser("can-sponsor", help="Check whether a user may sponsor SEPs")
    sponsor_parser.add_argument("username")

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    load_dotenv()
    try:
        config = load_config(config_path=args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    configure_logging(args.log_level or config.log_level, secrets=config.secrets)

    if args.command == "sweep":
        if args.dry_run:
            config = replace(config, dry_run=True)
        return asyncio.run(_run_sweep(config))
    if args.command == "analyze":
        return asyncio.run(_run_analyze(config, args.number))
    if args.command == "check-user":
        return asyncio.run(_run_check_user(config, args.number, args.username))
    return asyncio.run(_run_can_sponsor(config, args.username))


if __name__ == "__main__":
    sys.exit(main())
