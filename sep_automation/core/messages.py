"""Comment bodies posted by the sweep.

Every body starts with the bot marker so the analyzer can recognise its own
comments.
"""

from sep_automation.core.models import BOT_COMMENT_MARKER, PingTarget, SEPState, StaleAnalysis

_PING_BODIES = {
    SEPState.PROPOSAL: (
        "This proposal has had no activity from you for {days} days. "
        "Is it still being worked on? Proposals need a sponsor to move forward; "
        "without activity it will be marked dormant and closed after {dormant_days} days."
    ),
    SEPState.DRAFT: (
        "As sponsor, could you share an update on this draft? "
        "There has been no sponsor activity for {days} days."
    ),
    SEPState.ACCEPTED: (
        "This SEP was accepted but has seen no activity for {days} days. "
        "Is the reference implementation in progress?"
    ),
}

_FALLBACK_PING = "There has been no activity here for {days} days. Is this still being worked on?"


def build_ping_comment(analysis: StaleAnalysis, login: str, dormant_days: int) -> str:
    """Ping addressed to *login* (the author or the sponsor)."""
    template = _PING_BODIES.get(analysis.item.state, _FALLBACK_PING)
    text = template.format(days=analysis.days_since_activity, dormant_days=dormant_days)
    role = "sponsor" if analysis.ping_target is PingTarget.SPONSOR else "author"
    return f"{BOT_COMMENT_MARKER}\n@{login} ({role}): {text}"


def build_dormant_comment(analysis: StaleAnalysis, dormant_label: str) -> str:
    """Closing notice for a proposal that went dormant."""
    return (
        f"{BOT_COMMENT_MARKER}\n"
        f"This proposal has been inactive for {analysis.days_since_activity} days and did not "
        f"find a sponsor. It is being marked `{dormant_label}` and closed. "
        "It can be reopened once someone is ready to pick it up again."
    )
