"""Tests for log secret redaction."""

import logging

from sep_automation.core.utils.logging_filters import REDACTED, SecretRedactingFilter


def _record(msg, *args):
    return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)


def test_redacts_formatted_arguments():
    log_filter = SecretRedactingFilter(["ghp_secret", None, ""])
    record = _record("token=%s repo=%s", "ghp_secret", "owner/repo")

    assert log_filter.filter(record) is True
    assert record.getMessage() == f"token={REDACTED} repo=owner/repo"


def test_longest_secret_wins():
    url = "https://discord.com/api/webhooks/1/abc"
    log_filter = SecretRedactingFilter(["abc", url])

    assert log_filter.redact(f"post to {url}") == f"post to {REDACTED}"


def test_untouched_record_keeps_args():
    log_filter = SecretRedactingFilter(["ghp_secret"])
    record = _record("checked %d SEPs", 4)

    log_filter.filter(record)

    assert record.args == (4,)


def test_mismatched_format_args_do_not_raise_in_filter():
    log_filter = SecretRedactingFilter(["ghp_secret"])
    record = _record("token=%s repo=%s", "ghp_secret")

    assert log_filter.filter(record) is True
    assert record.args == (REDACTED,)


def test_redacts_nested_args():
    log_filter = SecretRedactingFilter(["ghp_secret"])
    record = _record("headers=%s", {"Authorization": "token ghp_secret"})

    log_filter.filter(record)

    assert record.getMessage() == f"headers={{'Authorization': 'token {REDACTED}'}}"
