"""Logging setup with credential redaction."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
REDACTED = "[REDACTED]"


class SecretRedactingFilter(logging.Filter):
    """Replace configured secrets (tokens, webhook URLs) in log messages and args."""

    def __init__(self, secrets: Iterable[str | None]):
        super().__init__()
        # Longest first so a token embedded in a URL does not leave a partial match.
        self._secrets = sorted({s for s in secrets if s}, key=len, reverse=True)

    def redact(self, value: Any) -> Any:
        if isinstance(value, str):
            for secret in self._secrets:
                value = value.replace(secret, REDACTED)
            return value
        if isinstance(value, tuple):
            return tuple(self.redact(item) for item in value)
        if isinstance(value, list):
            return [self.redact(item) for item in value]
        if isinstance(value, dict):
            return {key: self.redact(item) for key, item in value.items()}
        return value

    def filter(self, record: logging.LogRecord) -> bool:
        # Formatting is left to the handler, which reports bad format args itself.
        if self._secrets:
            record.msg = self.redact(record.msg)
            record.args = self.redact(record.args)
        return True


def configure_logging(level: str | int = "INFO", secrets: Iterable[str | None] = ()) -> logging.Logger:
    """Configure the root logger and attach secret redaction to its handlers."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(format=LOG_FORMAT, level=level)
    root = logging.getLogger()
    root.setLevel(level)

    redaction_filter = SecretRedactingFilter(secrets)
    for handler in root.handlers:
        handler.addFilter(redaction_filter)
    return root
