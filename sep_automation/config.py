"""Configuration for SEP automation.

Settings are resolved from built-in defaults, an optional YAML file and
environment variables, in increasing order of precedence. Any invalid value
raises :class:`ConfigError` before analysis starts.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "SEP_AUTOMATION_CONFIG"

DEFAULT_TARGET_OWNER = "modelcontextprotocol"
DEFAULT_TARGET_REPO = "modelcontextprotocol"
DEFAULT_MAINTAINERS_TEAM = "core-maintainers"
DEFAULT_SEP_LABEL = "SEP"
DEFAULT_DORMANT_LABEL = "dormant"

# Used when the team hierarchy cannot be read (e.g. a token without
# read:org). Must be kept in sync with the maintainers team by hand.
DEFAULT_FALLBACK_SPONSORS: tuple[str, ...] = ()

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """Raised when configuration is missing or invalid."""


class SponsorMode(Enum):
    """How sponsor eligibility is resolved."""

    TEAM_HIERARCHY = "team-hierarchy"
    MEMBERSHIP = "membership"
    STATIC = "static"


@dataclass(frozen=True)
class Thresholds:
    """Day counts driving the staleness policy."""

    proposal_ping_days: int = 90
    proposal_dormant_days: int = 180
    draft_ping_days: int = 90
    accepted_ping_days: int = 30
    ping_cooldown_days: int = 14
    maintainer_inactivity_days: int = 90


# env var -> Thresholds field
THRESHOLD_ENV_VARS = {
    "PROPOSAL_PING_DAYS": "proposal_ping_days",
    "PROPOSAL_DORMANT_DAYS": "proposal_dormant_days",
    "DRAFT_PING_DAYS": "draft_ping_days",
    "ACCEPTED_PING_DAYS": "accepted_ping_days",
    "PING_COOLDOWN_DAYS": "ping_cooldown_days",
    "MAINTAINER_INACTIVITY_DAYS": "maintainer_inactivity_days",
}


@dataclass(frozen=True)
class Config:
    github_token: str
    target_owner: str = DEFAULT_TARGET_OWNER
    target_repo: str = DEFAULT_TARGET_REPO
    maintainers_team: str = DEFAULT_MAINTAINERS_TEAM
    thresholds: Thresholds = field(default_factory=Thresholds)
    sponsor_mode: SponsorMode = SponsorMode.TEAM_HIERARCHY
    fallback_sponsors: tuple[str, ...] = DEFAULT_FALLBACK_SPONSORS
    sep_label: str = DEFAULT_SEP_LABEL
    dormant_label: str = DEFAULT_DORMANT_LABEL
    dry_run: bool = False
    discord_webhook_url: str | None = None
    log_level: str = "INFO"

    @property
    def repo(self) -> str:
        return f"{self.target_owner}/{self.target_repo}"

    @property
    def secrets(self) -> tuple[str, ...]:
        """Values that must never appear in logs."""
        return tuple(value for value in (self.github_token, self.discord_webhook_url) if value)


def _require_env(env: Mapping[str, str], name: str) -> str:
    value = str(env.get(name) or "").strip()
    if not value:
        raise ConfigError(f"Required environment variable {name} is not set")
    return value


def _parse_days(name: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{name} must be >= 0, got {value}")
    return value


def _parse_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    normalized = str(raw).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _parse_sponsor_mode(raw: Any) -> SponsorMode:
    try:
        return SponsorMode(str(raw).strip().lower())
    except ValueError:
        allowed = ", ".join(mode.value for mode in SponsorMode)
        raise ConfigError(f"sponsor mode must be one of: {allowed} (got {raw!r})") from None


def _parse_logins(raw: Any) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        items = raw
    else:
        raise ConfigError(f"sponsor fallback must be a list or comma-separated string, got {raw!r}")
    return tuple(str(item).strip().lstrip("@") for item in items if str(item).strip())


def load_yaml_config(path: str) -> dict[str, Any]:
    """Read a YAML settings file into a mapping."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _thresholds_from_mapping(base: Thresholds, payload: Any) -> Thresholds:
    if payload is None:
        return base
    if not isinstance(payload, dict):
        raise ConfigError("thresholds must be a mapping")

    known = {f.name for f in fields(Thresholds)}
    updates: dict[str, int] = {}
    for key, raw in payload.items():
        if key not in known:
            raise ConfigError(f"Unknown threshold: {key}")
        updates[key] = _parse_days(f"thresholds.{key}", raw)
    return replace(base, **updates)


def load_config(
    env: Mapping[str, str] | None = None,
    config_path: str | None = None,
) -> Config:
    """Build a :class:`Config` from YAML (optional) and the environment.

    Raises:
        ConfigError: When ``GITHUB_TOKEN`` is missing or any value is invalid.
    """
    env = os.environ if env is None else env
    token = _require_env(env, "GITHUB_TOKEN")

    path = config_path or env.get(CONFIG_PATH_ENV)
    file_settings = load_yaml_config(path) if path else {}

    thresholds = _thresholds_from_mapping(Thresholds(), file_settings.get("thresholds"))
    env_thresholds = {
        attr: _parse_days(name, env[name]) for name, attr in THRESHOLD_ENV_VARS.items() if name in env
    }
    thresholds = replace(thresholds, **env_thresholds)

    sponsors = file_settings.get("sponsors") or {}
    if not isinstance(sponsors, dict):
        raise ConfigError("sponsors must be a mapping")

    def pick(env_name: str, file_key: str, default: Any, source: Mapping[str, Any] = file_settings) -> Any:
        if env.get(env_name) not in (None, ""):
            return env[env_name]
        value = source.get(file_key)
        return default if value is None else value

    webhook = str(pick("DISCORD_WEBHOOK_URL", "discord_webhook_url", "") or "").strip()

    config = Config(
        github_token=token,
        target_owner=str(pick("TARGET_OWNER", "target_owner", DEFAULT_TARGET_OWNER)),
        target_repo=str(pick("TARGET_REPO", "target_repo", DEFAULT_TARGET_REPO)),
        maintainers_team=str(pick("MAINTAINERS_TEAM", "maintainers_team", DEFAULT_MAINTAINERS_TEAM)),
        thresholds=thresholds,
        sponsor_mode=_parse_sponsor_mode(
            pick("SPONSOR_MODE", "mode", SponsorMode.TEAM_HIERARCHY.value, source=sponsors)
        ),
        fallback_sponsors=_parse_logins(
            pick("FALLBACK_SPONSORS", "fallback", DEFAULT_FALLBACK_SPONSORS, source=sponsors)
        ),
        sep_label=str(pick("SEP_LABEL", "sep_label", DEFAULT_SEP_LABEL)),
        dormant_label=str(pick("DORMANT_LABEL", "dormant_label", DEFAULT_DORMANT_LABEL)),
        dry_run=_parse_bool("DRY_RUN", pick("DRY_RUN", "dry_run", False)),
        discord_webhook_url=webhook or None,
        log_level=str(pick("LOG_LEVEL", "log_level", "INFO")).upper(),
    )

    if config.sponsor_mode is SponsorMode.STATIC and not config.fallback_sponsors:
        raise ConfigError("sponsor mode 'static' requires at least one fallback sponsor")
    if thresholds.proposal_dormant_days <= thresholds.proposal_ping_days:
        logger.warning(
            "proposal_dormant_days (%s) should exceed proposal_ping_days (%s); "
            "stale proposals will be closed without a prior ping",
            thresholds.proposal_dormant_days,
            thresholds.proposal_ping_days,
        )
    return config
