"""Tests for configuration loading."""

import logging

import pytest

from sep_automation.config import (
    ConfigError,
    SponsorMode,
    Thresholds,
    load_config,
)


def test_requires_github_token():
    with pytest.raises(ConfigError, match="Required environment variable GITHUB_TOKEN is not set"):
        load_config(env={})


def test_defaults():
    config = load_config(env={"GITHUB_TOKEN": "test-token"})

    assert config.github_token == "test-token"
    assert config.target_owner == "modelcontextprotocol"
    assert config.target_repo == "modelcontextprotocol"
    assert config.repo == "modelcontextprotocol/modelcontextprotocol"
    assert config.maintainers_team == "core-maintainers"
    assert config.thresholds == Thresholds()
    assert config.thresholds.proposal_ping_days == 90
    assert config.thresholds.proposal_dormant_days == 180
    assert config.thresholds.ping_cooldown_days == 14
    assert config.sponsor_mode is SponsorMode.TEAM_HIERARCHY
    assert config.dry_run is False
    assert config.discord_webhook_url is None


def test_env_overrides():
    config = load_config(
        env={
            "GITHUB_TOKEN": "test-token",
            "TARGET_OWNER": "custom-owner",
            "TARGET_REPO": "custom-repo",
            "PROPOSAL_PING_DAYS": "60",
            "DRY_RUN": "true",
            "DISCORD_WEBHOOK_URL": "https://discord.com/webhook",
            "SPONSOR_MODE": "membership",
            "FALLBACK_SPONSORS": "alice, @bob,",
        }
    )

    assert config.target_owner == "custom-owner"
    assert config.target_repo == "custom-repo"
    assert config.thresholds.proposal_ping_days == 60
    assert config.dry_run is True
    assert config.discord_webhook_url == "https://discord.com/webhook"
    assert config.sponsor_mode is SponsorMode.MEMBERSHIP
    assert config.fallback_sponsors == ("alice", "bob")
    assert config.secrets == ("test-token", "https://discord.com/webhook")


def test_non_numeric_threshold_is_fatal():
    with pytest.raises(ConfigError, match="must be a number"):
        load_config(env={"GITHUB_TOKEN": "t", "PROPOSAL_PING_DAYS": "not-a-number"})


def test_negative_threshold_is_fatal():
    with pytest.raises(ConfigError, match=">= 0"):
        load_config(env={"GITHUB_TOKEN": "t", "PING_COOLDOWN_DAYS": "-1"})


def test_unknown_sponsor_mode():
    with pytest.raises(ConfigError, match="sponsor mode"):
        load_config(env={"GITHUB_TOKEN": "t", "SPONSOR_MODE": "magic"})


def test_static_mode_requires_fallback():
    with pytest.raises(ConfigError, match="fallback"):
        load_config(env={"GITHUB_TOKEN": "t", "SPONSOR_MODE": "static"})


def test_yaml_file_with_env_precedence(tmp_path):
    path = tmp_path / "sep.yaml"
    path.write_text(
        "target_repo: specs\n"
        "dry_run: true\n"
        "thresholds:\n"
        "  draft_ping_days: 45\n"
        "  accepted_ping_days: 20\n"
        "sponsors:\n"
        "  mode: static\n"
        "  fallback: [alice, bob]\n",
        encoding="utf-8",
    )

    config = load_config(
        env={"GITHUB_TOKEN": "t", "ACCEPTED_PING_DAYS": "25", "SEP_AUTOMATION_CONFIG": str(path)}
    )

    assert config.target_repo == "specs"
    assert config.dry_run is True
    assert config.thresholds.draft_ping_days == 45
    assert config.thresholds.accepted_ping_days == 25
    assert config.sponsor_mode is SponsorMode.STATIC
    assert config.fallback_sponsors == ("alice", "bob")


def test_yaml_unknown_threshold(tmp_path):
    path = tmp_path / "sep.yaml"
    path.write_text("thresholds:\n  stale_days: 3\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Unknown threshold"):
        load_config(env={"GITHUB_TOKEN": "t"}, config_path=str(path))


def test_missing_yaml_file(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(env={"GITHUB_TOKEN": "t"}, config_path=str(tmp_path / "missing.yaml"))


def test_inverted_proposal_thresholds_warn(caplog):
    with caplog.at_level(logging.WARNING, logger="sep_automation.config"):
        config = load_config(
            env={"GITHUB_TOKEN": "t", "PROPOSAL_PING_DAYS": "200", "PROPOSAL_DORMANT_DAYS": "100"}
        )

    assert config.thresholds.proposal_dormant_days == 100
    assert "should exceed" in caplog.text
