"""Tests for environment-driven settings."""

import pytest

from most_replayed.config import Settings


def test_defaults_without_environment() -> None:
    """An empty environment gives the built-in defaults."""
    settings = Settings.from_env({})

    assert settings == Settings()
    assert settings.headless is True
    assert settings.max_retries == 3


def test_reads_prefixed_variables() -> None:
    """Prefixed variables override the defaults."""
    settings = Settings.from_env(
        {
            "MOST_REPLAYED_HEADLESS": "false",
            "MOST_REPLAYED_LOCALE": "ja-JP",
            "MOST_REPLAYED_NAVIGATION_TIMEOUT_MS": "45000",
            "MOST_REPLAYED_SELECTOR_TIMEOUT_MS": "2500",
            "MOST_REPLAYED_MAX_RETRIES": "5",
            "MOST_REPLAYED_AD_MAX_WAIT_MS": "10000",
            "MOST_REPLAYED_AD_POLL_INTERVAL_MS": "500",
        }
    )

    assert settings.headless is False
    assert settings.locale == "ja-JP"
    assert settings.navigation_timeout_ms == 45000
    assert settings.selector_timeout_ms == 2500
    assert settings.max_retries == 5
    assert settings.ad_max_wait_ms == 10000
    assert settings.ad_poll_interval_ms == 500


@pytest.mark.parametrize("raw", ["abc", "-1", "1.5"])
def test_invalid_integers_fall_back(raw: str) -> None:
    """Unparseable or negative values keep the default."""
    settings = Settings.from_env({"MOST_REPLAYED_MAX_RETRIES": raw})

    assert settings.max_retries == 3


@pytest.mark.parametrize(
    "name",
    ["NAVIGATION_TIMEOUT_MS", "SELECTOR_TIMEOUT_MS", "AD_POLL_INTERVAL_MS"],
)
def test_zero_timeouts_and_intervals_fall_back(name: str) -> None:
    """Zero would mean an unbounded wait, so the default is kept."""
    settings = Settings.from_env({f"MOST_REPLAYED_{name}": "0"})

    assert settings == Settings()


def test_zero_retries_and_ad_wait_are_allowed() -> None:
    """Disabling retries or the ad wait is a valid choice."""
    settings = Settings.from_env(
        {"MOST_REPLAYED_MAX_RETRIES": "0", "MOST_REPLAYED_AD_MAX_WAIT_MS": "0"}
    )

    assert settings.max_retries == 0
    assert settings.ad_max_wait_ms == 0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("YES", True), ("off", False), ("0", False), ("maybe", True)],
)
def test_boolean_parsing(raw: str, expected: bool) -> None:
    """Common boolean spellings are accepted, anything else keeps the default."""
    assert Settings.from_env({"MOST_REPLAYED_HEADLESS": raw}).headless is expected


def test_watch_url() -> None:
    """The watch URL embeds the video ID."""
    assert Settings().watch_url("abcdefghijk") == "https://www.youtube.com/watch?v=abcdefghijk"
