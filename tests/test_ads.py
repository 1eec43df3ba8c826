"""Tests for ad interstitial detection and waiting."""

import asyncio

from most_replayed.config import Settings
from most_replayed.services.ads import AdInterstitialHandler, has_ad_playing, wait_for_ad_to_clear

OVERLAY = ".ytp-ad-player-overlay"
SKIP = ".ytp-ad-skip-button"


def _clear_overlay_after(ms: int):
    def on_wait(page) -> None:
        if page.waited_ms >= ms:
            page.present.discard(OVERLAY)

    return on_wait


def test_no_ad_detected_on_clean_page(make_page) -> None:
    """A page without ad elements is not treated as an ad."""
    assert asyncio.run(has_ad_playing(make_page())) is False


def test_overlay_or_text_counts_as_ad(make_page) -> None:
    """Any of the overlay or ad text selectors indicates an ad."""
    assert asyncio.run(has_ad_playing(make_page(present=[OVERLAY]))) is True
    assert asyncio.run(has_ad_playing(make_page(present=[".ytp-ad-text"]))) is True


def test_detection_error_reports_no_ad(make_page, playwright_error) -> None:
    """Browser errors during detection are logged and treated as no ad."""
    page = make_page(present=[OVERLAY])
    page.query_error = playwright_error("target closed")

    assert asyncio.run(has_ad_playing(page)) is False


def test_skip_button_is_clicked_once(make_page) -> None:
    """A skippable ad is skipped and the page is given a moment to settle."""
    page = make_page(present=[SKIP])

    asyncio.run(wait_for_ad_to_clear(page))

    assert page.clicks == [SKIP]
    assert page.waited_ms == 1000


def test_unskippable_ad_is_polled_until_cleared(make_page) -> None:
    """Polling stops as soon as the overlay disappears."""
    page = make_page(present=[OVERLAY])
    page.on_wait = _clear_overlay_after(6000)

    asyncio.run(wait_for_ad_to_clear(page, max_wait_ms=30000, poll_interval_ms=2000))

    assert page.waited_ms == 6000
    assert page.clicks == []


def test_ad_that_never_clears_is_bounded(make_page) -> None:
    """Waiting gives up after the maximum wait without raising."""
    page = make_page(present=[OVERLAY])

    asyncio.run(wait_for_ad_to_clear(page, max_wait_ms=30000, poll_interval_ms=2000))

    assert page.waited_ms == 30000
    assert OVERLAY in page.present


def test_click_failure_is_swallowed(make_page, playwright_error) -> None:
    """A failing skip click is logged and does not propagate."""
    page = make_page(present=[SKIP])
    page.click_error = playwright_error("element detached")

    asyncio.run(wait_for_ad_to_clear(page))

    assert page.clicks == []


def test_handler_uses_settings_and_reports_detection(make_page) -> None:
    """The handler applies its configured wait and says whether it saw an ad."""
    settings = Settings(ad_max_wait_ms=4000, ad_poll_interval_ms=1000)
    handler = AdInterstitialHandler(settings)
    page = make_page(present=[OVERLAY])

    assert asyncio.run(handler.handle(page)) is True
    assert page.waited_ms == 4000
    assert asyncio.run(handler.handle(make_page())) is False


def test_unclickable_skip_button_still_waits_for_overlay(make_page, playwright_error) -> None:
    """A skip button stuck in its countdown does not cut the overlay wait short."""
    page = make_page(present=[SKIP, OVERLAY])
    page.click_error = playwright_error("Timeout 2000ms exceeded")
    page.on_wait = _clear_overlay_after(6000)

    asyncio.run(wait_for_ad_to_clear(page, max_wait_ms=30000, poll_interval_ms=2000))

    assert page.waited_ms == 6000
    assert OVERLAY not in page.present


def test_zero_poll_interval_is_still_bounded(make_page) -> None:
    """A non-positive interval cannot keep the wait from reaching its limit."""
    page = make_page(present=[OVERLAY])

    asyncio.run(wait_for_ad_to_clear(page, max_wait_ms=50, poll_interval_ms=0))

    assert page.waited_ms == 50
