"""Shared fakes for driving the pipeline without a real browser."""

from contextlib import asynccontextmanager

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from most_replayed.config import (
    HEATMAP_SELECTOR,
    PROGRESS_BAR_SELECTOR,
    VIDEO_LENGTH_ATTRIBUTE,
)


class FakeElement:
    def __init__(self, page: "FakePage", selector: str) -> None:
        self.page = page
        self.selector = selector

    async def click(self, timeout=None) -> None:
        if self.page.click_error is not None:
            raise self.page.click_error
        self.page.clicks.append(self.selector)
        self.page.present.discard(self.selector)


class FakePage:
    """In-memory stand-in for a Playwright page."""

    def __init__(
        self,
        *,
        present=(),
        scripts=(),
        heatmap_markup=(),
        video_length="100",
        hidden_until_reload: int = 0,
    ) -> None:
        self.present = set(present)
        self.scripts = list(scripts)
        self.heatmap_markup = list(heatmap_markup)
        self.video_length = video_length
        self.hidden_until_reload = hidden_until_reload
        if self.scripts:
            self.present.add("script")
        if self.heatmap_markup:
            self.present.add(HEATMAP_SELECTOR)
        if video_length is not None:
            self.present.add(PROGRESS_BAR_SELECTOR)

        self.visited: list[str] = []
        self.clicks: list[str] = []
        self.waited_ms = 0
        self.reloads = 0
        self.selector_waits: list[tuple[str, int | None]] = []
        self.on_wait = None
        self.goto_error: Exception | None = None
        self.query_error: Exception | None = None
        self.click_error: Exception | None = None
        self.reload_error: Exception | None = None

    def _visible(self, selector: str) -> bool:
        if selector == "script":
            return selector in self.present
        return selector in self.present and self.reloads >= self.hidden_until_reload

    async def goto(self, url: str, **kwargs) -> None:
        if self.goto_error is not None:
            raise self.goto_error
        self.visited.append(url)

    async def query_selector(self, selector: str):
        if self.query_error is not None:
            raise self.query_error
        return FakeElement(self, selector) if self._visible(selector) else None

    async def wait_for_timeout(self, timeout: float) -> None:
        self.waited_ms += timeout
        if self.on_wait is not None:
            self.on_wait(self)

    async def wait_for_selector(self, selector: str, state=None, timeout=None):
        self.selector_waits.append((selector, timeout))
        if not self._visible(selector):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")
        return FakeElement(self, selector)

    async def eval_on_selector_all(self, selector: str, expression: str):
        if selector == "script":
            return list(self.scripts)
        if selector == HEATMAP_SELECTOR and self._visible(selector):
            return list(self.heatmap_markup)
        return []

    async def get_attribute(self, selector: str, name: str, timeout=None):
        if selector == PROGRESS_BAR_SELECTOR and name == VIDEO_LENGTH_ATTRIBUTE:
            return self.video_length
        return None

    async def reload(self, **kwargs) -> None:
        self.reloads += 1
        if self.reload_error is not None:
            raise self.reload_error


class FakeSession:
    """Session factory that hands out one FakePage and records teardown."""

    def __init__(self, page: FakePage, enter_error: Exception | None = None) -> None:
        self.page = page
        self.enter_error = enter_error
        self.opened = 0
        self.closed = 0

    def __call__(self, settings):
        return self._session()

    @asynccontextmanager
    async def _session(self):
        self.opened += 1
        if self.enter_error is not None:
            raise self.enter_error
        try:
            yield self.page
        finally:
            self.closed += 1


def svg(*paths: str) -> str:
    body = "".join(f'<path class="ytp-heat-map-path" d="{d}"></path>' for d in paths)
    return (
        '<svg class="ytp-heat-map-svg" viewBox="0 0 1000 100">'
        '<defs><clipPath id="c"><rect x="0" y="0"></rect></clipPath></defs>'
        f"{body}</svg>"
    )


def line_path(points) -> str:
    head, *rest = points
    return " ".join([f"M {head[0]},{head[1]}"] + [f"L {x},{y}" for x, y in rest])


@pytest.fixture
def make_page():
    return FakePage


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def playwright_error():
    return PlaywrightError


@pytest.fixture
def svg_markup():
    return svg


@pytest.fixture
def path_of():
    return line_path
