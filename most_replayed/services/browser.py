"""ヘッドレスブラウザのセッション管理"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Page, async_playwright

from most_replayed.config import Settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def browser_session(settings: Settings) -> AsyncIterator[Page]:
    """
    呼び出しごとに独立したブラウザを起動し、ページを渡す

    成功・失敗・キャンセルのいずれでも抜けるときにブラウザを閉じる。

    Args:
        settings: 起動オプション

    Yields:
        新しいページ
    """
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(
            headless=settings.headless,
            args=list(settings.browser_args),
        )
        logger.debug("ブラウザを起動: %s", browser.version)
        try:
            context = await browser.new_context(
                user_agent=settings.user_agent,
                locale=settings.locale,
            )
            page = await context.new_page()
            page.set_default_timeout(settings.navigation_timeout_ms)
            yield page
        finally:
            await browser.close()
            logger.debug("ブラウザを終了")
