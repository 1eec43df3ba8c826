"""広告インタースティシャルの検出・スキップ"""

import logging

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import ElementHandle, Page

from most_replayed.config import Settings

logger = logging.getLogger(__name__)


async def _first_match(page: Page, selectors: tuple[str, ...]) -> ElementHandle | None:
    for selector in selectors:
        element = await page.query_selector(selector)
        if element is not None:
            return element
    return None


async def has_ad_playing(page: Page, settings: Settings | None = None) -> bool:
    """
    広告が再生中かどうかを判定

    スキップボタン・広告オーバーレイ・広告テキストのいずれかがあれば広告とみなす。
    判定中のエラーはログに残してFalseを返す。
    """
    settings = settings or Settings()
    selectors = (
        settings.ad_skip_selectors
        + settings.ad_overlay_selectors
        + settings.ad_text_selectors
    )
    try:
        return await _first_match(page, selectors) is not None
    except PlaywrightError as e:
        logger.warning("広告の検出に失敗: %s", e)
        return False


async def wait_for_ad_to_clear(
    page: Page,
    max_wait_ms: int = 30000,
    poll_interval_ms: int = 2000,
    settle_ms: int = 1000,
    click_timeout_ms: int = 2000,
    settings: Settings | None = None,
) -> None:
    """
    広告をスキップ、またはスキップできない広告の終了を待つ

    スキップボタンがあれば一度だけ押す。カウントダウン中で押せなくても
    オーバーレイの確認は続け、残っていれば poll_interval_ms ごとに確認し、
    max_wait_ms を超えたら諦めて戻る。エラーはログに残すだけで呼び出し元には伝えない。

    Args:
        page: 対象ページ
        max_wait_ms: オーバーレイを待つ上限（ミリ秒）
        poll_interval_ms: 確認間隔（ミリ秒）
        settle_ms: スキップ後の待ち時間（ミリ秒）
        click_timeout_ms: スキップボタンを押すときのタイムアウト（ミリ秒）
        settings: セレクタ定義
    """
    settings = settings or Settings()
    poll_interval_ms = max(poll_interval_ms, 1)
    try:
        skip_button = await _first_match(page, settings.ad_skip_selectors)
    except PlaywrightError as e:
        logger.warning("スキップボタンの検出に失敗: %s", e)
        skip_button = None

    if skip_button is not None:
        logger.info("広告を検出、スキップを試行")
        try:
            await skip_button.click(timeout=click_timeout_ms)
        except PlaywrightError as e:
            logger.info("スキップできませんでした: %s", e)
        else:
            await page.wait_for_timeout(settle_ms)

    try:
        if await _first_match(page, settings.ad_overlay_selectors) is None:
            return

        logger.info("スキップできない広告を検出、終了を待機（最大%dms）", max_wait_ms)
        waited_ms = 0
        while waited_ms < max_wait_ms:
            await page.wait_for_timeout(poll_interval_ms)
            waited_ms += poll_interval_ms
            if await _first_match(page, settings.ad_overlay_selectors) is None:
                logger.info("広告が終了（%dms）", waited_ms)
                return

        logger.warning("広告が%dms以内に終了しなかったため続行", max_wait_ms)
    except PlaywrightError as e:
        logger.warning("広告の処理に失敗: %s", e)


class AdInterstitialHandler:
    """設定に従って広告を処理する"""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    async def has_ad_playing(self, page: Page) -> bool:
        return await has_ad_playing(page, self.settings)

    async def wait_for_ad_to_clear(self, page: Page, max_wait_ms: int | None = None) -> None:
        await wait_for_ad_to_clear(
            page,
            max_wait_ms=self.settings.ad_max_wait_ms if max_wait_ms is None else max_wait_ms,
            poll_interval_ms=self.settings.ad_poll_interval_ms,
            settle_ms=self.settings.ad_settle_ms,
            click_timeout_ms=self.settings.ad_click_timeout_ms,
            settings=self.settings,
        )

    async def handle(self, page: Page) -> bool:
        """広告があれば処理する。広告を検出したかどうかを返す"""
        if not await self.has_ad_playing(page):
            return False
        await self.wait_for_ad_to_clear(page)
        return True
