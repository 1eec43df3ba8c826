"""YouTube Heatmap (Most Replayed) 抽出パイプライン"""

import asyncio
import logging
from typing import Any, Callable, Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from most_replayed.config import DEFAULT_SEGMENT_COUNT, Settings
from most_replayed.models.heatmap import ExtractionResult, HeatMapData
from most_replayed.services.ads import AdInterstitialHandler
from most_replayed.services.browser import browser_session
from most_replayed.services.embedded import EmbeddedDataStrategy
from most_replayed.services.graphic import VectorGraphicStrategy
from most_replayed.services.normalizer import to_normalized
from most_replayed.services.ranker import top_replayed_parts

logger = logging.getLogger(__name__)


class HeatmapError(Exception):
    """Heatmap取得時のエラー（ブラウザ起動・ページ読み込みの失敗など）"""

    pass


class ExtractionStrategy(Protocol):
    """ページからマーカーを取り出す戦略"""

    name: str

    async def attempt(self, page: Page, video_id: str) -> HeatMapData | None: ...


def default_strategies(settings: Settings) -> list[ExtractionStrategy]:
    """埋め込みJSON → SVGパスの順で試す"""
    return [
        EmbeddedDataStrategy(timeout_ms=settings.selector_timeout_ms),
        VectorGraphicStrategy(
            max_retries=settings.max_retries,
            timeout_ms=settings.selector_timeout_ms,
            reload_timeout_ms=settings.navigation_timeout_ms,
        ),
    ]


class HeatmapService:
    """ブラウザでYouTubeのMost Replayedデータを取得するサービス"""

    def __init__(
        self,
        settings: Settings | None = None,
        strategies: list[ExtractionStrategy] | None = None,
        ad_handler: AdInterstitialHandler | None = None,
        session_factory: Callable[[Settings], Any] | None = None,
    ) -> None:
        """
        Args:
            settings: 実行時設定（Noneの場合は環境変数から読み込む）
            strategies: 試す順に並べた抽出戦略
            ad_handler: 広告ハンドラ
            session_factory: Settingsを受け取りページを渡す非同期コンテキストマネージャ
        """
        self.settings = settings or Settings.from_env()
        self.strategies = strategies if strategies is not None else default_strategies(self.settings)
        self.ad_handler = ad_handler or AdInterstitialHandler(self.settings)
        self._session_factory = session_factory or browser_session

    async def extract(
        self,
        video_id: str,
        requested_segment_count: int = DEFAULT_SEGMENT_COUNT,
    ) -> ExtractionResult:
        """
        動画のよく再生された区間を取得

        Args:
            video_id: YouTubeの動画ID
            requested_segment_count: 返す区間数の上限

        Returns:
            ExtractionResult（ヒートマップがなければ空）

        Raises:
            HeatmapError: ブラウザの起動やページの読み込みに失敗した場合
        """
        if not isinstance(video_id, str) or not video_id.strip():
            raise HeatmapError(f"無効な動画ID: {video_id!r}")

        try:
            async with self._session_factory(self.settings) as page:
                await self._navigate(page, video_id)
                await self.ad_handler.handle(page)
                data = await self._run_strategies(page, video_id)
        except PlaywrightError as e:
            raise HeatmapError(f"ブラウザ操作に失敗: {e}") from e

        if data is None:
            logger.info("ヒートマップデータが見つかりません: %s", video_id)
            return ExtractionResult()

        markers = to_normalized(data.markers)
        parts = top_replayed_parts(markers, requested_segment_count)
        logger.info(
            "%s: %d件のマーカーから%d区間を取得（%s）",
            video_id,
            len(markers),
            len(parts),
            data.source,
        )
        return ExtractionResult(
            replayed_parts=parts,
            video_length=data.video_length,
            source=data.source,
        )

    async def _navigate(self, page: Page, video_id: str) -> None:
        url = self.settings.watch_url(video_id)
        try:
            await page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.settings.navigation_timeout_ms,
            )
        except PlaywrightError as e:
            raise HeatmapError(f"ページの読み込みに失敗: {url}: {e}") from e

    async def _run_strategies(self, page: Page, video_id: str) -> HeatMapData | None:
        for strategy in self.strategies:
            data = await strategy.attempt(page, video_id)
            if data is not None and data.markers:
                return data
            logger.debug("%s: データなし、次の戦略へ", strategy.name)
        return None


def get_most_replayed_parts(
    video_id: str,
    parts: int = DEFAULT_SEGMENT_COUNT,
    timeout: float | None = None,
    settings: Settings | None = None,
) -> ExtractionResult:
    """
    同期版のエントリポイント

    Args:
        video_id: YouTubeの動画ID
        parts: 返す区間数の上限
        timeout: 全体のタイムアウト（秒）。超えるとブラウザを閉じてHeatmapError
        settings: 実行時設定

    Returns:
        ExtractionResult
    """
    service = HeatmapService(settings)

    async def _run() -> ExtractionResult:
        return await asyncio.wait_for(service.extract(video_id, parts), timeout)

    try:
        return asyncio.run(_run())
    except asyncio.TimeoutError as e:
        raise HeatmapError(f"タイムアウトしました（{timeout}秒）") from e
