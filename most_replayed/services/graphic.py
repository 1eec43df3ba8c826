"""ヒートマップSVGのパスからマーカーを復元する（フォールバック）"""

import logging
import math

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from most_replayed.config import (
    HEATMAP_SELECTOR,
    PROGRESS_BAR_SELECTOR,
    VIDEO_LENGTH_ATTRIBUTE,
)
from most_replayed.models.heatmap import GraphicExtraction, HeatMapData
from most_replayed.services.normalizer import normalize
from most_replayed.utils.svg_path import extract_path_fragments, render_path, stitch_fragments

logger = logging.getLogger(__name__)

_OUTER_HTML_JS = "els => els.map(el => el.outerHTML)"


class _TransientGraphicError(Exception):
    """リロードで回復し得る失敗"""


def _parse_video_length(raw: str | None) -> float | None:
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


async def _read_heatmap(page: Page, timeout_ms: int) -> GraphicExtraction | None:
    """1回分の読み取り。ヒートマップがない動画ならNone"""
    try:
        await page.wait_for_selector(HEATMAP_SELECTOR, state="attached", timeout=timeout_ms)
    except PlaywrightError as e:
        # プレイヤーが描画されているのにヒートマップがなければ構造的な不在
        if await page.query_selector(PROGRESS_BAR_SELECTOR) is not None:
            return None
        raise _TransientGraphicError(f"プレイヤーが描画されていません: {e}") from e

    await page.wait_for_selector(PROGRESS_BAR_SELECTOR, state="attached", timeout=timeout_ms)
    raw_length = await page.get_attribute(
        PROGRESS_BAR_SELECTOR, VIDEO_LENGTH_ATTRIBUTE, timeout=timeout_ms
    )
    video_length = _parse_video_length(raw_length)
    if video_length is None:
        raise _TransientGraphicError(f"動画の長さが読めません: {raw_length!r}")

    markups = await page.eval_on_selector_all(HEATMAP_SELECTOR, _OUTER_HTML_JS)
    fragments = extract_path_fragments("".join(markups or []))
    if not fragments:
        raise _TransientGraphicError("ヒートマップのパスが空です")

    points = stitch_fragments(fragments)
    markers = normalize(points, video_length)
    logger.debug(
        "SVGから%d断片・%d点・%dマーカーを取得", len(fragments), len(points), len(markers)
    )
    return GraphicExtraction(
        markers=markers,
        video_length=video_length,
        path_data=render_path(points),
    )


async def try_extract_from_graphic(
    page: Page,
    video_id: str,
    max_retries: int = 3,
    timeout_ms: int = 5000,
    reload_timeout_ms: int = 30000,
) -> GraphicExtraction | None:
    """
    ヒートマップSVGからマーカーを抽出

    一時的な失敗ではページをリロードして最大 max_retries 回まで再試行する。
    試行ごとにセレクタの待ち時間を倍にする。ヒートマップ自体がない動画は
    再試行せずにNoneを返す。

    Args:
        page: 対象ページ
        video_id: 動画ID（ログ用）
        max_retries: 再試行回数の上限
        timeout_ms: 初回のセレクタ待ち時間（ミリ秒）
        reload_timeout_ms: リロードのタイムアウト（ミリ秒）

    Returns:
        GraphicExtraction（取得できなければNone）
    """
    for attempt in range(max_retries + 1):
        try:
            result = await _read_heatmap(page, timeout_ms * (2**attempt))
        except (_TransientGraphicError, PlaywrightError) as e:
            if attempt >= max_retries:
                logger.error("再試行の上限に達しました（%s）: %s", video_id, e)
                return None
            logger.warning("再試行します（%d/%d）: %s", attempt + 1, max_retries, e)
        else:
            if result is None:
                logger.info("ヒートマップがありません: %s", video_id)
            return result

        try:
            await page.reload(wait_until="domcontentloaded", timeout=reload_timeout_ms)
        except PlaywrightError as e:
            logger.warning("リロードに失敗: %s", e)

    return None


class VectorGraphicStrategy:
    """SVGパスから取得する戦略"""

    name = "graphic"

    def __init__(
        self,
        max_retries: int = 3,
        timeout_ms: int = 5000,
        reload_timeout_ms: int = 30000,
    ) -> None:
        self.max_retries = max_retries
        self.timeout_ms = timeout_ms
        self.reload_timeout_ms = reload_timeout_ms

    async def attempt(self, page: Page, video_id: str) -> HeatMapData | None:
        result = await try_extract_from_graphic(
            page,
            video_id,
            max_retries=self.max_retries,
            timeout_ms=self.timeout_ms,
            reload_timeout_ms=self.reload_timeout_ms,
        )
        if result is None or not result.markers:
            return None
        return HeatMapData(
            markers=result.markers,
            video_length=result.video_length,
            source=self.name,
        )
