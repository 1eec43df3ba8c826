"""ページ内スクリプトに埋め込まれたJSONからマーカーを取り出す"""

import json
import logging
import math
import re
from typing import Any, Iterator

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from most_replayed.config import EMBEDDED_DATA_KEY
from most_replayed.models.heatmap import MARKER_TYPE_HEATMAP, HeatMapData, RawMarker

logger = logging.getLogger(__name__)

_DECODER = json.JSONDecoder()
_SCRIPT_TEXTS_JS = "els => els.map(el => el.textContent || '')"


def _iter_objects_after(content: str, key: str) -> Iterator[dict[str, Any]]:
    """keyの直後にある釣り合ったJSONオブジェクトを順にデコード"""
    pattern = re.compile('"' + re.escape(key) + r'"\s*:\s*\{')
    for match in pattern.finditer(content):
        try:
            obj, _ = _DECODER.raw_decode(content, match.end() - 1)
        except json.JSONDecodeError as e:
            logger.debug("埋め込みJSONの解析に失敗: %s", e)
            continue
        yield obj


def _markers_list_from(framework_updates: dict[str, Any]) -> dict[str, Any] | None:
    """frameworkUpdates -> entityBatchUpdate -> mutations からmarkersListを探す"""
    batch = framework_updates.get("entityBatchUpdate")
    mutations = batch.get("mutations") if isinstance(batch, dict) else None
    if not isinstance(mutations, list):
        return None

    fallback: dict[str, Any] | None = None
    for mutation in mutations:
        if not isinstance(mutation, dict):
            continue
        payload = mutation.get("payload")
        entity = payload.get("macroMarkersListEntity") if isinstance(payload, dict) else None
        markers_list = entity.get("markersList") if isinstance(entity, dict) else None
        if not isinstance(markers_list, dict):
            continue
        if markers_list.get("markerType") == MARKER_TYPE_HEATMAP:
            return markers_list
        fallback = fallback or markers_list
    return fallback


def find_markers_list(script_texts: list[str]) -> dict[str, Any] | None:
    """
    スクリプト本文のリストからmarkersListを探す

    Args:
        script_texts: <script>要素のテキスト

    Returns:
        markersList（見つからなければNone）
    """
    for content in script_texts:
        if not content or EMBEDDED_DATA_KEY not in content:
            continue
        for framework_updates in _iter_objects_after(content, EMBEDDED_DATA_KEY):
            markers_list = _markers_list_from(framework_updates)
            if markers_list is not None:
                return markers_list
    return None


def _to_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_markers(raw_markers: Any) -> list[RawMarker]:
    """markersList.markers をRawMarkerに変換（壊れたマーカーはスキップ）"""
    if not isinstance(raw_markers, list):
        return []

    markers: list[RawMarker] = []
    for raw in raw_markers:
        if not isinstance(raw, dict):
            continue
        start_ms = _to_float(raw.get("startMillis"))
        duration_ms = _to_float(raw.get("durationMillis"))
        if start_ms is None or duration_ms is None or not math.isfinite(start_ms + duration_ms):
            logger.debug("時間が読めないマーカーをスキップ: %r", raw)
            continue
        markers.append(
            RawMarker(
                start_ms=start_ms,
                duration_ms=duration_ms,
                intensity_raw=_to_float(raw.get("intensityScoreNormalized")),
            )
        )
    return markers


async def try_extract_embedded_markers(
    page: Page, timeout_ms: int = 5000
) -> list[RawMarker] | None:
    """
    ページの埋め込みJSONからマーカーを取得

    Args:
        page: 対象ページ
        timeout_ms: <script>の出現を待つ時間（ミリ秒）

    Returns:
        RawMarkerのリスト（見つからなければNone）
    """
    try:
        await page.wait_for_selector("script", state="attached", timeout=timeout_ms)
    except PlaywrightTimeoutError:
        logger.info("scriptタグの待機がタイムアウト、取得済みの内容で続行")

    try:
        script_texts = await page.eval_on_selector_all("script", _SCRIPT_TEXTS_JS)
    except PlaywrightError as e:
        logger.warning("スクリプトの読み取りに失敗: %s", e)
        return None

    markers_list = find_markers_list(list(script_texts or []))
    if markers_list is None:
        logger.info("埋め込みデータにヒートマップが見つかりません")
        return None

    markers = parse_markers(markers_list.get("markers"))
    return markers or None


class EmbeddedDataStrategy:
    """埋め込みJSONから取得する戦略"""

    name = "embedded"

    def __init__(self, timeout_ms: int = 5000) -> None:
        self.timeout_ms = timeout_ms

    async def attempt(self, page: Page, video_id: str) -> HeatMapData | None:
        markers = await try_extract_embedded_markers(page, self.timeout_ms)
        if not markers:
            return None

        # 埋め込みデータには動画の長さがないのでマーカーの終端から求める
        video_length = max(marker.end_ms for marker in markers) / 1000.0
        return HeatMapData(markers=markers, video_length=video_length, source=self.name)
