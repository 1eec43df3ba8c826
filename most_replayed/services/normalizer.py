"""座標列を時間区間ごとの強度マーカーに変換・正規化する"""

import math

from most_replayed.config import HEATMAP_Y_BASELINE
from most_replayed.models.heatmap import Coordinate, NormalizedMarker, RawMarker


def _is_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def normalize(
    points: list[Coordinate],
    video_length_seconds: float,
    baseline: float = HEATMAP_Y_BASELINE,
) -> list[RawMarker]:
    """
    座標列を均等な時間区間に割り当てる

    ページは点ごとのタイムスタンプを持たないため、動画の長さを点の数で
    均等に割る。区間幅は全サンプル数で決め、yが数値でない点は除外する。
    SVGは下向きがyの正方向なので、基準線からの高さ（baseline - y）を強度とする。

    Args:
        points: 連結済みの座標列
        video_length_seconds: 動画の長さ（秒）
        baseline: 強度0に当たる基準線のy座標

    Returns:
        RawMarkerのリスト（有効な点がなければ空）
    """
    if not points or not _is_number(video_length_seconds) or video_length_seconds <= 0:
        return []

    segment_ms = video_length_seconds * 1000.0 / len(points)
    valid = [point for point in points if _is_number(point.y)]

    return [
        RawMarker(
            start_ms=index * segment_ms,
            duration_ms=segment_ms,
            intensity_raw=baseline - float(point.y),
        )
        for index, point in enumerate(valid)
    ]


def to_normalized(markers: list[RawMarker]) -> list[NormalizedMarker]:
    """
    最大強度で割って0-1に正規化

    数値でない強度は0として扱う。有効な最大値が正でなければ全て0になる。
    """
    values = [m.intensity_raw for m in markers if _is_number(m.intensity_raw)]
    max_value = max(values) if values else 0.0

    normalized: list[NormalizedMarker] = []
    for marker in markers:
        if max_value > 0 and _is_number(marker.intensity_raw):
            intensity = min(max(marker.intensity_raw / max_value, 0.0), 1.0)
        else:
            intensity = 0.0
        normalized.append(
            NormalizedMarker(
                start_ms=marker.start_ms,
                duration_ms=marker.duration_ms,
                intensity=intensity,
            )
        )
    return normalized
