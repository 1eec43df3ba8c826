"""正規化済みマーカーを強度順に並べて上位区間を返す"""

import math

from most_replayed.models.heatmap import NormalizedMarker, ReplayedPart


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def top_replayed_parts(markers: list[NormalizedMarker], count: int) -> list[ReplayedPart]:
    """
    強度の高い順に上位count件をReplayedPartに変換

    同じ強度の場合は元の順序（時間順）を保つ。

    Args:
        markers: NormalizedMarkerのリスト
        count: 返す件数の上限

    Returns:
        ReplayedPartのリスト（position=1が最も再生された区間）
    """
    if count <= 0 or not markers:
        return []

    ranked = sorted(markers, key=lambda m: m.intensity, reverse=True)

    return [
        ReplayedPart(
            position=position,
            start=_round_half_up(marker.start_seconds),
            end=_round_half_up(marker.end_seconds),
        )
        for position, marker in enumerate(ranked[:count], start=1)
    ]
