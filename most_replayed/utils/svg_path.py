"""
ヒートマップSVGのパス断片を1本の座標列に繋ぐユーティリティ

ヒートマップはチャプターごとに独立したSVGとして描画されることがあり、
各断片はそれぞれのローカル原点を基準にしている。ここでは断片を
平行移動して繋ぎ、繋ぎ目に出るスパイク（joint artifact）を取り除く。
"""

import logging
import math
import re

from most_replayed.models.heatmap import Coordinate

logger = logging.getLogger(__name__)

# 繋ぎ目の前後で削除する点数。実際のページ出力に合わせて経験的に決めた値で、
# ページ側の描画粒度が変われば再調整が必要。
JOINT_WINDOW_BEFORE = 6
JOINT_WINDOW_AFTER = 9

_COMMAND_PATTERN = re.compile(r"([MmLlHhVvCcSsQqTtAaZz])([^MmLlHhVvCcSsQqTtAaZz]*)")
_NUMBER_PATTERN = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_PATH_D_PATTERN = re.compile(r"<path\b[^>]*?\sd=\"([^\"]*)\"", re.IGNORECASE)


def extract_path_fragments(svg_markup: str) -> list[str]:
    """SVGマークアップから<path>のd属性を出現順に取り出す"""
    return [match.group(1) for match in _PATH_D_PATTERN.finditer(svg_markup)]


def parse_path(path_data: str) -> list[Coordinate]:
    """
    パスのd属性を座標列に変換

    コマンドの引数を2つずつ組にして座標とみなす（制御点も含む）。
    組にならない余りや数値として読めないトークンは読み飛ばす。

    Args:
        path_data: SVGパスのd属性

    Returns:
        Coordinateのリスト
    """
    coordinates: list[Coordinate] = []

    for match in _COMMAND_PATTERN.finditer(path_data):
        values: list[float] = []
        for token in _NUMBER_PATTERN.findall(match.group(2)):
            try:
                value = float(token)
            except ValueError:
                continue
            if math.isfinite(value):
                values.append(value)

        for i in range(0, len(values) - 1, 2):
            coordinates.append(Coordinate(values[i], values[i + 1]))

    return coordinates


def render_path(coordinates: list[Coordinate]) -> str:
    """座標列を直線のみのパス（M x,y L x,y ...）に変換"""
    if not coordinates:
        return ""

    parts = [f"M {_format_number(coordinates[0].x)},{_format_number(coordinates[0].y)}"]
    for coord in coordinates[1:]:
        parts.append(f"L {_format_number(coord.x)},{_format_number(coord.y)}")
    return " ".join(parts)


def find_joints(coordinates: list[Coordinate], boundaries: list[int]) -> list[int]:
    """
    断片の境界のうち、直前の点と同じ点を再訪している位置を返す

    Args:
        coordinates: 連結済みの座標列
        boundaries: 2つ目以降の断片の先頭インデックス

    Returns:
        繋ぎ目のインデックスのリスト
    """
    joints: list[int] = []
    for index in boundaries:
        if 0 < index < len(coordinates) and coordinates[index] == coordinates[index - 1]:
            joints.append(index)
    return joints


def remove_artifacts(
    coordinates: list[Coordinate],
    joints: list[int],
    before: int = JOINT_WINDOW_BEFORE,
    after: int = JOINT_WINDOW_AFTER,
) -> list[Coordinate]:
    """
    繋ぎ目の前 before 点と後 after 点を取り除く（繋ぎ目の点自体は残す）

    Args:
        coordinates: 連結済みの座標列
        joints: find_jointsが返したインデックス
        before: 繋ぎ目の前で削除する点数
        after: 繋ぎ目の後で削除する点数

    Returns:
        クリーニング後の座標列
    """
    removal: set[int] = set()
    for joint in joints:
        removal.update(range(max(joint - before, 0), joint))
        removal.update(range(joint + 1, min(joint + after + 1, len(coordinates))))
    removal.difference_update(joints)

    return [coord for index, coord in enumerate(coordinates) if index not in removal]


def stitch_fragments(fragments: list[str]) -> list[Coordinate]:
    """
    複数のパス断片を1本の連続した座標列に繋ぐ

    2つ目以降の断片は、先頭の点が直前の断片の末尾の点に一致するよう
    平行移動してから連結し、最後に繋ぎ目のアーティファクトを取り除く。

    Args:
        fragments: パスのd属性のリスト

    Returns:
        Coordinateのリスト（断片が1つならそのまま）
    """
    stitched: list[Coordinate] = []
    boundaries: list[int] = []

    for fragment in fragments:
        points = parse_path(fragment)
        if not points:
            logger.debug("座標を取り出せないパス断片をスキップ: %.40r", fragment)
            continue

        if stitched:
            anchor = stitched[-1]
            dx = anchor.x - points[0].x
            dy = anchor.y - points[0].y
            # 先頭は浮動小数点誤差を避けるためアンカーをそのまま使う
            points = [anchor] + [point.translated(dx, dy) for point in points[1:]]
            boundaries.append(len(stitched))

        stitched.extend(points)

    joints = find_joints(stitched, boundaries)
    if joints:
        logger.debug("繋ぎ目を%d箇所検出: %s", len(joints), joints)
    return remove_artifacts(stitched, joints)


def _format_number(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return str(value)
