"""Most Replayed ヒートマップのデータモデル"""

from dataclasses import dataclass, field
from typing import Any

MARKER_TYPE_HEATMAP = "MARKER_TYPE_HEATMAP"


@dataclass(frozen=True)
class Coordinate:
    """SVGローカル座標系の1点"""

    x: float
    y: float

    def translated(self, dx: float, dy: float) -> "Coordinate":
        """平行移動した座標を返す"""
        return Coordinate(self.x + dx, self.y + dy)


@dataclass
class RawMarker:
    """正規化前の時間・強度サンプル"""

    start_ms: float  # 開始時間（ミリ秒）
    duration_ms: float  # 区間長（ミリ秒）
    intensity_raw: float | None  # 生の強度（数値でない場合はNone）

    @property
    def end_ms(self) -> float:
        """終了時間（ミリ秒）"""
        return self.start_ms + self.duration_ms


@dataclass
class NormalizedMarker:
    """最大値で正規化したマーカー"""

    start_ms: float  # 開始時間（ミリ秒）
    duration_ms: float  # 区間長（ミリ秒）
    intensity: float  # 正規化済みの強度（0-1）

    @property
    def end_ms(self) -> float:
        """終了時間（ミリ秒）"""
        return self.start_ms + self.duration_ms

    @property
    def start_seconds(self) -> float:
        """開始時間（秒）"""
        return self.start_ms / 1000.0

    @property
    def end_seconds(self) -> float:
        """終了時間（秒）"""
        return self.end_ms / 1000.0


@dataclass
class ReplayedPart:
    """よく再生された区間（順位付き）"""

    position: int  # 1始まりの順位
    start: int  # 開始時間（秒）
    end: int  # 終了時間（秒）

    @property
    def duration(self) -> int:
        """区間長（秒）"""
        return self.end - self.start

    def format_time_range(self) -> str:
        """時間範囲を読みやすい形式で返す"""
        return f"{self._format_time(self.start)} - {self._format_time(self.end)}"

    def to_dict(self) -> dict[str, int]:
        return {"position": self.position, "start": self.start, "end": self.end}

    @staticmethod
    def _format_time(seconds: int) -> str:
        """秒を MM:SS 形式に変換"""
        minutes = seconds // 60
        secs = seconds % 60
        return f"{minutes:02d}:{secs:02d}"


@dataclass
class HeatMapData:
    """抽出戦略が返すマーカー一式"""

    markers: list[RawMarker]
    video_length: float | None = None  # 動画の長さ（秒）
    source: str = ""  # "embedded" / "graphic"


@dataclass
class GraphicExtraction:
    """SVGヒートマップからの抽出結果"""

    markers: list[RawMarker]
    video_length: float  # progress barのaria-valuemax（秒）
    path_data: str = ""  # 連結・クリーニング後のパス


@dataclass
class ExtractionResult:
    """パイプラインの戻り値"""

    replayed_parts: list[ReplayedPart] = field(default_factory=list)
    video_length: float | None = None
    source: str | None = None

    @property
    def found(self) -> bool:
        """ヒートマップが見つかったかどうか"""
        return bool(self.replayed_parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "replayedParts": [part.to_dict() for part in self.replayed_parts],
            "videoLength": self.video_length,
        }
