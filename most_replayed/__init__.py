"""YouTubeのMost Replayedヒートマップをブラウザ経由で取得する"""

from most_replayed.config import Settings
from most_replayed.models.heatmap import ExtractionResult, ReplayedPart
from most_replayed.services.heatmap import HeatmapError, HeatmapService, get_most_replayed_parts

__version__ = "0.1.0"

__all__ = [
    "ExtractionResult",
    "HeatmapError",
    "HeatmapService",
    "ReplayedPart",
    "Settings",
    "get_most_replayed_parts",
]
