"""Service modules"""

from most_replayed.services.ads import AdInterstitialHandler
from most_replayed.services.embedded import EmbeddedDataStrategy
from most_replayed.services.graphic import VectorGraphicStrategy
from most_replayed.services.heatmap import HeatmapError, HeatmapService

__all__ = [
    "AdInterstitialHandler",
    "EmbeddedDataStrategy",
    "HeatmapError",
    "HeatmapService",
    "VectorGraphicStrategy",
]
