"""Data models"""

from most_replayed.models.heatmap import (
    Coordinate,
    ExtractionResult,
    GraphicExtraction,
    HeatMapData,
    NormalizedMarker,
    RawMarker,
    ReplayedPart,
)

__all__ = [
    "Coordinate",
    "ExtractionResult",
    "GraphicExtraction",
    "HeatMapData",
    "NormalizedMarker",
    "RawMarker",
    "ReplayedPart",
]
