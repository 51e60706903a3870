"""Read-only views over the sample log."""

from pylocust.views.heatmap import MapDocument, MapView, build_map, compute_view, render
from pylocust.views.recent import RecentSamples, format_sample, list_recent

__all__ = [
    "MapDocument",
    "MapView",
    "RecentSamples",
    "build_map",
    "compute_view",
    "format_sample",
    "list_recent",
    "render",
]
