"""Heat map and path rendering of the sample log.

The map is a self-contained Leaflet page produced with folium.  The
same chronologically ordered coordinate list feeds two layers:

* a heat layer, one weighted point per sample;
* a path polyline joining samples in the order they were recorded.

The initial viewport depends only on how many samples there are:
none shows the whole world, one centres on that sample at street-ish
zoom, two or more fit the bounds of the path.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import folium
from folium.plugins import HeatMap

from pylocust._constants import DEFAULT_MAP_PATH, SINGLE_POINT_ZOOM, WORLD_CENTER, WORLD_ZOOM
from pylocust.exceptions import RecordParseError, RenderError
from pylocust.store import LogStore

_logger = logging.getLogger(__name__)

Point = tuple[float, float]
Bounds = tuple[Point, Point]

HEAT_RADIUS = 25
HEAT_WEIGHT = 1.0
HEAT_GRADIENT = {0.4: "red", 0.7: "darkred", 1.0: "#8b0000"}
PATH_STYLE = {"color": "blue", "weight": 3, "opacity": 0.7}


@dataclass(frozen=True)
class MapView:
    """Initial viewport of the map.

    ``bounds`` is set only when the view is fitted to two or more
    points, as ``((south, west), (north, east))``.
    """

    center: Point
    zoom: int
    bounds: Bounds | None = None


@dataclass(frozen=True)
class MapDocument:
    path: Path
    view: MapView
    point_count: int
    errors: list[RecordParseError] = field(default_factory=list)


def compute_view(points: Sequence[Point]) -> MapView:
    if not points:
        return MapView(center=WORLD_CENTER, zoom=WORLD_ZOOM)
    if len(points) == 1:
        return MapView(center=points[0], zoom=SINGLE_POINT_ZOOM)

    lats = [lat for lat, _ in points]
    lons = [lon for _, lon in points]
    south, north = min(lats), max(lats)
    west, east = min(lons), max(lons)
    return MapView(
        center=((south + north) / 2, (west + east) / 2),
        zoom=WORLD_ZOOM,
        bounds=((south, west), (north, east)),
    )


def build_map(points: Sequence[Point], view: MapView | None = None) -> folium.Map:
    """Build the folium map for *points*, which must be in recording order."""
    if view is None:
        view = compute_view(points)
    fmap = folium.Map(location=list(view.center), zoom_start=view.zoom, tiles="OpenStreetMap")

    HeatMap(
        [[lat, lon, HEAT_WEIGHT] for lat, lon in points],
        name="Heat",
        radius=HEAT_RADIUS,
        gradient=HEAT_GRADIENT,
    ).add_to(fmap)

    # A polyline needs two vertices.
    if len(points) > 1:
        folium.PolyLine([list(p) for p in points], **PATH_STYLE).add_to(fmap)

    if view.bounds is not None:
        south_west, north_east = view.bounds
        fmap.fit_bounds([list(south_west), list(north_east)])

    return fmap


def render(store: LogStore, output_path: str | os.PathLike[str] = DEFAULT_MAP_PATH) -> MapDocument:
    """Write the map of every readable sample in *store* to *output_path*.

    A missing log renders an empty world map.  Damaged records are
    skipped and reported in ``errors``.

    Raises
    ------
    RenderError
        If the document cannot be written.
    """
    result = store.read()
    if not result.exists:
        _logger.info("No log found at %s, rendering an empty map", store.path)

    points = [sample.coordinates for sample in result.samples]
    view = compute_view(points)
    fmap = build_map(points, view)

    path = Path(output_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fmap.save(str(path))
    except OSError as exc:
        raise RenderError(f"Could not write map to {path}: {exc}", path=path) from exc

    _logger.debug("Wrote map with %d point(s) to %s", len(points), path)
    return MapDocument(path=path, view=view, point_count=len(points), errors=result.errors)
