"""
SVG path generation for projected geometry.

The navigator only depends on the `Renderer` protocol: `redraw(paths,
projection)`. `SvgPathRenderer` is the concrete implementation used by the
site; it writes SVG path data onto each map element.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from .projection import OrthographicProjection

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class Renderer(Protocol):
    """Anything that can re-render map paths for a projection."""

    def redraw(self, paths: Iterable[Any], projection: OrthographicProjection) -> None:
        ...


def graticule(step: float = 10.0, sample: float = 2.5, lat_limit: float = 80.0) -> Dict[str, Any]:
    """
    Graticule as a MultiLineString.

    Meridians every `step` degrees between +/- lat_limit, parallels every
    `step` degrees, each sampled every `sample` degrees so that they curve
    when projected.
    """
    lines: List[List[List[float]]] = []

    n_lat = int(round(2 * lat_limit / sample))
    for i in range(int(round(360 / step))):
        lon = -180.0 + i * step
        lines.append([[lon, -lat_limit + j * sample] for j in range(n_lat + 1)])

    n_lon = int(round(360 / sample))
    n_par = int(round(2 * lat_limit / step))
    for i in range(n_par + 1):
        lat = -lat_limit + i * step
        lines.append([[-180.0 + j * sample, lat] for j in range(n_lon + 1)])

    return {"type": "MultiLineString", "coordinates": lines}


def _fmt(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


class SvgPathRenderer:
    """
    Render GeoJSON geometry to SVG path data.

    Points outside the clip circle split lines into separate runs; a ring is
    closed ("Z") only if every vertex is visible.
    """

    def __init__(self, point_radius: float = 4.5):
        self.point_radius = point_radius
        self.n_redraws = 0

    def redraw(self, paths: Iterable[Any], projection: OrthographicProjection) -> None:
        """Recompute `d` for every element carrying a geometry."""
        count = 0
        for element in paths:
            element.d = self.path_data(element.geometry, projection)
            count += 1
        self.n_redraws += 1
        logger.debug(f"Redrew {count} paths at rotation {projection.rotation}")

    def path_data(self, geometry: Optional[Dict[str, Any]], projection: OrthographicProjection) -> str:
        if geometry is None:
            return ""
        kind = geometry.get("type")

        if kind == "Feature":
            return self.path_data(geometry.get("geometry"), projection)
        if kind == "FeatureCollection":
            return "".join(self.path_data(f, projection) for f in geometry.get("features", []))
        if kind == "GeometryCollection":
            return "".join(self.path_data(g, projection) for g in geometry.get("geometries", []))
        if kind == "Sphere":
            return self._sphere(projection)

        coords = geometry.get("coordinates")
        if kind == "Point":
            return self._point(coords, projection)
        if kind == "MultiPoint":
            return "".join(self._point(c, projection) for c in coords)
        if kind == "LineString":
            return self._line(coords, projection, closed=False)
        if kind == "MultiLineString":
            return "".join(self._line(c, projection, closed=False) for c in coords)
        if kind == "Polygon":
            return "".join(self._line(ring, projection, closed=True) for ring in coords)
        if kind == "MultiPolygon":
            return "".join(
                self._line(ring, projection, closed=True)
                for polygon in coords for ring in polygon
            )

        logger.warning(f"Cannot render geometry type: {kind}")
        return ""

    def _sphere(self, projection: OrthographicProjection) -> str:
        cx, cy = projection.translate
        r = projection.scale
        return (
            f"M{_fmt(cx)},{_fmt(cy - r)}"
            f"A{_fmt(r)},{_fmt(r)} 0 1,1 {_fmt(cx)},{_fmt(cy + r)}"
            f"A{_fmt(r)},{_fmt(r)} 0 1,1 {_fmt(cx)},{_fmt(cy - r)}Z"
        )

    def _point(self, coords: Sequence[float], projection: OrthographicProjection) -> str:
        p = projection.project(coords[0], coords[1])
        if p is None:
            return ""
        r = self.point_radius
        return (
            f"M{_fmt(p[0])},{_fmt(p[1] - r)}"
            f"a{_fmt(r)},{_fmt(r)} 0 1,1 0,{_fmt(2 * r)}"
            f"a{_fmt(r)},{_fmt(r)} 0 1,1 0,{_fmt(-2 * r)}Z"
        )

    def _line(self, coords: Sequence[Sequence[float]], projection: OrthographicProjection, closed: bool) -> str:
        runs: List[List[Point]] = [[]]
        for lon, lat in (c[:2] for c in coords):
            p = projection.project(lon, lat)
            if p is None:
                if runs[-1]:
                    runs.append([])
                continue
            runs[-1].append(p)

        runs = [run for run in runs if run]
        whole = closed and len(runs) == 1 and len(runs[0]) == len(coords)
        parts = []
        for run in runs:
            head, tail = run[0], run[1:]
            segment = f"M{_fmt(head[0])},{_fmt(head[1])}"
            segment += "".join(f"L{_fmt(x)},{_fmt(y)}" for x, y in tail)
            if whole:
                segment += "Z"
            parts.append(segment)
        return "".join(parts)
