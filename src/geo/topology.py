"""
Topology decoding.

The world document stores countries, cities and trips as a topology:
shared arcs, optionally quantized and delta-encoded, referenced by index
from each geometry. This module turns named objects back into GeoJSON.
"""

import logging
from typing import Any, Dict, List, Optional

import numpy as np

logger = logging.getLogger(__name__)


class TopologyError(ValueError):
    """Raised for malformed topology documents."""


class ArcTable:
    """
    Decoded arcs of a topology.

    Quantized topologies carry a `transform` (scale, translate) and store
    each arc as integer deltas from the previous position.
    """

    def __init__(self, topology: Dict[str, Any]):
        if topology.get("type") != "Topology":
            raise TopologyError(f"Not a topology: type={topology.get('type')!r}")

        transform = topology.get("transform")
        if transform is not None:
            self.scale = np.asarray(transform["scale"], dtype=np.float64)
            self.translate = np.asarray(transform["translate"], dtype=np.float64)
        else:
            self.scale = None
            self.translate = None

        self.arcs = [self._decode_arc(arc) for arc in topology.get("arcs", [])]
        logger.debug(f"Decoded {len(self.arcs)} arcs (quantized={self.quantized})")

    @property
    def quantized(self) -> bool:
        return self.scale is not None

    def _decode_arc(self, arc: List[List[float]]) -> np.ndarray:
        points = np.asarray(arc, dtype=np.float64)
        if points.size == 0:
            return np.empty((0, 2))
        points = points[:, :2]
        if self.quantized:
            points = np.cumsum(points, axis=0) * self.scale + self.translate
        return points

    def position(self, point: List[float]) -> List[float]:
        """Decode a single (non delta-encoded) position."""
        if self.quantized:
            return (np.asarray(point[:2], dtype=np.float64) * self.scale + self.translate).tolist()
        return [float(point[0]), float(point[1])]

    def line(self, indexes: List[int]) -> List[List[float]]:
        """Stitch arcs into one line; a negative index means arc ~i reversed."""
        points: List[List[float]] = []
        for index in indexes:
            try:
                arc = self.arcs[~index if index < 0 else index]
            except IndexError:
                raise TopologyError(f"Arc index {index} out of range ({len(self.arcs)} arcs)")
            if index < 0:
                arc = arc[::-1]
            coords = arc.tolist()
            if points:
                # Consecutive arcs share their joining position
                coords = coords[1:]
            points.extend(coords)
        if len(points) < 2 and points:
            points.append(list(points[0]))
        return points

    def ring(self, indexes: List[int]) -> List[List[float]]:
        points = self.line(indexes)
        # A closed ring needs at least four positions
        while 0 < len(points) < 4:
            points.append(list(points[0]))
        return points


def _geometry(arcs: ArcTable, obj: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    kind = obj.get("type")
    if kind is None:
        return None
    if kind == "GeometryCollection":
        return {
            "type": "GeometryCollection",
            "geometries": [_geometry(arcs, o) for o in obj.get("geometries", [])],
        }
    if kind == "Point":
        coordinates = arcs.position(obj["coordinates"])
    elif kind == "MultiPoint":
        coordinates = [arcs.position(p) for p in obj["coordinates"]]
    elif kind == "LineString":
        coordinates = arcs.line(obj["arcs"])
    elif kind == "MultiLineString":
        coordinates = [arcs.line(a) for a in obj["arcs"]]
    elif kind == "Polygon":
        coordinates = [arcs.ring(a) for a in obj["arcs"]]
    elif kind == "MultiPolygon":
        coordinates = [[arcs.ring(a) for a in polygon] for polygon in obj["arcs"]]
    else:
        raise TopologyError(f"Unsupported geometry type: {kind}")
    return {"type": kind, "coordinates": coordinates}


def _feature(arcs: ArcTable, obj: Dict[str, Any]) -> Dict[str, Any]:
    feature: Dict[str, Any] = {
        "type": "Feature",
        "properties": obj.get("properties") or {},
        "geometry": _geometry(arcs, obj),
    }
    if "id" in obj:
        feature["id"] = obj["id"]
    return feature


def feature(topology: Dict[str, Any], name: str) -> Dict[str, Any]:
    """
    Convert a named topology object to GeoJSON.

    Args:
        topology: Parsed topology document
        name: Key under `objects` (e.g. "countries")

    Returns:
        A FeatureCollection for geometry collections, else a single Feature
    """
    objects = topology.get("objects", {})
    if name not in objects:
        raise TopologyError(f"Topology has no object '{name}' (have {sorted(objects)})")

    arcs = ArcTable(topology)
    obj = objects[name]
    if obj.get("type") == "GeometryCollection":
        return {
            "type": "FeatureCollection",
            "features": [_feature(arcs, o) for o in obj.get("geometries", [])],
        }
    return _feature(arcs, obj)


def features(topology: Dict[str, Any], name: str) -> List[Dict[str, Any]]:
    """List of features for a named object (a lone geometry becomes one feature)."""
    decoded = feature(topology, name)
    if decoded["type"] == "FeatureCollection":
        return decoded["features"]
    return [decoded]
