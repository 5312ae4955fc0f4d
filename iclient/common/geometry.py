# ============================================================================
# MODULE CONTEXT - GEOMETRY MODEL
# ============================================================================
# STATUS: Common Layer - geometry types sent to and read from iServer
# PURPOSE: Bounds/point/server-geometry records and GeoJSON conversion
# EXPORTS: Bounds, GeometryPoint, ServerGeometry, to_server_geometry, feature_to_geojson
# DEPENDENCIES: shapely
# ============================================================================
"""
Geometry model for the common service layer.

iServer describes geometries as a flat point list split into parts::

    {"type": "REGION", "parts": [5, 4], "partTopo": [1, -1],
     "points": [{"x": 0, "y": 0}, ...]}

``ServerGeometry`` converts between that layout and GeoJSON. Inputs
exposing ``__geo_interface__`` (shapely, geojson, GeoPandas rows) are
normalized through shapely first.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from shapely.geometry import mapping, shape

from .enums import GeometryType

logger = logging.getLogger(__name__)


@dataclass
class Bounds:
    """Rectangle in map units."""
    left: float
    bottom: float
    right: float
    top: float

    @classmethod
    def from_bbox(cls, bbox: Sequence[float]) -> "Bounds":
        left, bottom, right, top = (float(v) for v in bbox)
        return cls(left, bottom, right, top)

    def to_bbox(self) -> Tuple[float, float, float, float]:
        return (self.left, self.bottom, self.right, self.top)

    def to_server_json(self) -> Dict[str, Dict[str, float]]:
        return {
            "leftBottom": {"x": self.left, "y": self.bottom},
            "rightTop": {"x": self.right, "y": self.top},
        }

    @classmethod
    def from_server_json(cls, data: Mapping[str, Any]) -> "Bounds":
        left_bottom = data["leftBottom"]
        right_top = data["rightTop"]
        return cls(left_bottom["x"], left_bottom["y"], right_top["x"], right_top["y"])


@dataclass
class GeometryPoint:
    """Single point."""
    x: float
    y: float

    def to_server_json(self) -> Dict[str, Any]:
        return ServerGeometry(
            type=GeometryType.POINT,
            parts=[1],
            points=[(self.x, self.y)],
        ).to_server_json()

    def to_geojson(self) -> Dict[str, Any]:
        return {"type": "Point", "coordinates": [self.x, self.y]}


@dataclass
class ServerGeometry:
    """
    iServer geometry: typed flat point list with per-part point counts.

    ``part_topo`` marks each REGION part as exterior (1) or hole (-1); it
    is only present when a polygon has holes.
    """
    type: GeometryType
    parts: List[int] = field(default_factory=list)
    points: List[Tuple[float, float]] = field(default_factory=list)
    part_topo: Optional[List[int]] = None
    id: int = 0

    # ------------------------------------------------------------------
    # GeoJSON -> server
    # ------------------------------------------------------------------

    @classmethod
    def from_geojson(cls, geometry: Any) -> "ServerGeometry":
        """
        Build from a GeoJSON geometry mapping or a ``__geo_interface__`` object.

        Raises:
            ValueError: For geometry collections or unknown types
        """
        geojson = mapping(shape(geometry))
        geom_type = geojson["type"]
        coordinates = geojson["coordinates"]

        if geom_type == "Point":
            return cls(GeometryType.POINT, [1], [_xy(coordinates)])
        if geom_type == "MultiPoint":
            return cls(GeometryType.POINT, [1] * len(coordinates), [_xy(c) for c in coordinates])
        if geom_type == "LineString":
            return cls._from_parts(GeometryType.LINE, [coordinates])
        if geom_type == "MultiLineString":
            return cls._from_parts(GeometryType.LINE, coordinates)
        if geom_type == "Polygon":
            return cls._from_polygons([coordinates])
        if geom_type == "MultiPolygon":
            return cls._from_polygons(coordinates)

        raise ValueError(f"Unsupported geometry type for iServer: {geom_type}")

    @classmethod
    def _from_parts(cls, geom_type: GeometryType, parts: Sequence[Sequence]) -> "ServerGeometry":
        points: List[Tuple[float, float]] = []
        counts: List[int] = []
        for part in parts:
            counts.append(len(part))
            points.extend(_xy(c) for c in part)
        return cls(geom_type, counts, points)

    @classmethod
    def _from_polygons(cls, polygons: Sequence[Sequence]) -> "ServerGeometry":
        rings: List[Sequence] = []
        topo: List[int] = []
        for polygon in polygons:
            for index, ring in enumerate(polygon):
                rings.append(ring)
                topo.append(1 if index == 0 else -1)
        geometry = cls._from_parts(GeometryType.REGION, rings)
        if -1 in topo:
            geometry.part_topo = topo
        return geometry

    def to_server_json(self) -> Dict[str, Any]:
        result = {
            "id": self.id,
            "type": GeometryType(self.type).value,
            "parts": list(self.parts),
            "points": [{"x": x, "y": y} for x, y in self.points],
            "style": None,
        }
        if self.part_topo:
            result["partTopo"] = list(self.part_topo)
        return result

    # ------------------------------------------------------------------
    # server -> GeoJSON
    # ------------------------------------------------------------------

    @classmethod
    def from_server_json(cls, data: Mapping[str, Any]) -> "ServerGeometry":
        """
        Raises:
            ValueError: If the geometry type is not POINT, LINE or REGION
        """
        geom_type = GeometryType(data.get("type"))
        points = [(p["x"], p["y"]) for p in data.get("points") or []]
        parts = list(data.get("parts") or ([len(points)] if points else []))
        return cls(
            type=geom_type,
            parts=parts,
            points=points,
            part_topo=data.get("partTopo"),
            id=data.get("id") or 0,
        )

    def _split_parts(self) -> List[List[List[float]]]:
        result = []
        offset = 0
        for count in self.parts:
            result.append([list(p) for p in self.points[offset:offset + count]])
            offset += count
        return result

    def to_geojson(self) -> Dict[str, Any]:
        geom_type = GeometryType(self.type)

        if geom_type == GeometryType.POINT:
            if len(self.points) == 1:
                return {"type": "Point", "coordinates": list(self.points[0])}
            return {"type": "MultiPoint", "coordinates": [list(p) for p in self.points]}

        parts = self._split_parts()
        if geom_type == GeometryType.LINE:
            if len(parts) == 1:
                return {"type": "LineString", "coordinates": parts[0]}
            return {"type": "MultiLineString", "coordinates": parts}

        polygons: List[List] = []
        topo = self.part_topo or [1] * len(parts)
        for ring, kind in zip(parts, topo):
            if kind == -1 and polygons:
                polygons[-1].append(ring)
            else:
                polygons.append([ring])
        if len(polygons) == 1:
            return {"type": "Polygon", "coordinates": polygons[0]}
        return {"type": "MultiPolygon", "coordinates": polygons}


def _xy(coordinate: Sequence[float]) -> Tuple[float, float]:
    return (float(coordinate[0]), float(coordinate[1]))


def bounds_of(geometry: Any) -> Bounds:
    """Bounding rectangle of a GeoJSON mapping or ``__geo_interface__`` object."""
    return Bounds.from_bbox(shape(geometry).bounds)


def to_server_geometry(geometry: Any) -> Optional[Dict[str, Any]]:
    """
    Serialize any supported geometry value to iServer JSON.

    Accepts ``GeometryPoint``, ``ServerGeometry``, an already-serialized
    server geometry dict, or anything ``ServerGeometry.from_geojson`` takes.
    """
    if geometry is None:
        return None
    if isinstance(geometry, (GeometryPoint, ServerGeometry)):
        return geometry.to_server_json()
    if isinstance(geometry, Mapping) and "points" in geometry:
        return dict(geometry)
    return ServerGeometry.from_geojson(geometry).to_server_json()


def feature_to_geojson(feature: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert one iServer feature to a GeoJSON Feature.

    iServer features carry ``fieldNames``/``fieldValues`` side by side and
    an optional server geometry.
    """
    properties = dict(zip(feature.get("fieldNames") or [], feature.get("fieldValues") or []))
    geometry = None
    server_geometry = feature.get("geometry")
    if server_geometry:
        try:
            geometry = ServerGeometry.from_server_json(server_geometry).to_geojson()
        except ValueError:
            logger.debug(f"Feature {feature.get('ID')} has unsupported geometry type {server_geometry.get('type')}")
    return {
        "type": "Feature",
        "id": feature.get("ID"),
        "properties": properties,
        "geometry": geometry,
    }


def features_to_feature_collection(features: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [feature_to_geojson(f) for f in features],
    }
