"""
Plain-value adapter.

Accepts what a caller without a geometry library has at hand:

- bounds: ``Bounds``, ``(left, bottom, right, top)``, ``{"left": ...}``,
  ``{"leftBottom": ..., "rightTop": ...}`` or any GeoJSON geometry
- points: ``(x, y)``, ``{"x": ..., "y": ...}``, GeoJSON Point
- geometries: GeoJSON mappings and anything exposing ``__geo_interface__``
"""

from numbers import Number
from typing import Any, Dict, Mapping, Sequence, Union

from shapely.geometry import mapping, shape

from iclient.common.geometry import Bounds, GeometryPoint, ServerGeometry, bounds_of

from .base import GeometryAdapter


def _is_xy(value: Any) -> bool:
    return (
        isinstance(value, Sequence)
        and not isinstance(value, str)
        and len(value) == 2
        and all(isinstance(v, Number) for v in value)
    )


def _is_geojson(value: Any) -> bool:
    return hasattr(value, "__geo_interface__") or (isinstance(value, Mapping) and "type" in value)


class PlainAdapter(GeometryAdapter):
    name = "plain"

    def to_bounds(self, value: Any) -> Bounds:
        if isinstance(value, Bounds):
            return value
        if isinstance(value, Mapping) and "leftBottom" in value:
            return Bounds.from_server_json(value)
        if isinstance(value, Mapping) and "left" in value:
            return Bounds(value["left"], value["bottom"], value["right"], value["top"])
        if _is_geojson(value):
            return bounds_of(value)
        if isinstance(value, Sequence) and not isinstance(value, str) and len(value) == 4:
            return Bounds.from_bbox(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to Bounds")

    def to_geometry(self, value: Any) -> Union[GeometryPoint, ServerGeometry]:
        if isinstance(value, (GeometryPoint, ServerGeometry)):
            return value
        if _is_xy(value):
            return GeometryPoint(float(value[0]), float(value[1]))
        if isinstance(value, Mapping) and "x" in value and "y" in value and "type" not in value:
            return GeometryPoint(float(value["x"]), float(value["y"]))
        if _is_geojson(value):
            geojson = mapping(shape(value))
            if geojson["type"] == "Point":
                x, y = geojson["coordinates"][:2]
                return GeometryPoint(float(x), float(y))
            return ServerGeometry.from_geojson(geojson)
        raise TypeError(f"Cannot convert {type(value).__name__} to an iServer geometry")

    def to_geojson(self, value: Any) -> Dict[str, Any]:
        if isinstance(value, (GeometryPoint, ServerGeometry)):
            return value.to_geojson()
        if _is_xy(value):
            return {"type": "Point", "coordinates": [float(value[0]), float(value[1])]}
        if hasattr(value, "__geo_interface__"):
            return dict(value.__geo_interface__)
        if isinstance(value, Mapping) and "type" in value:
            return dict(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to GeoJSON")
