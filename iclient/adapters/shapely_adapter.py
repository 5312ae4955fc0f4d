"""
Shapely adapter.

Shapely points become ``GeometryPoint``; other shapely geometries are
serialized through their GeoJSON mapping. Non-shapely values fall back
to the plain adapter.
"""

from typing import Any, Dict, Union

from shapely.geometry import Point, mapping
from shapely.geometry.base import BaseGeometry

from iclient.common.geometry import Bounds, GeometryPoint, ServerGeometry

from .plain import PlainAdapter


class ShapelyAdapter(PlainAdapter):
    name = "shapely"

    def to_bounds(self, value: Any) -> Bounds:
        if isinstance(value, BaseGeometry):
            return Bounds.from_bbox(value.bounds)
        return super().to_bounds(value)

    def to_geometry(self, value: Any) -> Union[GeometryPoint, ServerGeometry]:
        if isinstance(value, Point):
            return GeometryPoint(value.x, value.y)
        if isinstance(value, BaseGeometry):
            return ServerGeometry.from_geojson(mapping(value))
        return super().to_geometry(value)

    def to_geojson(self, value: Any) -> Dict[str, Any]:
        if isinstance(value, BaseGeometry):
            return dict(mapping(value))
        return super().to_geojson(value)
