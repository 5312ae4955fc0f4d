"""
Geometry adapter interface.

Each host "framework" (plain Python values, shapely, ...) gets one small
adapter turning its native bounds, points and geometries into the common
geometry types. Service wrappers only talk to this interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Union

from iclient.common.geometry import Bounds, GeometryPoint, ServerGeometry


class GeometryAdapter(ABC):
    """Converts native geometry values to the common geometry model."""

    name: str = "base"

    @abstractmethod
    def to_bounds(self, value: Any) -> Bounds:
        """Native rectangle -> Bounds."""

    @abstractmethod
    def to_geometry(self, value: Any) -> Union[GeometryPoint, ServerGeometry]:
        """Native point -> GeometryPoint, any other geometry -> ServerGeometry."""

    @abstractmethod
    def to_geojson(self, value: Any) -> Dict[str, Any]:
        """Native geometry -> GeoJSON geometry mapping."""
