# ============================================================================
# MODULE CONTEXT - MAP LAYER MODEL
# ============================================================================
# STATUS: Common Layer - UGC layer DTOs and the layers resource of a map
# PURPOSE: Parse iServer layer JSON into typed sub-layer objects
# EXPORTS: ServerColor, UGCMapLayer, UGCSubLayer, UGCImage, LayerInfoRequest
# DEPENDENCIES: pydantic, httpx (through CommonServiceBase)
# ============================================================================
"""
Map layer DTOs.

iServer nests sub-layers under ``subLayers.layers``. Image sub-layers
(``ugcLayerType == "IMAGE"``) carry display settings and a transparent
color given as ``{"red", "green", "blue"}``; ``UGCImage.from_json``
rebuilds that color as a ``ServerColor``.
"""

from typing import Any, Dict, List, Mapping, Optional

from .enums import ColorSpaceType, UGCLayerType
from .geometry import Bounds
from .models import ServerModel
from .service_base import CommonServiceBase, ServiceEvent


class ServerColor(ServerModel):
    """RGB color, components 0-255."""
    red: Optional[int] = 255
    green: Optional[int] = 0
    blue: Optional[int] = 0

    def __init__(self, red: Optional[int] = 255, green: Optional[int] = 0, blue: Optional[int] = 0, **data):
        super().__init__(red=red, green=green, blue=blue, **data)


class UGCMapLayer(ServerModel):
    bounds: Optional[Any] = None
    caption: Optional[str] = None
    description: Optional[str] = None
    name: Optional[str] = None
    queryable: Optional[bool] = None
    sub_layers: Optional[Any] = None
    type: Optional[str] = None
    visible: Optional[bool] = None

    def from_json(self, json_object: Mapping[str, Any]) -> "UGCMapLayer":
        super().from_json(json_object)
        if isinstance(self.bounds, Mapping) and "leftBottom" in self.bounds:
            self.bounds = Bounds.from_server_json(self.bounds)
        return self


class UGCSubLayer(UGCMapLayer):
    dataset_info: Optional[Dict[str, Any]] = None
    display_filter: Optional[str] = None
    join_items: Optional[List[Dict[str, Any]]] = None
    representation_field: Optional[str] = None
    ugc_layer_type: Optional[str] = None


class UGCImage(UGCSubLayer):
    """
    UGC image layer.

    Attributes:
        brightness: Image brightness
        color_space_type: Display color space
        contrast: Image contrast
        display_band_indexes: Indexes of the displayed bands
        transparent: Whether the background is transparent
        transparent_color: Background transparent color
        transparent_color_tolerance: Tolerance of the transparent color
    """
    brightness: Optional[int] = None
    color_space_type: Optional[ColorSpaceType] = None
    contrast: Optional[int] = None
    display_band_indexes: Optional[List[int]] = None
    transparent: Optional[bool] = None
    transparent_color: Optional[Any] = None
    transparent_color_tolerance: Optional[int] = None

    def from_json(self, json_object: Mapping[str, Any]) -> "UGCImage":
        super().from_json(json_object)
        color = self.transparent_color
        if isinstance(color, Mapping):
            self.transparent_color = ServerColor(color.get("red"), color.get("green"), color.get("blue"))
        return self


def parse_sub_layer(json_object: Mapping[str, Any]) -> UGCSubLayer:
    """Build the sub-layer class matching ``ugcLayerType``."""
    if json_object.get("ugcLayerType") == UGCLayerType.IMAGE.value:
        return UGCImage().from_json(json_object)
    return UGCSubLayer().from_json(json_object)


def _collect_sub_layers(layers: List[Mapping[str, Any]]) -> List[UGCSubLayer]:
    result = []
    for layer in layers:
        nested = (layer.get("subLayers") or {}).get("layers") or []
        for sub_layer in nested:
            result.append(parse_sub_layer(sub_layer))
        result.extend(_collect_sub_layers(nested))
    return result


class LayerInfoRequest(CommonServiceBase):
    """Request object for ``{map_url}/layers.json``."""

    def get_layers_info(self) -> ServiceEvent:
        return self.request("GET", f"{self.url}/layers.json")

    def transform_result(self, result: Any) -> Any:
        layers = result if isinstance(result, list) else [result]
        return {"layers": result, "sub_layers": _collect_sub_layers(layers)}
