# ============================================================================
# MODULE CONTEXT - ADDRESS MATCH REQUESTS
# ============================================================================
# STATUS: Common Layer - geocoding/geodecoding resources of an address match service
# PURPOSE: Forward and reverse geocoding parameters and request object
# EXPORTS: GeoCodingParameter, GeoDecodingParameter, AddressMatchRequest
# DEPENDENCIES: pydantic, httpx (through CommonServiceBase)
# ============================================================================
"""
Address match requests.

Forward geocoding::

    GET {url}/geocoding.json?address=...&fromIndex=0&toIndex=10&filters=a,b&maxReturn=-1

Reverse geocoding::

    GET {url}/geodecoding.json?x=...&y=...&geoDecodingRadius=500&...

Validation happens on the server. Whatever JSON it answers with, including
``{"error": {"code": 400, "errorMsg": "address cannot be null!"}}``, is
delivered as ``processCompleted``; only transport failures are
``processFailed``.
"""

from typing import Any, Dict, List, Optional, Union

from .models import ServerModel
from .request import FetchResponse
from .service_base import CommonServiceBase, ServiceEvent


class GeoCodingParameter(ServerModel):
    address: Optional[str] = None
    from_index: Optional[int] = None
    to_index: Optional[int] = None
    filters: Optional[Union[str, List[str]]] = None
    prj_coord_sys: Optional[str] = None
    max_return: Optional[int] = None

    def to_query(self) -> Dict[str, Any]:
        """Query string parameters, ``None`` values dropped later by the transport."""
        return {
            "address": self.address,
            "fromIndex": self.from_index,
            "toIndex": self.to_index,
            "filters": self.filters,
            "prjCoordSys": self.prj_coord_sys,
            "maxReturn": self.max_return,
        }


class GeoDecodingParameter(ServerModel):
    x: Optional[float] = None
    y: Optional[float] = None
    from_index: Optional[int] = None
    to_index: Optional[int] = None
    filters: Optional[Union[str, List[str]]] = None
    prj_coord_sys: Optional[str] = None
    max_return: Optional[int] = None
    geo_decoding_radius: Optional[float] = None

    def to_query(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "fromIndex": self.from_index,
            "toIndex": self.to_index,
            "filters": self.filters,
            "prjCoordSys": self.prj_coord_sys,
            "maxReturn": self.max_return,
            "geoDecodingRadius": self.geo_decoding_radius,
        }


class AddressMatchRequest(CommonServiceBase):
    """Request object for the geocoding and geodecoding resources."""

    def code(self, params: GeoCodingParameter) -> ServiceEvent:
        return self.request("GET", f"{self.url}/geocoding.json", params=params.to_query())

    def decode(self, params: GeoDecodingParameter) -> ServiceEvent:
        return self.request("GET", f"{self.url}/geodecoding.json", params=params.to_query())

    def handle_response(self, response: FetchResponse) -> ServiceEvent:
        if response.data is None:
            return self.service_process_failed(response)
        result = response.data
        if isinstance(result, dict) and "error" in result and "success" not in result:
            result = {**result, "success": bool(result.get("succeed", False))}
        return self.service_process_completed(result)
