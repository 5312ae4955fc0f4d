# ============================================================================
# MODULE CONTEXT - ADDRESS MATCH SERVICE
# ============================================================================
# STATUS: Service Layer - address match wrapper
# PURPOSE: Forward (code) and reverse (decode) geocoding
# EXPORTS: AddressMatchService, address_match_service
# DEPENDENCIES: iclient.common.address_match
# ============================================================================
"""
Address match service.

Usage:
    service = AddressMatchService(address_match_url)
    service.code(GeoCodingParameter(address="公司", from_index=0, to_index=10,
                                    filters="北京市,海淀区", max_return=-1), on_result)

Input validation is the server's job: an invalid request still completes,
with ``event.result`` carrying ``success: False`` and the server's error.
"""

from typing import Callable

from iclient.common.address_match import AddressMatchRequest, GeoCodingParameter, GeoDecodingParameter
from iclient.common.service_base import ServiceEvent

from .service_base import ServiceBase


class AddressMatchService(ServiceBase):

    def code(self, params: GeoCodingParameter, callback: Callable[[ServiceEvent], None]) -> "AddressMatchService":
        """Forward geocoding: address -> locations."""
        self._request(callback).code(params)
        return self

    def decode(self, params: GeoDecodingParameter, callback: Callable[[ServiceEvent], None]) -> "AddressMatchService":
        """Reverse geocoding: location -> addresses."""
        self._request(callback).decode(params)
        return self

    def _request(self, callback) -> AddressMatchRequest:
        return AddressMatchRequest(
            self.url,
            event_listeners=self._event_listeners(callback),
            **self._request_options()
        )


def address_match_service(url: str, options=None, **kwargs) -> AddressMatchService:
    return AddressMatchService(url, options, **kwargs)
