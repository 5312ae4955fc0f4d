"""
Layer info service: reads a map's layers and parses its UGC sub-layers.

The completed result is ``{"layers": <raw JSON>, "sub_layers": [UGCSubLayer | UGCImage]}``.
"""

from typing import Callable

from iclient.common.layers import LayerInfoRequest
from iclient.common.service_base import ServiceEvent

from .service_base import ServiceBase


class LayerInfoService(ServiceBase):

    def get_layers_info(self, callback: Callable[[ServiceEvent], None]) -> "LayerInfoService":
        LayerInfoRequest(
            self.url,
            event_listeners=self._event_listeners(callback),
            **self._request_options()
        ).get_layers_info()
        return self


def layer_info_service(url: str, options=None, **kwargs) -> LayerInfoService:
    return LayerInfoService(url, options, **kwargs)
