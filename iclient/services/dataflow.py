# ============================================================================
# MODULE CONTEXT - DATAFLOW SERVICE
# ============================================================================
# STATUS: Service Layer - real-time DataFlow wrapper
# PURPOSE: Relay DataFlow channel events to the wrapper's listeners
# EXPORTS: DataFlowService, DataFlowEvent, data_flow_service
# DEPENDENCIES: iclient.common.dataflow
# ============================================================================
"""
DataFlow service.

Usage:
    service = DataFlowService(dataflow_url, exclude_field=["speed"])
    service.on("messageSuccessed", lambda e: print(e.value.feature_result))
    service.init_subscribe()
    ...
    service.destroy()

Every channel event is re-dispatched as ``DataFlowEvent(type, value)``
where ``type`` is the DataFlow event name and ``value`` the channel event.
Listeners of ``messageSuccessed`` run on the channel's reader thread.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from iclient.common.dataflow import ChannelEvent, DataFlowChannel, DATAFLOW_EVENT_TYPES

from .service_base import ServiceBase


@dataclass
class DataFlowEvent:
    type: str
    value: ChannelEvent


class DataFlowService(ServiceBase):
    """
    Options:
        projection: Coordinate system of the features, stored as ``prj_coord_sys``
        geometry: Native geometry (or list of them) filtering subscriptions
        exclude_field: Field names left out of received messages
        connect: WebSocket factory passed to the channel
    """

    options = {
        "geometry": None,
        "exclude_field": None,
        "prj_coord_sys": None,
        "connect": None,
    }

    def __init__(self, url: str, options: Optional[Mapping[str, Any]] = None, **kwargs):
        super().__init__(url, options, **kwargs)
        if self.options.get("projection"):
            self.options["prj_coord_sys"] = self.options["projection"]
        self.data_flow = DataFlowChannel(
            self.url,
            geometry=self._to_geojson(self.options.get("geometry")),
            exclude_field=self.options.get("exclude_field"),
            prj_coord_sys=self.options.get("prj_coord_sys"),
            connect=self.options.get("connect")
        )
        self.data_flow.events.on({event_type: self._default_event for event_type in DATAFLOW_EVENT_TYPES})

    def init_broadcast(self) -> "DataFlowService":
        self.data_flow.init_broadcast()
        return self

    def broadcast(self, obj: Any) -> None:
        """Broadcast one GeoJSON feature."""
        self.data_flow.broadcast(obj)

    def init_subscribe(self) -> "DataFlowService":
        self.data_flow.init_subscribe()
        return self

    def set_exclude_field(self, exclude_field: Optional[List[str]]) -> "DataFlowService":
        self.data_flow.set_exclude_field(exclude_field)
        self.options["exclude_field"] = exclude_field
        return self

    def set_geometry(self, geometry: Any) -> "DataFlowService":
        self.data_flow.set_geometry(self._to_geojson(geometry))
        self.options["geometry"] = geometry
        return self

    def unsubscribe(self) -> None:
        self.data_flow.unsubscribe()

    def unbroadcast(self) -> None:
        self.data_flow.unbroadcast()

    def destroy(self) -> None:
        """Close both sockets, then fire ``destroy``."""
        self.data_flow.destroy()
        super().destroy()

    def _to_geojson(self, geometry: Any) -> Any:
        if geometry is None:
            return None
        if isinstance(geometry, (list, tuple)) and not self._is_coordinate(geometry):
            return [self.adapter.to_geojson(g) for g in geometry]
        return self.adapter.to_geojson(geometry)

    @staticmethod
    def _is_coordinate(value) -> bool:
        return len(value) == 2 and all(isinstance(v, (int, float)) for v in value)

    def _default_event(self, event: ChannelEvent) -> None:
        self.dispatch_event(DataFlowEvent(type=event.event_type or event.type, value=event))


def data_flow_service(url: str, options=None, **kwargs) -> DataFlowService:
    return DataFlowService(url, options, **kwargs)
