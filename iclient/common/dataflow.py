# ============================================================================
# MODULE CONTEXT - DATAFLOW CHANNEL
# ============================================================================
# STATUS: Common Layer - real-time DataFlow service over WebSockets
# PURPOSE: Broadcast features and subscribe to feature updates
# EXPORTS: DataFlowChannel, ChannelEvent, DATAFLOW_EVENT_TYPES
# DEPENDENCIES: websockets (sync client), threading
# ============================================================================
"""
DataFlow channel.

A DataFlow service exposes two WebSocket endpoints next to its REST URL::

    http://host:8090/iserver/services/dataflow/dataflow
    -> ws://host:8090/iserver/services/dataflow/dataflow/broadcast
    -> ws://host:8090/iserver/services/dataflow/dataflow/subscribe

The channel reports everything through its ``events`` registry; no method
raises for connection problems. Subscribed messages are read on a daemon
thread and delivered as ``messageSuccessed`` events, so listeners run on
that thread.
"""

import json
import threading
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from websockets.exceptions import WebSocketException
from websockets.sync.client import connect as ws_connect

from iclient.config import get_client_settings
from iclient.events import Events
from iclient.util_logger import ComponentType, LoggerFactory

logger = LoggerFactory.create_logger(ComponentType.CHANNEL, "DataFlowChannel")

DATAFLOW_EVENT_TYPES = [
    "broadcastSocketConnected",
    "broadcastSocketError",
    "broadcastFailed",
    "broadcastSuccessed",
    "subscribeSocketConnected",
    "subscribeSocketError",
    "messageSuccessed",
    "setFilterParamSuccessed",
]


@dataclass
class ChannelEvent:
    """
    Event emitted by the channel.

    ``type`` is the socket-level event (open, send, message, error);
    ``event_type`` is the DataFlow event name listeners registered for.
    """
    type: str
    event_type: str
    data: Any = None
    feature_result: Any = None
    error: Optional[str] = None


class DataFlowChannel:
    """
    Broadcast/subscribe channel of one DataFlow service.

    Args:
        url: DataFlow service URL (http, https, ws or wss)
        geometry: GeoJSON geometry (or list of them) filtering subscriptions
        exclude_field: Field names the server leaves out of messages
        prj_coord_sys: Coordinate system of broadcast/received features
        connect: WebSocket factory ``connect(uri, open_timeout=...)``;
            defaults to ``websockets.sync.client.connect``
    """

    def __init__(
        self,
        url: str,
        geometry: Any = None,
        exclude_field: Optional[List[str]] = None,
        prj_coord_sys: Any = None,
        connect: Optional[Callable[..., Any]] = None
    ):
        self.url = url
        self.geometry = geometry
        self.exclude_field = exclude_field
        self.prj_coord_sys = prj_coord_sys
        self.events = Events(DATAFLOW_EVENT_TYPES)
        self.broadcast_websocket = None
        self.subscribe_websocket = None
        self.subscribe_thread: Optional[threading.Thread] = None
        self._connect = connect or ws_connect
        self._open_timeout = get_client_settings().dataflow_open_timeout
        self._lock = threading.Lock()

    # =========================================================================
    # Connection helpers
    # =========================================================================

    def _ws_url(self, endpoint: str) -> str:
        url = self.url
        if url.startswith("https://"):
            url = "wss://" + url[len("https://"):]
        elif url.startswith("http://"):
            url = "ws://" + url[len("http://"):]
        return f"{url}/{endpoint}"

    def _open(self, endpoint: str):
        return self._connect(self._ws_url(endpoint), open_timeout=self._open_timeout)

    def _fire(self, event_type: str, socket_type: str, **fields) -> None:
        self.events.trigger_event(event_type, ChannelEvent(type=socket_type, event_type=event_type, **fields))

    # =========================================================================
    # Broadcast
    # =========================================================================

    def init_broadcast(self) -> "DataFlowChannel":
        self.unbroadcast()
        try:
            websocket = self._open("broadcast")
        except (WebSocketException, OSError) as e:
            logger.warning(f"Broadcast socket failed to open: {e}")
            self._fire("broadcastSocketError", "error", error=str(e))
            return self
        with self._lock:
            self.broadcast_websocket = websocket
        self._fire("broadcastSocketConnected", "open")
        return self

    def broadcast(self, feature: Any) -> None:
        """Send one GeoJSON feature; fires broadcastSuccessed or broadcastFailed."""
        websocket = self.broadcast_websocket
        if websocket is None:
            self._fire("broadcastFailed", "error", data=feature, error="broadcast socket is not open")
            return
        if hasattr(feature, "__geo_interface__"):
            feature = feature.__geo_interface__
        try:
            websocket.send(json.dumps(feature, ensure_ascii=False))
        except (WebSocketException, OSError) as e:
            logger.warning(f"Broadcast failed: {e}")
            self._fire("broadcastFailed", "error", data=feature, error=str(e))
            return
        self._fire("broadcastSuccessed", "send", data=feature)

    def unbroadcast(self) -> None:
        with self._lock:
            websocket, self.broadcast_websocket = self.broadcast_websocket, None
        if websocket is not None:
            websocket.close()

    # =========================================================================
    # Subscribe
    # =========================================================================

    def init_subscribe(self) -> "DataFlowChannel":
        self.unsubscribe()
        try:
            websocket = self._open("subscribe")
        except (WebSocketException, OSError) as e:
            logger.warning(f"Subscribe socket failed to open: {e}")
            self._fire("subscribeSocketError", "error", error=str(e))
            return self
        try:
            websocket.send(self._get_filter_params())
        except (WebSocketException, OSError) as e:
            logger.warning(f"Subscribe filter could not be sent: {e}")
            websocket.close()
            self._fire("subscribeSocketError", "error", error=str(e))
            return self
        with self._lock:
            self.subscribe_websocket = websocket
        self._fire("subscribeSocketConnected", "open")
        self.subscribe_thread = threading.Thread(
            target=self._read_messages,
            args=(websocket,),
            name="dataflow-subscribe",
            daemon=True
        )
        self.subscribe_thread.start()
        return self

    def _read_messages(self, websocket) -> None:
        try:
            for message in websocket:
                try:
                    feature_result = json.loads(message)
                except ValueError as e:
                    self._fire("subscribeSocketError", "error", data=message, error=f"invalid message: {e}")
                    continue
                self._fire("messageSuccessed", "message", data=message, feature_result=feature_result)
        except (WebSocketException, OSError) as e:
            # A socket closed by unsubscribe() is not an error
            if self.subscribe_websocket is websocket:
                logger.warning(f"Subscribe socket error: {e}")
                self._fire("subscribeSocketError", "error", error=str(e))

    def unsubscribe(self) -> None:
        with self._lock:
            websocket, self.subscribe_websocket = self.subscribe_websocket, None
            thread, self.subscribe_thread = self.subscribe_thread, None
        if websocket is not None:
            websocket.close()
        # Listeners may call unsubscribe() from the reader thread itself
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._open_timeout)

    # =========================================================================
    # Filters
    # =========================================================================

    def _get_filter_params(self) -> str:
        filter_param = {
            "excludeField": self.exclude_field,
            "geometry": self.geometry,
            "prjCoordSys": self.prj_coord_sys,
        }
        return json.dumps({"filterParam": filter_param}, ensure_ascii=False)

    def _send_filter_params(self) -> None:
        websocket = self.subscribe_websocket
        if websocket is None:
            return
        message = self._get_filter_params()
        try:
            websocket.send(message)
        except (WebSocketException, OSError) as e:
            logger.warning(f"Filter update failed: {e}")
            self._fire("subscribeSocketError", "error", data=message, error=str(e))
            return
        self._fire("setFilterParamSuccessed", "send", data=message)

    def set_exclude_field(self, exclude_field: Optional[List[str]]) -> "DataFlowChannel":
        self.exclude_field = exclude_field
        self._send_filter_params()
        return self

    def set_geometry(self, geometry: Any) -> "DataFlowChannel":
        self.geometry = geometry
        self._send_filter_params()
        return self

    def destroy(self) -> None:
        self.unbroadcast()
        self.unsubscribe()
        self.events.destroy()
