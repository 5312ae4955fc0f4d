# ============================================================================
# MODULE CONTEXT - COMMON SERVICE BASE
# ============================================================================
# STATUS: Common Layer - base for every framework-agnostic request object
# PURPOSE: Own a transport, dispatch results as processCompleted/processFailed
# EXPORTS: CommonServiceBase, ServiceEvent
# DEPENDENCIES: httpx (through FetchRequest)
# ============================================================================
"""
Common service base.

A request object is created per call with the caller's listeners::

    service = QueryBySQLService(url, event_listeners={
        "processCompleted": callback,
        "processFailed": callback,
    })
    service.process_async(params)

``process_async`` runs the HTTP call through ``FetchRequest`` and fires
exactly one of the two events with a ``ServiceEvent`` envelope. Failures
carry ``{"error": {"code": ..., "errorMsg": ...}}``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import httpx

from iclient.events import Events

from .enums import DataFormat, EventType, ServerType
from .request import FetchRequest, FetchResponse, ProxyType

logger = logging.getLogger(__name__)


@dataclass
class ServiceEvent:
    """Result envelope handed to callbacks."""
    type: str
    result: Any = None
    object: Any = None


class CommonServiceBase:
    """
    Base class of the common request objects.

    Args:
        url: Service URL
        proxy: Proxy prefix or callable, see FetchRequest
        with_credentials: Share cookies across requests
        server_type: iServer | iPortal | Online
        event_listeners: ``{"processCompleted": fn, "processFailed": fn}``;
            an optional ``"scope"`` entry is ignored
        format: Result format for services that convert results
        transport: Optional httpx transport
    """

    EVENT_TYPES = [EventType.PROCESS_COMPLETED.value, EventType.PROCESS_FAILED.value]

    def __init__(
        self,
        url: str,
        proxy: ProxyType = None,
        with_credentials: Optional[bool] = None,
        server_type: Optional[ServerType] = None,
        event_listeners: Optional[Mapping[str, Any]] = None,
        format: Optional[DataFormat] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.url = url
        self.format = DataFormat(format) if format else DataFormat.GEOJSON
        self.events = Events(self.EVENT_TYPES)
        self.event_listeners = event_listeners
        if event_listeners:
            self.events.on(event_listeners)
        self.fetch = FetchRequest(
            proxy=proxy,
            with_credentials=with_credentials,
            server_type=server_type,
            transport=transport
        )

    def destroy(self) -> None:
        if self.events:
            if self.event_listeners:
                self.events.un(self.event_listeners)
            self.events.destroy()
        if self.fetch:
            self.fetch.close()
        self.url = None
        self.format = None
        self.events = None
        self.event_listeners = None
        self.fetch = None

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        data: Any = None
    ) -> ServiceEvent:
        """Run one HTTP call and fire the matching event. Returns the envelope."""
        try:
            response = self.fetch.request(method, url, params=params, data=data)
        finally:
            self.fetch.close()
        return self.handle_response(response)

    def handle_response(self, response: FetchResponse) -> ServiceEvent:
        if response.success and not _has_error(response.data):
            return self.service_process_completed(response.data)
        return self.service_process_failed(response)

    def transform_result(self, result: Any) -> Any:
        """Hook for subclasses converting the decoded JSON."""
        return result

    def service_process_completed(self, result: Any) -> ServiceEvent:
        event = ServiceEvent(
            type=EventType.PROCESS_COMPLETED.value,
            result=self.transform_result(result),
            object=self
        )
        self.events.trigger_event(event.type, event)
        return event

    def service_process_failed(self, response: FetchResponse) -> ServiceEvent:
        if _has_error(response.data):
            error = dict(response.data["error"])
        else:
            error = {"code": response.status_code, "errorMsg": response.error}
        logger.info(f"{type(self).__name__} failed: {error.get('code')} {error.get('errorMsg')}")
        event = ServiceEvent(
            type=EventType.PROCESS_FAILED.value,
            result={"error": error},
            object=self
        )
        self.events.trigger_event(event.type, event)
        return event


def _has_error(data: Any) -> bool:
    return isinstance(data, Mapping) and isinstance(data.get("error"), Mapping)
