# ============================================================================
# MODULE CONTEXT - SERVICE BASE
# ============================================================================
# STATUS: Service Layer - base of every caller-facing wrapper
# PURPOSE: URL normalization, option defaults, initialized/destroy lifecycle
# EXPORTS: ServiceBase
# DEPENDENCIES: iclient.events, iclient.adapters
# ============================================================================
"""
Service base.

Every wrapper is constructed as ``Service(url, options=None, **options)``:

- one trailing slash is stripped from ``url``; anything else is kept as is
- caller options are merged over the class-level defaults
- ``initialized`` fires at the end of construction, ``destroy`` from
  ``destroy()``

Options:
    proxy: Proxy URL prefix or callable
    server_type: ServerType of the service (iServer | iPortal | Online)
    with_credentials: Share cookies across requests
    adapter: GeometryAdapter converting native geometries (PlainAdapter)
    event_listeners: ``{event_type: fn}`` registered before ``initialized``
    transport: httpx transport handed to the common request objects
"""

from typing import Any, Dict, Mapping, Optional

from iclient.adapters import GeometryAdapter, PlainAdapter
from iclient.events import Evented
from iclient.util_logger import ComponentType, LoggerFactory

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "ServiceBase")


class ServiceBase(Evented):

    options = {
        "url": None,
        "proxy": None,
        # iServer | iPortal | Online
        "server_type": None,
        "with_credentials": False,
        "adapter": None,
        "event_listeners": None,
        "transport": None,
    }

    def __init__(self, url: Optional[str], options: Optional[Mapping[str, Any]] = None, **kwargs):
        super().__init__(options, **kwargs)
        if url and url.endswith("/"):
            url = url[:-1]
        self.url = url
        self.adapter: GeometryAdapter = self.options.get("adapter") or PlainAdapter()
        for event_type, func in (self.options.get("event_listeners") or {}).items():
            self.on(event_type, func)
        logger.debug(f"{type(self).__name__} created for {url}")
        self.fire("initialized", self)

    def _request_options(self) -> Dict[str, Any]:
        """Options every common request object is built with."""
        return {
            "proxy": self.options.get("proxy"),
            "with_credentials": self.options.get("with_credentials"),
            "server_type": self.options.get("server_type"),
            "transport": self.options.get("transport"),
        }

    def _event_listeners(self, callback) -> Dict[str, Any]:
        return {
            "scope": self,
            "processCompleted": callback,
            "processFailed": callback,
        }

    def destroy(self) -> None:
        """Fire ``destroy``; callers drop their reference afterwards."""
        self.fire("destroy", self)
