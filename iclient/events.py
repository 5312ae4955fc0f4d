# ============================================================================
# MODULE CONTEXT - EVENT DISPATCH
# ============================================================================
# STATUS: Core - pub/sub primitives shared by wrappers and common services
# PURPOSE: Listener registry for request objects, evented base for wrappers
# EXPORTS: Events, Evented, FrameworkEvent
# DEPENDENCIES: stdlib only
# ============================================================================
"""
Event dispatch primitives.

Two shapes exist:

- ``Events``: a named-listener registry owned by common request objects
  and channels. Listeners are registered with a handler map, the way
  iServer clients wire ``processCompleted`` / ``processFailed``.
- ``Evented``: base class for caller-facing wrappers. It merges option
  defaults declared on each class of the hierarchy and exposes
  ``fire`` / ``dispatch_event`` for the host application.

Listener exceptions propagate to whoever fired the event.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional


class Events:
    """
    Named listener registry.

    Usage:
        events = Events()
        events.on({"processCompleted": on_done, "processFailed": on_done})
        events.trigger_event("processCompleted", event)
    """

    def __init__(self, event_types: Optional[List[str]] = None):
        self.event_types = list(event_types or [])
        self.listeners: Dict[str, List[Callable]] = {}

    def on(self, handlers: Mapping[str, Any], scope: Any = None) -> None:
        """
        Register every ``name -> callable`` pair in ``handlers``.

        A ``"scope"`` entry is accepted for compatibility with handler maps
        that carry one; bound methods already know their owner.
        """
        for name, func in handlers.items():
            if name == "scope" or func is None:
                continue
            self.register(name, func)

    def register(self, name: str, func: Callable) -> None:
        self.listeners.setdefault(name, []).append(func)

    def un(self, handlers: Mapping[str, Any]) -> None:
        """Remove listeners previously registered with ``on``."""
        for name, func in handlers.items():
            if name == "scope" or func is None:
                continue
            self.unregister(name, func)

    def unregister(self, name: str, func: Callable) -> None:
        listeners = self.listeners.get(name, [])
        if func in listeners:
            listeners.remove(func)

    def trigger_event(self, name: str, event: Any = None) -> None:
        # Copy so listeners may unregister themselves while running
        for func in list(self.listeners.get(name, [])):
            func(event)

    def destroy(self) -> None:
        self.listeners = {}
        self.event_types = []


@dataclass
class FrameworkEvent:
    """Event delivered by ``Evented.fire``."""
    type: str
    target: Any = None
    data: Any = None


class Evented:
    """
    Evented base class for wrappers.

    Subclasses declare option defaults as a class-level ``options`` dict.
    Defaults are merged along the class hierarchy (subclass wins), then
    caller options are applied by ``set_options``.
    """

    options: Dict[str, Any] = {}

    def __init__(self, options: Optional[Mapping[str, Any]] = None, **kwargs):
        self._listeners: Dict[str, List[Callable]] = {}
        self.options = self._default_options()
        self.set_options(options, **kwargs)

    @classmethod
    def _default_options(cls) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            merged.update(klass.__dict__.get("options", {}))
        return merged

    def set_options(self, options: Optional[Mapping[str, Any]] = None, **kwargs) -> Dict[str, Any]:
        if options:
            self.options.update(options)
        if kwargs:
            self.options.update(kwargs)
        return self.options

    def on(self, event_type: str, func: Callable) -> "Evented":
        self._listeners.setdefault(event_type, []).append(func)
        return self

    def off(self, event_type: str, func: Optional[Callable] = None) -> "Evented":
        if func is None:
            self._listeners.pop(event_type, None)
        elif func in self._listeners.get(event_type, []):
            self._listeners[event_type].remove(func)
        return self

    def listens(self, event_type: str) -> bool:
        return bool(self._listeners.get(event_type))

    def fire(self, event_type: str, data: Any = None) -> "Evented":
        """Call listeners of ``event_type`` with a ``FrameworkEvent``."""
        event = FrameworkEvent(type=event_type, target=self, data=data)
        for func in list(self._listeners.get(event_type, [])):
            func(event)
        return self

    def dispatch_event(self, event: Any) -> "Evented":
        """
        Forward a pre-built event to the listeners of its type.

        ``event`` is any object with a ``type`` attribute or a mapping
        with a ``"type"`` key; listeners receive it unchanged.
        """
        if isinstance(event, Mapping):
            event_type = event.get("type")
        else:
            event_type = getattr(event, "type", None)
        for func in list(self._listeners.get(event_type, [])):
            func(event)
        return self
