"""Tests for wrapper construction, options and the event primitives."""

from iclient.adapters import PlainAdapter, ShapelyAdapter
from iclient.events import Evented, Events, FrameworkEvent
from iclient.services import ServiceBase, QueryService


class TestServiceBase:

    def test_trailing_slash_is_stripped(self):
        service = ServiceBase("http://localhost:8090/iserver/services/map-world/rest/maps/World/")

        assert service.url == "http://localhost:8090/iserver/services/map-world/rest/maps/World"

    def test_only_one_trailing_slash_is_stripped(self):
        assert ServiceBase("http://localhost/a//").url == "http://localhost/a/"

    def test_url_without_slash_is_unchanged(self):
        assert ServiceBase("http://localhost/a").url == "http://localhost/a"

    def test_none_url(self):
        assert ServiceBase(None).url is None

    def test_default_options(self):
        service = ServiceBase("http://localhost/a")

        assert service.options["with_credentials"] is False
        assert service.options["proxy"] is None
        assert service.options["server_type"] is None
        assert isinstance(service.adapter, PlainAdapter)

    def test_options_mapping_and_kwargs_are_merged(self):
        service = ServiceBase("http://localhost/a", {"proxy": "http://proxy/?url="}, with_credentials=True)

        assert service.options["proxy"] == "http://proxy/?url="
        assert service.options["with_credentials"] is True

    def test_adapter_option(self):
        adapter = ShapelyAdapter()

        assert ServiceBase("http://localhost/a", adapter=adapter).adapter is adapter

    def test_initialized_fires_for_preregistered_listeners(self):
        received = []

        service = QueryService("http://localhost/a", event_listeners={"initialized": received.append})

        assert len(received) == 1
        assert received[0].type == "initialized"
        assert received[0].target is service
        assert received[0].data is service

    def test_destroy_fires(self):
        received = []
        service = ServiceBase("http://localhost/a")
        service.on("destroy", received.append)

        service.destroy()

        assert [event.type for event in received] == ["destroy"]

    def test_subclass_options_extend_base_defaults(self):
        class Custom(ServiceBase):
            options = {"layer": "Countries@World"}

        service = Custom("http://localhost/a")

        assert service.options["layer"] == "Countries@World"
        assert service.options["with_credentials"] is False


class TestEvented:

    def test_off_removes_listener(self):
        received = []
        evented = Evented()
        evented.on("change", received.append)
        assert evented.listens("change")

        evented.off("change", received.append)
        evented.fire("change")

        assert received == []
        assert not evented.listens("change")

    def test_dispatch_event_forwards_object(self):
        received = []
        evented = Evented()
        evented.on("messageSuccessed", received.append)
        event = FrameworkEvent(type="messageSuccessed", data={"id": 1})

        evented.dispatch_event(event)

        assert received == [event]

    def test_dispatch_event_accepts_mapping(self):
        received = []
        evented = Evented()
        evented.on("custom", received.append)

        evented.dispatch_event({"type": "custom", "value": 1})

        assert received == [{"type": "custom", "value": 1}]


class TestEvents:

    def test_scope_entry_is_ignored(self):
        received = []
        events = Events(["processCompleted"])
        events.on({"scope": object(), "processCompleted": received.append})

        events.trigger_event("processCompleted", "done")

        assert received == ["done"]

    def test_un_removes_handlers(self):
        received = []
        handlers = {"processCompleted": received.append}
        events = Events()
        events.on(handlers)
        events.un(handlers)

        events.trigger_event("processCompleted", "done")

        assert received == []

    def test_listener_may_unregister_itself(self):
        events = Events()
        calls = []

        def once(event):
            calls.append(event)
            events.unregister("tick", once)

        events.register("tick", once)
        events.trigger_event("tick", 1)
        events.trigger_event("tick", 2)

        assert calls == [1]
