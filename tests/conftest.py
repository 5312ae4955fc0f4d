"""
Root conftest.py - environment isolation, iServer emulator, fake sockets.

The emulator answers the REST resources the services call, so tests run
without a live iServer. It is wired in through ``httpx.MockTransport``.
"""

import json
from typing import Any, Dict, List

import httpx
import pytest

from iclient.common import request as request_module
from iclient.config import reset_client_settings


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Drop ICLIENT_* variables and cached settings around every test."""
    import os
    for key in list(os.environ):
        if key.startswith("ICLIENT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(os.path.dirname(__file__))
    reset_client_settings()
    request_module.shared_cookie_jar.clear()
    yield
    reset_client_settings()


# ============================================================================
# iServer emulator
# ============================================================================

def _json(status: int, body: Any) -> httpx.Response:
    return httpx.Response(status, json=body)


class IServerEmulator:
    """
    Minimal iServer: geocoding, geodecoding, queryResults, layers and
    topology validator jobs. Every request is kept in ``requests``.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.layers: List[Dict[str, Any]] = []
        self.jobs: List[Dict[str, Any]] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_body(self) -> Dict[str, Any]:
        return json.loads(self.last_request.content.decode("utf-8"))

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        params = request.url.params

        if path.endswith("/geocoding.json"):
            return self._geocoding(params)
        elif path.endswith("/geodecoding.json"):
            return self._geodecoding(params)
        elif path.endswith("/queryResults.json"):
            return self._query(request)
        elif path.endswith("/layers.json"):
            return _json(200, self.layers)
        elif path.endswith("/topologyvalidator.json"):
            return self._topology_jobs(request)
        elif "/topologyvalidator/" in path:
            job_id = path.rsplit("/", 1)[-1][:-len(".json")]
            matches = [job for job in self.jobs if job["id"] == job_id]
            if not matches:
                return _json(404, {"succeed": False, "error": {"code": 404, "errorMsg": f"job {job_id} not found"}})
            else:
                return _json(200, matches[0])
        else:
            return httpx.Response(404, text="not found")

    def _matches(self, params):
        from_index = int(params.get("fromIndex", 0))
        to_index = int(params.get("toIndex", 10))
        filters = params.get("filters").split(",") if params.get("filters") else []
        return [
            {
                "address": f"北京市海淀区公司{i}",
                "location": {"x": 116.3 + i * 0.001, "y": 39.9},
                "filters": filters,
                "score": 90 - i,
            }
            for i in range(from_index, to_index)
        ]

    def _geocoding(self, params) -> httpx.Response:
        if not params.get("address"):
            return _json(400, {"succeed": False, "error": {"code": 400, "errorMsg": "address cannot be null!"}})
        return _json(200, self._matches(params))

    def _geodecoding(self, params) -> httpx.Response:
        if params.get("x") is None or params.get("y") is None:
            return _json(400, {"succeed": False, "error": {"code": 400, "errorMsg": "location not valid!"}})
        return _json(200, self._matches(params))

    def _query(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content.decode("utf-8"))
        query_params = body["queryParameters"]["queryParams"]
        if not query_params:
            return _json(400, {"succeed": False, "error": {"code": 400, "errorMsg": "queryParams is empty"}})
        if request.url.params.get("returnContent") == "false":
            return _json(201, {"succeed": True, "newResourceID": "abc", "newResourceLocation": "queryResults/abc.json"})
        return _json(200, {
            "currentCount": 1,
            "totalCount": 1,
            "recordsets": [{
                "datasetName": query_params[0]["name"],
                "fieldCaptions": ["SMID", "NAME"],
                "fields": ["SMID", "NAME"],
                "features": [{
                    "ID": 1,
                    "fieldNames": ["SMID", "NAME"],
                    "fieldValues": ["1", "北京"],
                    "geometry": {"id": 1, "type": "POINT", "parts": [1], "points": [{"x": 116.4, "y": 39.9}]},
                }],
            }],
        })

    def _topology_jobs(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            body = json.loads(request.content.decode("utf-8"))
            job = {"id": f"job{len(self.jobs) + 1}", "state": {"runState": "RUNNING"}, "setting": body}
            self.jobs.append(job)
            return _json(200, {"succeed": True, "newResourceID": job["id"]})
        return _json(200, self.jobs)


@pytest.fixture
def iserver():
    return IServerEmulator()


@pytest.fixture
def results():
    """Collects callback envelopes."""
    collected = []

    def callback(event):
        collected.append(event)

    callback.events = collected
    return callback


# ============================================================================
# Fake WebSocket
# ============================================================================

class FakeWebSocket:
    """Stands in for a websockets sync ClientConnection."""

    def __init__(self, uri: str, incoming=None):
        self.uri = uri
        self.incoming = list(incoming or [])
        self.sent: List[str] = []
        self.closed = False
        self.send_error = None

    def send(self, message):
        if self.send_error:
            raise self.send_error
        self.sent.append(message)

    def __iter__(self):
        for message in self.incoming:
            yield message

    def close(self):
        self.closed = True


class FakeConnector:
    """WebSocket factory recording every opened socket."""

    def __init__(self):
        self.sockets: List[FakeWebSocket] = []
        self.incoming = []
        self.error = None
        self.send_error = None

    def __call__(self, uri, open_timeout=None):
        if self.error:
            raise self.error
        socket = FakeWebSocket(uri, self.incoming)
        socket.send_error = self.send_error
        self.sockets.append(socket)
        return socket


@pytest.fixture
def connector():
    return FakeConnector()
