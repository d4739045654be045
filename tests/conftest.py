"""Common test fixtures and helpers."""

import json
import threading
import time
from collections import namedtuple

import jwt
import pytest

from f1tv_api import F1TVClient

TOKEN_SECRET = "f1tv-api-test-secret-0123456789abcdef"

RecordedRequest = namedtuple("RecordedRequest", "method url operation headers")


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, status_code=200, json_data=None, text=None, content=None, headers=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text
        self.content = content if content is not None else text.encode("utf-8")
        self.headers = headers or {"Content-Type": "application/json"}

    def json(self):
        return json.loads(self.text)


class FakeHTTPManager:
    """
    Records every request and answers from registered routes.

    A route is a URL fragment mapped to a FakeResponse or to a callable
    taking (url, headers) and returning one. Routes added later win.
    Unmatched URLs answer 404.
    """

    def __init__(self):
        self.routes = []
        self.requests = []
        self._lock = threading.Lock()

    def add(self, fragment, response):
        self.routes.append((fragment, response))

    def get(self, url, operation="api", headers=None, **kwargs):
        return self.request("GET", url, operation, headers=headers, **kwargs)

    def request(self, method, url, operation="api", headers=None, **kwargs):
        headers = dict(headers or {})
        with self._lock:
            self.requests.append(RecordedRequest(method, url, operation, headers))

        for fragment, response in reversed(self.routes):
            if fragment in url:
                return response(url, headers) if callable(response) else response
        return FakeResponse(404, text="no route")

    def urls(self, fragment=""):
        with self._lock:
            return [r.url for r in self.requests if fragment in r.url]

    def find(self, fragment):
        with self._lock:
            return [r for r in self.requests if fragment in r.url]

    def close(self):
        pass


def envelope(result_obj):
    return {
        "resultCode": "OK",
        "message": "OK",
        "errorDescription": "",
        "resultObj": result_obj,
        "systemTime": 1700000000000,
    }


def location_payload(entitlement, group_id, country="US"):
    return envelope({
        "userLocation": [{
            "groupId": group_id,
            "entitlement": entitlement,
            "detectedCountryIsoCode": country,
            "registeredCountryIsoCode": country,
        }],
        "countries": [],
    })


def default_location(url, headers):
    # Registered sessions get the PRO view, anonymous ones the public one
    if "/R/" in url and "entitlementtoken" in headers:
        return FakeResponse(200, location_payload("PRO", 2))
    if "/R/" in url:
        return FakeResponse(200, location_payload("REG", 3))
    return FakeResponse(200, location_payload("ANONYMOUS", 1))


@pytest.fixture
def make_token():
    """Mint an HS256 JWT carrying ascendon-style claims"""

    def _make(**overrides):
        now = int(time.time())
        claims = {
            "SubscriberId": "12345",
            "SubscriptionStatus": "active",
            "SubscribedProduct": "F1 TV Pro",
            "ExternalAuthorizationsContextData": "US",
            "iat": now,
            "exp": now + 3600,
        }
        claims.update(overrides)
        claims = {key: value for key, value in claims.items() if value is not None}
        return jwt.encode(claims, TOKEN_SECRET, algorithm="HS256")

    return _make


@pytest.fixture
def transport():
    manager = FakeHTTPManager()
    manager.add("ALL/USER/ENTITLEMENT",
                FakeResponse(200, envelope({"entitlementToken": "ent-token-1"})))
    manager.add("ALL/USER/LOCATION", default_location)
    manager.add("f1tv.formula1.com/config", FakeResponse(200, {"version": 7, "features": {}}))
    return manager


@pytest.fixture
def client_factory(transport):
    clients = []

    def _create(ascendon=None, **kwargs):
        kwargs.setdefault("http_manager", transport)
        client = F1TVClient(ascendon=ascendon, **kwargs)
        clients.append(client)
        return client

    yield _create

    for client in clients:
        client.close()


@pytest.fixture
def anonymous_client(client_factory):
    client = client_factory()
    client.initial_refresh.result(timeout=5)
    return client


@pytest.fixture
def registered_client(client_factory, make_token):
    client = client_factory(make_token())
    client.initial_refresh.result(timeout=5)
    return client
