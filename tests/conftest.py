from __future__ import annotations

import http.client
import json
import threading
import urllib.parse

import pytest

from signal_relay.backend import SocioLogicClient
from signal_relay.server import make_server
from signal_relay.types import GatewayConfig
from tests.fixtures.mock_backend import start_backend

TEST_KEY = "sk_test_123"
GATEWAY_LIMIT = 2048


def http_request(
    url: str,
    method: str = "POST",
    body: bytes | str | dict | list | None = None,
    headers: dict[str, str] | None = None,
    path: str = "/",
) -> tuple[int, dict[str, str], object]:
    parts = urllib.parse.urlsplit(url)
    conn = http.client.HTTPConnection(parts.hostname, parts.port, timeout=10)
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode()
    try:
        conn.request(method, path, body=body, headers=headers or {})
        resp = conn.getresponse()
        raw = resp.read()
        resp_headers = {k.lower(): v for k, v in resp.getheaders()}
    finally:
        conn.close()
    return resp.status, resp_headers, json.loads(raw) if raw else None


def rpc(url: str, method: str, params: dict | None = None, request_id: object = 1, key: str = TEST_KEY):
    msg: dict = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        msg["params"] = params
    return http_request(url, body=msg, headers={"Content-Type": "application/json", "X-API-Key": key})


@pytest.fixture
def backend():
    state, server = start_backend()
    yield state
    server.shutdown()
    server.server_close()


@pytest.fixture
def client(backend):
    return SocioLogicClient(backend.url, TEST_KEY, timeout=5)


@pytest.fixture
def gateway(backend):
    config = GatewayConfig(api_url=backend.url, timeout=5, max_request_size=GATEWAY_LIMIT)
    server = make_server(config, "127.0.0.1", 0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()
