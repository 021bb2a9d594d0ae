from __future__ import annotations

import json

import pytest

from signal_relay.backend import SocioLogicClient
from signal_relay.handler import MCPHandler
from signal_relay.prompts import get_prompt
from signal_relay.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PROTOCOL_VERSION,
    RpcError,
)
from tests.fixtures.mock_backend import INVALID_KEY


def _msg(method, params=None, request_id=1):
    msg = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        msg["params"] = params
    return msg


@pytest.fixture
def handler(client):
    return MCPHandler(client)


async def test_initialize(handler, backend):
    resp = await handler.handle(_msg("initialize", {"protocolVersion": PROTOCOL_VERSION}))
    result = resp["result"]
    assert result["protocolVersion"] == PROTOCOL_VERSION
    assert result["serverInfo"] == {"name": "sociologic-mcp-server", "version": "1.0.0"}
    assert set(result["capabilities"]) == {"tools", "prompts", "resources"}
    assert [c.path for c in backend.calls] == ["/api/v1/auth/validate"]


async def test_initialize_rejected_key(backend):
    handler = MCPHandler(SocioLogicClient(backend.url, INVALID_KEY, timeout=5))
    resp = await handler.handle(_msg("initialize"))
    assert resp["error"]["code"] == INVALID_REQUEST
    assert resp["error"]["message"] == "API key validation failed: Invalid API key"


async def test_ping(handler, backend):
    resp = await handler.handle(_msg("ping", request_id="p-1"))
    assert resp == {"jsonrpc": "2.0", "id": "p-1", "result": {"pong": True}}
    assert backend.calls == []


async def test_unknown_method(handler):
    resp = await handler.handle(_msg("sampling/createMessage"))
    assert resp["error"] == {"code": METHOD_NOT_FOUND, "message": "Method not found: sampling/createMessage"}


async def test_tools_list(handler):
    resp = await handler.handle(_msg("tools/list"))
    assert len(resp["result"]["tools"]) == 20


async def test_tools_call_success(handler, backend):
    resp = await handler.handle(_msg("tools/call", {"name": "sociologic_get_persona", "arguments": {"slug": "alice"}}))
    result = resp["result"]
    assert result["isError"] is False
    content = result["content"][0]
    assert content["type"] == "text"
    assert content["text"].startswith("{\n  ")
    assert json.loads(content["text"])["data"]["path"] == "/api/v1/personas/alice"


async def test_tools_call_backend_error_is_result(handler):
    resp = await handler.handle(_msg("tools/call", {"name": "sociologic_get_persona", "arguments": {"slug": "missing"}}))
    assert "error" not in resp
    assert resp["result"]["isError"] is True
    body = json.loads(resp["result"]["content"][0]["text"])
    assert body == {"error": {"code": "NOT_FOUND", "message": "Persona not found"}}


async def test_tools_call_unknown_tool(handler):
    resp = await handler.handle(_msg("tools/call", {"name": "sociologic_nope"}))
    assert resp["error"]["code"] == INTERNAL_ERROR
    assert resp["error"]["message"] == "Unknown tool: sociologic_nope"
    assert resp["error"]["data"] == {"tool": "sociologic_nope"}


async def test_tools_call_invalid_arguments(handler, backend):
    resp = await handler.handle(_msg("tools/call", {"name": "sociologic_get_persona", "arguments": {}}))
    error = resp["error"]
    assert error["code"] == INVALID_PARAMS
    assert error["message"] == "Invalid parameters: slug: Required"
    assert error["data"] == {"tool": "sociologic_get_persona", "errors": ["slug: Required"]}
    assert backend.calls == []


@pytest.mark.parametrize("params", [None, [], {"arguments": {}}, {"name": 5}])
async def test_tools_call_bad_params(handler, params):
    resp = await handler.handle(_msg("tools/call", params))
    assert resp["error"]["code"] == INVALID_PARAMS


async def test_tools_call_without_arguments(handler):
    resp = await handler.handle(_msg("tools/call", {"name": "sociologic_list_focus_groups"}))
    assert resp["result"]["isError"] is False


async def test_prompts_list(handler):
    resp = await handler.handle(_msg("prompts/list"))
    names = [p["name"] for p in resp["result"]["prompts"]]
    assert "interview_persona" in names


async def test_prompts_get(handler):
    resp = await handler.handle(
        _msg("prompts/get", {"name": "interview_persona", "arguments": {"persona_slug": "alice", "topic": "pricing"}})
    )
    text = resp["result"]["messages"][0]["content"]["text"]
    assert "'alice'" in text
    assert "pricing" in text


async def test_prompts_get_missing_argument(handler):
    resp = await handler.handle(_msg("prompts/get", {"name": "interview_persona", "arguments": {"topic": "x"}}))
    assert resp["error"]["code"] == INVALID_PARAMS
    assert resp["error"]["data"]["missing"] == ["persona_slug"]


async def test_prompts_get_unknown(handler):
    resp = await handler.handle(_msg("prompts/get", {"name": "nope"}))
    assert resp["error"]["code"] == INVALID_PARAMS


def test_optional_prompt_argument_placeholder():
    rendered = get_prompt("design_campaign", {"research_goal": "churn"})
    assert "Target audience: not specified" in rendered["messages"][0]["content"]["text"]


def test_prompt_arguments_must_be_object():
    with pytest.raises(RpcError):
        get_prompt("research_company", ["https://example.com"])


async def test_resources_list(handler):
    resp = await handler.handle(_msg("resources/list"))
    resources = resp["result"]["resources"]
    assert all(r["uri"].startswith("sociologic://") for r in resources)
    assert all(r["mimeType"] == "application/json" for r in resources)


async def test_resources_read(handler, backend):
    resp = await handler.handle(_msg("resources/read", {"uri": "sociologic://credits"}))
    content = resp["result"]["contents"][0]
    assert content["uri"] == "sociologic://credits"
    assert json.loads(content["text"]) == {"data": {"valid": True, "credits": 100}}
    assert [c.path for c in backend.calls] == ["/api/v1/auth/validate"]


async def test_resources_read_unknown(handler, backend):
    resp = await handler.handle(_msg("resources/read", {"uri": "sociologic://secrets"}))
    assert resp["error"]["code"] == INVALID_PARAMS
    assert backend.calls == []


async def test_unexpected_exception_maps_to_internal_error(handler, monkeypatch):
    async def boom(params):
        raise RuntimeError("kaboom")

    monkeypatch.setitem(handler._methods, "ping", boom)
    resp = await handler.handle(_msg("ping"))
    assert resp["error"] == {"code": INTERNAL_ERROR, "message": "kaboom"}
