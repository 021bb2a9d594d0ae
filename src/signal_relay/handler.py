from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from signal_relay import prompts, resources
from signal_relay.backend import SocioLogicClient
from signal_relay.jsonrpc import make_error, make_response
from signal_relay.schema_utils import InvalidParamsError
from signal_relay.tools import ToolNotFoundError, execute_tool, list_tools
from signal_relay.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    JSONRPC_ERROR_CODES,
    METHOD_NOT_FOUND,
    PROTOCOL_VERSION,
    SERVER_NAME,
    SERVER_VERSION,
    RpcError,
)

logger = logging.getLogger(__name__)

Method = Callable[[Any], Awaitable[Any]]


def _params_object(params: Any) -> dict:
    if params is None:
        return {}
    if not isinstance(params, dict):
        raise RpcError(INVALID_PARAMS, "params must be an object")
    return params


class MCPHandler:
    def __init__(self, client: SocioLogicClient) -> None:
        self._client = client
        self._methods: dict[str, Method] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "prompts/list": self._prompts_list,
            "prompts/get": self._prompts_get,
            "resources/list": self._resources_list,
            "resources/read": self._resources_read,
        }

    async def handle(self, msg: dict) -> dict:
        request_id = msg.get("id")
        method = msg["method"]
        fn = self._methods.get(method)
        if fn is None:
            return make_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")
        try:
            result = await fn(msg.get("params"))
        except RpcError as exc:
            return make_error(request_id, exc.code, exc.message, exc.data)
        except Exception as exc:
            logger.exception("Method %s failed", method)
            return make_error(request_id, INTERNAL_ERROR, str(exc) or JSONRPC_ERROR_CODES[INTERNAL_ERROR])
        return make_response(request_id, result)

    async def _initialize(self, params: Any) -> dict:
        validation = await self._client.validate_key()
        if not validation.ok:
            raise RpcError(INVALID_REQUEST, f"API key validation failed: {validation.error.message}")
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}, "prompts": {}, "resources": {}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
        }

    async def _ping(self, params: Any) -> dict:
        return {"pong": True}

    async def _tools_list(self, params: Any) -> dict:
        return {"tools": list_tools()}

    async def _tools_call(self, params: Any) -> dict:
        params = _params_object(params)
        name = params.get("name")
        if not isinstance(name, str):
            raise RpcError(INVALID_PARAMS, "params.name must be a string")
        try:
            response = await execute_tool(self._client, name, params.get("arguments"))
        except ToolNotFoundError as exc:
            raise RpcError(INTERNAL_ERROR, str(exc), {"tool": name}) from exc
        except InvalidParamsError as exc:
            raise RpcError(INVALID_PARAMS, str(exc), {"tool": name, "errors": exc.errors}) from exc
        if not response.ok:
            logger.info("Tool %s returned backend error %s", name, response.error.code)
        return {
            "content": [{"type": "text", "text": json.dumps(response.to_dict(), indent=2)}],
            "isError": not response.ok,
        }

    async def _prompts_list(self, params: Any) -> dict:
        return {"prompts": prompts.list_prompts()}

    async def _prompts_get(self, params: Any) -> dict:
        params = _params_object(params)
        return prompts.get_prompt(params.get("name"), params.get("arguments"))

    async def _resources_list(self, params: Any) -> dict:
        return {"resources": resources.list_resources()}

    async def _resources_read(self, params: Any) -> dict:
        params = _params_object(params)
        return await resources.read_resource(self._client, params.get("uri"))
