from __future__ import annotations

import json
import logging
from typing import Any

from signal_relay.types import INVALID_REQUEST, PARSE_ERROR

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"


class EnvelopeError(Exception):
    def __init__(self, code: int, message: str, request_id: Any = None, http_status: int = 400) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.request_id = request_id
        self.http_status = http_status

    def to_response(self) -> dict:
        return make_error(self.request_id, self.code, self.message)


def valid_id(value: Any) -> bool:
    if value is None or isinstance(value, str):
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_request(body: bytes) -> dict:
    try:
        msg = json.loads(body, parse_constant=_reject_constant)
    except ValueError as exc:
        logger.debug("Unparseable request body: %s", exc)
        raise EnvelopeError(PARSE_ERROR, "Failed to parse JSON body") from exc

    if not isinstance(msg, dict):
        raise EnvelopeError(INVALID_REQUEST, "Request body must be a JSON object")

    if "id" in msg and not valid_id(msg["id"]):
        raise EnvelopeError(INVALID_REQUEST, "Invalid JSON-RPC request: id must be string, number, or null")
    request_id = msg.get("id")

    if msg.get("jsonrpc") != JSONRPC_VERSION or not isinstance(msg.get("method"), str):
        raise EnvelopeError(
            INVALID_REQUEST,
            "Invalid JSON-RPC 2.0 request: requires jsonrpc='2.0' and method string",
            request_id,
        )
    return msg


def is_notification(msg: dict) -> bool:
    return "id" not in msg


def make_response(request_id: Any, result: Any) -> dict:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def make_error(request_id: Any, code: int, message: str, data: Any = None) -> dict:
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}
