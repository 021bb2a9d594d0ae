from __future__ import annotations

from dataclasses import dataclass
from typing import Any

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "sociologic-mcp-server"
SERVER_VERSION = "1.0.0"
SERVER_DESCRIPTION = (
    "SocioLogic Revenue Intelligence Platform - High-fidelity synthetic personas for market research"
)
CARD_NAME = "signal-relay-mcp"
CARD_VERSION = "1.0.1"

DEFAULT_API_URL = "https://www.sociologic.ai"
DEFAULT_TIMEOUT = 30
MAX_REQUEST_SIZE = 1024 * 1024
DOCS_URL = "https://www.sociologic.ai/docs"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

JSONRPC_ERROR_CODES: dict[int, str] = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
}


class RpcError(Exception):
    def __init__(self, code: int, message: str, data: dict | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self) -> dict:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


@dataclass
class ApiError:
    code: str
    message: str
    details: Any = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            out["details"] = self.details
        return out


@dataclass
class ApiResponse:
    data: Any = None
    error: ApiError | None = None
    meta: dict | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, code: str, message: str, details: Any = None) -> ApiResponse:
        return cls(error=ApiError(code=code, message=message, details=details))

    @classmethod
    def from_dict(cls, body: Any) -> ApiResponse:
        if not isinstance(body, dict):
            return cls(data=body)
        error = None
        raw_error = body.get("error")
        if isinstance(raw_error, dict):
            error = ApiError(
                code=str(raw_error.get("code") or "UNKNOWN_ERROR"),
                message=str(raw_error.get("message") or "Unknown error"),
                details=raw_error.get("details"),
            )
        meta = body.get("meta")
        return cls(
            data=body.get("data"),
            error=error,
            meta=meta if isinstance(meta, dict) else None,
        )

    def to_dict(self) -> dict:
        out: dict[str, Any] = {}
        if self.data is not None:
            out["data"] = self.data
        if self.error is not None:
            out["error"] = self.error.to_dict()
        if self.meta is not None:
            out["meta"] = self.meta
        return out


@dataclass(frozen=True)
class GatewayConfig:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    max_request_size: int = MAX_REQUEST_SIZE
