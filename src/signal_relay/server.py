from __future__ import annotations

import asyncio
import json
import logging
import urllib.parse
from datetime import datetime, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

from signal_relay import __version__
from signal_relay.backend import SocioLogicClient
from signal_relay.handler import MCPHandler
from signal_relay.jsonrpc import EnvelopeError, is_notification, make_error, parse_request
from signal_relay.prompts import list_prompts
from signal_relay.resources import list_resources
from signal_relay.tools import TOOL_DEFINITIONS
from signal_relay.types import (
    CARD_NAME,
    CARD_VERSION,
    DOCS_URL,
    INTERNAL_ERROR,
    INVALID_REQUEST,
    SERVER_NAME,
    SERVER_VERSION,
    GatewayConfig,
)

logger = logging.getLogger(__name__)

RPC_PATHS = ("/", "/mcp", "/rpc")
SSE_PATHS = ("/sse", "/mcp/sse")
CARD_PATH = "/.well-known/mcp/server-card.json"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-API-Key",
    "Access-Control-Max-Age": "86400",
}

AUTH_INSTRUCTIONS = "Get your API key at https://sociologic.ai/dashboard/api-keys (100 free credits on signup)"


class BodyTooLarge(Exception):
    pass


class MalformedBody(Exception):
    pass


def extract_api_key(headers: Any) -> str | None:
    raw = headers.get("X-API-Key")
    if not raw:
        raw = headers.get("Authorization") or ""
        if raw.startswith("Bearer "):
            raw = raw[len("Bearer "):]
    key = raw.strip()
    return key or None


def server_card() -> dict:
    return {
        "serverInfo": {"name": CARD_NAME, "version": CARD_VERSION},
        "authentication": {"required": True, "schemes": ["apiKey"], "instructions": AUTH_INSTRUCTIONS},
        "tools": [
            {"name": t.name, "description": t.description, "inputSchema": t.input_schema}
            for t in TOOL_DEFINITIONS
        ],
        "resources": list_resources(),
        "prompts": list_prompts(),
    }


def server_info() -> dict:
    return {
        "name": "SocioLogic MCP Server",
        "version": SERVER_VERSION,
        "description": "Remote MCP server for the SocioLogic Revenue Intelligence Platform",
        "endpoints": {
            "/": "JSON-RPC endpoint (POST)",
            "/mcp": "JSON-RPC endpoint (POST)",
            "/rpc": "JSON-RPC endpoint (POST)",
            "/sse": "Not implemented (returns 501)",
            "/health": "Health check",
            "/info": "Server information",
            CARD_PATH: "Discovery document (no auth)",
        },
        "tools": [t.summary() for t in TOOL_DEFINITIONS],
        "documentation": DOCS_URL,
    }


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _too_large(limit: int) -> dict:
    return make_error(None, INVALID_REQUEST, f"Request body too large. Maximum size is {limit} bytes.")


class GatewayServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], config: GatewayConfig) -> None:
        self.config = config
        super().__init__(address, GatewayRequestHandler)


class GatewayRequestHandler(BaseHTTPRequestHandler):
    server: GatewayServer
    server_version = f"signal-relay/{__version__}"

    def do_OPTIONS(self) -> None:  # noqa: N802
        self.send_response(204)
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)
        self.end_headers()

    def do_GET(self) -> None:  # noqa: N802
        self._route()

    def do_POST(self) -> None:  # noqa: N802
        self._route()

    def do_PUT(self) -> None:  # noqa: N802
        self._route()

    def do_DELETE(self) -> None:  # noqa: N802
        self._route()

    def do_PATCH(self) -> None:  # noqa: N802
        self._route()

    def do_HEAD(self) -> None:  # noqa: N802
        self._route()

    def log_message(self, format: str, *args: object) -> None:
        logger.info("%s %s", self.address_string(), format % args)

    def _send_json(self, status: int, payload: Any) -> None:
        body = json.dumps(payload).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)

    def _send_empty(self, status: int) -> None:
        self.send_response(status)
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Content-Length", "0")
        self.end_headers()

    def _declared_length(self) -> int | None:
        raw = self.headers.get("Content-Length")
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    def _read_body(self, limit: int) -> bytes:
        if "chunked" in self.headers.get("Transfer-Encoding", "").lower():
            return self._read_chunked(limit)
        length = self._declared_length() or 0
        if length > limit:
            raise BodyTooLarge
        return self.rfile.read(length) if length > 0 else b""

    def _read_chunked(self, limit: int) -> bytes:
        chunks: list[bytes] = []
        total = 0
        while True:
            size_line = self.rfile.readline(1024)
            if not size_line.endswith(b"\n"):
                raise MalformedBody("truncated chunk size line")
            try:
                size = int(size_line.split(b";", 1)[0].strip(), 16)
            except ValueError:
                raise MalformedBody(f"invalid chunk size {size_line[:40]!r}") from None
            if size < 0:
                raise MalformedBody(f"invalid chunk size {size}")
            if size == 0:
                # trailer section ends with an empty line
                while self.rfile.readline(1024) not in (b"\r\n", b"\n", b""):
                    pass
                return b"".join(chunks)
            total += size
            if total > limit:
                raise BodyTooLarge
            data = self.rfile.read(size)
            if len(data) != size or self.rfile.readline(1024) not in (b"\r\n", b"\n"):
                raise MalformedBody("chunk does not match its declared size")
            chunks.append(data)

    def _route(self) -> None:
        config = self.server.config
        path = urllib.parse.urlsplit(self.path).path

        if path == CARD_PATH:
            self._send_json(200, server_card())
            return

        declared = self._declared_length()
        if declared is not None and declared > config.max_request_size:
            self.close_connection = True
            self._send_json(413, _too_large(config.max_request_size))
            return

        api_key = extract_api_key(self.headers)
        if api_key is None:
            self._send_json(
                401,
                {
                    "error": {
                        "code": "AUTHENTICATION_REQUIRED",
                        "message": "API key required. Pass via X-API-Key header or Authorization: Bearer header.",
                    }
                },
            )
            return

        if path in SSE_PATHS:
            self._send_json(
                501,
                {
                    "error": {
                        "code": "NOT_IMPLEMENTED",
                        "message": "SSE transport is not available. Use JSON-RPC instead: POST to / or /rpc",
                        "documentation": f"{DOCS_URL}/mcp",
                    }
                },
            )
        elif path in RPC_PATHS:
            self._handle_rpc(config, api_key)
        elif path == "/health":
            self._send_json(
                200,
                {"status": "healthy", "server": SERVER_NAME, "version": SERVER_VERSION, "timestamp": _utc_timestamp()},
            )
        elif path == "/info":
            self._send_json(200, server_info())
        else:
            self._send_json(
                404,
                {
                    "error": {
                        "code": "NOT_FOUND",
                        "message": f"Unknown endpoint: {path}",
                        "available_endpoints": ["/", "/mcp", "/rpc", "/sse", "/health", "/info", CARD_PATH],
                    }
                },
            )

    def _handle_rpc(self, config: GatewayConfig, api_key: str) -> None:
        if self.command != "POST":
            self._send_json(
                405,
                {"jsonrpc": "2.0", "error": {"code": INVALID_REQUEST, "message": "POST method required for JSON-RPC"}},
            )
            return

        try:
            body = self._read_body(config.max_request_size)
        except BodyTooLarge:
            self.close_connection = True
            self._send_json(413, _too_large(config.max_request_size))
            return
        except MalformedBody as exc:
            logger.debug("Malformed chunked body: %s", exc)
            self.close_connection = True
            self._send_json(400, make_error(None, INVALID_REQUEST, "Malformed chunked request body"))
            return

        try:
            msg = parse_request(body)
        except EnvelopeError as exc:
            self._send_json(exc.http_status, exc.to_response())
            return

        try:
            client = SocioLogicClient(config.api_url, api_key, timeout=config.timeout)
            response = asyncio.run(MCPHandler(client).handle(msg))
        except Exception:
            logger.exception("Failed to process %s request", msg.get("method"))
            self._send_json(500, make_error(None, INTERNAL_ERROR, "Failed to process request"))
            return

        if is_notification(msg):
            self._send_empty(202)
            return
        self._send_json(200, response)


def make_server(config: GatewayConfig, host: str = "127.0.0.1", port: int = 8787) -> GatewayServer:
    return GatewayServer((host, port), config)
