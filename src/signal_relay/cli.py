from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from signal_relay import __version__
from signal_relay.types import DEFAULT_API_URL, DEFAULT_TIMEOUT, MAX_REQUEST_SIZE, GatewayConfig

logger = logging.getLogger("signal_relay")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="signal-relay",
        description="MCP gateway for the SocioLogic persona-research API",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"signal-relay {__version__}",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Interface to bind (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8787,
        help="Port to listen on (default: 8787)",
    )
    parser.add_argument(
        "--api-url",
        default=os.environ.get("SOCIOLOGIC_API_URL") or DEFAULT_API_URL,
        help=f"SocioLogic API base URL (default: $SOCIOLOGIC_API_URL or {DEFAULT_API_URL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Backend request timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--max-request-size",
        type=int,
        default=MAX_REQUEST_SIZE,
        help=f"Largest accepted request body in bytes (default: {MAX_REQUEST_SIZE})",
    )
    parser.add_argument(
        "--list-tools",
        action="store_true",
        default=False,
        help="Print the tool catalogue as JSON and exit",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Log request-level detail",
    )
    return parser


def _error(msg: str) -> None:
    print(f"signal-relay: error: {msg}", file=sys.stderr)
    sys.exit(2)


def _build_config(args: argparse.Namespace) -> GatewayConfig:
    if not args.api_url.startswith(("http://", "https://")):
        _error(f"--api-url must be an http(s) URL: {args.api_url}")
    if args.timeout <= 0:
        _error("--timeout must be positive")
    if args.max_request_size <= 0:
        _error("--max-request-size must be positive")
    if not 0 <= args.port <= 65535:
        _error(f"--port out of range: {args.port}")
    return GatewayConfig(
        api_url=args.api_url,
        timeout=args.timeout,
        max_request_size=args.max_request_size,
    )


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.list_tools:
        from signal_relay.tools import list_tools

        print(json.dumps(list_tools(), indent=2))
        sys.exit(0)

    config = _build_config(args)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s: %(message)s",
    )

    from signal_relay.server import make_server

    try:
        server = make_server(config, args.host, args.port)
    except OSError as exc:
        _error(f"Cannot bind {args.host}:{args.port}: {exc}")

    host, port = server.server_address[:2]
    logger.info("Listening on http://%s:%s (backend %s)", host, port, config.api_url)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
    finally:
        server.server_close()
