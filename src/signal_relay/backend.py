from __future__ import annotations

import asyncio
import http.client
import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any

from signal_relay.payment import PAYMENT_RESPONSE_HEADER, decode_payment_header, payment_headers
from signal_relay.types import DEFAULT_TIMEOUT, ApiResponse

logger = logging.getLogger(__name__)

_USER_AGENT = "signal-relay-mcp"
_READ_CHUNK = 8192


@dataclass
class _RawResponse:
    status: int
    reason: str
    headers: dict[str, str]
    body: bytes


def _segment(value: str) -> str:
    return urllib.parse.quote(value, safe="")


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _lower_keys(headers: Any) -> dict[str, str]:
    return {k.lower(): v for k, v in headers.items()}


def _read_within(resp: Any, deadline: float) -> bytes:
    chunks: list[bytes] = []
    while True:
        if time.monotonic() > deadline:
            raise TimeoutError("response body exceeded deadline")
        chunk = resp.read1(_READ_CHUNK)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


def _send(req: urllib.request.Request, timeout: float) -> _RawResponse:
    # socket timeouts bound each read; the deadline bounds the whole call
    deadline = time.monotonic() + timeout
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = _read_within(resp, deadline)
            return _RawResponse(resp.status, resp.reason, _lower_keys(resp.headers), body)
    except urllib.error.HTTPError as exc:
        body = exc.read()
        exc.close()
        return _RawResponse(exc.code, str(exc.reason), _lower_keys(exc.headers or {}), body)


class SocioLogicClient:
    def __init__(self, api_url: str, api_key: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._api_url = api_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout

    @property
    def api_url(self) -> str:
        return self._api_url

    def build_url(self, path: str, query: dict[str, Any] | None = None) -> str:
        url = f"{self._api_url}{path}"
        if query:
            pairs = [(k, _query_value(v)) for k, v in query.items() if v is not None]
            if pairs:
                url += "?" + urllib.parse.urlencode(pairs)
        return url

    async def _request(
        self,
        method: str,
        path: str,
        body: dict | None = None,
        query: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        url = self.build_url(path, query)
        req_headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": _USER_AGENT,
            "X-API-Key": self._api_key,
        }
        if headers:
            req_headers.update(headers)

        data = None
        if body is not None and method != "GET":
            data = json.dumps(body).encode()
        req = urllib.request.Request(url, data=data, headers=req_headers, method=method)

        logger.debug("%s %s", method, url)
        start = time.perf_counter()
        try:
            raw = await asyncio.wait_for(asyncio.to_thread(_send, req, self._timeout), self._timeout)
        except (TimeoutError, asyncio.TimeoutError):
            return self._timed_out()
        except urllib.error.URLError as exc:
            if isinstance(exc.reason, TimeoutError):
                return self._timed_out()
            return ApiResponse.failure("NETWORK_ERROR", str(exc.reason) or "Network request failed")
        except (OSError, http.client.HTTPException) as exc:
            return ApiResponse.failure("NETWORK_ERROR", str(exc) or "Network request failed")
        elapsed = (time.perf_counter() - start) * 1000
        logger.debug("%s %s -> %s in %.0fms", method, path, raw.status, elapsed)

        if not 200 <= raw.status < 300:
            return self._http_error(raw)

        try:
            parsed = json.loads(raw.body) if raw.body else {}
        except ValueError as exc:
            return ApiResponse.failure("INVALID_RESPONSE", f"Invalid JSON in response: {exc}")
        result = ApiResponse.from_dict(parsed)

        receipt = raw.headers.get(PAYMENT_RESPONSE_HEADER.lower())
        if receipt:
            decoded = decode_payment_header(receipt)
            if decoded is not None:
                result.meta = {**(result.meta or {}), "payment_response": decoded}
        return result

    def _timed_out(self) -> ApiResponse:
        return ApiResponse.failure("TIMEOUT", f"Request timed out after {int(self._timeout * 1000)}ms")

    def _http_error(self, raw: _RawResponse) -> ApiResponse:
        code = f"HTTP_{raw.status}"
        message = f"HTTP {raw.status}: {raw.reason}"
        try:
            parsed = json.loads(raw.body)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict) and isinstance(parsed.get("error"), dict):
            code = parsed["error"].get("code") or code
            message = parsed["error"].get("message") or message
        logger.debug("Backend error %s: %s", code, message)
        return ApiResponse.failure(str(code), str(message))

    # personas

    async def list_personas(self, params: dict) -> ApiResponse:
        return await self._request("GET", "/api/v1/personas", query=params)

    async def get_persona(self, slug: str) -> ApiResponse:
        return await self._request("GET", f"/api/v1/personas/{_segment(slug)}")

    async def create_persona(self, params: dict, payment: dict | None = None) -> ApiResponse:
        return await self._request("POST", "/api/v1/personas", body=params, headers=payment_headers(payment))

    async def interview_persona(self, slug: str, params: dict, payment: dict | None = None) -> ApiResponse:
        body = {**params, "stream": False}
        return await self._request(
            "POST",
            f"/api/v1/personas/{_segment(slug)}/interview",
            body=body,
            headers=payment_headers(payment),
        )

    async def get_persona_memories(self, slug: str, params: dict) -> ApiResponse:
        return await self._request("GET", f"/api/v1/personas/{_segment(slug)}/memories", query=params)

    # campaigns

    async def list_campaigns(self, params: dict) -> ApiResponse:
        return await self._request("GET", "/api/v1/campaigns", query=params)

    async def get_campaign(self, campaign_id: str) -> ApiResponse:
        return await self._request("GET", f"/api/v1/campaigns/{_segment(campaign_id)}")

    async def create_campaign(self, params: dict) -> ApiResponse:
        return await self._request("POST", "/api/v1/campaigns", body=params)

    async def execute_campaign(self, campaign_id: str) -> ApiResponse:
        return await self._request("POST", f"/api/v1/campaigns/{_segment(campaign_id)}/execute")

    async def export_campaign(self, campaign_id: str, fmt: str = "pdf") -> ApiResponse:
        path = f"/api/v1/campaigns/{_segment(campaign_id)}/export"
        if fmt == "pdf":
            # binary report: return the download URL only
            return ApiResponse(
                data={
                    "export_url": self.build_url(path, {"format": "pdf"}),
                    "format": "pdf",
                    "message": "Use the export_url to download the PDF report. "
                    "Include your API key in the X-API-Key header.",
                },
                meta={"request_id": f"mcp_{int(time.time() * 1000)}"},
            )
        return await self._request("GET", path, query={"format": fmt})

    # focus groups

    async def list_focus_groups(self, params: dict) -> ApiResponse:
        return await self._request("GET", "/api/v1/focus-groups", query=params)

    async def get_focus_group(self, group_id: str) -> ApiResponse:
        return await self._request("GET", f"/api/v1/focus-groups/{_segment(group_id)}")

    async def create_focus_group(self, params: dict) -> ApiResponse:
        return await self._request("POST", "/api/v1/focus-groups", body=params)

    async def add_personas_to_focus_group(self, group_id: str, persona_ids: list[str]) -> ApiResponse:
        return await self._request(
            "POST",
            f"/api/v1/focus-groups/{_segment(group_id)}/personas",
            body={"persona_ids": persona_ids},
        )

    # account

    async def validate_key(self) -> ApiResponse:
        return await self._request("GET", "/api/v1/auth/validate")

    async def get_credits_balance(self) -> ApiResponse:
        return await self.validate_key()

    async def get_x402_discovery(self) -> ApiResponse:
        return await self._request("GET", "/api/v1/x402/discovery")

    # web research

    async def scrape_url(self, params: dict) -> ApiResponse:
        return await self._request("POST", "/api/v1/research/scrape", body=params)

    async def search_web(self, params: dict) -> ApiResponse:
        return await self._request("POST", "/api/v1/research/search", body=params)

    async def research_topic(self, params: dict) -> ApiResponse:
        return await self._request("POST", "/api/v1/research/topic", body=params)

    async def get_company_info(self, url: str) -> ApiResponse:
        return await self._request("POST", "/api/v1/research/company", body={"url": url})
