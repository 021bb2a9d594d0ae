from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

PAYMENT_HEADER = "X-PAYMENT"
PAYMENT_RESPONSE_HEADER = "X-PAYMENT-RESPONSE"
X402_VERSION = 1
DEFAULT_SCHEME = "exact"
DEFAULT_NETWORK = "eip155:8453"


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(value: str) -> bytes:
    value = value.strip()
    padded = value + "=" * (-len(value) % 4)
    if "-" in value or "_" in value:
        return base64.urlsafe_b64decode(padded)
    return base64.b64decode(padded, validate=True)


def encode_payment_header(payment: dict[str, Any]) -> str:
    envelope = {
        "x402Version": X402_VERSION,
        "scheme": payment.get("scheme") or DEFAULT_SCHEME,
        "network": payment.get("network") or DEFAULT_NETWORK,
        "payload": payment["payload"],
    }
    return _b64encode(json.dumps(envelope, separators=(",", ":")).encode("utf-8"))


def decode_payment_header(value: str) -> dict[str, Any] | None:
    try:
        decoded = json.loads(_b64decode(value))
    except (binascii.Error, ValueError):
        logger.debug("Ignoring undecodable x402 header: %s", value[:80])
        return None
    if not isinstance(decoded, dict):
        logger.debug("Ignoring non-object x402 header payload")
        return None
    return decoded


def payment_headers(payment: dict[str, Any] | None) -> dict[str, str]:
    if not payment:
        return {}
    return {PAYMENT_HEADER: encode_payment_header(payment)}
