from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from signal_relay.backend import SocioLogicClient
from signal_relay.types import INVALID_PARAMS, ApiResponse, RpcError

MIME_JSON = "application/json"


@dataclass(frozen=True)
class Resource:
    uri: str
    name: str
    description: str
    fetch: Callable[[SocioLogicClient], Awaitable[ApiResponse]]

    def to_dict(self) -> dict:
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": MIME_JSON,
        }


RESOURCES: list[Resource] = [
    Resource(
        "sociologic://personas",
        "Public personas",
        "First page of marketplace personas",
        lambda c: c.list_personas({"visibility": "public", "page": 1, "per_page": 20}),
    ),
    Resource(
        "sociologic://campaigns",
        "Campaigns",
        "Your most recent research campaigns",
        lambda c: c.list_campaigns({"limit": 20, "offset": 0}),
    ),
    Resource(
        "sociologic://focus-groups",
        "Focus groups",
        "Your focus groups",
        lambda c: c.list_focus_groups({"limit": 20, "offset": 0}),
    ),
    Resource(
        "sociologic://credits",
        "Credits balance",
        "Current credits balance for the calling API key",
        lambda c: c.get_credits_balance(),
    ),
]

RESOURCES_BY_URI: dict[str, Resource] = {r.uri: r for r in RESOURCES}


def list_resources() -> list[dict]:
    return [r.to_dict() for r in RESOURCES]


async def read_resource(client: SocioLogicClient, uri: object) -> dict:
    resource = RESOURCES_BY_URI.get(uri) if isinstance(uri, str) else None
    if resource is None:
        raise RpcError(INVALID_PARAMS, f"Unknown resource: {uri}", {"uri": uri})
    response = await resource.fetch(client)
    return {
        "contents": [
            {
                "uri": resource.uri,
                "mimeType": MIME_JSON,
                "text": json.dumps(response.to_dict(), indent=2),
            }
        ]
    }
