from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from signal_relay.backend import SocioLogicClient
from signal_relay.schema_utils import validate_arguments
from signal_relay.tools.registry import get_tool
from signal_relay.types import ApiResponse

logger = logging.getLogger(__name__)

Handler = Callable[[SocioLogicClient, dict], Awaitable[ApiResponse]]


class ToolNotFoundError(Exception):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


def _pick(args: dict, *names: str) -> dict:
    return {n: args[n] for n in names if n in args}


async def _create_persona(client: SocioLogicClient, args: dict) -> ApiResponse:
    payment = args.pop("x402_payment", None)
    return await client.create_persona(args, payment=payment)


async def _interview_persona(client: SocioLogicClient, args: dict) -> ApiResponse:
    payment = args.pop("x402_payment", None)
    body = _pick(args, "message", "conversation_id", "include_memory", "save_conversation")
    return await client.interview_persona(args["slug"], body, payment=payment)


async def _get_persona_memories(client: SocioLogicClient, args: dict) -> ApiResponse:
    slug = args.pop("slug")
    return await client.get_persona_memories(slug, args)


_HANDLERS: dict[str, Handler] = {
    "sociologic_list_personas": lambda c, a: c.list_personas(a),
    "sociologic_get_persona": lambda c, a: c.get_persona(a["slug"]),
    "sociologic_create_persona": _create_persona,
    "sociologic_interview_persona": _interview_persona,
    "sociologic_get_persona_memories": _get_persona_memories,
    "sociologic_list_campaigns": lambda c, a: c.list_campaigns(a),
    "sociologic_get_campaign": lambda c, a: c.get_campaign(a["id"]),
    "sociologic_create_campaign": lambda c, a: c.create_campaign(a),
    "sociologic_execute_campaign": lambda c, a: c.execute_campaign(a["id"]),
    "sociologic_export_campaign": lambda c, a: c.export_campaign(a["id"], a["format"]),
    "sociologic_list_focus_groups": lambda c, a: c.list_focus_groups(a),
    "sociologic_get_focus_group": lambda c, a: c.get_focus_group(a["id"]),
    "sociologic_create_focus_group": lambda c, a: c.create_focus_group(a),
    "sociologic_add_personas_to_focus_group": lambda c, a: c.add_personas_to_focus_group(
        a["focus_group_id"], a["persona_ids"]
    ),
    "sociologic_get_credits_balance": lambda c, a: c.get_credits_balance(),
    "sociologic_get_x402_discovery": lambda c, a: c.get_x402_discovery(),
    "sociologic_scrape_url": lambda c, a: c.scrape_url(a),
    "sociologic_search_web": lambda c, a: c.search_web(a),
    "sociologic_research_topic": lambda c, a: c.research_topic(a),
    "sociologic_get_company_info": lambda c, a: c.get_company_info(a["url"]),
}


async def execute_tool(client: SocioLogicClient, name: str, arguments: object) -> ApiResponse:
    tool = get_tool(name)
    handler = _HANDLERS.get(name)
    if tool is None or handler is None:
        raise ToolNotFoundError(name)
    args = validate_arguments(tool.input_schema, arguments)
    logger.debug("Calling tool %s", name)
    return await handler(client, args)
