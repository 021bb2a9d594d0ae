from __future__ import annotations

from dataclasses import dataclass

from signal_relay.tools import schemas


@dataclass(frozen=True)
class ToolAnnotations:
    title: str
    read_only: bool
    idempotent: bool
    destructive: bool = False
    open_world: bool = True

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "readOnlyHint": self.read_only,
            "destructiveHint": self.destructive,
            "idempotentHint": self.idempotent,
            "openWorldHint": self.open_world,
        }


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: dict
    annotations: ToolAnnotations

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
            "annotations": self.annotations.to_dict(),
        }

    def summary(self) -> dict:
        return {"name": self.name, "description": self.description}


def _read(title: str) -> ToolAnnotations:
    return ToolAnnotations(title=title, read_only=True, idempotent=True)


def _write(title: str, idempotent: bool = False) -> ToolAnnotations:
    return ToolAnnotations(title=title, read_only=False, idempotent=idempotent)


TOOL_DEFINITIONS: list[ToolDefinition] = [
    ToolDefinition(
        "sociologic_list_personas",
        "List available synthetic personas from the SocioLogic marketplace or your private collection. "
        "Use this to discover personas for interviews or campaigns.",
        schemas.LIST_PERSONAS,
        _read("List Personas"),
    ),
    ToolDefinition(
        "sociologic_get_persona",
        "Get detailed information about a specific persona including demographics, psychographics, "
        "and behavioral traits.",
        schemas.GET_PERSONA,
        _read("Get Persona Details"),
    ),
    ToolDefinition(
        "sociologic_create_persona",
        "Create a new synthetic persona from a natural language description. The AI will generate a "
        "high-fidelity persona with consistent traits. Supports x402 crypto payments.",
        schemas.CREATE_PERSONA,
        _write("Create Persona"),
    ),
    ToolDefinition(
        "sociologic_interview_persona",
        "Conduct an adversarial interview with a synthetic persona. Personas are prompted to challenge "
        "ideas and reveal unknown unknowns. Supports ongoing conversations and x402 crypto payments.",
        schemas.INTERVIEW_PERSONA,
        _write("Interview Persona"),
    ),
    ToolDefinition(
        "sociologic_get_persona_memories",
        "Retrieve a persona's semantic memories. Memories are vector-embedded learnings from past "
        "interactions that inform future responses.",
        schemas.GET_PERSONA_MEMORIES,
        _read("Get Persona Memories"),
    ),
    ToolDefinition(
        "sociologic_list_campaigns",
        "List your research campaigns. Campaigns are structured multi-persona interview sessions with "
        "defined questions.",
        schemas.LIST_CAMPAIGNS,
        _read("List Campaigns"),
    ),
    ToolDefinition(
        "sociologic_get_campaign",
        "Get detailed information about a specific campaign including status, personas, questions, "
        "and interview results.",
        schemas.GET_CAMPAIGN,
        _read("Get Campaign Details"),
    ),
    ToolDefinition(
        "sociologic_create_campaign",
        "Create a new research campaign. Define questions and either generate new personas or use "
        "existing ones. Campaigns enable systematic multi-persona research.",
        schemas.CREATE_CAMPAIGN,
        _write("Create Campaign"),
    ),
    ToolDefinition(
        "sociologic_execute_campaign",
        "Execute a draft campaign. This triggers background interviews with all personas and generates "
        "a research report. Long-running operation.",
        schemas.EXECUTE_CAMPAIGN,
        _write("Execute Campaign"),
    ),
    ToolDefinition(
        "sociologic_export_campaign",
        "Export a completed campaign's results as PDF or JSON. PDF includes executive summary, persona "
        "responses, and synthesized findings.",
        schemas.EXPORT_CAMPAIGN,
        _read("Export Campaign"),
    ),
    ToolDefinition(
        "sociologic_list_focus_groups",
        "List your focus groups. Focus groups are collections of personas for cohort-based research.",
        schemas.LIST_FOCUS_GROUPS,
        _read("List Focus Groups"),
    ),
    ToolDefinition(
        "sociologic_get_focus_group",
        "Get detailed information about a focus group including its member personas.",
        schemas.GET_FOCUS_GROUP,
        _read("Get Focus Group Details"),
    ),
    ToolDefinition(
        "sociologic_create_focus_group",
        "Create a new focus group to organize personas for cohort-based research.",
        schemas.CREATE_FOCUS_GROUP,
        _write("Create Focus Group"),
    ),
    ToolDefinition(
        "sociologic_add_personas_to_focus_group",
        "Add one or more personas to an existing focus group.",
        schemas.ADD_PERSONAS_TO_FOCUS_GROUP,
        _write("Add Personas to Focus Group", idempotent=True),
    ),
    ToolDefinition(
        "sociologic_get_credits_balance",
        "Check your current credits balance. Credits are used for persona interviews and campaign execution.",
        schemas.GET_CREDITS_BALANCE,
        _read("Get Credits Balance"),
    ),
    ToolDefinition(
        "sociologic_get_x402_discovery",
        "Get x402 payment discovery information. Returns which endpoints accept crypto payments "
        "(USDC on Base), wallet address, pricing, and facilitator details.",
        schemas.GET_X402_DISCOVERY,
        _read("Get x402 Payment Info"),
    ),
    ToolDefinition(
        "sociologic_scrape_url",
        "Scrape content from a URL. Returns markdown, HTML, or links from a webpage. Useful for "
        "researching companies, products, or topics to enrich persona interviews.",
        schemas.SCRAPE_URL,
        _read("Scrape URL"),
    ),
    ToolDefinition(
        "sociologic_search_web",
        "Search the web and return scraped results. Useful for gathering information about topics, "
        "competitors, or market research to inform persona interviews.",
        schemas.SEARCH_WEB,
        _read("Search Web"),
    ),
    ToolDefinition(
        "sociologic_research_topic",
        "Research a topic and gather sources for persona enrichment. Returns summarized content from "
        "multiple web sources about a specific topic.",
        schemas.RESEARCH_TOPIC,
        _read("Research Topic"),
    ),
    ToolDefinition(
        "sociologic_get_company_info",
        "Get information about a company from their website. Returns company name, description, and "
        "main content. Useful for preparing brand affinity questions in persona interviews.",
        schemas.GET_COMPANY_INFO,
        _read("Get Company Info"),
    ),
]

TOOLS_BY_NAME: dict[str, ToolDefinition] = {t.name: t for t in TOOL_DEFINITIONS}


def get_tool(name: str) -> ToolDefinition | None:
    return TOOLS_BY_NAME.get(name)


def list_tools() -> list[dict]:
    return [t.to_dict() for t in TOOL_DEFINITIONS]
