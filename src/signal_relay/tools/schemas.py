from __future__ import annotations

_DRAFT7 = "http://json-schema.org/draft-07/schema#"

FIDELITY_TIERS = ["standard", "enhanced", "premium", "ultra"]


def _object(properties: dict, required: tuple[str, ...] = (), top_level: bool = True) -> dict:
    schema: dict = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(required)
    schema["additionalProperties"] = False
    if top_level:
        schema["$schema"] = _DRAFT7
    return schema


def _uuid(description: str) -> dict:
    return {"type": "string", "format": "uuid", "description": description}


def _slug() -> dict:
    return {"type": "string", "minLength": 1, "description": "The persona's unique slug identifier"}


X402_PAYMENT = _object(
    {
        "payload": {
            "type": "string",
            "minLength": 1,
            "description": "Base64-encoded payment payload from your x402 wallet",
        },
        "scheme": {"type": "string", "description": "Payment scheme (default: 'exact')"},
        "network": {"type": "string", "description": "Network identifier (default: 'eip155:8453' for Base)"},
    },
    required=("payload",),
    top_level=False,
)
X402_PAYMENT["description"] = "Optional x402 crypto payment to use instead of credits"


LIST_PERSONAS = _object({
    "visibility": {
        "type": "string",
        "enum": ["public", "private", "all"],
        "default": "public",
        "description": "Filter by visibility: 'public' (marketplace), 'private' (user's own), 'all' (both)",
    },
    "category": {"type": "string", "description": "Filter by category"},
    "fidelity_tier": {"type": "string", "enum": FIDELITY_TIERS, "description": "Filter by fidelity tier"},
    "search": {"type": "string", "description": "Search in name, tagline, description"},
    "page": {"type": "integer", "exclusiveMinimum": 0, "default": 1, "description": "Page number for pagination"},
    "per_page": {
        "type": "integer",
        "minimum": 1,
        "maximum": 100,
        "default": 20,
        "description": "Results per page (max 100)",
    },
})

GET_PERSONA = _object({"slug": _slug()}, required=("slug",))

CREATE_PERSONA = _object(
    {
        "description": {
            "type": "string",
            "minLength": 10,
            "maxLength": 2000,
            "description": "Natural language description of the persona to create",
        },
        "fidelity_tier": {
            "type": "string",
            "enum": FIDELITY_TIERS,
            "default": "enhanced",
            "description": "Fidelity tier for the persona (affects depth and consistency)",
        },
        "x402_payment": X402_PAYMENT,
    },
    required=("description",),
)

INTERVIEW_PERSONA = _object(
    {
        "slug": _slug(),
        "message": {
            "type": "string",
            "minLength": 1,
            "maxLength": 4000,
            "description": "Your message/question to the persona",
        },
        "conversation_id": _uuid("Optional conversation ID to continue an existing conversation"),
        "include_memory": {
            "type": "boolean",
            "default": True,
            "description": "Whether to include persona's semantic memory context",
        },
        "save_conversation": {
            "type": "boolean",
            "default": True,
            "description": "Whether to save this conversation for future reference",
        },
        "x402_payment": X402_PAYMENT,
    },
    required=("slug", "message"),
)

GET_PERSONA_MEMORIES = _object(
    {
        "slug": _slug(),
        "query": {"type": "string", "description": "Optional semantic search query to filter memories"},
        "limit": {
            "type": "integer",
            "minimum": 1,
            "maximum": 50,
            "default": 10,
            "description": "Maximum number of memories to return",
        },
    },
    required=("slug",),
)

LIST_CAMPAIGNS = _object({
    "status": {
        "type": "string",
        "enum": ["draft", "running", "completed", "failed"],
        "description": "Filter by campaign status",
    },
    "limit": {
        "type": "integer",
        "minimum": 1,
        "maximum": 100,
        "default": 20,
        "description": "Maximum number of campaigns to return",
    },
    "offset": {
        "type": "integer",
        "minimum": 0,
        "default": 0,
        "description": "Number of campaigns to skip for pagination",
    },
    "include_interviews": {
        "type": "boolean",
        "default": False,
        "description": "Include interview details in response",
    },
})

GET_CAMPAIGN = _object({"id": _uuid("The campaign's unique ID")}, required=("id",))

_QUESTION = _object(
    {
        "id": {"type": "string", "description": "Unique identifier for the question"},
        "text": {
            "type": "string",
            "minLength": 1,
            "maxLength": 1000,
            "description": "The question text to ask personas",
        },
        "type": {
            "type": "string",
            "enum": ["open", "scale", "multiple_choice"],
            "default": "open",
            "description": "Question type: open-ended, scale rating, or multiple choice",
        },
        "required": {"type": "boolean", "default": True, "description": "Whether the question must be answered"},
        "options": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Answer options for multiple choice questions",
        },
    },
    required=("id", "text"),
    top_level=False,
)

_RESEARCH_CONTEXT = _object(
    {
        "subjectName": {
            "type": "string",
            "minLength": 1,
            "maxLength": 200,
            "description": "Name of the product, service, or topic being researched",
        },
        "subjectDescription": {
            "type": "string",
            "minLength": 50,
            "maxLength": 2000,
            "description": "Detailed description of the research subject",
        },
        "currentChallenge": {
            "type": "string",
            "minLength": 20,
            "maxLength": 1000,
            "description": "The main challenge or problem you're trying to solve",
        },
        "areasToExplore": {
            "type": "array",
            "items": {"type": "string", "maxLength": 500},
            "maxItems": 10,
            "description": "Specific areas or topics to investigate",
        },
        "knownIssues": {
            "type": "array",
            "items": {"type": "string", "maxLength": 500},
            "maxItems": 10,
            "description": "Known problems or pain points to validate",
        },
    },
    required=("subjectName", "subjectDescription", "currentChallenge"),
    top_level=False,
)
_RESEARCH_CONTEXT["description"] = "Research context for AI-guided questioning"

CREATE_CAMPAIGN = _object(
    {
        "name": {"type": "string", "minLength": 1, "maxLength": 200, "description": "Name for the campaign"},
        "description": {
            "type": "string",
            "maxLength": 2000,
            "description": "Description of the campaign's purpose",
        },
        "questions": {
            "type": "array",
            "items": _QUESTION,
            "minItems": 1,
            "maxItems": 20,
            "description": "Research questions to ask personas",
        },
        "persona_brief": {
            "type": "string",
            "minLength": 10,
            "maxLength": 2000,
            "description": "Description for generating new personas (if not using existing)",
        },
        "persona_count": {
            "type": "integer",
            "minimum": 1,
            "maximum": 50,
            "default": 10,
            "description": "Number of personas to generate (if using persona_brief)",
        },
        "fidelity_tier": {
            "type": "string",
            "enum": FIDELITY_TIERS,
            "default": "enhanced",
            "description": "Fidelity tier for generated personas",
        },
        "existing_persona_ids": {
            "type": "array",
            "items": {"type": "string", "format": "uuid"},
            "description": "Use existing personas instead of generating new ones",
        },
        "focus_group_ids": {
            "type": "array",
            "items": {"type": "string", "format": "uuid"},
            "description": "Use personas from existing focus groups",
        },
        "research_context": _RESEARCH_CONTEXT,
    },
    required=("name", "questions"),
)

EXECUTE_CAMPAIGN = _object({"id": _uuid("The campaign's unique ID to execute")}, required=("id",))

EXPORT_CAMPAIGN = _object(
    {
        "id": _uuid("The campaign's unique ID"),
        "format": {"type": "string", "enum": ["pdf", "json"], "default": "pdf", "description": "Export format"},
    },
    required=("id",),
)

LIST_FOCUS_GROUPS = _object({
    "limit": {
        "type": "integer",
        "minimum": 1,
        "maximum": 100,
        "default": 20,
        "description": "Maximum number of focus groups to return",
    },
    "offset": {
        "type": "integer",
        "minimum": 0,
        "default": 0,
        "description": "Number of focus groups to skip for pagination",
    },
})

GET_FOCUS_GROUP = _object({"id": _uuid("The focus group's unique ID")}, required=("id",))

CREATE_FOCUS_GROUP = _object(
    {
        "name": {"type": "string", "minLength": 1, "maxLength": 200, "description": "Name for the focus group"},
        "description": {
            "type": "string",
            "maxLength": 2000,
            "description": "Description of the focus group's purpose",
        },
    },
    required=("name",),
)

ADD_PERSONAS_TO_FOCUS_GROUP = _object(
    {
        "focus_group_id": _uuid("The focus group's unique ID"),
        "persona_ids": {
            "type": "array",
            "items": {"type": "string", "format": "uuid"},
            "minItems": 1,
            "description": "Array of persona IDs to add to the focus group",
        },
    },
    required=("focus_group_id", "persona_ids"),
)

GET_CREDITS_BALANCE = _object({})

GET_X402_DISCOVERY = _object({})

SCRAPE_URL = _object(
    {
        "url": {"type": "string", "format": "uri", "description": "The URL to scrape"},
        "formats": {
            "type": "array",
            "items": {"type": "string", "enum": ["markdown", "html", "links"]},
            "default": ["markdown"],
            "description": "Output formats to return",
        },
        "only_main_content": {
            "type": "boolean",
            "default": True,
            "description": "Whether to extract only the main content (recommended)",
        },
    },
    required=("url",),
)

SEARCH_WEB = _object(
    {
        "query": {"type": "string", "minLength": 1, "maxLength": 500, "description": "Search query"},
        "limit": {
            "type": "integer",
            "minimum": 1,
            "maximum": 10,
            "default": 5,
            "description": "Maximum number of results to return",
        },
    },
    required=("query",),
)

RESEARCH_TOPIC = _object(
    {
        "topic": {
            "type": "string",
            "minLength": 1,
            "maxLength": 500,
            "description": "Topic to research for persona enrichment",
        },
        "source_count": {
            "type": "integer",
            "minimum": 1,
            "maximum": 5,
            "default": 3,
            "description": "Number of sources to gather",
        },
    },
    required=("topic",),
)

GET_COMPANY_INFO = _object(
    {"url": {"type": "string", "format": "uri", "description": "Company website URL to analyze"}},
    required=("url",),
)
