from __future__ import annotations

from dataclasses import dataclass, field

from signal_relay.types import INVALID_PARAMS, RpcError


@dataclass(frozen=True)
class PromptArgument:
    name: str
    description: str
    required: bool = False

    def to_dict(self) -> dict:
        return {"name": self.name, "description": self.description, "required": self.required}


@dataclass(frozen=True)
class Prompt:
    name: str
    description: str
    template: str
    arguments: list[PromptArgument] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "arguments": [a.to_dict() for a in self.arguments],
        }


PROMPTS: list[Prompt] = [
    Prompt(
        name="interview_persona",
        description="Run an adversarial interview with a synthetic persona about a product or idea",
        template=(
            "Use sociologic_get_persona to load the persona '{persona_slug}', then use "
            "sociologic_interview_persona to ask them about: {topic}\n\n"
            "Push back on vague answers, ask follow-up questions in the same conversation, "
            "and summarise the objections and unmet needs the persona raised."
        ),
        arguments=[
            PromptArgument("persona_slug", "Slug of the persona to interview", required=True),
            PromptArgument("topic", "Product, feature, or idea to discuss", required=True),
        ],
    ),
    Prompt(
        name="design_campaign",
        description="Design and create a multi-persona research campaign",
        template=(
            "Design a research campaign about: {research_goal}\n\n"
            "Target audience: {audience}\n\n"
            "Draft between three and eight open or scale questions, then call "
            "sociologic_create_campaign with a persona_brief describing the audience. "
            "Do not execute the campaign until the questions have been reviewed."
        ),
        arguments=[
            PromptArgument("research_goal", "What the campaign should learn", required=True),
            PromptArgument("audience", "Who the personas should represent"),
        ],
    ),
    Prompt(
        name="research_company",
        description="Gather web research on a company to prepare brand-affinity interview questions",
        template=(
            "Use sociologic_get_company_info on {company_url} and sociologic_search_web for recent "
            "news about the company. Summarise its positioning, then propose interview questions "
            "that test how personas perceive the brand."
        ),
        arguments=[PromptArgument("company_url", "Company website URL", required=True)],
    ),
]

PROMPTS_BY_NAME: dict[str, Prompt] = {p.name: p for p in PROMPTS}


def list_prompts() -> list[dict]:
    return [p.to_dict() for p in PROMPTS]


def get_prompt(name: object, arguments: object = None) -> dict:
    prompt = PROMPTS_BY_NAME.get(name) if isinstance(name, str) else None
    if prompt is None:
        raise RpcError(INVALID_PARAMS, f"Unknown prompt: {name}")
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise RpcError(INVALID_PARAMS, "Prompt arguments must be an object")

    values: dict[str, str] = {}
    missing: list[str] = []
    for arg in prompt.arguments:
        value = arguments.get(arg.name)
        if value is None or value == "":
            if arg.required:
                missing.append(arg.name)
            values[arg.name] = "not specified"
        else:
            values[arg.name] = str(value)
    if missing:
        raise RpcError(
            INVALID_PARAMS,
            f"Missing required argument(s): {', '.join(missing)}",
            {"prompt": prompt.name, "missing": missing},
        )

    return {
        "description": prompt.description,
        "messages": [
            {
                "role": "user",
                "content": {"type": "text", "text": prompt.template.format(**values)},
            }
        ],
    }
