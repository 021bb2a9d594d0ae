from signal_relay.tools.dispatch import ToolNotFoundError, execute_tool
from signal_relay.tools.registry import TOOL_DEFINITIONS, TOOLS_BY_NAME, ToolDefinition, get_tool, list_tools

__all__ = [
    "TOOL_DEFINITIONS",
    "TOOLS_BY_NAME",
    "ToolDefinition",
    "ToolNotFoundError",
    "execute_tool",
    "get_tool",
    "list_tools",
]
