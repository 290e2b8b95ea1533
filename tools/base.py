# tools/base.py
# Tool record and MCP tool result helpers shared by the servers.
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

Handler = Callable[[Dict[str, Any]], Dict[str, Any]]

class ToolError(Exception):
    """Expected tool failure; reported to the caller as an isError result."""

@dataclass
class Tool:
    name: str
    description: str
    handler: Handler
    input_schema: Dict[str, Any] = field(default_factory=lambda: {"type": "object", "properties": {}})
    title: Optional[str] = None

    def describe(self) -> Dict[str, Any]:
        """Tool entry as returned by tools/list."""
        out = {"name": self.name, "description": self.description, "inputSchema": self.input_schema}
        if self.title:
            out["title"] = self.title
        return out

def text_result(text: str, structured: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if structured is not None:
        out["structuredContent"] = structured
    return out

def error_result(message: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": message}], "isError": True}
