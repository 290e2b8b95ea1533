# tools/get_sums.py
# MCP tool: installed renewable capacity from the MaStR.
from typing import Optional

from external.errors import (
    MastrConnectionError, MastrError, MastrHTTPError, MastrPayloadError, MastrTimeoutError,
)
from external.mastr_client import MastrClient
from models.constants import ENERGY_TYPE_CODES, STATE_CODES
from tools.base import Tool, ToolError, text_result

NAME = "get-sums"
TITLE = "MaStR-Leistung"
DESCRIPTION = (
    "Liefert die installierte Leistung von erneuerbaren Energieträgern (Windkraft, Wasserkraft, "
    "Biomasse und Photovoltaik) in Deutschland. Bei Photovoltaik gilt: Die Bruttoleistung ist die "
    "Leistung der PV-Module, die Nettoleistung ist die Leistung aller Wechselrichter zusammen."
)

INPUT_SCHEMA = {
    "type": "object",
    "properties": {
        "type": {
            "type": "string",
            "enum": list(ENERGY_TYPE_CODES),
            "description": "Energieträger, Energiequelle, Art der Erzeugung",
        },
        "state": {
            "type": "string",
            "enum": list(STATE_CODES),
            "description": "Bundesland, in dem sich die Anlagen befinden",
        },
        "plz": {"type": "string", "description": "Postleitzahl der Anlagen"},
        "county": {"type": "string", "description": "Landkreis oder Region, in der die Anlagen stehen"},
    },
    "required": ["type"],
    "additionalProperties": False,
}

def format_kw(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value} kW"

def _describe(ex: MastrError) -> str:
    if isinstance(ex, MastrTimeoutError):
        return f"Das MaStR hat nicht innerhalb von {ex.timeout:g} Sekunden geantwortet."
    if isinstance(ex, MastrHTTPError):
        return f"Das MaStR hat mit HTTP-Status {ex.status_code} geantwortet."
    if isinstance(ex, MastrPayloadError):
        return f"Die Antwort des MaStR ist unbrauchbar: {ex}"
    if isinstance(ex, MastrConnectionError):
        return f"Das MaStR ist nicht erreichbar: {ex}"
    return f"MaStR-Abfrage fehlgeschlagen: {ex}"

def _opt(params: dict, key: str) -> Optional[str]:
    value = (params.get(key) or "").strip()
    return value or None

def tool_get_sums(params: dict, client: MastrClient) -> dict:
    """
    Input:
      type, state?, plz?, county?
    Output:
      text "Bruttoleistung: ... kW / Nettoleistung: ... kW" plus structuredContent
    """
    try:
        sums = client.get_sums(
            params["type"],
            state=_opt(params, "state"),
            plz=_opt(params, "plz"),
            county=_opt(params, "county"),
        )
    except MastrError as ex:
        raise ToolError(_describe(ex)) from ex

    text = f"Bruttoleistung: {format_kw(sums.gross_kw)}\nNettoleistung: {format_kw(sums.net_kw)}\n"
    return text_result(text, {"bruttoleistungSumme": sums.gross_kw, "nettoleistungSumme": sums.net_kw})

def get_sums_tool(client: MastrClient | None = None) -> Tool:
    client = client or MastrClient()
    return Tool(
        name=NAME,
        title=TITLE,
        description=DESCRIPTION,
        input_schema=INPUT_SCHEMA,
        handler=lambda params: tool_get_sums(params, client),
    )
