# tools/get_time.py
# MCP tool: current date and time from the PTB NTP server.
import os
from zoneinfo import ZoneInfo

from external.errors import NtpError
from external.ntp_client import NtpClient
from tools.base import Tool, ToolError, text_result

NAME = "get-time"
DESCRIPTION = "Frage Datum und Zeit bei der Physikalisch-Technischen Bundesanstalt ab."
DEFAULT_TIMEZONE = "Europe/Berlin"

def tool_get_time(params: dict, client: NtpClient, tz: ZoneInfo) -> dict:
    try:
        nt = client.get_time()
    except NtpError as ex:
        raise ToolError(f"Zeitabfrage bei {ex.server} fehlgeschlagen: {ex.reason}") from ex

    local = nt.utc.astimezone(tz)
    text = f"Aktuelles Datum: {local:%d.%m.%Y %H:%M:%S} {local.tzname()}"
    return text_result(text, {
        "utc": nt.utc.isoformat(),
        "local": local.isoformat(),
        "timezone": tz.key,
        "server": nt.server,
        "offset_seconds": nt.offset,
    })

def get_time_tool(client: NtpClient | None = None, timezone: str | None = None) -> Tool:
    client = client or NtpClient()
    tz = ZoneInfo(timezone or os.getenv("NTP_TIMEZONE") or DEFAULT_TIMEZONE)
    return Tool(
        name=NAME,
        description=DESCRIPTION,
        input_schema={"type": "object", "properties": {}, "additionalProperties": False},
        handler=lambda params: tool_get_time(params, client, tz),
    )
