# servers.py
# The two MCP servers: each one registers a single tool.
from external.mastr_client import MastrClient
from external.ntp_client import NtpClient
from rpc_handler import McpStdioServer
from tools.get_sums import get_sums_tool
from tools.get_time import get_time_tool

SERVER_VERSION = "1.0.0"

def build_mastr_server(client: MastrClient | None = None, logger=None, stdin=None, stdout=None) -> McpStdioServer:
    server = McpStdioServer("mastr-mcp", SERVER_VERSION, logger=logger, stdin=stdin, stdout=stdout)
    server.register_tool(get_sums_tool(client))
    return server

def build_ntp_server(client: NtpClient | None = None, logger=None, stdin=None, stdout=None) -> McpStdioServer:
    server = McpStdioServer("ntp-mcp", SERVER_VERSION, logger=logger, stdin=stdin, stdout=stdout)
    server.register_tool(get_time_tool(client))
    return server

SERVERS = {
    "mastr": (build_mastr_server, "MaStR MCP Server running on stdio"),
    "ntp": (build_ntp_server, "NTP MCP Server running on stdio"),
}
