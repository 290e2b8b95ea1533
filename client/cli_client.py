# Minimal host CLI: start a server, call one tool, print the result.
import argparse, json, sys
from client.stdio_client import StdioClient, McpCallError

def result_text(result: dict) -> str:
    return "\n".join(c.get("text", "") for c in result.get("content", []) if c.get("type") == "text")

def main(argv=None):
    p = argparse.ArgumentParser(description="MaStR / NTP MCP CLI host")
    p.add_argument("--server", required=True, choices=["mastr", "ntp"])
    p.add_argument("--list", action="store_true", help="print the server's tools and exit")
    p.add_argument("--tool", help="tool name, e.g. get-sums or get-time")
    p.add_argument("--args", default="{}", help='JSON arguments, e.g. {"type":"Windkraft","state":"Bayern"}')
    p.add_argument("--json", action="store_true", help="print the full tool result as JSON")
    args = p.parse_args(argv)
    if not args.list and not args.tool:
        p.error("one of --list or --tool is required")
    try:
        arguments = json.loads(args.args)
    except json.JSONDecodeError as ex:
        p.error(f"--args is not valid JSON: {ex}")
    if not isinstance(arguments, dict):
        p.error("--args must be a JSON object")

    with StdioClient(server=args.server) as client:
        client.initialize()
        if args.list:
            print(json.dumps(client.list_tools(), indent=2, ensure_ascii=False))
            return 0
        try:
            result = client.call_tool(args.tool, arguments)
        except McpCallError as ex:
            print(ex, file=sys.stderr)
            return 2
        print(json.dumps(result, indent=2, ensure_ascii=False) if args.json else result_text(result))
        return 1 if result.get("isError") else 0

if __name__ == "__main__":
    sys.exit(main())
