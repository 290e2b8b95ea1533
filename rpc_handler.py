# rpc_handler.py
# MCP server side of JSON-RPC 2.0 over STDIO (binary I/O).
# Accepts newline-delimited JSON (MCP stdio) and Content-Length framing (LSP style);
# each response goes out in the framing of its request.
import sys, json
from typing import Any, Dict, Optional

from tools.base import Tool, ToolError, error_result

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSIONS = ["2025-06-18", "2025-03-26", "2024-11-05"]

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

class JsonRpcError(Exception):
    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

def check_arguments(schema: Dict[str, Any], arguments: Any):
    """Check tool arguments against the subset of JSON Schema our tools declare."""
    if not isinstance(arguments, dict):
        raise JsonRpcError(INVALID_PARAMS, "Invalid params: arguments must be an object")
    props = schema.get("properties", {})
    for key in schema.get("required", []):
        if key not in arguments:
            raise JsonRpcError(INVALID_PARAMS, f"Invalid params: missing required argument '{key}'")
    for key, value in arguments.items():
        prop = props.get(key)
        if prop is None:
            if schema.get("additionalProperties", True) is False:
                raise JsonRpcError(INVALID_PARAMS, f"Invalid params: unknown argument '{key}'")
            continue
        if prop.get("type") == "string" and not isinstance(value, str):
            raise JsonRpcError(INVALID_PARAMS, f"Invalid params: '{key}' must be a string")
        if "enum" in prop and value not in prop["enum"]:
            allowed = ", ".join(prop["enum"])
            raise JsonRpcError(INVALID_PARAMS, f"Invalid params: '{key}' must be one of: {allowed}")

class McpStdioServer:
    def __init__(self, name: str, version: str, logger=None, stdin=None, stdout=None):
        self.name = name
        self.version = version
        self.log = logger
        self.tools: Dict[str, Tool] = {}
        self._in = stdin or sys.stdin.buffer
        self._out = stdout or sys.stdout.buffer
        self._framed = False
        self.methods = {
            "initialize": self._initialize,
            "ping": lambda params: {},
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
        }

    def register_tool(self, tool: Tool):
        self.tools[tool.name] = tool

    # --- transport ---

    def _readline_bytes(self) -> Optional[bytes]:
        line = self._in.readline()
        if line == b"":
            return None  # EOF
        return line

    def _read_message(self) -> Optional[str]:
        """
        Read one message. Either a single line of raw JSON, or:
          Content-Length: <bytes>\r\n
          \r\n
          <body (exactly N bytes)>
        Returns the decoded UTF-8 text, or None on EOF.
        """
        headers = {}
        while True:
            line = self._readline_bytes()
            if line is None:
                return None
            s = line.strip().decode("utf-8", errors="replace")
            if s == "":
                if headers:
                    break  # end of headers
                continue  # blank line between messages
            if not headers and (s.startswith("{") or s.startswith("[")):
                self._framed = False
                return s
            if ":" in s:
                k, v = s.split(":", 1)
                headers[k.strip().lower()] = v.strip()
            elif self.log:
                self.log.warning(f"Ignoring unexpected line: {s[:80]}")

        try:
            n = int(headers.get("content-length", ""))
        except ValueError:
            if self.log:
                self.log.warning(f"Frame without valid Content-Length: {headers}")
            return self._read_message()

        # Read exactly n bytes
        remaining = n
        chunks = []
        while remaining > 0:
            chunk = self._in.read(remaining)
            if not chunk:
                return None  # EOF mid-body
            chunks.append(chunk)
            remaining -= len(chunk)
        self._framed = True
        return b"".join(chunks).decode("utf-8", errors="replace")

    def _write_message(self, payload: dict):
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        if self._framed:
            self._out.write(f"Content-Length: {len(data)}\r\n\r\n".encode("ascii"))
            self._out.write(data)
        else:
            self._out.write(data + b"\n")
        self._out.flush()

    def _err(self, _id, code: int, message: str):
        return {"jsonrpc": JSONRPC_VERSION, "id": _id, "error": {"code": code, "message": message}}

    def _ok(self, _id, result: dict):
        return {"jsonrpc": JSONRPC_VERSION, "id": _id, "result": result}

    # --- MCP methods ---

    def _initialize(self, params: dict) -> dict:
        requested = params.get("protocolVersion")
        version = requested if requested in PROTOCOL_VERSIONS else PROTOCOL_VERSIONS[0]
        if self.log:
            client = (params.get("clientInfo") or {}).get("name", "unknown")
            self.log.info(f"initialize from {client}, protocol {version}")
        return {
            "protocolVersion": version,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": self.name, "version": self.version},
        }

    def _tools_list(self, params: dict) -> dict:
        return {"tools": [t.describe() for t in self.tools.values()]}

    def _tools_call(self, params: dict) -> dict:
        name = params.get("name")
        tool = self.tools.get(name)
        if tool is None:
            raise JsonRpcError(INVALID_PARAMS, f"Unknown tool: {name}")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        check_arguments(tool.input_schema, arguments)
        try:
            return tool.handler(arguments)
        except ToolError as ex:
            if self.log:
                self.log.warning(f"Tool {name} failed: {ex} ({ex.__cause__!r})")
            return error_result(str(ex))

    # --- dispatch ---

    def handle(self, req: Any) -> Optional[dict]:
        """Handle one decoded message. Returns the response, or None for notifications."""
        if not isinstance(req, dict):
            return self._err(None, INVALID_REQUEST, "Invalid Request: expected a single JSON object")

        is_notification = "id" not in req
        _id = req.get("id")
        method = req.get("method")
        params = req.get("params")
        if params is None:
            params = {}

        if req.get("jsonrpc") != JSONRPC_VERSION or not isinstance(method, str):
            if is_notification:
                return None
            return self._err(_id, INVALID_REQUEST, "Invalid Request: jsonrpc must be '2.0'")

        if is_notification:
            if self.log:
                self.log.info(f"--- {method}")
            return None

        if method not in self.methods:
            return self._err(_id, METHOD_NOT_FOUND, f"Method not found: {method}")
        if not isinstance(params, dict):
            return self._err(_id, INVALID_PARAMS, "Invalid params: params must be an object")

        if self.log:
            self.log.info(f">>> {method} {params}")
        try:
            result = self.methods[method](params)
        except JsonRpcError as ex:
            if self.log:
                self.log.warning(f"<<< {method} error {ex.code}: {ex.message}")
            return self._err(_id, ex.code, ex.message)
        except Exception:
            if self.log:
                self.log.exception(f"Exception in method {method}")
            return self._err(_id, INTERNAL_ERROR, "Internal error")
        if self.log:
            self.log.info(f"<<< {method} OK")
        return self._ok(_id, result)

    def serve_forever(self):
        while True:
            raw = self._read_message()
            if raw is None:
                if self.log:
                    self.log.info("EOF on stdin. Exiting.")
                return
            try:
                req = json.loads(raw)
            except json.JSONDecodeError:
                if self.log:
                    self.log.warning("Received non-JSON payload.")
                self._write_message(self._err(None, PARSE_ERROR, "Parse error"))
                continue

            resp = self.handle(req)
            if resp is not None:
                self._write_message(resp)
