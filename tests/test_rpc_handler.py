import io, json
from models.power_sums import PowerSums
from rpc_handler import McpStdioServer, check_arguments, JsonRpcError
from servers import build_mastr_server, build_ntp_server
from tools.base import Tool, ToolError
from tools.get_sums import INPUT_SCHEMA
import pytest

class FakeMastr:
    def get_sums(self, energy_type, state=None, plz=None, county=None):
        return PowerSums(gross_kw=500.0, net_kw=400.0)

def req(method, params=None, _id=1):
    out = {"jsonrpc": "2.0", "id": _id, "method": method}
    if params is not None:
        out["params"] = params
    return out

def run(server_factory, raw: bytes) -> bytes:
    out = io.BytesIO()
    server = server_factory(stdin=io.BytesIO(raw), stdout=out)
    server.serve_forever()
    return out.getvalue()

def test_initialize_echoes_supported_version():
    server = build_mastr_server(client=FakeMastr())
    resp = server.handle(req("initialize", {"protocolVersion": "2024-11-05", "clientInfo": {"name": "t"}}))
    result = resp["result"]
    assert result["protocolVersion"] == "2024-11-05"
    assert result["serverInfo"] == {"name": "mastr-mcp", "version": "1.0.0"}
    assert "tools" in result["capabilities"]

def test_initialize_unknown_version_gets_latest():
    server = build_ntp_server()
    resp = server.handle(req("initialize", {"protocolVersion": "1999-01-01"}))
    assert resp["result"]["protocolVersion"] == "2025-06-18"
    assert resp["result"]["serverInfo"]["name"] == "ntp-mcp"

def test_notifications_get_no_response():
    server = build_mastr_server(client=FakeMastr())
    assert server.handle({"jsonrpc": "2.0", "method": "notifications/initialized"}) is None
    assert server.handle({"jsonrpc": "2.0", "method": "unknown/notification"}) is None

def test_ping_and_unknown_method():
    server = build_mastr_server(client=FakeMastr())
    assert server.handle(req("ping")) == {"jsonrpc": "2.0", "id": 1, "result": {}}
    assert server.handle(req("resources/list"))["error"]["code"] == -32601

def test_invalid_requests():
    server = build_mastr_server(client=FakeMastr())
    assert server.handle({"jsonrpc": "1.0", "id": 3, "method": "ping"})["error"]["code"] == -32600
    assert server.handle([req("ping")])["error"]["code"] == -32600
    assert server.handle(req("tools/list", params=[1, 2]))["error"]["code"] == -32602

def test_tools_list():
    server = build_mastr_server(client=FakeMastr())
    tools = server.handle(req("tools/list"))["result"]["tools"]
    assert [t["name"] for t in tools] == ["get-sums"]
    assert tools[0]["inputSchema"]["required"] == ["type"]

def test_tools_call_get_sums():
    server = build_mastr_server(client=FakeMastr())
    resp = server.handle(req("tools/call", {"name": "get-sums", "arguments": {"type": "Windkraft"}}))
    assert resp["result"]["content"][0]["text"] == "Bruttoleistung: 500 kW\nNettoleistung: 400 kW\n"

def test_tools_call_invalid_arguments():
    server = build_mastr_server(client=FakeMastr())
    for args in ({}, {"type": "Kernkraft"}, {"type": "Windkraft", "plz": 12345}, {"type": "Windkraft", "x": "1"}):
        resp = server.handle(req("tools/call", {"name": "get-sums", "arguments": args}))
        assert resp["error"]["code"] == -32602

def test_tools_call_unknown_tool():
    server = build_ntp_server()
    resp = server.handle(req("tools/call", {"name": "get-sums", "arguments": {}}))
    assert resp["error"]["code"] == -32602
    assert "Unknown tool" in resp["error"]["message"]

def test_tool_error_becomes_error_result():
    def failing(params):
        raise ToolError("MaStR nicht erreichbar")
    server = McpStdioServer("t", "0")
    server.register_tool(Tool(name="fail", description="", handler=failing))
    resp = server.handle(req("tools/call", {"name": "fail"}))
    assert resp["result"] == {"content": [{"type": "text", "text": "MaStR nicht erreichbar"}], "isError": True}

def test_unexpected_exception_is_internal_error():
    def broken(params):
        raise ValueError("boom")
    server = McpStdioServer("t", "0")
    server.register_tool(Tool(name="broken", description="", handler=broken))
    resp = server.handle(req("tools/call", {"name": "broken", "arguments": {}}))
    assert resp["error"] == {"code": -32603, "message": "Internal error"}

def test_check_arguments_accepts_optional_filters():
    check_arguments(INPUT_SCHEMA, {"type": "Biomasse", "state": "Hessen", "plz": "35390", "county": "Gießen"})
    with pytest.raises(JsonRpcError):
        check_arguments(INPUT_SCHEMA, ["Biomasse"])

def test_serve_line_delimited():
    raw = (json.dumps(req("ping", _id=1)) + "\n"
           + json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}) + "\n"
           + "\n"
           + json.dumps(req("tools/list", _id=2)) + "\n").encode("utf-8")
    out = run(lambda **kw: build_mastr_server(client=FakeMastr(), **kw), raw)
    lines = out.decode("utf-8").splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0])["id"] == 1
    assert json.loads(lines[1])["result"]["tools"][0]["name"] == "get-sums"

def test_serve_content_length_framing():
    body = json.dumps(req("tools/call", {"name": "get-sums", "arguments": {"type": "Photovoltaik", "state": "Thüringen"}}),
                      ensure_ascii=False).encode("utf-8")
    raw = b"Content-Length: " + str(len(body)).encode("ascii") + b"\r\nContent-Type: application/json\r\n\r\n" + body
    out = run(lambda **kw: build_mastr_server(client=FakeMastr(), **kw), raw)
    header, payload = out.split(b"\r\n\r\n", 1)
    assert header == b"Content-Length: " + str(len(payload)).encode("ascii")
    assert json.loads(payload)["result"]["structuredContent"]["bruttoleistungSumme"] == 500.0

def test_serve_parse_error():
    out = run(lambda **kw: build_ntp_server(**kw), b"{not json\n")
    assert json.loads(out)["error"]["code"] == -32700

def test_array_params_are_rejected():
    server = build_ntp_server()
    for params in ([], [1, 2]):
        assert server.handle(req("ping", params=params))["error"]["code"] == -32602
    assert server.handle(req("ping", params=None))["result"] == {}
