# client/stdio_client.py
# Stdio MCP client that spawns a server subprocess (Windows-friendly).

import json, subprocess, sys, threading, queue, os, shlex, time
from itertools import count
from typing import Any, Dict, Optional
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
CLIENT_INFO = {"name": "mastr-ntp-host", "version": "1.0.0"}
PROTOCOL_VERSION = "2025-06-18"

class McpCallError(RuntimeError):
    def __init__(self, method: str, error: Dict[str, Any]):
        super().__init__(f"{method} failed ({error.get('code')}): {error.get('message')}")
        self.code = error.get("code")
        self.error = error

class StdioClient:
    def __init__(self, server: str = "mastr", server_cmd: Optional[str] = None, timeout_sec: float = 30.0,
                 framing: str = "line", env: Optional[Dict[str, str]] = None):
        """
        Launch a server subprocess.
        - server_cmd None: run main.py --server <server> from the project root.
        - framing "line": newline-delimited JSON (MCP stdio); "content-length": LSP-style headers.
        """
        self.timeout = timeout_sec
        self.framing = framing
        self._ids = count(1)
        if server_cmd is None:
            server_cmd = f'"{sys.executable}" "{PROJECT_ROOT / "main.py"}" --server {server}'

        self.proc = subprocess.Popen(
            server_cmd if os.name == "nt" else shlex.split(server_cmd),
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=str(PROJECT_ROOT),
            env={**os.environ, **(env or {})},
            shell=(os.name == "nt"),
            text=False,  # binary I/O
            bufsize=0
        )

        self._out_q = queue.Queue()
        self._err_q = queue.Queue()
        self._readers = [
            threading.Thread(target=self._read_stdout, daemon=True),
            threading.Thread(target=self._read_stderr, daemon=True),
        ]
        for t in self._readers:
            t.start()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _readline_bytes(self) -> Optional[bytes]:
        line = self.proc.stdout.readline()
        if line == b"":
            return None
        return line

    def _read_stdout(self):
        while True:
            headers = {}
            line = self._readline_bytes()
            if line is None:
                return
            s = line.strip().decode("utf-8", errors="replace")
            if s.startswith("{") or s.startswith("["):
                self._out_q.put(s)
                continue
            if ":" in s:
                k, v = s.split(":", 1)
                headers[k.strip().lower()] = v.strip()
                # read remaining headers
                while True:
                    l2 = self._readline_bytes()
                    if l2 is None:
                        return
                    if l2.strip() == b"":
                        break
                    k2, v2 = l2.decode("utf-8", errors="replace").split(":", 1)
                    headers[k2.strip().lower()] = v2.strip()
                try:
                    length = int(headers.get("content-length", "0"))
                except ValueError:
                    length = 0
                body = b""
                while len(body) < length:
                    chunk = self.proc.stdout.read(length - len(body))  # unbuffered pipe: may be short
                    if not chunk:
                        return
                    body += chunk
                if body:
                    self._out_q.put(body.decode("utf-8", errors="replace"))

    def _read_stderr(self):
        while True:
            data = self.proc.stderr.readline()
            if not data:
                return
            self._err_q.put(data.decode("utf-8", errors="replace").rstrip())

    def _drain_stderr(self) -> str:
        lines = []
        try:
            while True:
                lines.append(self._err_q.get_nowait())
        except queue.Empty:
            pass
        return "\n".join(lines)

    def _send(self, payload: Dict[str, Any]):
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        if self.framing == "content-length":
            frame = b"Content-Length: " + str(len(data)).encode("ascii") + b"\r\n\r\n" + data
        else:
            frame = data + b"\n"
        try:
            self.proc.stdin.write(frame)
            self.proc.stdin.flush()
        except OSError as e:
            err = self._drain_stderr()
            raise RuntimeError(f"Failed to write to server stdin: {e}\nServer stderr:\n{err}") from e

    def _wait_for(self, req_id: int) -> Dict[str, Any]:
        deadline = time.monotonic() + self.timeout
        while True:
            remaining = deadline - time.monotonic()
            try:
                if remaining <= 0:
                    raise queue.Empty
                resp = json.loads(self._out_q.get(timeout=remaining))
            except queue.Empty:
                # If server died, surface stderr to help debugging
                code = self.proc.poll()
                err = self._drain_stderr()
                if code is not None:
                    raise RuntimeError(f"Server exited (code={code}). Stderr:\n{err}")
                raise TimeoutError(f"No response within {self.timeout}s. Stderr so far:\n{err}")
            if resp.get("id") == req_id:
                return resp
            # server-initiated messages and stale replies are skipped

    def call(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Send a request and return the raw JSON-RPC response."""
        req_id = next(self._ids)
        self._send({"jsonrpc": "2.0", "id": req_id, "method": method, "params": params})
        return self._wait_for(req_id)

    def notify(self, method: str, params: Optional[Dict[str, Any]] = None):
        self._send({"jsonrpc": "2.0", "method": method, "params": params or {}})

    def request(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Like call(), but return the result and raise McpCallError on error responses."""
        resp = self.call(method, params)
        if "error" in resp:
            raise McpCallError(method, resp["error"])
        return resp.get("result", {})

    def initialize(self) -> Dict[str, Any]:
        result = self.request("initialize", {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {},
            "clientInfo": CLIENT_INFO,
        })
        self.notify("notifications/initialized")
        return result

    def list_tools(self) -> list:
        return self.request("tools/list", {}).get("tools", [])

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("tools/call", {"name": name, "arguments": arguments or {}})

    def close(self):
        if self.proc.poll() is None:
            try:
                self.proc.stdin.close()
                self.proc.wait(timeout=5)
            except (OSError, subprocess.TimeoutExpired):
                self.proc.terminate()
                self.proc.wait(timeout=5)
        # the readers stop at EOF once the process is gone
        for t in self._readers:
            t.join(timeout=2)
        for pipe in (self.proc.stdin, self.proc.stdout, self.proc.stderr):
            try:
                pipe.close()
            except OSError:
                pass  # already closed or broken
