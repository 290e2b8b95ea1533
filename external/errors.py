# external/errors.py
# Errors raised by the outbound clients (MaStR over HTTP, NTP over UDP).

class MastrError(Exception):
    """Base class for every failed MaStR query."""

class MastrTimeoutError(MastrError):
    def __init__(self, url: str, timeout: float):
        super().__init__(f"No response from MaStR within {timeout:g}s: {url}")
        self.url = url
        self.timeout = timeout

class MastrConnectionError(MastrError):
    pass

class MastrHTTPError(MastrError):
    def __init__(self, status_code: int, url: str):
        super().__init__(f"HTTP error {status_code} from MaStR: {url}")
        self.status_code = status_code
        self.url = url

class MastrPayloadError(MastrError):
    pass

class UnknownFilterError(MastrError):
    def __init__(self, kind: str, name: str):
        super().__init__(f"Unknown {kind}: {name!r}")
        self.kind = kind
        self.name = name

class NtpError(Exception):
    def __init__(self, server: str, reason: str):
        super().__init__(f"NTP query to {server} failed: {reason}")
        self.server = server
        self.reason = reason
