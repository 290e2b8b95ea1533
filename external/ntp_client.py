# external/ntp_client.py
# Network time from a fixed NTP server (PTB by default).
import os, ntplib
from datetime import datetime, timezone

from external.errors import NtpError
from models.network_time import NetworkTime

NTP_SERVER = "ptbtime1.ptb.de"
NTP_VERSION = 3
DEFAULT_TIMEOUT = 5.0

class NtpClient:
    def __init__(self, server: str | None = None, timeout: float | None = None, ntp: ntplib.NTPClient | None = None):
        self.server = server or os.getenv("NTP_SERVER") or NTP_SERVER
        self.timeout = float(timeout or os.getenv("NTP_TIMEOUT") or DEFAULT_TIMEOUT)
        self._ntp = ntp or ntplib.NTPClient()

    def get_time(self) -> NetworkTime:
        """Send one NTP request and return the server's transmit time."""
        try:
            stats = self._ntp.request(self.server, version=NTP_VERSION, timeout=self.timeout)
        except ntplib.NTPException as ex:
            # ntplib reports timeouts this way
            raise NtpError(self.server, str(ex)) from ex
        except OSError as ex:
            raise NtpError(self.server, ex.strerror or str(ex)) from ex
        return NetworkTime(
            server=self.server,
            utc=datetime.fromtimestamp(stats.tx_time, tz=timezone.utc),
            offset=stats.offset,
        )
