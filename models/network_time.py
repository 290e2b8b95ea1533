from dataclasses import dataclass
from datetime import datetime

@dataclass(frozen=True)
class NetworkTime:
    server: str
    utc: datetime      # transmit time of the server reply, tz-aware UTC
    offset: float      # local clock offset [s]
