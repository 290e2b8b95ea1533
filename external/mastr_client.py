# external/mastr_client.py
# Client for the MaStR (Marktstammdatenregister) web JSON endpoint.
import os, requests
from typing import Any, Dict, Optional
from urllib.parse import quote

from external.errors import (
    MastrConnectionError, MastrHTTPError, MastrPayloadError, MastrTimeoutError,
)
from models.constants import STATUS_IN_OPERATION, energy_type_code, state_code
from models.power_sums import PowerSums

BASE_URL = "https://www.marktstammdatenregister.de/MaStR"
SUMS_PATH = "/Einheit/EinheitJson/GetSummenDerLeistungswerte"
GRID_NAME = "extSEE"
USER_AGENT = "mastr-mcp/1.0"
DEFAULT_TIMEOUT = 25.0

def _clause(field: str, op: str, value: str) -> str:
    # Telerik-style filter clause: Field~op~'value'; a quote inside the literal is doubled
    literal = value.replace("'", "''")
    return f"{quote(field)}~{op}~%27{quote(literal, safe='')}%27"

def build_sums_url(energy_type: str, state: Optional[str] = None, plz: Optional[str] = None,
                   county: Optional[str] = None, base_url: str = BASE_URL) -> str:
    """
    Build the GetSummenDerLeistungswerte URL for units in operation.
    Empty plz/county and a missing state add no clause.
    """
    clauses = [_clause("Betriebs-Status", "eq", STATUS_IN_OPERATION)]
    if county:
        clauses.append(_clause("Landkreis", "ct", county))
    clauses.append(_clause("Energieträger", "eq", energy_type_code(energy_type)))
    if plz:
        clauses.append(_clause("Postleitzahl", "eq", plz))
    if state:
        clauses.append(_clause("Bundesland", "eq", state_code(state)))
    return f"{base_url.rstrip('/')}{SUMS_PATH}?gridName={GRID_NAME}&filter=" + "~and~".join(clauses)

def _kw(data: Dict[str, Any], key: str) -> float:
    if key not in data:
        raise MastrPayloadError(f"Missing field '{key}' in MaStR response")
    value = data[key]
    if value is None:
        # no matching units
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MastrPayloadError(f"Field '{key}' is not a number: {value!r}")
    return value

def parse_sums(data: Any) -> PowerSums:
    if not isinstance(data, dict):
        raise MastrPayloadError(f"Expected a JSON object, got {type(data).__name__}")
    return PowerSums(gross_kw=_kw(data, "bruttoleistungSumme"), net_kw=_kw(data, "nettoleistungSumme"))

class MastrClient:
    def __init__(self, base_url: str | None = None, timeout: float | None = None,
                 user_agent: str | None = None, session: requests.Session | None = None):
        self.base_url = base_url or os.getenv("MASTR_BASE_URL") or BASE_URL
        self.timeout = float(timeout or os.getenv("MASTR_TIMEOUT") or DEFAULT_TIMEOUT)
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent or os.getenv("MASTR_USER_AGENT") or USER_AGENT,
            "Accept": "application/json",
        })

    def get_sums(self, energy_type: str, state: Optional[str] = None, plz: Optional[str] = None,
                 county: Optional[str] = None) -> PowerSums:
        """Gross and net power [kW] of all units in operation matching the filters."""
        url = build_sums_url(energy_type, state=state, plz=plz, county=county, base_url=self.base_url)
        return parse_sums(self._get_json(url))

    def _get_json(self, url: str) -> Any:
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.Timeout as ex:
            raise MastrTimeoutError(url, self.timeout) from ex
        except requests.RequestException as ex:
            raise MastrConnectionError(f"MaStR request failed: {ex}") from ex
        if not r.ok:
            raise MastrHTTPError(r.status_code, url)
        try:
            return r.json()
        except ValueError as ex:
            raise MastrPayloadError("MaStR response is not valid JSON") from ex
