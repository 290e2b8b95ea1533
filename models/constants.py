# MaStR filter codes. Names are the values offered in the get-sums input schema.
from external.errors import UnknownFilterError

ENERGY_TYPE_CODES = {
    "Photovoltaik": "2495",
    "Windkraft": "2497",
    "Wasserkraft": "2498",
    "Biomasse": "2493",
}

STATE_CODES = {
    "Baden-Württemberg": "1402",
    "Bayern": "1403",
    "Berlin": "1401",
    "Brandenburg": "1400",
    "Bremen": "1404",
    "Hamburg": "1406",
    "Hessen": "1405",
    "Mecklenburg-Vorpommern": "1407",
    "Niedersachsen": "1408",
    "Nordrhein-Westfalen": "1409",
    "Rheinland-Pfalz": "1410",
    "Saarland": "1412",
    "Sachsen": "1413",
    "Sachsen-Anhalt": "1414",
    "Schleswig-Holstein": "1411",
    "Thüringen": "1415",
}

# "35" = unit in operation
STATUS_IN_OPERATION = "35"

def energy_type_code(name: str) -> str:
    try:
        return ENERGY_TYPE_CODES[name]
    except KeyError:
        raise UnknownFilterError("energy type", name) from None

def state_code(name: str) -> str:
    try:
        return STATE_CODES[name]
    except KeyError:
        raise UnknownFilterError("state", name) from None
