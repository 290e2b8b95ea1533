import pytest
from external.errors import UnknownFilterError
from models.constants import ENERGY_TYPE_CODES, STATE_CODES, energy_type_code, state_code
from tools.get_sums import INPUT_SCHEMA

def test_energy_type_codes():
    assert energy_type_code("Photovoltaik") == "2495"
    assert energy_type_code("Windkraft") == "2497"
    assert energy_type_code("Wasserkraft") == "2498"
    assert energy_type_code("Biomasse") == "2493"

def test_state_codes_cover_all_sixteen_states():
    assert len(STATE_CODES) == 16
    assert len(set(STATE_CODES.values())) == 16
    assert state_code("Berlin") == "1401"
    assert state_code("Schleswig-Holstein") == "1411"
    assert state_code("Thüringen") == "1415"

def test_schema_enums_match_code_tables():
    props = INPUT_SCHEMA["properties"]
    assert set(props["type"]["enum"]) == set(ENERGY_TYPE_CODES)
    assert set(props["state"]["enum"]) == set(STATE_CODES)
    assert INPUT_SCHEMA["required"] == ["type"]

def test_unknown_names_raise():
    with pytest.raises(UnknownFilterError) as ei:
        energy_type_code("Kernkraft")
    assert ei.value.kind == "energy type"
    with pytest.raises(UnknownFilterError):
        state_code("Bavaria")
