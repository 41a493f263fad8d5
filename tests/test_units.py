"""
Tests for the unit data model and JSON input.
"""
import json

import pytest

from orgchart.config import SAMPLE_UNITS_PATH
from orgchart.model.io import load_units, parse_units
from orgchart.model.units import (
    ContactType, DEFAULT_UNIT_COLOR, Unit, UnitDataError, UnitType
)

from conftest import make_unit


# ============================================================
# Unit records
# ============================================================

class TestUnitFromDict:
    def test_camel_case_fields(self, sample_payload):
        root = Unit.from_dict(sample_payload[0])

        assert root.id == 1
        assert root.name == "Opštinska uprava"
        assert root.type is UnitType.DEPARTMENT
        assert root.manager_name == "Marija Petrović"
        assert root.manager_title == "Načelnica"
        assert root.employee_count == 42
        assert root.phone == "+381 11 123 4567"
        assert root.email is None

    def test_children_keep_order(self, sample_payload):
        root = Unit.from_dict(sample_payload[0])
        assert [c.name for c in root.children] == ["Finansije", "Komisija"]
        assert [c.name for c in root.children[0].children] == ["Budžet"]

    def test_contacts_sorted_by_order(self, sample_payload):
        root = Unit.from_dict(sample_payload[0])
        assert [c.name for c in root.contacts] == ["Prvi", "Drugi"]
        assert root.contacts[0].type is ContactType.SECRETARY
        assert root.contacts[0].title == "Sekretar"

    def test_unknown_type_falls_back_to_other(self):
        unit = Unit.from_dict({"id": 5, "name": "X", "type": "Ministry"})
        assert unit.type is UnitType.OTHER
        assert unit.color == DEFAULT_UNIT_COLOR

    def test_type_is_case_insensitive(self):
        assert UnitType.parse("COMMITTEE") is UnitType.COMMITTEE

    @pytest.mark.parametrize("record", [
        {"name": "No id"},
        {"id": 3},
        {"id": "abc", "name": "Bad id"},
        {"id": 1, "name": "Bad count", "employeeCount": "many"},
        {"id": 1, "name": "Bad contact id", "contacts": [{"id": "x", "name": "C"}]},
        {"id": 1, "name": "Bad contact order", "contacts": [{"id": 2, "name": "C", "order": "first"}]},
        {"id": 1, "name": "Contact not an object", "contacts": ["oops"]},
    ])
    def test_malformed_records(self, record):
        with pytest.raises(UnitDataError):
            Unit.from_dict(record)

    def test_child_must_be_object(self):
        with pytest.raises(UnitDataError):
            Unit.from_dict({"id": 1, "name": "Root", "children": ["oops"]})

    def test_deep_record_does_not_recurse(self):
        record = {"id": 0, "name": "leaf"}
        for i in range(1, 3000):
            record = {"id": i, "name": f"n{i}", "children": [record]}
        root = Unit.from_dict(record)
        assert sum(1 for _ in root.walk()) == 3000


class TestUnit:
    def test_negative_employee_count_rejected(self):
        with pytest.raises(UnitDataError):
            make_unit("Broken", employee_count=-1)

    def test_labels_and_colors(self):
        unit = make_unit("Sector", type=UnitType.SECTOR)
        assert unit.type_label == "Sektor"
        assert unit.color == "#8B5CF6"

    def test_walk_is_preorder(self, deep_tree):
        names = [u.name for u in deep_tree[0].walk()]
        assert names[:3] == ["A", "A1", "A1- 0"]
        assert names[-1] == "A3a- 2"

    def test_unit_data_error_is_value_error(self):
        assert issubclass(UnitDataError, ValueError)


# ============================================================
# JSON input
# ============================================================

class TestParseUnits:
    def test_bare_list(self, sample_payload):
        assert [u.id for u in parse_units(sample_payload)] == [1]

    def test_envelope(self, sample_payload):
        assert [u.id for u in parse_units({"data": sample_payload})] == [1]

    def test_single_record(self, sample_payload):
        assert [u.id for u in parse_units(sample_payload[0])] == [1]

    def test_none_is_empty(self):
        assert parse_units(None) == []

    def test_scalar_rejected(self):
        with pytest.raises(UnitDataError):
            parse_units("units")


class TestLoadUnits:
    def test_round_trip_file(self, tmp_path, sample_payload):
        path = tmp_path / "units.json"
        path.write_text(json.dumps(sample_payload), encoding="utf-8")

        [root] = load_units(path)
        assert root.name == "Opštinska uprava"
        assert len(list(root.walk())) == 4

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(UnitDataError):
            load_units(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_units(tmp_path / "missing.json")

    def test_bundled_sample(self):
        roots = load_units(SAMPLE_UNITS_PATH)
        assert [r.id for r in roots] == [1, 10]
        assert sum(1 for r in roots for _ in r.walk()) == 10
        # Contacts are re-sorted by their order field
        assert roots[0].contacts[0].name == "Dragan Nikolić"
