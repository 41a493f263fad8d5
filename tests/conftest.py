"""
Pytest configuration and fixtures for the organizational chart.

This module provides:
- A headless QApplication shared by the whole session
- Unit tree builders
- Reusable sample trees
"""
import os
import itertools

# Must be set before the first Qt import
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

from orgchart.model.units import Unit, UnitType

_ids = itertools.count(1000)


# ============================================================
# QT FIXTURES
# ============================================================

@pytest.fixture(scope="session", autouse=True)
def qapp():
    """One QApplication for every test (Qt allows only one per process)."""
    app = QApplication.instance() or QApplication([])
    yield app


# ============================================================
# UNIT BUILDERS
# ============================================================

def make_unit(name="Unit", children=None, unit_id=None, **kwargs) -> Unit:
    """Build a unit with sensible defaults; ids are unique unless given."""
    return Unit(
        id=next(_ids) if unit_id is None else unit_id,
        name=name,
        code=kwargs.pop("code", name.upper()[:6]),
        type=kwargs.pop("type", UnitType.DEPARTMENT),
        children=list(children or []),
        **kwargs,
    )


def leaves(count: int, prefix: str = "Leaf") -> list:
    return [make_unit(f"{prefix} {i}") for i in range(count)]


# ============================================================
# SAMPLE TREES
# ============================================================

@pytest.fixture
def star_tree():
    """Single root with three leaf children."""
    return [make_unit("Root", children=leaves(3), unit_id=1)]


@pytest.fixture
def lopsided_tree():
    """Root with one 5-leaf branch and one 1-leaf branch."""
    wide = make_unit("Wide", children=leaves(5, "W"), unit_id=10)
    narrow = make_unit("Narrow", children=leaves(1, "N"), unit_id=20)
    return [make_unit("Root", children=[wide, narrow], unit_id=1)]


@pytest.fixture
def deep_tree():
    """A mixed-depth tree with two roots."""
    a = make_unit("A", children=[
        make_unit("A1", children=leaves(2, "A1-")),
        make_unit("A2"),
        make_unit("A3", children=[make_unit("A3a", children=leaves(3, "A3a-"))]),
    ])
    b = make_unit("B", children=leaves(4, "B"))
    return [a, b]


@pytest.fixture
def sample_payload():
    """API-shaped records (camelCase), as returned by the portal."""
    return [
        {
            "id": 1,
            "name": "Opštinska uprava",
            "code": "OU",
            "type": "department",
            "managerName": "Marija Petrović",
            "managerTitle": "Načelnica",
            "employeeCount": 42,
            "phone": "+381 11 123 4567",
            "contacts": [
                {"id": 2, "name": "Drugi", "type": "deputy", "order": 2},
                {"id": 1, "name": "Prvi", "title": "Sekretar", "type": "secretary", "order": 1},
            ],
            "children": [
                {"id": 2, "name": "Finansije", "code": "FIN", "type": "division", "employeeCount": 5,
                 "children": [{"id": 4, "name": "Budžet", "code": "B", "type": "sector"}]},
                {"id": 3, "name": "Komisija", "code": "KOM", "type": "committee"},
            ],
        }
    ]
