"""Interactive organizational structure chart (layout, pan/zoom, node dragging)."""
from orgchart.model.layout import LayoutError, LayoutNode, diagram_extent, layout
from orgchart.model.units import Contact, ContactType, Unit, UnitDataError, UnitType

__all__ = [
    "Contact",
    "ContactType",
    "LayoutError",
    "LayoutNode",
    "Unit",
    "UnitDataError",
    "UnitType",
    "diagram_extent",
    "layout",
]
