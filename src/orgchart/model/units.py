"""
Organizational Units (Data Model)
=================================
Defines the records the chart consumes. The tree arrives already resolved from
the portal API, so these classes only validate and convert; they never fetch
or persist anything.

Classes:
    UnitType: Organizational category of a unit (drives the card color).
    ContactType: Role of a contact person inside a unit.
    Contact: One contact person.
    Unit: One organizational unit with its ordered children.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, Iterator, List, Optional
import logging

logger = logging.getLogger(__name__)


class UnitDataError(ValueError):
    """Raised when a unit record cannot be converted."""


class UnitType(StrEnum):
    DEPARTMENT = "department"
    DIVISION = "division"
    SECTOR = "sector"
    SERVICE = "service"
    OFFICE = "office"
    COMMITTEE = "committee"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> UnitType:
        """Lenient lookup; unknown categories fall back to OTHER."""
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.debug(f"Unknown unit type '{value}', using OTHER.")
            return cls.OTHER


class ContactType(StrEnum):
    MANAGER = "manager"
    DEPUTY = "deputy"
    SECRETARY = "secretary"
    COORDINATOR = "coordinator"
    SPECIALIST = "specialist"
    OTHER = "other"


# UI labels (Serbian, as shown on the portal)
UNIT_TYPE_LABELS: Dict[UnitType, str] = {
    UnitType.DEPARTMENT: "Odsek",
    UnitType.DIVISION: "Odeljenje",
    UnitType.SECTOR: "Sektor",
    UnitType.SERVICE: "Služba",
    UnitType.OFFICE: "Kancelarija",
    UnitType.COMMITTEE: "Komisija",
    UnitType.OTHER: "Ostalo",
}

UNIT_TYPE_COLORS: Dict[UnitType, str] = {
    UnitType.DEPARTMENT: "#3B82F6",
    UnitType.DIVISION: "#10B981",
    UnitType.SECTOR: "#8B5CF6",
    UnitType.SERVICE: "#F59E0B",
    UnitType.OFFICE: "#6B7280",
    UnitType.COMMITTEE: "#EF4444",
    UnitType.OTHER: "#6B7280",
}

DEFAULT_UNIT_COLOR = "#6B7280"


@dataclass
class Contact:
    id: int
    name: str
    title: Optional[str] = None
    type: ContactType = ContactType.OTHER
    phone: Optional[str] = None
    email: Optional[str] = None
    office: Optional[str] = None
    order: int = 0

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Contact:
        if not isinstance(data, dict):
            raise UnitDataError(f"Expected a contact object, got {type(data).__name__}.")
        try:
            contact_id = int(data.get("id", 0))
            order = int(data.get("order") or 0)
        except (TypeError, ValueError) as e:
            raise UnitDataError(f"Contact record has a non-numeric field: {e}") from e
        try:
            contact_type = ContactType(str(data.get("type", "other")).lower())
        except ValueError:
            contact_type = ContactType.OTHER
        return Contact(
            id=contact_id,
            name=str(data.get("name", "")),
            title=data.get("title") or None,
            type=contact_type,
            phone=data.get("phone") or None,
            email=data.get("email") or None,
            office=data.get("office") or None,
            order=order,
        )


@dataclass
class Unit:
    """
    One node of the organizational tree.

    The tree is assumed acyclic; the layout engine refuses cyclic input
    rather than looping forever.
    """
    id: int
    name: str
    code: str
    type: UnitType = UnitType.OTHER
    description: Optional[str] = None
    manager_name: Optional[str] = None
    manager_title: Optional[str] = None
    employee_count: int = 0
    phone: Optional[str] = None
    email: Optional[str] = None
    location: Optional[str] = None
    contacts: List[Contact] = field(default_factory=list)
    children: List[Unit] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.employee_count < 0:
            raise UnitDataError(
                f"Unit {self.id} has a negative employee count ({self.employee_count})."
            )

    @property
    def type_label(self) -> str:
        return UNIT_TYPE_LABELS.get(self.type, str(self.type))

    @property
    def color(self) -> str:
        return UNIT_TYPE_COLORS.get(self.type, DEFAULT_UNIT_COLOR)

    def walk(self) -> Iterator[Unit]:
        """Pre-order iteration over this unit and all descendants."""
        stack: List[Unit] = [self]
        while stack:
            unit = stack.pop()
            yield unit
            stack.extend(reversed(unit.children))

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Unit:
        """
        Build a unit tree from an API record (camelCase keys).

        Raises:
            UnitDataError: If a required field is missing or malformed.
        """
        # Iterative so that very deep trees do not hit the recursion limit
        root = Unit._from_flat_record(data)
        pending = [(root, data.get("children") or [])]
        while pending:
            parent, raw_children = pending.pop()
            for raw_child in raw_children:
                child = Unit._from_flat_record(raw_child)
                parent.children.append(child)
                pending.append((child, raw_child.get("children") or []))
        return root

    @staticmethod
    def _from_flat_record(data: Dict[str, Any]) -> Unit:
        if not isinstance(data, dict):
            raise UnitDataError(f"Expected a unit object, got {type(data).__name__}.")
        missing = [key for key in ("id", "name") if key not in data]
        if missing:
            raise UnitDataError(f"Unit record is missing required field(s): {', '.join(missing)}")
        try:
            unit_id = int(data["id"])
            employee_count = int(data.get("employeeCount") or 0)
        except (TypeError, ValueError) as e:
            raise UnitDataError(f"Unit record has a non-numeric field: {e}") from e

        contacts = sorted(
            (Contact.from_dict(c) for c in data.get("contacts") or []),
            key=lambda c: c.order,
        )
        return Unit(
            id=unit_id,
            name=str(data["name"]),
            code=str(data.get("code", "")),
            type=UnitType.parse(data.get("type", UnitType.OTHER)),
            description=data.get("description") or None,
            manager_name=data.get("managerName") or None,
            manager_title=data.get("managerTitle") or None,
            employee_count=employee_count,
            phone=data.get("phone") or None,
            email=data.get("email") or None,
            location=data.get("location") or None,
            contacts=contacts,
        )
