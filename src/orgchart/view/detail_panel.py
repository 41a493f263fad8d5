"""
Unit Detail Panel
Floating card with the full record of the selected unit. It is anchored to a
screen corner of the chart (not to the world), so it stays legible at any zoom.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QToolButton, QVBoxLayout, QWidget

from orgchart.model.units import Unit

MAX_LISTED_CONTACTS = 3
PANEL_WIDTH = 320


@dataclass(frozen=True)
class DetailRow:
    kind: str  # manager, employees, phone, email, location, contact, more
    text: str


def detail_rows(unit: Unit) -> List[DetailRow]:
    """Rows of the detail panel; absent optional fields are skipped."""
    rows: List[DetailRow] = []
    if unit.manager_name:
        manager = unit.manager_name
        if unit.manager_title:
            manager += f" - {unit.manager_title}"
        rows.append(DetailRow("manager", manager))

    rows.append(DetailRow("employees", f"{unit.employee_count} zaposlenih"))

    for kind, value in (("phone", unit.phone), ("email", unit.email), ("location", unit.location)):
        if value:
            rows.append(DetailRow(kind, value))

    for contact in unit.contacts[:MAX_LISTED_CONTACTS]:
        text = contact.name if not contact.title else f"{contact.name} - {contact.title}"
        rows.append(DetailRow("contact", text))
    hidden = len(unit.contacts) - MAX_LISTED_CONTACTS
    if hidden > 0:
        rows.append(DetailRow("more", f"+{hidden} više kontakata"))
    return rows


_ROW_PREFIX = {
    "manager": "Rukovodilac:",
    "employees": "Zaposleni:",
    "phone": "Tel:",
    "email": "E-pošta:",
    "location": "Lokacija:",
}


class UnitDetailPanel(QFrame):
    """Shows one unit; emits close_requested when the user dismisses it."""
    close_requested = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.unit: Optional[Unit] = None

        self.setObjectName("unitDetailPanel")
        self.setFixedWidth(PANEL_WIDTH)
        self.setFrameShape(QFrame.StyledPanel)
        self.setStyleSheet("""
            QFrame#unitDetailPanel { background: white; border: 1px solid #E2E8F0; border-radius: 8px; }
            QLabel { border: none; }
        """)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(6)

        # --- header: name + close ---
        header = QHBoxLayout()
        self.lbl_name = QLabel()
        self.lbl_name.setWordWrap(True)
        self.lbl_name.setStyleSheet("font-size: 16px; font-weight: 600;")
        header.addWidget(self.lbl_name, 1)

        self.btn_close = QToolButton()
        self.btn_close.setText("×")
        self.btn_close.setAutoRaise(True)
        self.btn_close.clicked.connect(self.close_requested.emit)
        header.addWidget(self.btn_close, 0, Qt.AlignTop)
        layout.addLayout(header)

        # --- type badge + code ---
        badge_row = QHBoxLayout()
        self.lbl_type = QLabel()
        self.lbl_code = QLabel()
        self.lbl_code.setStyleSheet("color: #6B7280;")
        badge_row.addWidget(self.lbl_type)
        badge_row.addWidget(self.lbl_code)
        badge_row.addStretch(1)
        layout.addLayout(badge_row)

        self.lbl_description = QLabel()
        self.lbl_description.setWordWrap(True)
        self.lbl_description.setStyleSheet("color: #4B5563;")
        layout.addWidget(self.lbl_description)

        self.rows_container = QVBoxLayout()
        self.rows_container.setSpacing(2)
        layout.addLayout(self.rows_container)

        self.hide()

    def set_unit(self, unit: Optional[Unit]) -> None:
        self.unit = unit
        if unit is None:
            self.hide()
            return

        self.lbl_name.setText(unit.name)
        self.lbl_type.setText(unit.type_label)
        self.lbl_type.setStyleSheet(
            f"background: {unit.color}; color: white; border-radius: 6px; padding: 1px 6px; font-size: 11px;"
        )
        self.lbl_code.setText(f"({unit.code})" if unit.code else "")
        self.lbl_description.setText(unit.description or "")
        self.lbl_description.setVisible(bool(unit.description))

        self._rebuild_rows(detail_rows(unit))
        self.adjustSize()
        self.show()
        self.raise_()

    def row_texts(self) -> List[str]:
        """Texts currently displayed in the row area."""
        texts: List[str] = []
        for i in range(self.rows_container.count()):
            widget = self.rows_container.itemAt(i).widget()
            if isinstance(widget, QLabel):
                texts.append(widget.text())
        return texts

    def _rebuild_rows(self, rows: List[DetailRow]) -> None:
        while self.rows_container.count():
            item = self.rows_container.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

        contacts_started = False
        for row in rows:
            if row.kind in ("contact", "more") and not contacts_started:
                title = QLabel("Kontakti:")
                title.setStyleSheet("font-weight: 600; margin-top: 6px;")
                self.rows_container.addWidget(title)
                contacts_started = True

            prefix = _ROW_PREFIX.get(row.kind)
            label = QLabel(f"{prefix} {row.text}" if prefix else row.text)
            label.setWordWrap(True)
            if row.kind in ("contact", "more"):
                label.setStyleSheet("color: #4B5563; font-size: 11px;")
            self.rows_container.addWidget(label)
