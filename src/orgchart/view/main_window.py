"""
Main Application Window
=======================
Host window for the organizational chart.

Why is this file needed?
------------------------
1. Layout: The chart is embedded in a scrollable page, the way it sits inside
   the portal dashboard, so wheel isolation between chart and page is visible.
2. Routing: It connects menu actions (open file, zoom, reset) to the chart.
"""
import logging
import os
from typing import Optional

from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QFileDialog, QLabel, QMainWindow, QMessageBox, QScrollArea, QVBoxLayout, QWidget
)

from orgchart.config import SAMPLE_UNITS_PATH
from orgchart.model.io import load_units
from orgchart.model.units import Unit, UnitDataError
from orgchart.view.chart_widget import OrgChartWidget

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Organizaciona struktura"
CHART_HEIGHT = 600


class MainWindow(QMainWindow):
    def __init__(self, data_path: Optional[str] = None) -> None:
        super().__init__()
        self.data_path: Optional[str] = None
        self.resize(1280, 860)

        # --- PAGE (scrollable, like the dashboard page around the chart) ---
        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.setCentralWidget(self.scroll)

        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)

        title = QLabel(VISIBLE_APP_NAME)
        title.setStyleSheet("font-size: 22px; font-weight: 600;")
        layout.addWidget(title)

        subtitle = QLabel("Hijerarhijski prikaz organizacionih jedinica")
        subtitle.setStyleSheet("color: #6B7280;")
        layout.addWidget(subtitle)

        self.chart = OrgChartWidget()
        self.chart.setFixedHeight(CHART_HEIGHT)
        layout.addWidget(self.chart)

        self.lbl_selection = QLabel("Nijedna jedinica nije izabrana.")
        self.lbl_selection.setStyleSheet("color: #374151;")
        layout.addWidget(self.lbl_selection)
        layout.addStretch(1)

        self.scroll.setWidget(page)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        self.chart.controller.selection_cleared.connect(self._on_selection_cleared)

        if data_path:
            self.open_file(data_path)
        else:
            self.update_window_title()

    def _create_actions(self) -> None:
        self.act_open = QAction("Otvori...", self)
        self.act_open.setShortcut("Ctrl+O")
        self.act_open.triggered.connect(self.on_file_open)

        self.act_sample = QAction("Učitaj primer", self)
        self.act_sample.triggered.connect(lambda: self.open_file(SAMPLE_UNITS_PATH))
        self.act_sample.setEnabled(os.path.exists(SAMPLE_UNITS_PATH))

        self.act_exit = QAction("Izlaz", self)
        self.act_exit.triggered.connect(self.close)

        self.act_zoom_in = QAction("Uvećaj", self)
        self.act_zoom_in.setShortcut("Ctrl++")
        self.act_zoom_in.triggered.connect(self.chart.zoom_in)

        self.act_zoom_out = QAction("Umanji", self)
        self.act_zoom_out.setShortcut("Ctrl+-")
        self.act_zoom_out.triggered.connect(self.chart.zoom_out)

        self.act_fit = QAction("Prilagodi", self)
        self.act_fit.setShortcut("Ctrl+0")
        self.act_fit.triggered.connect(self.chart.fit_to_container)

        self.act_reset = QAction("Vrati početni prikaz", self)
        self.act_reset.setShortcut("Ctrl+R")
        self.act_reset.triggered.connect(self.chart.reset_view)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&Datoteka")
        file_menu.addAction(self.act_open)
        file_menu.addAction(self.act_sample)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        view_menu = menu_bar.addMenu("&Prikaz")
        view_menu.addAction(self.act_zoom_in)
        view_menu.addAction(self.act_zoom_out)
        view_menu.addSeparator()
        view_menu.addAction(self.act_fit)
        view_menu.addAction(self.act_reset)

    # --- HELPER METHODS ---
    def update_window_title(self) -> None:
        filename = os.path.basename(self.data_path) if self.data_path else "bez podataka"
        self.setWindowTitle(f"{VISIBLE_APP_NAME} - [{filename}]")

    def open_file(self, filepath: str) -> bool:
        """Load units from JSON and show them. Errors are reported in a dialog."""
        try:
            units = load_units(filepath)
        except (OSError, UnitDataError) as e:
            logger.error(f"Failed to load '{filepath}': {e}")
            QMessageBox.critical(self, "Greška", f"Nije moguće otvoriti datoteku:\n{e}")
            return False

        self.data_path = filepath
        self.chart.set_units(units, on_unit_select=self.on_unit_selected)
        self.update_window_title()
        return True

    # --- SLOTS ---
    def on_file_open(self) -> None:
        fname, _ = QFileDialog.getOpenFileName(
            self, "Otvori organizacionu strukturu", "", "JSON (*.json)"
        )
        if fname:
            self.open_file(fname)

    def on_unit_selected(self, unit: Unit) -> None:
        self.lbl_selection.setText(f"Izabrana jedinica: {unit.name} ({unit.code})")
        self.statusBar().showMessage(f"{unit.name} - {unit.type_label}", 5000)

    def _on_selection_cleared(self) -> None:
        self.lbl_selection.setText("Nijedna jedinica nije izabrana.")
