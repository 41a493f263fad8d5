"""
Application Initialization
==========================
Builds the main window and starts the Qt event loop.

Why is this file needed?
------------------------
It acts as the composition root. It:
1. Parses the command line (data file, debug logging).
2. Sets up logging.
3. Creates the Qt application and the main window.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication

from orgchart.config import SAMPLE_UNITS_PATH
from orgchart.logging_config import setup_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orgchart",
        description="Interactive organizational structure chart.",
    )
    parser.add_argument(
        "--data",
        metavar="PATH",
        default=None,
        help=f"JSON file with the unit tree (default: {SAMPLE_UNITS_PATH})",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument("--log-file", metavar="PATH", default=None)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args, qt_args = _build_parser().parse_known_args(argv)

    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # Import after logging so module-level warnings are formatted
    from orgchart.view.main_window import MainWindow

    app = QApplication([sys.argv[0], *qt_args])
    app.setApplicationName("Organizaciona struktura")

    window = MainWindow(data_path=args.data or SAMPLE_UNITS_PATH)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
