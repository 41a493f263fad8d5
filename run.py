"""
Entry Point Script (Bootstrap)
==============================
Development runner for the organizational chart.

It sits outside the 'src' package, so it puts 'src' on the import path before
importing 'orgchart'. An installed package (pip install -e .) does not need
this; use the 'orgchart' command instead.

Usage:
    $ python run.py [--data units.json] [--debug]
"""
import sys
import os

current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

appid = 'Portal.OrgChart.1'  # Windows taskbar grouping
try:
    import ctypes
    ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(appid)
except (AttributeError, ImportError):
    # Not on Windows or ctypes not available
    pass

from orgchart.main import main

if __name__ == "__main__":
    main(sys.argv[1:])
