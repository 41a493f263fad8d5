"""
The CONTROLLER layer owns the interaction state of the chart: viewport
(pan/zoom), per-card drag overrides and selection. Views only forward events.
"""
