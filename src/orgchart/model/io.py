"""
Input Manager (JSON)
Reads an organizational tree exported from the portal API.

The chart never writes anything back; saving a rearranged structure is the
portal's job.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Union

from orgchart.model.units import Unit, UnitDataError

logger = logging.getLogger(__name__)


def parse_units(payload: Any) -> List[Unit]:
    """
    Convert decoded JSON into unit trees.

    Accepts either a bare list of root records or the API envelope
    {"data": [...]}.
    """
    if payload is None:
        return []
    if isinstance(payload, dict) and "data" in payload:
        payload = payload["data"]
    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        raise UnitDataError(f"Expected a list of units, got {type(payload).__name__}.")

    return [Unit.from_dict(record) for record in payload]


def load_units(filepath: Union[str, Path]) -> List[Unit]:
    """
    Load a unit tree from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        UnitDataError: If the content is not valid JSON or not a unit tree.
    """
    path = Path(filepath)
    logger.info(f"Loading organizational units from: {path}")

    with path.open("r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise UnitDataError(f"Invalid JSON in '{path.name}': {e}") from e

    units = parse_units(payload)
    total = sum(1 for root in units for _ in root.walk())
    logger.info(f"Loaded {total} units ({len(units)} roots).")
    return units
