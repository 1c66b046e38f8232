"""
Part dimension loaders.

Sources:
  - equation text     lines like ``"TL"= 1.5in`` (CAD equation export)
  - tolerance text    lines like ``"TL" +0.002 -0.001 in``
  - spreadsheet rows  dicts / CSV export with ``<KEY>_NOM/_UTOL/_LTOL`` columns
  - JSON documents    ``{"wedge_type": ..., "metadata": {...}, "dimensions": {...}}``

Every loader stores values in native units (mm, degrees) and makes sure the
part carries a SymmetryTolerance (0.04 mm unless the source supplies one).
"""

import csv
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from wedge_layout.config import DEFAULT_SYMMETRY_TOLERANCE_MM, INCH_MM, SYMMETRY_TOLERANCE_KEY
from wedge_layout.errors import PartLoadError
from wedge_layout.model.parameters import ParameterMap
from wedge_layout.model.part import (
    PART_DIMENSIONS,
    WedgePart,
    WedgeType,
    foreign_dimension_keys,
    is_angle_key,
)
from wedge_layout.model.quantity import Quantity
from wedge_layout.model.units import Unit, to_native

logger = logging.getLogger(__name__)

EQUATION_RE = re.compile(
    r'"(?P<key>[^"]+)"=\s*(?P<value>[-+]?\d*\.?\d+)(?P<unit>mm|in|deg|rad|m)')
TOLERANCE_RE = re.compile(
    r'"(?P<key>[^"]+)"\s*\+(?P<upper>[-+]?\d*\.?\d+)\s*-?(?P<lower>[-+]?\d*\.?\d+)'
    r'\s*(?P<unit>mm|in|deg|rad|m)?')

NOMINAL_SUFFIX = "_NOM"
UPPER_SUFFIX = "_UTOL"
LOWER_SUFFIX = "_LTOL"

# Spreadsheet columns copied into part metadata
ROW_METADATA_COLUMNS = {
    "drawing#": "drawing_number",
    "drawing_title": "drawing_title",
    "wedge_title": "wedge_title",
    "drawing_comments": "drawing_comments",
    "packaging": "packaging",
    "engrave": "engrave",
    "finishing": "finishing",
}

PathLike = Union[str, Path]


def ensure_symmetry_tolerance(dimensions: ParameterMap) -> None:
    """Add the default SymmetryTolerance when the source did not supply one."""
    if SYMMETRY_TOLERANCE_KEY not in dimensions:
        q = Quantity(DEFAULT_SYMMETRY_TOLERANCE_MM)
        q.set_unit(Unit.MILLIMETER)
        dimensions.set(SYMMETRY_TOLERANCE_KEY, q)


def _read_text(path: PathLike) -> str:
    path = Path(path)
    try:
        return path.read_text(encoding='utf-8')
    except OSError as e:
        raise PartLoadError(f"Cannot read part source {path}: {e}") from e


# ---------------------------------------------------------------------------
# Equation / tolerance text
# ---------------------------------------------------------------------------

def parse_equations(lines: Iterable[str], dimensions: Optional[ParameterMap] = None) -> ParameterMap:
    """Read ``"KEY"= <number><unit>`` lines; other lines are ignored.

    Values are converted to native units and tagged with their source unit.
    """
    dimensions = dimensions if dimensions is not None else ParameterMap(PART_DIMENSIONS)
    for line in lines:
        match = EQUATION_RE.search(line)
        if not match:
            continue
        unit = Unit.lookup(match.group("unit"))
        q = Quantity(to_native(float(match.group("value")), unit))
        q.set_unit(unit)
        dimensions.set(match.group("key"), q)
    return dimensions


def apply_tolerances(dimensions: ParameterMap, lines: Iterable[str]) -> int:
    """Attach ``+upper -lower`` tolerances to dimensions already present.

    Returns:
        Number of dimensions updated
    """
    updated = 0
    for line in lines:
        match = TOLERANCE_RE.search(line)
        if not match:
            continue
        key = match.group("key")
        original = dimensions.try_get(key)
        if original is None:
            logger.debug("Tolerance for unknown dimension '%s' ignored", key)
            continue

        upper = float(match.group("upper"))
        lower = float(match.group("lower"))
        if match.group("unit"):
            unit = Unit.lookup(match.group("unit"))
            upper, lower = to_native(upper, unit), to_native(lower, unit)

        q = Quantity.from_text(original.value(Unit.MILLIMETER), upper, lower)
        if original.unit is not None:
            q.set_unit(original.unit)
        dimensions.set(key, q)
        updated += 1
    return updated


def load_equation_file(
    equation_path: PathLike,
    tolerance_path: Optional[PathLike] = None,
    wedge_type: Optional[Union[WedgeType, str]] = None,
) -> WedgePart:
    """Build a part from an equation export and an optional tolerance file."""
    part = WedgePart(wedge_type=WedgeType.parse(wedge_type))
    parse_equations(_read_text(equation_path).splitlines(), part.dimensions)

    if tolerance_path is not None:
        if Path(tolerance_path).exists():
            count = apply_tolerances(part.dimensions, _read_text(tolerance_path).splitlines())
            logger.debug("Applied %d tolerances from %s", count, tolerance_path)
        else:
            logger.warning("Tolerance file not found: %s", tolerance_path)

    ensure_symmetry_tolerance(part.dimensions)
    part.metadata["source"] = str(equation_path)
    logger.info("Loaded %d dimensions from %s", len(part.dimensions), equation_path)
    return part


# ---------------------------------------------------------------------------
# Spreadsheet rows
# ---------------------------------------------------------------------------

def _cell(row: Mapping[str, Any], column: str) -> str:
    value = row.get(column)
    return "" if value is None else str(value).strip()


def _log_foreign_keys(part: WedgePart) -> None:
    foreign = foreign_dimension_keys(part.dimensions.keys(), part.wedge_type)
    if foreign:
        logger.debug("Keys not used by %s wedges: %s", part.wedge_type.value, ", ".join(foreign))


def _inch_to_mm(text: str) -> str:
    """Convert numeric inch text to mm text; leave anything else unchanged."""
    try:
        return repr(float(text) * INCH_MM)
    except ValueError:
        return text


def part_from_row(row: Mapping[str, Any], source: str = "") -> WedgePart:
    """Build a part from one spreadsheet row.

    Dimension columns are ``<KEY>_NOM``, ``<KEY>_UTOL`` and ``<KEY>_LTOL``;
    lengths are given in inches, angles in degrees. A blank nominal skips
    the key; unparsable cells become NaN.
    """
    row = {str(k).strip(): v for k, v in row.items() if k is not None}
    part = WedgePart(wedge_type=WedgeType.parse(_cell(row, "wedge_type")))

    for column, meta_key in ROW_METADATA_COLUMNS.items():
        if column in row:
            part.metadata[meta_key] = _cell(row, column)
    part.engraved_text = _cell(row, "wedge_title")
    part.overlay_calibration = _cell(row, "overlay_calibration")
    scaling = _cell(row, "overlay_scaling")
    if scaling:
        try:
            part.overlay_scaling = float(scaling)
        except ValueError:
            logger.warning("Invalid overlay_scaling '%s', using %s", scaling, part.overlay_scaling)

    keys = [c[:-len(NOMINAL_SUFFIX)] for c in row if c.endswith(NOMINAL_SUFFIX)]
    for key in keys:
        nominal = _cell(row, key + NOMINAL_SUFFIX)
        if not nominal:
            continue
        upper = _cell(row, key + UPPER_SUFFIX)
        lower = _cell(row, key + LOWER_SUFFIX)

        angle = is_angle_key(key, part.wedge_type)
        if not angle:
            nominal, upper, lower = _inch_to_mm(nominal), _inch_to_mm(upper), _inch_to_mm(lower)

        q = Quantity.from_text(nominal, upper, lower)
        q.set_unit(Unit.DEGREE if angle else Unit.MILLIMETER)
        part.dimensions.set(key, q)

    _log_foreign_keys(part)
    ensure_symmetry_tolerance(part.dimensions)
    if source:
        part.metadata["source"] = source
    return part


def load_spreadsheet_csv(path: PathLike) -> List[WedgePart]:
    """Read every data row of a CSV export of the wedge spreadsheet."""
    path = Path(path)
    if not path.exists():
        raise PartLoadError(f"Spreadsheet not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8-sig', newline='') as f:
            rows = list(csv.DictReader(f))
    except (OSError, csv.Error) as e:
        raise PartLoadError(f"Cannot read spreadsheet {path}: {e}") from e

    parts = [part_from_row(row, source=str(path)) for row in rows]
    logger.info("Loaded %d parts from %s", len(parts), path)
    return parts


# ---------------------------------------------------------------------------
# JSON documents
# ---------------------------------------------------------------------------

def _quantity_from_json(key: str, raw: Any, wedge_type: Optional[WedgeType] = None) -> Quantity:
    if isinstance(raw, dict):
        q = Quantity.from_text(raw.get("nom"), raw.get("utol"), raw.get("ltol"))
    else:
        q = Quantity.from_text(raw)
    q.set_unit(Unit.DEGREE if is_angle_key(key, wedge_type) else Unit.MILLIMETER)
    return q


def part_from_dict(data: Dict[str, Any]) -> WedgePart:
    """Build a part from a JSON-style dict (values already in mm / degrees)."""
    if not isinstance(data, dict):
        raise PartLoadError("Part document must be an object")
    dims = data.get("dimensions") or {}
    if not isinstance(dims, dict):
        raise PartLoadError("'dimensions' must be an object")

    part = WedgePart(
        wedge_type=WedgeType.parse(data.get("wedge_type")),
        metadata=dict(data.get("metadata") or {}),
        engraved_text=str(data.get("engraved_text", "") or ""),
        overlay_calibration=str(data.get("overlay_calibration", "") or ""),
        overlay_scaling=float(data.get("overlay_scaling", 1.0)),
    )
    for key, raw in dims.items():
        part.dimensions.set(key, _quantity_from_json(key, raw, part.wedge_type))

    _log_foreign_keys(part)
    ensure_symmetry_tolerance(part.dimensions)
    return part


def load_part_json(path: PathLike) -> WedgePart:
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as e:
        raise PartLoadError(f"Invalid JSON in {path}: {e}") from e
    part = part_from_dict(data)
    part.metadata.setdefault("source", str(path))
    return part


def load_part(path: PathLike, wedge_type: Optional[Union[WedgeType, str]] = None) -> WedgePart:
    """Load one part, choosing the reader by file extension.

    ``.json`` -> JSON document, ``.csv`` -> first spreadsheet row,
    anything else -> equation text (with ``<stem>.tol`` beside it if present).
    """
    path = Path(path)
    if not path.exists():
        raise PartLoadError(f"Part source not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        part = load_part_json(path)
    elif suffix == ".csv":
        parts = load_spreadsheet_csv(path)
        if not parts:
            raise PartLoadError(f"No data rows in {path}")
        part = parts[0]
    else:
        tolerance = path.with_suffix(".tol")
        part = load_equation_file(path, tolerance if tolerance.exists() else None)

    if wedge_type is not None:
        part.wedge_type = WedgeType.parse(wedge_type)
    return part
