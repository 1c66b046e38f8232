"""
Wedge part model: dimensions plus the descriptive data of one part instance.

Types:
  - WedgeType    wedge family (CKVD, COB)
  - DrawingType  kind of sheet produced (Production, Overlay)
  - WedgePart    one part instance as read by the layout engine
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from wedge_layout.model.parameters import ParameterMap
from wedge_layout.model.units import Unit

PART_DIMENSIONS = "PartDimensions"


class WedgeType(Enum):
    CKVD = "CKVD"
    COB = "COB"

    @classmethod
    def parse(cls, text: Any) -> Optional['WedgeType']:
        """Case-insensitive parse; None for blank or unknown text."""
        if isinstance(text, WedgeType):
            return text
        token = str(text or "").strip().upper()
        return cls.__members__.get(token)


class DrawingType(Enum):
    PRODUCTION = "Production"
    OVERLAY = "Overlay"

    @classmethod
    def parse(cls, text: Any) -> Optional['DrawingType']:
        """Case-insensitive parse; None for blank or unknown text."""
        if isinstance(text, DrawingType):
            return text
        token = str(text or "").strip().lower()
        for member in cls:
            if member.value.lower() == token:
                return member
        return None


# Dimension codes carried by each wedge family
WEDGE_DIMENSION_KEYS: Dict[WedgeType, FrozenSet[str]] = {
    WedgeType.CKVD: frozenset({
        "TL", "TD", "TDF", "BA", "ISA", "FA", "GR", "GA", "GD", "FL", "F",
        "FX", "B", "VW", "E", "FR", "BR", "X", "VR", "W", "FRX", "BRX",
        "FL_groove_angle",
    }),
    WedgeType.COB: frozenset({
        "TL", "TD", "TDF", "BA", "ISA", "RA", "T", "ERW", "ERD", "CA", "FD",
        "FL", "FLER", "FRO", "FH", "HA", "FNA", "H", "MB", "W",
    }),
}

WEDGE_ANGLE_KEYS: Dict[WedgeType, FrozenSet[str]] = {
    WedgeType.CKVD: frozenset({"ISA", "FA", "BA", "GA", "FL_groove_angle"}),
    WedgeType.COB: frozenset({"ISA", "BA", "RA", "CA", "HA", "FNA"}),
}

# Spreadsheet columns holding angles (degrees, never inch-converted)
ANGLE_KEYS = frozenset({"ISA", "FA", "BA", "GA", "FL_groove_angle"})


def is_angle_key(key: str, wedge_type: Optional[WedgeType] = None) -> bool:
    """Angle codes are stored in degrees; the family table wins when the family is known."""
    if wedge_type is not None:
        return key in WEDGE_ANGLE_KEYS[wedge_type]
    return key in ANGLE_KEYS


def foreign_dimension_keys(keys: Iterable[str], wedge_type: Optional[WedgeType]) -> List[str]:
    """Keys the wedge family does not carry; empty when the family is unknown."""
    if wedge_type is None:
        return []
    return [key for key in keys if key not in WEDGE_DIMENSION_KEYS[wedge_type]]


@dataclass
class WedgePart:
    """One wedge part instance.

    Attributes:
        dimensions: dimension code -> Quantity ("PartDimensions").
        wedge_type: wedge family; None when the source did not name one.
        metadata: free-form descriptive fields (drawing_number, titles, source ...).
        engraved_text: text engraved on the part.
        overlay_calibration: calibration note printed on overlay sheets.
        overlay_scaling: overlay magnification.
    """
    dimensions: ParameterMap = field(default_factory=lambda: ParameterMap(PART_DIMENSIONS))
    wedge_type: Optional[WedgeType] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    engraved_text: str = ""
    overlay_calibration: str = ""
    overlay_scaling: float = 1.0

    @property
    def drawing_number(self) -> str:
        return str(self.metadata.get("drawing_number", "") or "")

    def describe(self) -> str:
        """Multi-line text dump for logs and the CLI."""
        lines = ["=== WedgePart ==="]
        lines.append(f"Wedge type: {self.wedge_type.value if self.wedge_type else '-'}")
        lines.append("Dimensions:")
        for key, q in self.dimensions.items():
            lines.append(
                f"  {key}: {q.value(Unit.MILLIMETER):.3f} mm "
                f"(+{q.tolerance_plus(Unit.MILLIMETER):.3f}/-{q.tolerance_minus(Unit.MILLIMETER):.3f})"
            )
        lines.append("Metadata:")
        for key, value in self.metadata.items():
            lines.append(f"  {key}: {value}")
        lines.append(f"Engraved text: {self.engraved_text}")
        lines.append(f"Overlay calibration: {self.overlay_calibration}")
        lines.append(f"Overlay scaling: {self.overlay_scaling}")
        return "\n".join(lines)
