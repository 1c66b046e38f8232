"""
Drawing sheet state: view scales and positions, breaklines, tables, title
block, and the computed annotation styles.

Types:
  - ExtensionLineAsCenterline  display flag pair for one extension line
  - AnnotationStyle            computed placement + optional display flags
  - AnnotationStyleMap         dimension code -> AnnotationStyle
  - DrawingState               everything known about one sheet
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from wedge_layout.errors import MissingParameterError
from wedge_layout.model.parameters import ParameterMap
from wedge_layout.model.part import DrawingType
from wedge_layout.model.quantity import Quantity
from wedge_layout.model.units import Unit

DIMENSION_STYLES = "DimensionStyles"


@dataclass(frozen=True)
class ExtensionLineAsCenterline:
    ext_index: Optional[int] = None
    centerline: Optional[bool] = None


@dataclass
class AnnotationStyle:
    """Placement of one dimension or symbol on the sheet.

    Attributes:
        position: vector Quantity (x, y) in sheet millimeters.
        arrow_side: which side arrows are drawn on (host enum value).
        center_text: center the dimension text between extension lines.
        witness_visibility: which extension lines are shown (host enum value).
        extension_line_from_center: extension lines start at the feature center.
        extension_line_as_centerline: render one extension line as a centerline.
    """
    position: Quantity
    arrow_side: Optional[int] = None
    center_text: Optional[bool] = None
    witness_visibility: Optional[int] = None
    extension_line_from_center: Optional[bool] = None
    extension_line_as_centerline: Optional[ExtensionLineAsCenterline] = None

    def point(self, unit: Unit = Unit.MILLIMETER) -> Tuple[float, float]:
        values = self.position.vector_values(unit)
        return float(values[0]), float(values[1])

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"position": self.position.vector_values(Unit.MILLIMETER).tolist()}
        for name in ("arrow_side", "center_text", "witness_visibility", "extension_line_from_center"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        if self.extension_line_as_centerline is not None:
            data["extension_line_as_centerline"] = {
                "ext_index": self.extension_line_as_centerline.ext_index,
                "centerline": self.extension_line_as_centerline.centerline,
            }
        return data


class AnnotationStyleMap:
    """Dimension code -> AnnotationStyle, with the same lookup styles as ParameterMap."""

    def __init__(self, name: str = DIMENSION_STYLES):
        self.name = name
        self._items: Dict[str, AnnotationStyle] = {}

    def get(self, key: str) -> AnnotationStyle:
        try:
            return self._items[key]
        except KeyError:
            raise MissingParameterError(self.name, key) from None

    def try_get(self, key: str) -> Optional[AnnotationStyle]:
        return self._items.get(key)

    def set(self, key: str, style: AnnotationStyle) -> None:
        self._items[key] = style

    def contains(self, key: str) -> bool:
        return key in self._items

    def keys(self) -> List[str]:
        return list(self._items.keys())

    def items(self) -> List[Tuple[str, AnnotationStyle]]:
        return list(self._items.items())

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)


def _point_list(q: Quantity) -> List[float]:
    if q.is_vector:
        return q.vector_values(Unit.MILLIMETER).tolist()
    return [q.value(Unit.MILLIMETER)]


@dataclass
class DrawingState:
    """Mutable state of one drawing sheet.

    Only the conditional rule engine (scales, positions, title block scale
    text) and the dynamic styler (dimension_styles) change it after seeding.
    """
    view_scales: ParameterMap = field(default_factory=lambda: ParameterMap("ViewScales"))
    view_positions: ParameterMap = field(default_factory=lambda: ParameterMap("ViewPositions"))
    breakline_data: ParameterMap = field(default_factory=lambda: ParameterMap("BreaklineData"))
    table_positions: ParameterMap = field(default_factory=lambda: ParameterMap("TablePositions"))
    dimension_styles: AnnotationStyleMap = field(default_factory=AnnotationStyleMap)
    title_block_info: Dict[str, str] = field(default_factory=dict)
    how_to_order_info: Dict[str, str] = field(default_factory=dict)
    title_info: Dict[str, str] = field(default_factory=dict)
    label_as_items: List[str] = field(default_factory=list)
    polish_items: List[str] = field(default_factory=list)
    dimension_keys_in_table: List[str] = field(default_factory=list)
    drawing_type: DrawingType = DrawingType.PRODUCTION
    title: str = ""

    def describe(self) -> str:
        """Multi-line text dump for logs and the CLI."""
        lines = ["=== DrawingState ===", f"Title: {self.title}",
                 f"Drawing type: {self.drawing_type.value}"]

        for header, mapping in (("Title info", self.title_info),
                                ("Title block", self.title_block_info),
                                ("How to order", self.how_to_order_info)):
            lines.append(f"{header}:")
            lines.extend(f"  {k}: {v}" for k, v in mapping.items())

        for header, seq in (("Label as", self.label_as_items),
                            ("Polish", self.polish_items),
                            ("Dimension keys in table", self.dimension_keys_in_table)):
            lines.append(f"{header}:")
            lines.extend(f"  - {item}" for item in seq)

        for header, pmap in (("View positions", self.view_positions),
                             ("View scales", self.view_scales),
                             ("Table positions", self.table_positions),
                             ("Breakline data", self.breakline_data)):
            lines.append(f"{header}:")
            for key, q in pmap.items():
                lines.append(f"  {key}: {', '.join(f'{v:g}' for v in _point_list(q))}")

        lines.append("Dimension styles:")
        for key, style in self.dimension_styles.items():
            x, y = style.point()
            lines.append(f"  {key}: ({x:.3f}, {y:.3f})")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly export of the sheet state."""
        def scalars(pmap: ParameterMap) -> Dict[str, float]:
            return {k: q.value(Unit.MILLIMETER) for k, q in pmap.items()}

        def vectors(pmap: ParameterMap) -> Dict[str, List[float]]:
            return {k: _point_list(q) for k, q in pmap.items()}

        return {
            "title": self.title,
            "drawing_type": self.drawing_type.value,
            "view_scales": scalars(self.view_scales),
            "view_positions": vectors(self.view_positions),
            "breakline_data": scalars(self.breakline_data),
            "table_positions": vectors(self.table_positions),
            "title_block_info": dict(self.title_block_info),
            "how_to_order_info": dict(self.how_to_order_info),
            "title_info": dict(self.title_info),
            "label_as_items": list(self.label_as_items),
            "polish_items": list(self.polish_items),
            "dimension_keys_in_table": list(self.dimension_keys_in_table),
            "dimension_styles": {k: s.to_dict() for k, s in self.dimension_styles.items()},
        }
