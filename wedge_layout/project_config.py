"""
JSON-based layout configuration for wedge_layout.

One section per drawing type ("Production", "Overlay"); each section seeds
the view scales, view positions, breaklines, table anchors and title block
of a fresh drawing.

Config file search order:
1. Explicit config path (CLI --config)
2. .wedgelayout.json in the part file's directory
3. .wedgelayout.json in the current working directory
4. ~/.wedgelayout.json

Example .wedgelayout.json:
{
    "Production": {
        "scaling": {"front_side_top": 2.0, "detail_section": 4.0},
        "views": {"front_x": 60.0, "front_y": 160.0, "side_dx": 70.0,
                  "top_dy": -110.0, "detail_x": 250.0, "detail_y": 190.0,
                  "section_x": 80.0},
        "breaklines": {"front_lower_length": 30.0, "front_upper_length": 20.0,
                       "front_gap": 3.0, "detail_lower_length": 40.0,
                       "detail_gap": 3.0},
        "tables": {"dimension": {"x": 290.0, "y": 120.0, "width": 110.0}},
        "title_block": {"material": "TUNGSTEN CARBIDE", "author": "J. Smith"}
    }
}

Sections written with the flat keys of the legacy automation config
("scaling_fsv", "front_view_posX", "dim_table_width" ...) are accepted too.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from wedge_layout.errors import ConfigError
from wedge_layout.model.part import DrawingType

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".wedgelayout.json"

# Separator of multi-item text fields in the legacy flat format
LEGACY_ITEM_SEPARATOR = "¶"


@dataclass
class ScalingConfig:
    """Base view scales."""
    front_side_top: float = 2.0
    detail_section: float = 4.0


@dataclass
class ViewPlacementConfig:
    """View anchor positions on the sheet (mm)."""
    front_x: float = 60.0
    front_y: float = 160.0
    side_dx: float = 70.0
    top_dy: float = -110.0
    detail_x: float = 250.0
    detail_y: float = 190.0
    section_x: float = 80.0


@dataclass
class BreaklineConfig:
    """Broken view lengths (mm). Front values are shared by the side view,
    detail values by the section view."""
    front_lower_length: float = 30.0
    front_upper_length: float = 20.0
    front_gap: float = 3.0
    detail_lower_length: float = 40.0
    detail_gap: float = 3.0


@dataclass
class TableAnchor:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0

    def as_vector(self) -> List[float]:
        return [self.x, self.y, self.width]


@dataclass
class TablesConfig:
    """Table anchors: position of the top-left corner and column width."""
    dimension: TableAnchor = field(default_factory=lambda: TableAnchor(290.0, 120.0, 110.0))
    how_to_order: TableAnchor = field(default_factory=lambda: TableAnchor(290.0, 60.0, 110.0))
    label_as: TableAnchor = field(default_factory=lambda: TableAnchor(20.0, 60.0, 80.0))
    polish: TableAnchor = field(default_factory=lambda: TableAnchor(20.0, 40.0, 80.0))


@dataclass
class TitleBlockConfig:
    """Title block and sheet note texts."""
    material: str = ""
    author: str = ""
    packaging: str = ""
    how_to_order_info: str = ""
    engrave: List[str] = field(default_factory=list)
    polish_text: List[str] = field(default_factory=list)
    dimension_keys_in_table: List[str] = field(default_factory=list)


_GROUPS = ('scaling', 'views', 'breaklines', 'title_block')

# Legacy flat key -> (group, field)
_FLAT_KEYS = {
    "scaling_fsv": ("scaling", "front_side_top"),
    "scaling_dsv": ("scaling", "detail_section"),
    "front_view_posX": ("views", "front_x"),
    "front_view_posY": ("views", "front_y"),
    "side_view_dX": ("views", "side_dx"),
    "top_view_dY": ("views", "top_dy"),
    "detail_view_posX": ("views", "detail_x"),
    "detail_view_posY": ("views", "detail_y"),
    "section_view_posX": ("views", "section_x"),
    "length_lower_section_fsv": ("breaklines", "front_lower_length"),
    "length_upper_section_fsv": ("breaklines", "front_upper_length"),
    "breakline_gap_fsv": ("breaklines", "front_gap"),
    "length_lower_section_dsv": ("breaklines", "detail_lower_length"),
    "breakline_gap_dsv": ("breaklines", "detail_gap"),
    "material": ("title_block", "material"),
    "author": ("title_block", "author"),
    "packaging": ("title_block", "packaging"),
    "how_to_order_info": ("title_block", "how_to_order_info"),
    "engrave": ("title_block", "engrave"),
    "polish_text": ("title_block", "polish_text"),
    "dimension_keys_in_table": ("title_block", "dimension_keys_in_table"),
}

# Legacy table prefixes: "<prefix>_posX", "<prefix>_posY", "<prefix>_width"
_FLAT_TABLES = {
    "dim_table": "dimension",
    "how_to_order": "how_to_order",
    "label_as": "label_as",
    "polish": "polish",
}

_LIST_FIELDS = {
    "engrave": LEGACY_ITEM_SEPARATOR,
    "polish_text": LEGACY_ITEM_SEPARATOR,
    "dimension_keys_in_table": ",",
}


def _split_items(value: Any, separator: str) -> List[str]:
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [item.strip() for item in str(value or "").split(separator) if item.strip()]


@dataclass
class DrawingTypeConfig:
    """Configuration of one drawing type."""
    scaling: ScalingConfig = field(default_factory=ScalingConfig)
    views: ViewPlacementConfig = field(default_factory=ViewPlacementConfig)
    breaklines: BreaklineConfig = field(default_factory=BreaklineConfig)
    tables: TablesConfig = field(default_factory=TablesConfig)
    title_block: TitleBlockConfig = field(default_factory=TitleBlockConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def _set(self, group: str, key: str, value: Any) -> None:
        target = getattr(self, group)
        if not hasattr(target, key):
            logger.debug("Ignoring unknown config key %s.%s", group, key)
            return
        if key in _LIST_FIELDS:
            value = _split_items(value, _LIST_FIELDS[key])
        setattr(target, key, value)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DrawingTypeConfig':
        """Create a section from grouped or legacy flat keys.

        Args:
            data: Section dictionary

        Returns:
            DrawingTypeConfig with defaults for everything not given
        """
        section = cls()

        for group in _GROUPS:
            for key, value in (data.get(group) or {}).items():
                section._set(group, key, value)

        for name, anchor in (data.get('tables') or {}).items():
            if hasattr(section.tables, name) and isinstance(anchor, dict):
                table = getattr(section.tables, name)
                for key, value in anchor.items():
                    if hasattr(table, key):
                        setattr(table, key, value)

        for key, value in data.items():
            if key in _FLAT_KEYS:
                group, name = _FLAT_KEYS[key]
                section._set(group, name, value)

        for prefix, name in _FLAT_TABLES.items():
            table = getattr(section.tables, name)
            for suffix, attr in (("_posX", "x"), ("_posY", "y"), ("_width", "width")):
                if prefix + suffix in data:
                    setattr(table, attr, data[prefix + suffix])

        return section


def _default_sections() -> Dict[str, DrawingTypeConfig]:
    return {dt.value: DrawingTypeConfig() for dt in DrawingType}


@dataclass
class ProjectConfig:
    """Complete layout configuration: one section per drawing type."""
    sections: Dict[str, DrawingTypeConfig] = field(default_factory=_default_sections)

    def for_drawing_type(self, drawing_type: Union[DrawingType, str]) -> DrawingTypeConfig:
        """Section for ``drawing_type``.

        Raises:
            ConfigError: If the configuration has no such section
        """
        parsed = DrawingType.parse(drawing_type)
        name = parsed.value if parsed else str(drawing_type)
        try:
            return self.sections[name]
        except KeyError:
            raise ConfigError(f"Drawing type section '{name}' not found in config") from None

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {name: section.to_dict() for name, section in self.sections.items()}

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        """Save configuration to JSON file.

        Args:
            path: Output file path
        """
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Create configuration from dictionary.

        Only the drawing type sections present in ``data`` are created;
        section names are matched case-insensitively, keys starting with
        ``_`` are comments.

        Args:
            data: Configuration dictionary

        Returns:
            ProjectConfig instance
        """
        config = cls(sections={})

        for key, value in data.items():
            if key.startswith('_'):
                continue
            drawing_type = DrawingType.parse(key)
            if drawing_type is None or not isinstance(value, dict):
                logger.warning("Ignoring unknown config section '%s'", key)
                continue
            config.sections[drawing_type.value] = DrawingTypeConfig.from_dict(value)

        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'ProjectConfig':
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ProjectConfig':
        """Load configuration from JSON file.

        Args:
            path: Input file path

        Returns:
            ProjectConfig instance

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)


def find_config_file(
    part_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Find configuration file using search hierarchy.

    Args:
        part_path: Path to the part source being processed
        explicit_config: Explicitly specified config path

    Returns:
        Path to config file if found, None otherwise
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    candidates = []
    if part_path:
        candidates.append(Path(part_path).parent / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)
    candidates.append(Path.home() / CONFIG_FILENAME)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(
    part_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> ProjectConfig:
    """Load configuration with fallback to defaults.

    Args:
        part_path: Path to the part source being processed
        explicit_config: Explicitly specified config path

    Returns:
        ProjectConfig instance (defaults if no usable config file found)
    """
    config_path = find_config_file(part_path, explicit_config)

    if config_path:
        try:
            return ProjectConfig.load(config_path)
        except (json.JSONDecodeError, IOError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)

    return ProjectConfig()


def create_sample_config(path: Union[str, Path] = CONFIG_FILENAME) -> None:
    """Write a documented sample configuration.

    Args:
        path: Output file path (default: .wedgelayout.json)
    """
    production = DrawingTypeConfig()
    production.title_block.dimension_keys_in_table = ["TL", "TD", "TDF", "W", "GD", "FL"]
    overlay = DrawingTypeConfig()

    sample: Dict[str, Any] = {
        "_comment": "Wedge drawing layout configuration",
        "_version": "1.0",
        DrawingType.PRODUCTION.value: {
            "_comment": "Production sheet: scales, view anchors (mm), breaklines, tables",
            **production.to_dict(),
        },
        DrawingType.OVERLAY.value: {
            "_comment": "Overlay sheet: annotations use fixed positions",
            **overlay.to_dict(),
        },
    }

    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample, f, indent=2, ensure_ascii=False)

    logger.info("Sample configuration created: %s", path)
