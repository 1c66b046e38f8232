"""
Unit tests for wedge_layout.project_config module.

Tests:
- Section defaults and drawing type lookup
- Grouped and legacy flat section keys
- JSON serialization/deserialization
- Config file search and loading
"""

import json

import pytest

from wedge_layout.errors import ConfigError
from wedge_layout.model.part import DrawingType
from wedge_layout.project_config import (
    CONFIG_FILENAME,
    DrawingTypeConfig,
    ProjectConfig,
    TableAnchor,
    create_sample_config,
    find_config_file,
    load_config,
)


class TestDrawingTypeConfig:
    """Tests for DrawingTypeConfig defaults and from_dict."""

    def test_default_values(self):
        """Test default scales, anchors and breaklines."""
        section = DrawingTypeConfig()
        assert section.scaling.front_side_top == 2.0
        assert section.scaling.detail_section == 4.0
        assert (section.views.front_x, section.views.front_y) == (60.0, 160.0)
        assert section.breaklines.detail_lower_length == 40.0
        assert section.tables.dimension.as_vector() == [290.0, 120.0, 110.0]
        assert section.title_block.engrave == []

    def test_grouped_keys(self):
        """Test the grouped section layout."""
        section = DrawingTypeConfig.from_dict({
            "scaling": {"front_side_top": 3.0},
            "views": {"side_dx": 90.0},
            "tables": {"polish": {"x": 15.0, "width": 70.0}},
            "title_block": {"material": "CARBIDE", "engrave": ["A", "B"]},
        })
        assert section.scaling.front_side_top == 3.0
        assert section.scaling.detail_section == 4.0
        assert section.views.side_dx == 90.0
        assert section.tables.polish.as_vector() == [15.0, 40.0, 70.0]
        assert section.title_block.material == "CARBIDE"
        assert section.title_block.engrave == ["A", "B"]

    def test_legacy_flat_keys(self):
        """Test the flat keys of the legacy automation config."""
        section = DrawingTypeConfig.from_dict({
            "scaling_fsv": 5.0,
            "front_view_posX": 75.0,
            "breakline_gap_dsv": 2.5,
            "dim_table_posX": 300.0,
            "dim_table_width": 90.0,
            "engrave": "PART NO ¶ LOT ¶ ",
            "dimension_keys_in_table": "TL, TD,W",
        })
        assert section.scaling.front_side_top == 5.0
        assert section.views.front_x == 75.0
        assert section.breaklines.detail_gap == 2.5
        assert section.tables.dimension.as_vector() == [300.0, 120.0, 90.0]
        assert section.title_block.engrave == ["PART NO", "LOT"]
        assert section.title_block.dimension_keys_in_table == ["TL", "TD", "W"]

    def test_unknown_keys_ignored(self):
        """Test unknown keys leave the defaults in place."""
        section = DrawingTypeConfig.from_dict({"views": {"bogus": 1}, "_comment": "x"})
        assert not hasattr(section.views, "bogus")
        assert section == DrawingTypeConfig()


class TestProjectConfig:
    """Tests for ProjectConfig."""

    def test_default_sections(self):
        """Test one default section per drawing type."""
        config = ProjectConfig()
        assert sorted(config.sections) == ["Overlay", "Production"]

    def test_for_drawing_type(self):
        """Test lookup by enum and case-insensitive text."""
        config = ProjectConfig()
        production = config.for_drawing_type(DrawingType.PRODUCTION)
        assert config.for_drawing_type("production") is production
        assert config.for_drawing_type("OVERLAY") is config.sections["Overlay"]

    def test_missing_section(self):
        """Test a missing section raises ConfigError."""
        with pytest.raises(ConfigError, match="Overlay"):
            ProjectConfig(sections={}).for_drawing_type(DrawingType.OVERLAY)

    def test_from_dict_sections(self):
        """Test only given sections are created and comments are skipped."""
        config = ProjectConfig.from_dict({
            "_comment": "layout",
            "production": {"scaling_dsv": 6.0},
            "Sketch": {"scaling_fsv": 1.0},
        })
        assert list(config.sections) == ["Production"]
        assert config.for_drawing_type("Production").scaling.detail_section == 6.0

    def test_json_roundtrip(self):
        """Test to_json / from_json keeps every field."""
        config = ProjectConfig()
        section = config.for_drawing_type("Production")
        section.views.detail_x = 240.0
        section.tables.label_as = TableAnchor(10.0, 20.0, 30.0)
        section.title_block.polish_text = ["MIRROR"]

        restored = ProjectConfig.from_json(config.to_json())

        assert restored == config

    def test_save_and_load(self, tmp_path):
        """Test saving and loading a configuration file."""
        path = tmp_path / "layout.json"
        config = ProjectConfig()
        config.for_drawing_type("Overlay").scaling.front_side_top = 1.5
        config.save(path)

        assert ProjectConfig.load(path) == config

    def test_load_missing_file(self, tmp_path):
        """Test loading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ProjectConfig.load(tmp_path / "absent.json")


class TestConfigSearch:
    """Tests for find_config_file and load_config."""

    @pytest.fixture
    def isolated(self, tmp_path, monkeypatch):
        home = tmp_path / "home"
        home.mkdir()
        work = tmp_path / "work"
        work.mkdir()
        monkeypatch.setenv("HOME", str(home))
        monkeypatch.setenv("USERPROFILE", str(home))
        monkeypatch.chdir(work)
        return tmp_path

    def test_explicit_path(self, isolated):
        """Test an existing explicit path wins."""
        explicit = isolated / "custom.json"
        explicit.write_text("{}", encoding="utf-8")
        assert find_config_file(explicit_config=explicit) == explicit

    def test_part_directory(self, isolated):
        """Test the part file's directory is searched."""
        parts = isolated / "parts"
        parts.mkdir()
        config_path = parts / CONFIG_FILENAME
        config_path.write_text("{}", encoding="utf-8")

        assert find_config_file(part_path=parts / "W-1042.csv") == config_path

    def test_missing_explicit_falls_back(self, isolated):
        """Test a missing explicit path falls back to the search order."""
        cwd_config = isolated / "work" / CONFIG_FILENAME
        cwd_config.write_text("{}", encoding="utf-8")
        found = find_config_file(explicit_config=isolated / "absent.json")
        assert found.resolve() == cwd_config.resolve()

    def test_nothing_found(self, isolated):
        """Test None when no config file exists."""
        assert find_config_file(part_path=isolated / "W-1042.csv") is None

    def test_load_defaults(self, isolated):
        """Test defaults when no config file exists."""
        assert load_config() == ProjectConfig()

    def test_invalid_json_falls_back(self, isolated):
        """Test an unparsable config file gives the defaults."""
        bad = isolated / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        assert load_config(explicit_config=bad) == ProjectConfig()

    def test_sample_config_loads(self, isolated):
        """Test the sample file reads back with both sections."""
        path = isolated / "sample.json"
        create_sample_config(path)

        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw["_version"] == "1.0"

        config = load_config(explicit_config=path)
        assert sorted(config.sections) == ["Overlay", "Production"]
        keys = config.for_drawing_type("Production").title_block.dimension_keys_in_table
        assert keys == ["TL", "TD", "TDF", "W", "GD", "FL"]
