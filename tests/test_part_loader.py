"""
Unit tests for wedge_layout.io.part_loader.

Tests:
- Equation and tolerance text
- Spreadsheet rows and CSV exports
- JSON part documents
- Dispatch by file extension and error handling
"""

import json
import logging
import math

import pytest

from wedge_layout.config import SYMMETRY_TOLERANCE_KEY
from wedge_layout.errors import PartLoadError
from wedge_layout.io.part_loader import (
    apply_tolerances,
    load_equation_file,
    load_part,
    load_spreadsheet_csv,
    parse_equations,
    part_from_dict,
    part_from_row,
)
from wedge_layout.model.part import WedgeType
from wedge_layout.model.units import Unit

EQUATIONS = '''"TL"= 1.5in
"TD"= 20mm
"ISA"= 30deg
"D1@Sketch1" = 5mm
not an equation
'''

TOLERANCES = '''"TL" +0.002 -0.001 in
"TD" +0.1 -0.05
"XX" +1 -1 mm
'''

CSV_HEADER = "drawing#,wedge_type,wedge_title,TL_NOM,TL_UTOL,TL_LTOL,ISA_NOM,W_NOM\n"


class TestEquations:
    """Tests for parse_equations and apply_tolerances."""

    def test_parse_converts_to_native(self):
        """Test values are stored in mm / degrees and tagged with their unit."""
        dims = parse_equations(EQUATIONS.splitlines())
        assert dims.get("TL").value(Unit.MILLIMETER) == pytest.approx(38.1)
        assert dims.get("TL").unit is Unit.INCH
        assert dims.get("TD").value(Unit.MILLIMETER) == 20.0
        assert dims.get("ISA").value(Unit.DEGREE) == 30.0

    def test_non_matching_lines_ignored(self):
        """Test lines without the equation form are skipped."""
        dims = parse_equations(EQUATIONS.splitlines())
        assert sorted(dims.keys()) == ["ISA", "TD", "TL"]

    def test_tolerances_for_present_keys(self):
        """Test tolerances attach to known keys only."""
        dims = parse_equations(EQUATIONS.splitlines())
        updated = apply_tolerances(dims, TOLERANCES.splitlines())

        assert updated == 2
        assert "XX" not in dims
        tl = dims.get("TL")
        assert tl.value(Unit.MILLIMETER) == pytest.approx(38.1)
        assert tl.tolerance_plus(Unit.INCH) == pytest.approx(0.002)
        assert tl.tolerance_minus(Unit.INCH) == pytest.approx(0.001)
        assert tl.unit is Unit.INCH

    def test_tolerance_without_unit_is_native(self):
        """Test a tolerance line without unit is read in mm."""
        dims = parse_equations(EQUATIONS.splitlines())
        apply_tolerances(dims, TOLERANCES.splitlines())
        assert dims.get("TD").tolerance_plus(Unit.MILLIMETER) == pytest.approx(0.1)
        assert dims.get("TD").tolerance_minus(Unit.MILLIMETER) == pytest.approx(0.05)

    def test_load_equation_file(self, tmp_path):
        """Test loading an equation file with its tolerance file."""
        eq = tmp_path / "W-1042.txt"
        eq.write_text(EQUATIONS, encoding="utf-8")
        tol = tmp_path / "W-1042.tol"
        tol.write_text(TOLERANCES, encoding="utf-8")

        part = load_equation_file(eq, tol, wedge_type="ckvd")

        assert part.wedge_type is WedgeType.CKVD
        assert part.dimensions.get("TL").tolerance_plus(Unit.INCH) == pytest.approx(0.002)
        assert part.dimensions.get(SYMMETRY_TOLERANCE_KEY).value() == 0.04

    def test_missing_tolerance_file_tolerated(self, tmp_path):
        """Test a missing tolerance file only logs a warning."""
        eq = tmp_path / "W-1042.txt"
        eq.write_text(EQUATIONS, encoding="utf-8")
        part = load_equation_file(eq, tmp_path / "absent.tol")
        assert part.dimensions.contains("TL")


class TestSpreadsheetRows:
    """Tests for part_from_row."""

    def _row(self, **overrides):
        row = {
            "drawing#": "W-2001",
            "wedge_type": "ckvd",
            "wedge_title": "CKVD 45",
            "TL_NOM": "1.5",
            "TL_UTOL": "0.002",
            "TL_LTOL": "0.001",
            "ISA_NOM": "30",
            "W_NOM": "",
        }
        row.update(overrides)
        return row

    def test_metadata(self):
        """Test descriptive columns go to metadata."""
        part = part_from_row(self._row())
        assert part.drawing_number == "W-2001"
        assert part.wedge_type is WedgeType.CKVD
        assert part.metadata["wedge_title"] == "CKVD 45"
        assert part.engraved_text == "CKVD 45"

    def test_lengths_converted_from_inches(self):
        """Test non-angle values are converted to mm."""
        tl = part_from_row(self._row()).dimensions.get("TL")
        assert tl.value(Unit.MILLIMETER) == pytest.approx(38.1)
        assert tl.tolerance_plus(Unit.MILLIMETER) == pytest.approx(0.0508)
        assert tl.tolerance_minus(Unit.MILLIMETER) == pytest.approx(0.0254)
        assert tl.unit is Unit.MILLIMETER

    def test_angles_not_converted(self):
        """Test angle columns stay in degrees."""
        isa = part_from_row(self._row()).dimensions.get("ISA")
        assert isa.value(Unit.DEGREE) == 30.0
        assert isa.unit is Unit.DEGREE

    def test_blank_nominal_skipped(self):
        """Test a blank nominal leaves the key absent."""
        assert not part_from_row(self._row()).dimensions.contains("W")

    def test_unparsable_cell_is_nan(self):
        """Test non-numeric text becomes NaN rather than an error."""
        part = part_from_row(self._row(TL_UTOL="see note"))
        tl = part.dimensions.get("TL")
        assert math.isnan(tl.tolerance_plus())
        assert tl.value() == pytest.approx(38.1)

    def test_default_symmetry_tolerance(self):
        """Test the default SymmetryTolerance is added."""
        part = part_from_row(self._row())
        assert part.dimensions.get(SYMMETRY_TOLERANCE_KEY).value() == 0.04

    def test_supplied_symmetry_tolerance_kept(self):
        """Test a spreadsheet SymmetryTolerance overrides the default."""
        part = part_from_row(self._row(SymmetryTolerance_NOM="0.001"))
        assert part.dimensions.get(SYMMETRY_TOLERANCE_KEY).value() == pytest.approx(0.0254)

    def test_unknown_wedge_type(self):
        """Test an unknown wedge family is left unset."""
        assert part_from_row(self._row(wedge_type="XYZ")).wedge_type is None

    def test_family_angle_keys(self):
        """Test angle columns follow the wedge family."""
        cob = part_from_row(self._row(wedge_type="COB", RA_NOM="15")).dimensions.get("RA")
        assert cob.unit is Unit.DEGREE
        assert cob.value(Unit.DEGREE) == 15.0

        ckvd = part_from_row(self._row(RA_NOM="1")).dimensions.get("RA")
        assert ckvd.unit is Unit.MILLIMETER
        assert ckvd.value() == pytest.approx(25.4)

    def test_foreign_keys_logged(self, caplog):
        """Test keys outside the wedge family are reported at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="wedge_layout.io.part_loader"):
            part_from_row(self._row(RA_NOM="1"))
        assert "Keys not used by CKVD wedges: RA" in caplog.text

    def test_overlay_columns(self):
        """Test overlay calibration and scaling columns."""
        part = part_from_row(self._row(overlay_calibration="5", overlay_scaling="50"))
        assert part.overlay_calibration == "5"
        assert part.overlay_scaling == 50.0

    def test_invalid_overlay_scaling(self):
        """Test an unparsable overlay scaling keeps the default."""
        assert part_from_row(self._row(overlay_scaling="big")).overlay_scaling == 1.0


class TestSpreadsheetCsv:
    """Tests for load_spreadsheet_csv."""

    def test_reads_every_row(self, tmp_path):
        """Test one part per data row."""
        path = tmp_path / "wedges.csv"
        path.write_text(
            CSV_HEADER
            + "W-1,CKVD,A,1.5,0.002,0.002,30,0.08\n"
            + "W-2,COB,B,2.0,,,45,\n",
            encoding="utf-8",
        )
        parts = load_spreadsheet_csv(path)

        assert [p.drawing_number for p in parts] == ["W-1", "W-2"]
        assert parts[1].wedge_type is WedgeType.COB
        assert parts[0].dimensions.get("W").value() == pytest.approx(2.032)
        assert parts[1].metadata["source"] == str(path)

    def test_missing_file(self, tmp_path):
        """Test a missing spreadsheet raises PartLoadError."""
        with pytest.raises(PartLoadError):
            load_spreadsheet_csv(tmp_path / "absent.csv")


class TestJsonParts:
    """Tests for part_from_dict."""

    def test_part_from_dict(self):
        """Test numbers and {nom, utol, ltol} objects."""
        part = part_from_dict({
            "wedge_type": "COB",
            "metadata": {"drawing_number": "C-7"},
            "dimensions": {"TL": 40, "TD": {"nom": 20, "utol": 0.1, "ltol": 0.05}, "BA": 12},
            "overlay_scaling": 50,
        })
        assert part.wedge_type is WedgeType.COB
        assert part.drawing_number == "C-7"
        assert part.overlay_scaling == 50.0
        assert part.dimensions.get("TD").tolerance_minus() == 0.05
        assert part.dimensions.get("BA").unit is Unit.DEGREE
        assert part.dimensions.get("TL").unit is Unit.MILLIMETER

    def test_family_angle_keys(self):
        """Test COB-only angle codes are stored in degrees."""
        part = part_from_dict({"wedge_type": "COB", "dimensions": {"CA": 20, "FNA": 8, "H": 3}})
        assert part.dimensions.get("CA").unit is Unit.DEGREE
        assert part.dimensions.get("FNA").unit is Unit.DEGREE
        assert part.dimensions.get("H").unit is Unit.MILLIMETER

    def test_not_an_object(self):
        """Test a non-object document is rejected."""
        with pytest.raises(PartLoadError):
            part_from_dict([1, 2])
        with pytest.raises(PartLoadError):
            part_from_dict({"dimensions": [1, 2]})


class TestLoadPart:
    """Tests for load_part dispatch."""

    def test_json(self, tmp_path):
        """Test .json files are read as part documents."""
        path = tmp_path / "part.json"
        path.write_text(json.dumps({"wedge_type": "CKVD", "dimensions": {"TL": 40}}), encoding="utf-8")
        part = load_part(path)
        assert part.dimensions.get("TL").value() == 40.0
        assert part.metadata["source"] == str(path)

    def test_csv_first_row(self, tmp_path):
        """Test .csv files yield their first row."""
        path = tmp_path / "wedges.csv"
        path.write_text(CSV_HEADER + "W-1,CKVD,A,1.5,,,30,\nW-2,COB,B,2,,,45,\n", encoding="utf-8")
        assert load_part(path).drawing_number == "W-1"

    def test_csv_without_rows(self, tmp_path):
        """Test an empty spreadsheet is an error."""
        path = tmp_path / "empty.csv"
        path.write_text(CSV_HEADER, encoding="utf-8")
        with pytest.raises(PartLoadError):
            load_part(path)

    def test_equation_with_sibling_tolerances(self, tmp_path):
        """Test equation text picks up <stem>.tol automatically."""
        eq = tmp_path / "W-1042.txt"
        eq.write_text(EQUATIONS, encoding="utf-8")
        (tmp_path / "W-1042.tol").write_text(TOLERANCES, encoding="utf-8")
        part = load_part(eq, wedge_type="CKVD")
        assert part.wedge_type is WedgeType.CKVD
        assert part.dimensions.get("TD").tolerance_plus() == pytest.approx(0.1)

    def test_missing(self, tmp_path):
        """Test a missing source raises PartLoadError."""
        with pytest.raises(PartLoadError):
            load_part(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON raises PartLoadError."""
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(PartLoadError):
            load_part(path)
