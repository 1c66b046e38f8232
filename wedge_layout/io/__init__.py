"""Readers for part dimension sources."""

from wedge_layout.io.part_loader import (
    apply_tolerances,
    ensure_symmetry_tolerance,
    load_equation_file,
    load_part,
    load_part_json,
    load_spreadsheet_csv,
    parse_equations,
    part_from_dict,
    part_from_row,
)

__all__ = [
    'apply_tolerances',
    'ensure_symmetry_tolerance',
    'load_equation_file',
    'load_part',
    'load_part_json',
    'load_spreadsheet_csv',
    'parse_equations',
    'part_from_dict',
    'part_from_row',
]
