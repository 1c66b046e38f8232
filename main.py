"""
Entry point: annotation layout of a wedge drawing.

Usage:
    python main.py <part_file> [--config CONFIG] [--rules RULES]
                   [--drawing-type {Production,Overlay}] [--output OUTPUT]
    python main.py <parts.csv> --batch [--parallel] [--output OUTPUT]

Examples:
    python main.py "W-1042.json" --output "W-1042.layout.json"
    python main.py "W-1042.txt" --rules rules.json          # equations + W-1042.tol
    python main.py "wedges.csv" --batch --parallel -o batch.json
"""

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from wedge_layout.batch import LayoutJob, batch_layout
from wedge_layout.conditions.engine import RuleEngine
from wedge_layout.errors import LayoutError
from wedge_layout.io.part_loader import load_part, load_spreadsheet_csv
from wedge_layout.layout.centerlines import compute_centerlines
from wedge_layout.layout.seed import seed_drawing_state
from wedge_layout.layout.styler import apply_render_flags, apply_styles
from wedge_layout.layout.visibility import geometric_tolerance_frame, hidden_annotations
from wedge_layout.logging_config import LogContext, log_timing, setup_logging
from wedge_layout.model.drawing import DrawingState
from wedge_layout.model.part import DrawingType, WedgePart
from wedge_layout.notes import build_dimension_note, overlay_calibration_note
from wedge_layout.project_config import load_config

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

def build_report(
    part: WedgePart,
    drawing: DrawingState,
    matched_rules: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """JSON document handed to the CAD host for one laid-out part."""
    frame = geometric_tolerance_frame(part)
    calibration = None
    if drawing.drawing_type == DrawingType.OVERLAY:
        calibration = overlay_calibration_note(part.overlay_calibration, part.overlay_scaling)
    return {
        "drawing_number": part.drawing_number,
        "wedge_type": part.wedge_type.value if part.wedge_type else None,
        "matched_rules": list(matched_rules or []),
        "hidden_annotations": sorted(hidden_annotations(part)),
        "geometric_tolerance": None if frame is None else {
            "inch_text": frame.inch_text,
            "mm_text": frame.mm_text,
            "label": frame.label,
        },
        "dimension_note": build_dimension_note(drawing.dimension_keys_in_table, part.dimensions),
        "calibration_note": None if calibration is None else {
            "text": calibration[0],
            "position": list(calibration[1]),
        },
        "centerlines": {
            view: [list(segment) for segment in segments]
            for view, segments in compute_centerlines(part, drawing).items()
        },
        "drawing": drawing.to_dict(),
    }


def _write_json(data: Dict[str, Any], output_path: Union[str, Path]) -> None:
    path = Path(output_path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.info("Layout written to %s", path)


def run_pipeline(
    part_path: Union[str, Path],
    config_path: Optional[Union[str, Path]] = None,
    rules_path: Optional[Union[str, Path]] = None,
    drawing_type: Union[DrawingType, str] = DrawingType.PRODUCTION,
    output_path: Optional[Union[str, Path]] = None,
    drawn_on: Optional[date] = None,
) -> Dict[str, Any]:
    """Full pipeline for one part: source -> DrawingState -> JSON report.

    Steps:
      1. Load the part (JSON, CSV row, or equation text + tolerances).
      2. Load the layout configuration.
      3. Seed the drawing state.
      4. Apply conditional rules (when a rules file is given).
      5. Compute annotation styles and render flags.

    Args:
        part_path: part source file.
        config_path: explicit layout configuration (optional).
        rules_path: conditional rules file (optional).
        drawing_type: sheet kind to lay out.
        output_path: where to write the JSON report (optional).
        drawn_on: date printed in the title block (default: today).

    Returns:
        The report written (or that would be written) to ``output_path``

    Raises:
        FileNotFoundError: rules file does not exist.
        LayoutError: part source, rule file or configuration is unusable,
            or a required dimension is missing.
    """
    dt = DrawingType.parse(drawing_type)
    if dt is None:
        raise LayoutError(f"Unknown drawing type: {drawing_type}")

    part = load_part(part_path)
    logger.debug("Part loaded:\n%s", part.describe())
    config = load_config(part_path=part_path, explicit_config=config_path)
    engine = RuleEngine.from_file(rules_path) if rules_path else None

    with LogContext(drawing_number=part.drawing_number):
        with log_timing(logger, f"Layout of {Path(part_path).name}", level=logging.INFO):
            drawing = seed_drawing_state(part, config, dt, drawn_on)
            matched = engine.apply(part, drawing, dt) if engine is not None else []
            apply_render_flags(apply_styles(part, drawing))
            logger.debug("Layout result:\n%s", drawing.describe())

    report = build_report(part, drawing, matched)
    if output_path:
        _write_json(report, output_path)
    return report


def run_batch(
    csv_path: Union[str, Path],
    config_path: Optional[Union[str, Path]] = None,
    rules_path: Optional[Union[str, Path]] = None,
    drawing_type: Union[DrawingType, str] = DrawingType.PRODUCTION,
    output_path: Optional[Union[str, Path]] = None,
    parallel: bool = False,
    max_workers: Optional[int] = None,
) -> Dict[str, Any]:
    """Lay out every row of a spreadsheet export.

    Returns:
        BatchResult as a dictionary, drawings included
    """
    dt = DrawingType.parse(drawing_type)
    if dt is None:
        raise LayoutError(f"Unknown drawing type: {drawing_type}")

    parts = load_spreadsheet_csv(csv_path)
    config = load_config(part_path=csv_path, explicit_config=config_path)
    engine = RuleEngine.from_file(rules_path) if rules_path else None

    jobs = [
        LayoutJob(part=part, config=config, drawing_type=dt,
                  name=part.drawing_number or f"row {i}")
        for i, part in enumerate(parts, 1)
    ]
    result = batch_layout(jobs, engine=engine, parallel=parallel, max_workers=max_workers)
    print("\n" + result.summary())

    data = result.to_dict(include_drawings=True)
    if output_path:
        _write_json(data, output_path)
    return data


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute annotation placement for a wedge drawing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "part",
        help="Part source: .json document, .csv spreadsheet export, or equation text.",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to a .wedgelayout.json layout configuration.",
    )
    parser.add_argument(
        "--rules", "-r",
        default=None,
        help="Path to a conditional rules JSON file.",
    )
    parser.add_argument(
        "--drawing-type", "-t",
        default=DrawingType.PRODUCTION.value,
        dest="drawing_type",
        choices=[dt.value for dt in DrawingType],
        help="Sheet kind (default: Production).",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the layout as JSON to this file.",
    )
    parser.add_argument(
        "--batch",
        action="store_true",
        help="Treat the part file as a spreadsheet CSV and lay out every row.",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Batch mode: use parallel processing.",
    )
    parser.add_argument(
        "-j", "--jobs",
        type=int,
        dest="max_workers",
        help="Batch mode: maximum parallel jobs.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging.",
    )
    parser.add_argument(
        "--log-json",
        default=None,
        dest="log_json",
        help="Also write JSON-lines logs to this file.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        json_file=args.log_json,
        root_logger=True,
    )

    try:
        if args.batch:
            data = run_batch(
                args.part,
                config_path=args.config,
                rules_path=args.rules,
                drawing_type=args.drawing_type,
                output_path=args.output,
                parallel=args.parallel,
                max_workers=args.max_workers,
            )
            return 0 if data["failed"] == 0 else 1

        report = run_pipeline(
            args.part,
            config_path=args.config,
            rules_path=args.rules,
            drawing_type=args.drawing_type,
            output_path=args.output,
        )
        if not args.output:
            print(json.dumps(report, indent=2, ensure_ascii=False))
    except FileNotFoundError as exc:
        logger.critical("File not found: %s", exc)
        return 1
    except LayoutError as exc:
        logger.critical("Layout failed: %s", exc)
        return 1
    except Exception as exc:
        logger.critical("Unexpected error: %s", exc, exc_info=True)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
