"""
Batch layout of many wedge parts.

Provides:
- Per-part pipeline: seed drawing -> conditional rules -> annotation styles
- Progress tracking and reporting
- Parallel processing (each job owns its DrawingState; the rule engine is shared)
- Per-part error capture: one failing part never stops the batch

Usage:
    from wedge_layout.batch import LayoutJob, batch_layout

    jobs = [LayoutJob(part=p, config=config) for p in parts]
    results = batch_layout(jobs, engine=RuleEngine.from_file("rules.json"))
    print(results.summary())
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from wedge_layout.conditions.engine import RuleEngine
from wedge_layout.layout.centerlines import Segment, compute_centerlines
from wedge_layout.layout.seed import seed_drawing_state
from wedge_layout.layout.styler import apply_render_flags, apply_styles
from wedge_layout.model.drawing import DrawingState
from wedge_layout.model.part import DrawingType, WedgePart
from wedge_layout.notes import overlay_calibration_note
from wedge_layout.project_config import DrawingTypeConfig, ProjectConfig

logger = logging.getLogger(__name__)


@dataclass
class LayoutJob:
    """One part to lay out."""
    part: WedgePart
    config: Union[ProjectConfig, DrawingTypeConfig] = field(default_factory=ProjectConfig)
    drawing_type: DrawingType = DrawingType.PRODUCTION
    name: str = ""
    drawn_on: Optional[date] = None
    render_flags: bool = True

    @property
    def label(self) -> str:
        return self.name or self.part.drawing_number or "<unnamed>"


@dataclass
class LayoutResult:
    """Result of laying out a single part."""
    name: str
    success: bool = False
    drawing: Optional[DrawingState] = None
    matched_rules: List[str] = field(default_factory=list)
    centerlines: Dict[str, List[Segment]] = field(default_factory=dict)
    calibration_note: Optional[Tuple[str, Tuple[float, float]]] = None
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def status(self) -> str:
        """Get status string."""
        return "OK" if self.success else "FAILED"

    def to_dict(self, include_drawing: bool = False) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'name': self.name,
            'success': self.success,
            'matched_rules': list(self.matched_rules),
            'error': self.error,
            'duration': self.duration_seconds,
        }
        if self.calibration_note is not None:
            text, position = self.calibration_note
            data['calibration_note'] = {'text': text, 'position': list(position)}
        if include_drawing and self.drawing is not None:
            data['drawing'] = self.drawing.to_dict()
            data['centerlines'] = {
                view: [list(segment) for segment in segments]
                for view, segments in self.centerlines.items()
            }
        return data


@dataclass
class BatchResult:
    """Result of a batch layout."""
    results: List[LayoutResult] = field(default_factory=list)
    total_duration_seconds: float = 0.0

    @property
    def total(self) -> int:
        """Total number of parts processed."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of parts laid out without error."""
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        """Number of failed parts."""
        return sum(1 for r in self.results if not r.success)

    @property
    def success_rate(self) -> float:
        """Success rate as percentage."""
        if self.total == 0:
            return 0.0
        return 100.0 * self.successful / self.total

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            "Batch Layout Summary",
            "=" * 40,
            f"Total parts:     {self.total}",
            f"Successful:      {self.successful}",
            f"Failed:          {self.failed}",
            f"Success rate:    {self.success_rate:.1f}%",
            f"Total time:      {self.total_duration_seconds:.1f}s",
            "",
        ]

        if self.failed > 0:
            lines.append("Failed parts:")
            for r in self.results:
                if not r.success:
                    lines.append(f"  - {r.name}: {r.error}")

        return "\n".join(lines)

    def to_dict(self, include_drawings: bool = False) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'total': self.total,
            'successful': self.successful,
            'failed': self.failed,
            'success_rate': self.success_rate,
            'total_duration_seconds': self.total_duration_seconds,
            'results': [r.to_dict(include_drawings) for r in self.results],
        }


def layout_single(job: LayoutJob, engine: Optional[RuleEngine] = None) -> LayoutResult:
    """Lay out one part.

    Errors (missing dimensions, missing config section ...) are captured in
    the result instead of being raised.

    Args:
        job: part, configuration and drawing type
        engine: conditional rules to apply before styling (optional)

    Returns:
        LayoutResult with the finished DrawingState on success
    """
    start_time = time.perf_counter()
    result = LayoutResult(name=job.label)

    try:
        drawing = seed_drawing_state(job.part, job.config, job.drawing_type, job.drawn_on)
        if engine is not None:
            result.matched_rules = engine.apply(job.part, drawing, job.drawing_type)
        styles = apply_styles(job.part, drawing)
        if job.render_flags:
            apply_render_flags(styles)
        result.centerlines = compute_centerlines(job.part, drawing)
        if drawing.drawing_type == DrawingType.OVERLAY:
            result.calibration_note = overlay_calibration_note(
                job.part.overlay_calibration, job.part.overlay_scaling)

        result.drawing = drawing
        result.success = True

    except Exception as e:
        result.success = False
        result.error = str(e)
        logger.error("Failed to lay out %s: %s", job.label, e,
                     extra={"drawing_number": job.part.drawing_number})

    result.duration_seconds = time.perf_counter() - start_time
    return result


def batch_layout(
    jobs: Sequence[LayoutJob],
    engine: Optional[RuleEngine] = None,
    parallel: bool = False,
    max_workers: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int, LayoutResult], None]] = None,
) -> BatchResult:
    """Lay out many parts.

    Args:
        jobs: parts to process
        engine: shared conditional rule engine (optional)
        parallel: use a thread pool
        max_workers: maximum parallel workers (None = executor default)
        progress_callback: called after each part: (current, total, result)

    Returns:
        BatchResult; in parallel mode results are in completion order
    """
    start_time = time.perf_counter()

    if not jobs:
        logger.warning("No parts to lay out")
        return BatchResult(total_duration_seconds=time.perf_counter() - start_time)

    logger.info("Starting batch layout: %d parts, parallel=%s", len(jobs), parallel)

    results: List[LayoutResult] = []

    def record(i: int, result: LayoutResult) -> None:
        results.append(result)
        if progress_callback:
            progress_callback(i, len(jobs), result)
        logger.info("[%d/%d] %s: %s (%.3fs)",
                    i, len(jobs), result.name, result.status, result.duration_seconds)

    if parallel:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(layout_single, job, engine) for job in jobs]
            for i, future in enumerate(as_completed(futures), 1):
                record(i, future.result())
    else:
        for i, job in enumerate(jobs, 1):
            record(i, layout_single(job, engine))

    batch_result = BatchResult(
        results=results,
        total_duration_seconds=time.perf_counter() - start_time,
    )

    logger.info(
        "Batch layout complete: %d/%d successful (%.1f%%) in %.1fs",
        batch_result.successful, batch_result.total,
        batch_result.success_rate, batch_result.total_duration_seconds
    )

    return batch_result
