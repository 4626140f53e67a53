"""Analysis pipeline: turn monitoring batches into sleep cycles.

This module consumes the batches produced by
:func:`sleepcycle.loader.load_batches` (or any other reader) and runs
the full analysis for one window, producing a :class:`SleepAnalysis`.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Iterable

from sleepcycle.analytics.activity import classify_activity
from sleepcycle.analytics.dump import dump_series
from sleepcycle.analytics.heart_rate import classify_heart_rate
from sleepcycle.analytics.phases import (
    detect_phases_hr_informed,
    detect_phases_motion_only,
)
from sleepcycle.analytics.summary import (
    SleepAnalysis,
    build_sleep_analysis,
    resting_heart_rate,
)
from sleepcycle.analytics.window import DEFAULT_WINDOW_OFFSET_SECS, extract_window
from sleepcycle.decoders.monitoring import MonitoringBatch
from sleepcycle.errors import NoTimezoneData

logger = logging.getLogger(__name__)


def analyze_sleep(
    batches: Iterable[MonitoringBatch],
    day: date | str,
    window_offset_secs: int = DEFAULT_WINDOW_OFFSET_SECS,
    dump_path: str | Path | None = None,
) -> SleepAnalysis:
    """Detect the sleep cycles of one analysis window.

    Args:
        batches: Monitoring batches in chronological order.
        day: Local calendar day (``date`` or ``YYYY-MM-DD``).
        window_offset_secs: Window start relative to local midnight of
            *day*.  The default starts it at noon of the previous day.
        dump_path: If set, write the per-minute series as CSV here.

    Returns:
        The SleepAnalysis.  It has no cycles and zero totals if no sleep
        was found or the batches carry no timezone information.
    """
    try:
        window = extract_window(batches, day, window_offset_secs)
    except NoTimezoneData as exc:
        logger.info("%s", exc)
        return build_sleep_analysis(day)

    window = window.filled()

    # --- Classification ---
    activity = classify_activity(window.activity_type, window.activity_intensity)
    heart_rate = classify_heart_rate(window.heart_rate, activity.classes)

    # --- Phases and cycles ---
    if heart_rate.usable:
        detection = detect_phases_hr_informed(
            heart_rate.regimes, activity.classes, window.window_start_time
        )
    else:
        logger.info(
            "Only %d heart rate transitions; using motion-only sleep phases",
            heart_rate.transitions,
        )
        detection = detect_phases_motion_only(
            window.activity_type, window.activity_intensity, window.window_start_time
        )

    chain = detection.chain
    chain.detect_phases(detection.stages)
    logger.debug("%s before pruning", detection)
    chain.prune_wake_cycles()

    if dump_path is not None:
        dump_series(dump_path, window, activity, heart_rate, detection.stages)

    return build_sleep_analysis(
        day,
        cycles=chain,
        strategy=detection.strategy,
        resting_hr=resting_heart_rate(window.heart_rate, window.activity_type),
        utc_offset=window.utc_offset,
        window_start_time=window.window_start_time,
        window_end_time=window.window_end_time,
    )
