"""Extraction of the 24-hour analysis window from monitoring batches.

The window is a fixed array of one-minute slots.  Its start is the local
midnight of the requested day shifted by a signed offset; the default of
-12 h anchors it at noon of the previous day so that one night's sleep
falls inside a single window.

Devices only emit a sample when a value changes, so after extraction the
arrays are sparse.  :func:`fill_gaps` densifies them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import Iterable, Sequence, TypeVar

from sleepcycle.decoders.monitoring import ActivityType, MonitoringBatch, unpack_activity
from sleepcycle.errors import NoTimezoneData

logger = logging.getLogger(__name__)

T = TypeVar("T")

WINDOW_MINUTES = 24 * 60
DEFAULT_WINDOW_OFFSET_SECS = -12 * 60 * 60


@dataclass
class MonitoringWindow:
    """Per-minute series of one analysis window."""

    window_start_time: int  # UTC epoch seconds of slot 0
    window_end_time: int  # exclusive
    utc_offset: int  # device local time - UTC, seconds
    activity_type: list[ActivityType | None]
    activity_intensity: list[int | None]
    heart_rate: list[int | None]

    @classmethod
    def empty(
        cls,
        window_start_time: int,
        utc_offset: int,
        minutes: int = WINDOW_MINUTES,
    ) -> MonitoringWindow:
        return cls(
            window_start_time=window_start_time,
            window_end_time=window_start_time + minutes * 60,
            utc_offset=utc_offset,
            activity_type=[None] * minutes,
            activity_intensity=[None] * minutes,
            heart_rate=[None] * minutes,
        )

    def __len__(self) -> int:
        return len(self.activity_type)

    def idx_to_time(self, idx: int) -> int:
        return self.window_start_time + 60 * idx

    def filled(self) -> MonitoringWindow:
        """Return a copy with every series passed through :func:`fill_gaps`."""
        return replace(
            self,
            activity_type=fill_gaps(self.activity_type),
            activity_intensity=fill_gaps(self.activity_intensity),
            heart_rate=fill_gaps(self.heart_rate),
        )

    def __repr__(self) -> str:
        known_hr = sum(1 for v in self.heart_rate if v is not None)
        return (
            f"MonitoringWindow(start={self.window_start_time}, "
            f"offset={self.utc_offset}s, minutes={len(self)}, hr={known_hr})"
        )


def day_midnight_utc(day: date | str) -> int:
    """Midnight UTC of *day* as epoch seconds.  Accepts ``YYYY-MM-DD``."""
    if isinstance(day, str):
        day = date.fromisoformat(day)
    return int(datetime(day.year, day.month, day.day, tzinfo=timezone.utc).timestamp())


def extract_window(
    batches: Iterable[MonitoringBatch],
    day: date | str,
    window_offset_secs: int = DEFAULT_WINDOW_OFFSET_SECS,
) -> MonitoringWindow:
    """Collect the samples of *batches* that fall into the analysis window.

    The window bounds and UTC offset are taken from the first batch with a
    sample inside the window.  Later batches recorded with a different
    offset are read against those locked bounds.

    Args:
        batches: Monitoring batches in chronological order.
        day: Local calendar day to analyse.
        window_offset_secs: Window start relative to local midnight.

    Returns:
        A MonitoringWindow with sparse (not yet gap-filled) series.

    Raises:
        NoTimezoneData: If no batch with a header overlaps the window.
    """
    midnight = day_midnight_utc(day)
    window: MonitoringWindow | None = None

    for batch in batches:
        utc_offset = batch.utc_offset
        if utc_offset is None:
            continue

        if window is None:
            window_start = midnight - utc_offset + window_offset_secs
            window_end = window_start + WINDOW_MINUTES * 60
            if not any(window_start <= s.timestamp < window_end for s in batch.samples):
                continue
            window = MonitoringWindow.empty(window_start, utc_offset)
            logger.debug(
                "Window %d..%d locked with UTC offset %ds",
                window.window_start_time, window.window_end_time, utc_offset,
            )

        for sample in batch.samples:
            if not window.window_start_time <= sample.timestamp < window.window_end_time:
                continue

            idx = (sample.timestamp - window.window_start_time) // 60
            if sample.current_activity_type_intensity is not None:
                activity_type, intensity = unpack_activity(
                    sample.current_activity_type_intensity
                )
                window.activity_type[idx] = activity_type
                window.activity_intensity[idx] = intensity
            if sample.heart_rate:
                window.heart_rate[idx] = sample.heart_rate

    if window is None:
        raise NoTimezoneData(f"No monitoring data with timezone information for {day}")

    return window


def fill_gaps(values: Sequence[T | None]) -> list[T | None]:
    """Densify a sparse per-minute series.

    Scanning from the end, every ``None`` takes the nearest later known
    value.  Slots after the last known value stay ``None``.
    """
    filled: list[T | None] = [None] * len(values)
    current = None
    for i in range(len(values) - 1, -1, -1):
        if values[i] is not None:
            current = values[i]
        filled[i] = current
    return filled
