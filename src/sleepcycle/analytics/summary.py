"""Sleep totals and the analysis result.

Pulls the surviving cycles of one window into a single SleepAnalysis
that is JSON-serializable.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Sequence

from sleepcycle.analytics.cycles import SleepCycle, SleepStage
from sleepcycle.analytics.phases import PhaseStrategy
from sleepcycle.decoders.monitoring import ActivityType

# Activity tag excluded from the resting heart rate search.  Decoded
# activity types are ActivityType members and never equal this string,
# so minutes of any type are searched.
RESTING_TAG = "resting"


@dataclass
class SleepTotals:
    """Seconds spent in each kind of sleep."""

    total_sleep: int = 0
    rem_sleep: int = 0
    light_sleep: int = 0  # NREM1 + NREM2
    deep_sleep: int = 0  # NREM3


def calculate_totals(cycles: Iterable[SleepCycle]) -> SleepTotals:
    totals = SleepTotals()
    for cycle in cycles:
        seconds = cycle.total_seconds
        totals.rem_sleep += seconds.get(SleepStage.REM, 0)
        totals.light_sleep += seconds.get(SleepStage.NREM1, 0) + seconds.get(SleepStage.NREM2, 0)
        totals.deep_sleep += seconds.get(SleepStage.NREM3, 0)
    totals.total_sleep = totals.rem_sleep + totals.light_sleep + totals.deep_sleep
    return totals


def resting_heart_rate(
    heart_rate: Sequence[int | None],
    activity_type: Sequence[ActivityType | None],
) -> int | None:
    """Lowest non-zero heart rate of the window, or None without data."""
    rates = [
        hr for hr, at in zip(heart_rate, activity_type)
        if hr and at != RESTING_TAG
    ]
    return min(rates) if rates else None


@dataclass
class SleepAnalysis:
    """Sleep cycles and totals of one analysis window."""

    day: str  # ISO date string, e.g. "2026-02-13"
    cycles: list[SleepCycle] = field(default_factory=list)
    strategy: PhaseStrategy | None = None

    total_sleep: int = 0  # seconds
    rem_sleep: int = 0
    light_sleep: int = 0
    deep_sleep: int = 0
    resting_heart_rate: int | None = None

    utc_offset: int | None = None
    window_start_time: int | None = None
    window_end_time: int | None = None

    def wake_gaps(self) -> list[tuple[int, int]]:
        """``(from_time, to_time)`` of each wake gap between two cycles."""
        gaps = []
        for prev, cycle in zip(self.cycles, self.cycles[1:]):
            if cycle.from_time > prev.to_time:
                gaps.append((prev.to_time, cycle.from_time))
        return gaps

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        return {
            "day": self.day,
            "strategy": self.strategy.value if self.strategy else None,
            "utc_offset": self.utc_offset,
            "window_start_time": self.window_start_time,
            "window_end_time": self.window_end_time,
            "total_sleep": self.total_sleep,
            "rem_sleep": self.rem_sleep,
            "light_sleep": self.light_sleep,
            "deep_sleep": self.deep_sleep,
            "resting_heart_rate": self.resting_heart_rate,
            "cycles": [c.summary() for c in self.cycles],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        return (
            f"SleepAnalysis({self.day}: "
            f"cycles={len(self.cycles)}, "
            f"sleep={self.total_sleep // 60}min, "
            f"rem={self.rem_sleep // 60}min, "
            f"deep={self.deep_sleep // 60}min)"
        )


def build_sleep_analysis(
    day: date | str,
    cycles: Iterable[SleepCycle] = (),
    strategy: PhaseStrategy | None = None,
    resting_hr: int | None = None,
    utc_offset: int | None = None,
    window_start_time: int | None = None,
    window_end_time: int | None = None,
) -> SleepAnalysis:
    """Build a SleepAnalysis from the surviving cycles of a window.

    Args:
        day: The analysed day.
        cycles: Surviving cycles in chronological order.
        strategy: Phase detection strategy that produced them.
        resting_hr: Resting heart rate of the window.
        utc_offset: Device UTC offset in seconds.
        window_start_time: Window start, epoch seconds.
        window_end_time: Window end, epoch seconds.

    Returns:
        A populated SleepAnalysis.
    """
    date_str = day if isinstance(day, str) else day.isoformat()
    cycles = list(cycles)
    totals = calculate_totals(cycles)

    return SleepAnalysis(
        day=date_str,
        cycles=cycles,
        strategy=strategy,
        total_sleep=totals.total_sleep,
        rem_sleep=totals.rem_sleep,
        light_sleep=totals.light_sleep,
        deep_sleep=totals.deep_sleep,
        resting_heart_rate=resting_hr,
        utc_offset=utc_offset,
        window_start_time=window_start_time,
        window_end_time=window_end_time,
    )
