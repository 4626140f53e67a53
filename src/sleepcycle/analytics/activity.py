"""Motion-based activity classification of the analysis window.

Wrist motion is not recorded per minute; the device's activity type and
intensity serve as a proxy.  Every minute gets an activity level: the
intensity (0-7) while the device reports the "resting" type, and the
maximum of 8 for any other type or when no type is known.

Levels are smoothed with a triangular window of +/-7 minutes (weight
``7 - |i - j|``) so that short movements during sleep do not register as
waking up, then split into three classes by fixed thresholds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np
from scipy import signal as sig

from sleepcycle.decoders.monitoring import ActivityType


class ActivityClass(str, Enum):
    """Per-minute motion class."""

    WAKE = "wake"
    LOW_ACTIVITY = "low_activity"
    NO_ACTIVITY = "no_activity"


# ---------------------------------------------------------------------------
# Thresholds
#
# Calibration for Garmin-style monitoring data, where the resting
# intensity ranges 0-7 and every other activity type maps to level 8.
# ---------------------------------------------------------------------------

ACTIVITY_WINDOW_RADIUS = 7  # minutes; weights reach 0 at the edges
ACTIVE_LEVEL = 8.0  # level of any non-resting minute

ACTIVITY_WAKE_THRESHOLD = 2.2  # weighted level above this → wake
ACTIVITY_LOW_THRESHOLD = 0.5  # above this → low activity
# Used by the motion-only phase detector.  Nearly any motion counts as
# light sleep there, so only completely still stretches become deep sleep.
MOTION_ONLY_LOW_THRESHOLD = 0.01


@dataclass
class ActivityClassification:
    """Smoothed activity levels and the resulting per-minute classes."""

    weighted: np.ndarray
    classes: list[ActivityClass]

    def count(self, activity_class: ActivityClass) -> int:
        return sum(1 for c in self.classes if c == activity_class)

    def __repr__(self) -> str:
        return (
            f"ActivityClassification(wake={self.count(ActivityClass.WAKE)}, "
            f"low={self.count(ActivityClass.LOW_ACTIVITY)}, "
            f"none={self.count(ActivityClass.NO_ACTIVITY)})"
        )


def _activity_levels(
    activity_type: Sequence[ActivityType | None],
    activity_intensity: Sequence[int | None],
) -> np.ndarray:
    levels = np.full(len(activity_type), ACTIVE_LEVEL, dtype=np.float64)
    for i, (at, intensity) in enumerate(zip(activity_type, activity_intensity)):
        if at == ActivityType.RESTING and intensity is not None:
            levels[i] = float(intensity)
    return levels


def triangular_weights(radius: int = ACTIVITY_WINDOW_RADIUS) -> np.ndarray:
    """Weights ``radius - |d|`` for offsets ``|d| < radius``."""
    offsets = np.arange(-radius + 1, radius)
    return (radius - np.abs(offsets)).astype(np.float64)


def weighted_activity(
    activity_type: Sequence[ActivityType | None],
    activity_intensity: Sequence[int | None],
    radius: int = ACTIVITY_WINDOW_RADIUS,
) -> np.ndarray:
    """Triangularly weighted mean activity level per minute.

    Near the ends of the series only the in-range minutes contribute and
    the mean is normalised by their weights.
    """
    levels = _activity_levels(activity_type, activity_intensity)
    if len(levels) == 0:
        return levels

    kernel = triangular_weights(radius)
    sums = sig.convolve(levels, kernel, mode="same", method="direct")
    weights = sig.convolve(np.ones_like(levels), kernel, mode="same", method="direct")
    return sums / weights


def _classify_minute(
    value: float,
    low_threshold: float = ACTIVITY_LOW_THRESHOLD,
) -> ActivityClass:
    if value > ACTIVITY_WAKE_THRESHOLD:
        return ActivityClass.WAKE
    if value > low_threshold:
        return ActivityClass.LOW_ACTIVITY
    return ActivityClass.NO_ACTIVITY


def classify_activity(
    activity_type: Sequence[ActivityType | None],
    activity_intensity: Sequence[int | None],
    low_threshold: float = ACTIVITY_LOW_THRESHOLD,
) -> ActivityClassification:
    """Classify every minute as wake, low activity or no activity.

    Args:
        activity_type: Gap-filled activity type per minute.
        activity_intensity: Gap-filled intensity (0-7) per minute.
        low_threshold: Boundary between low and no activity.

    Returns:
        ActivityClassification with the weighted levels and classes.
    """
    weighted = weighted_activity(activity_type, activity_intensity)
    classes = [_classify_minute(float(v), low_threshold) for v in weighted]
    return ActivityClassification(weighted=weighted, classes=classes)
