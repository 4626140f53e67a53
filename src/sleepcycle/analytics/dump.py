"""Per-minute CSV dump of an analysed window, for tuning the classifiers."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Sequence

from sleepcycle.analytics.activity import ActivityClassification
from sleepcycle.analytics.cycles import SleepStage
from sleepcycle.analytics.heart_rate import HeartRateClassification
from sleepcycle.analytics.window import MonitoringWindow

COLUMNS = [
    "Date", "Activity", "Intensity", "HeartRate", "Weighted",
    "Activity class", "HR class", "Phase",
]


def dump_series(
    path: str | Path,
    window: MonitoringWindow,
    activity: ActivityClassification,
    heart_rate: HeartRateClassification,
    stages: Sequence[SleepStage],
) -> Path:
    """Write one ``;``-separated row per minute of *window* to *path*."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", newline="") as f:
        writer = csv.writer(f, delimiter=";")
        writer.writerow(COLUMNS)
        for i in range(len(window)):
            activity_type = window.activity_type[i]
            regime = heart_rate.regimes[i]
            writer.writerow([
                window.idx_to_time(i),
                activity_type.name.lower() if activity_type is not None else "",
                "" if window.activity_intensity[i] is None else window.activity_intensity[i],
                "" if window.heart_rate[i] is None else window.heart_rate[i],
                f"{activity.weighted[i]:.3f}",
                activity.classes[i].value,
                regime.value if regime is not None else "",
                stages[i].value,
            ])

    return path
