"""Shared fixtures and helpers for the sleepcycle test suite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from sleepcycle.decoders.monitoring import (
    ActivityType,
    MonitoringBatch,
    MonitoringInfo,
    MonitoringSample,
    pack_activity,
)

DAY = "2026-03-10"
WINDOW_MINUTES = 24 * 60
# Noon UTC of the previous day: window start for DAY with UTC offset 0
# and the default -12 h window offset.
WINDOW_START = int(datetime(2026, 3, 9, 12, tzinfo=timezone.utc).timestamp())

WALKING = pack_activity(ActivityType.WALKING, 3)
SLEEP_START = 600  # minute index of 22:00 local


def resting(intensity: int = 0) -> int:
    """Packed activity byte for the resting type at *intensity*."""
    return pack_activity(ActivityType.RESTING, intensity)


# ---------------------------------------------------------------------------
# Batch-building helpers
# ---------------------------------------------------------------------------


def make_batch(
    cati: list[int | None],
    heart_rate: list[int | None] | None = None,
    start_time: int = WINDOW_START,
    utc_offset: int = 0,
    with_info: bool = True,
) -> MonitoringBatch:
    """Build a batch with one sample per minute starting at *start_time*."""
    if heart_rate is None:
        heart_rate = [None] * len(cati)
    samples = [
        MonitoringSample(
            timestamp=start_time + 60 * i,
            current_activity_type_intensity=a,
            heart_rate=hr,
        )
        for i, (a, hr) in enumerate(zip(cati, heart_rate))
    ]
    info = MonitoringInfo(timestamp=start_time, local_time=start_time + utc_offset) if with_info else None
    return MonitoringBatch(info=info, samples=samples)


def oscillating_night(
    periods: int = 6,
    period: int = 90,
    with_heart_rate: bool = True,
) -> tuple[list[int], list[int | None]]:
    """A window awake except for a night of alternating sleep regimes.

    Each period is half high heart rate (90 bpm) with restless resting
    intensity 2, then half low heart rate (50 bpm) and no motion.
    """
    cati = [WALKING] * WINDOW_MINUTES
    hr: list[int | None] = [75] * WINDOW_MINUTES
    half = period // 2
    idx = SLEEP_START
    for _ in range(periods):
        for _ in range(half):
            cati[idx] = resting(2)
            hr[idx] = 90
            idx += 1
        for _ in range(half):
            cati[idx] = resting(0)
            hr[idx] = 50
            idx += 1
    if not with_heart_rate:
        hr = [None] * WINDOW_MINUTES
    return cati, hr


def quiet_night(
    minutes: int = 480,
    spike_at: int | None = None,
    spike_minutes: int = 2,
    heart_rate: int | None = None,
) -> tuple[list[int], list[int | None]]:
    """A window awake except for *minutes* of motionless sleep.

    *spike_at* places a short burst of walking inside the sleep.
    """
    cati = [WALKING] * WINDOW_MINUTES
    for i in range(SLEEP_START, SLEEP_START + minutes):
        cati[i] = resting(0)
    if spike_at is not None:
        for i in range(spike_at, spike_at + spike_minutes):
            cati[i] = WALKING
    return cati, [heart_rate] * WINDOW_MINUTES


@pytest.fixture
def night_batches() -> list[MonitoringBatch]:
    cati, hr = oscillating_night()
    return [make_batch(cati, hr)]
