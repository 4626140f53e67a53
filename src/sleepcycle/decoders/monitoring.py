"""Decoder for per-minute monitoring records from a wearable device.

Monitoring data arrives in batches (one per device file).  Each batch has
a header carrying the same instant in UTC and in device local time, which
is the only source of the device's UTC offset, followed by samples.  The
device only emits a sample when a value changes.

Packed activity byte (``current_activity_type_intensity``):
    bits 0-4   Activity type (0-9, see :class:`ActivityType`)
    bits 5-7   Activity intensity (0-7)

Activity types above 9 are not documented.  They decode to
``ActivityType.UNKNOWN`` so the sample still counts as motion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

ACTIVITY_TYPE_MASK = 0x1F
INTENSITY_SHIFT = 5
INTENSITY_MASK = 0x7


class ActivityType(IntEnum):
    """Activity type from the low 5 bits of the packed activity byte."""

    UNKNOWN = -1
    GENERIC = 0
    RUNNING = 1
    CYCLING = 2
    TRANSITION = 3
    FITNESS_EQUIPMENT = 4
    SWIMMING = 5
    WALKING = 6
    UNKNOWN7 = 7
    RESTING = 8
    UNKNOWN9 = 9


def unpack_activity(cati: int) -> tuple[ActivityType, int]:
    """Split a packed activity byte into ``(activity_type, intensity)``."""
    raw_type = cati & ACTIVITY_TYPE_MASK
    try:
        activity_type = ActivityType(raw_type)
    except ValueError:
        activity_type = ActivityType.UNKNOWN
    return activity_type, (cati >> INTENSITY_SHIFT) & INTENSITY_MASK


def pack_activity(activity_type: int, intensity: int = 0) -> int:
    """Inverse of :func:`unpack_activity`."""
    return ((intensity & INTENSITY_MASK) << INTENSITY_SHIFT) | (
        int(activity_type) & ACTIVITY_TYPE_MASK
    )


@dataclass
class MonitoringInfo:
    """Batch header: one instant in UTC and in device local time."""

    timestamp: int  # Unix epoch seconds
    local_time: int  # same instant, device clock

    @property
    def utc_offset(self) -> int:
        return self.local_time - self.timestamp


@dataclass
class MonitoringSample:
    """A single monitoring record."""

    timestamp: int
    current_activity_type_intensity: int | None = None
    heart_rate: int | None = None

    @property
    def activity_type(self) -> ActivityType | None:
        if self.current_activity_type_intensity is None:
            return None
        return unpack_activity(self.current_activity_type_intensity)[0]

    @property
    def activity_intensity(self) -> int | None:
        if self.current_activity_type_intensity is None:
            return None
        return unpack_activity(self.current_activity_type_intensity)[1]

    def __repr__(self) -> str:
        parts = [f"t={self.timestamp}"]
        if self.current_activity_type_intensity is not None:
            parts.append(f"{self.activity_type.name.lower()}/{self.activity_intensity}")
        if self.heart_rate:
            parts.append(f"hr={self.heart_rate}bpm")
        return f"MonitoringSample({', '.join(parts)})"


@dataclass
class MonitoringBatch:
    """All samples of one monitoring file, in chronological order."""

    info: MonitoringInfo | None
    samples: list[MonitoringSample] = field(default_factory=list)

    @property
    def utc_offset(self) -> int | None:
        return self.info.utc_offset if self.info is not None else None

    @property
    def last_timestamp(self) -> int | None:
        return self.samples[-1].timestamp if self.samples else None

    def __repr__(self) -> str:
        return (
            f"MonitoringBatch(offset={self.utc_offset}, "
            f"samples={len(self.samples)})"
        )


class MonitoringDecoder:
    """Decode monitoring batches from their JSON representation.

    A batch is a JSON object::

        {"timestamp": 1700000000, "local_time": 1700003600,
         "samples": [{"timestamp": ..., "current_activity_type_intensity": 8,
                      "heart_rate": 52}, ...]}

    ``timestamp``/``local_time`` form the header.  If either is missing the
    batch has no UTC offset and is ignored by the window extractor.
    """

    @staticmethod
    def can_decode(entry: Any) -> bool:
        return isinstance(entry, dict) and isinstance(entry.get("samples"), list)

    @staticmethod
    def decode(entry: dict) -> MonitoringBatch | None:
        """Decode one batch.  Returns None if the entry is not a batch."""
        if not MonitoringDecoder.can_decode(entry):
            return None

        info = None
        if entry.get("timestamp") is not None and entry.get("local_time") is not None:
            info = MonitoringInfo(
                timestamp=int(entry["timestamp"]),
                local_time=int(entry["local_time"]),
            )

        samples: list[MonitoringSample] = []
        for raw in entry["samples"]:
            if not isinstance(raw, dict) or raw.get("timestamp") is None:
                continue
            cati = raw.get("current_activity_type_intensity")
            hr = raw.get("heart_rate")
            samples.append(MonitoringSample(
                timestamp=int(raw["timestamp"]),
                current_activity_type_intensity=int(cati) if cati is not None else None,
                heart_rate=int(hr) if hr is not None else None,
            ))

        return MonitoringBatch(info=info, samples=samples)

    @staticmethod
    def encode(batch: MonitoringBatch) -> dict:
        """Inverse of :meth:`decode`, used for writing fixture files."""
        entry: dict[str, Any] = {}
        if batch.info is not None:
            entry["timestamp"] = batch.info.timestamp
            entry["local_time"] = batch.info.local_time
        entry["samples"] = [
            {
                k: v for k, v in (
                    ("timestamp", s.timestamp),
                    ("current_activity_type_intensity", s.current_activity_type_intensity),
                    ("heart_rate", s.heart_rate),
                ) if v is not None
            }
            for s in batch.samples
        ]
        return entry
