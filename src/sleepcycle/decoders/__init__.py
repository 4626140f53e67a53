"""Decoders for wearable monitoring records."""

from sleepcycle.decoders.monitoring import (
    ActivityType,
    MonitoringBatch,
    MonitoringDecoder,
    MonitoringInfo,
    MonitoringSample,
    pack_activity,
    unpack_activity,
)

__all__ = [
    "ActivityType",
    "MonitoringBatch",
    "MonitoringDecoder",
    "MonitoringInfo",
    "MonitoringSample",
    "pack_activity",
    "unpack_activity",
]
