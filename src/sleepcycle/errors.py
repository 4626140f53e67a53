"""Exceptions raised while analysing monitoring data."""

from __future__ import annotations


class SleepDataError(ValueError):
    """Base class for problems with the monitoring input."""


class NoTimezoneData(SleepDataError):
    """No monitoring batch overlapping the window carried a UTC offset.

    The pipeline treats this as "no sleep data" and returns an empty
    analysis instead of propagating it.
    """
