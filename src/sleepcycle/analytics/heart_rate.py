"""Heart-rate regime detection during sleep.

Heart rate during sleep alternates between a low regime (deep NREM sleep)
and a high regime (light NREM and REM sleep).  This module labels every
minute with the current regime.

Algorithm:
1. A regime starts as ``high_hr`` on the first quiet minute with a heart
   rate.  Wake minutes and missing heart rate end it (label ``None``).
2. The regime extremum is tracked: the peak while high, the trough while
   low.  A swing of at least ``HR_MIN_SWING`` bpm against the regime is a
   transition candidate.
3. The candidate is confirmed if the regime has lasted its dwell
   threshold.  Deep sleep gets shorter and REM longer as the night goes
   on, so leaving the high regime needs ``25 - 2t`` minutes and leaving the
   low regime ``25 + 2t``, where ``t`` is the number of transitions so far.
4. A candidate that comes too early but swings further than the last
   confirmed transition means that transition was noise.  It is undone
   and the segment since then is relabelled with the previous regime.

The series is usable for phase detection if at least four transitions
were found.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from sleepcycle.analytics.activity import ActivityClass

logger = logging.getLogger(__name__)


class HeartRateRegime(str, Enum):
    """Sustained heart-rate level relative to the surrounding sleep."""

    HIGH = "high_hr"
    LOW = "low_hr"


# ---------------------------------------------------------------------------
# Dwell thresholds (minutes)
# ---------------------------------------------------------------------------

HR_DWELL_BASE = 25
HR_DWELL_STEP = 2  # per confirmed transition

HR_MIN_SWING = 5  # bpm against the regime extremum to consider a transition
HR_MIN_TRANSITIONS = 4  # fewer transitions → series not usable


@dataclass
class HeartRateClassification:
    """Per-minute heart-rate regimes and the number of transitions."""

    regimes: list[HeartRateRegime | None]
    transitions: int

    @property
    def usable(self) -> bool:
        return self.transitions >= HR_MIN_TRANSITIONS

    def __repr__(self) -> str:
        return (
            f"HeartRateClassification(transitions={self.transitions}, "
            f"usable={self.usable})"
        )


@dataclass
class _Transition:
    idx: int  # first minute of the new regime
    size: int  # swing in bpm that triggered it
    extremum: int  # extremum of the regime it ended


def _opposite(regime: HeartRateRegime) -> HeartRateRegime:
    return HeartRateRegime.LOW if regime == HeartRateRegime.HIGH else HeartRateRegime.HIGH


def dwell_threshold(regime: HeartRateRegime, transitions: int) -> int:
    """Minutes *regime* must last before a transition out of it counts."""
    if regime == HeartRateRegime.HIGH:
        return HR_DWELL_BASE - HR_DWELL_STEP * transitions
    return HR_DWELL_BASE + HR_DWELL_STEP * transitions


def classify_heart_rate(
    heart_rate: Sequence[int | None],
    activity_classes: Sequence[ActivityClass],
) -> HeartRateClassification:
    """Label each minute with a heart-rate regime.

    Args:
        heart_rate: Gap-filled heart rate per minute (bpm).
        activity_classes: Activity class per minute, same length.

    Returns:
        HeartRateClassification with regimes and the transition count.
    """
    n = len(heart_rate)
    regimes: list[HeartRateRegime | None] = [None] * n
    transitions = 0

    regime: HeartRateRegime | None = None
    segment_start = regime_start = 0
    extremum = 0
    marks: list[_Transition] = []

    for i in range(n):
        hr = heart_rate[i]
        if activity_classes[i] == ActivityClass.WAKE or not hr:
            regime = None
            continue

        if regime is None:
            regime = HeartRateRegime.HIGH
            segment_start = regime_start = i
            extremum = hr
            marks = []
            regimes[i] = regime
            continue

        if regime == HeartRateRegime.HIGH:
            swing = extremum - hr
        else:
            swing = hr - extremum

        if swing >= HR_MIN_SWING:
            if i - regime_start >= dwell_threshold(regime, transitions):
                marks.append(_Transition(idx=i, size=swing, extremum=extremum))
                transitions += 1
                regime = _opposite(regime)
                regime_start = i
                extremum = hr
            elif marks and swing > marks[-1].size:
                undone = marks.pop()
                transitions -= 1
                regime = _opposite(regime)
                regimes[undone.idx:i] = [regime] * (i - undone.idx)
                regime_start = marks[-1].idx if marks else segment_start
                if regime == HeartRateRegime.HIGH:
                    extremum = max(undone.extremum, hr)
                else:
                    extremum = min(undone.extremum, hr)
        elif regime == HeartRateRegime.HIGH:
            extremum = max(extremum, hr)
        else:
            extremum = min(extremum, hr)

        regimes[i] = regime

    logger.debug("Detected %d heart rate transitions", transitions)
    return HeartRateClassification(regimes=regimes, transitions=transitions)
