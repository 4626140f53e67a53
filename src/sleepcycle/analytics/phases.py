"""Sleep phase detection.

Two strategies, picked once per window:

``hr_informed``
    Combines heart-rate regimes with the activity classes.  Low heart rate
    with no motion is deep sleep (NREM3), high heart rate with some motion
    after a low regime is REM.  Cycles are cut at the heart-rate
    transitions and then moved to the end of their REM phase.

``motion_only``
    Fallback when the heart-rate series is unusable.  Maps the activity
    classes straight onto wake / NREM1 / NREM3 and cuts cycles at wake
    periods.  Never detects REM.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from sleepcycle.analytics.activity import (
    MOTION_ONLY_LOW_THRESHOLD,
    ActivityClass,
    classify_activity,
)
from sleepcycle.analytics.cycles import CycleChain, SleepStage
from sleepcycle.analytics.heart_rate import HeartRateRegime
from sleepcycle.decoders.monitoring import ActivityType

logger = logging.getLogger(__name__)


class PhaseStrategy(str, Enum):
    HR_INFORMED = "hr_informed"
    MOTION_ONLY = "motion_only"


MOTION_ONLY_STAGES = {
    ActivityClass.WAKE: SleepStage.WAKE,
    ActivityClass.LOW_ACTIVITY: SleepStage.NREM1,
    ActivityClass.NO_ACTIVITY: SleepStage.NREM3,
}


@dataclass
class PhaseDetection:
    """Per-minute sleep stages and the cycles found in them."""

    strategy: PhaseStrategy
    stages: list[SleepStage]
    chain: CycleChain

    def __repr__(self) -> str:
        return f"PhaseDetection({self.strategy.value}, cycles={len(self.chain)})"


def stage_for_minute(
    regime: HeartRateRegime | None,
    activity: ActivityClass,
    rem_possible: bool,
) -> SleepStage:
    """Sleep stage from the heart-rate regime and activity of one minute."""
    if regime is None:
        return SleepStage.WAKE
    if regime == HeartRateRegime.HIGH:
        if activity != ActivityClass.NO_ACTIVITY and rem_possible:
            return SleepStage.REM
        return SleepStage.NREM1
    if activity == ActivityClass.NO_ACTIVITY:
        return SleepStage.NREM3
    return SleepStage.NREM2


def detect_phases_hr_informed(
    regimes: Sequence[HeartRateRegime | None],
    activity_classes: Sequence[ActivityClass],
    zero_time: int,
) -> PhaseDetection:
    """Detect phases and cycles from heart-rate regimes and activity.

    Args:
        regimes: Heart-rate regime per minute.
        activity_classes: Activity class per minute.
        zero_time: Epoch seconds of minute 0.
    """
    n = len(regimes)
    chain = CycleChain(zero_time)
    stages: list[SleepStage] = []
    cycle = None
    rem_possible = False
    prev_regime: HeartRateRegime | None = None

    for idx in range(n):
        regime = regimes[idx]

        if regime != prev_regime:
            if prev_regime is None:
                # Falling asleep.  REM needs a preceding low regime.
                rem_possible = False
                cycle = chain.open(idx)
            elif regime is None:
                # Waking up from either regime.
                if cycle is not None:
                    cycle.end_idx = idx - 1
                    cycle = None
            elif regime == HeartRateRegime.LOW:
                if cycle.low_high_trans_idx is not None:
                    cycle.end_idx = idx - 1
                    cycle = chain.open(idx)
                cycle.high_low_trans_idx = idx
            else:
                cycle.low_high_trans_idx = idx
                rem_possible = True

        stages.append(stage_for_minute(regime, activity_classes[idx], rem_possible))
        prev_regime = regime

    if cycle is not None:
        cycle.end_idx = n - 1

    chain.adjust_cycle_boundaries(stages)
    return PhaseDetection(PhaseStrategy.HR_INFORMED, stages, chain)


def detect_phases_motion_only(
    activity_type: Sequence[ActivityType | None],
    activity_intensity: Sequence[int | None],
    zero_time: int,
) -> PhaseDetection:
    """Detect phases and cycles from motion alone.

    A cycle starts at the first sleep minute after a wake minute and ends
    with its last deep sleep minute once wake follows.  The minute before
    the window counts as wake, and the minute after it as well, so sleep
    reaching either window edge still forms a closed cycle.
    """
    activity = classify_activity(
        activity_type, activity_intensity, low_threshold=MOTION_ONLY_LOW_THRESHOLD
    )
    stages = [MOTION_ONLY_STAGES[c] for c in activity.classes]
    n = len(stages)
    chain = CycleChain(zero_time)
    cycle = None
    last_deep_idx: int | None = None
    prev_wake = True

    for idx in range(n + 1):
        wake = idx >= n or stages[idx] == SleepStage.WAKE

        if wake:
            if cycle is not None:
                cycle.end_idx = last_deep_idx if last_deep_idx is not None else idx - 1
                cycle = None
        else:
            if prev_wake:
                cycle = chain.open(idx)
                last_deep_idx = None
            if stages[idx] == SleepStage.NREM3:
                last_deep_idx = idx

        prev_wake = wake

    return PhaseDetection(PhaseStrategy.MOTION_ONLY, stages, chain)
