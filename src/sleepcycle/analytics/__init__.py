"""Sleep cycle analysis engine for wearable monitoring data.

Modules:
    window      -- Analysis window extraction and gap filling
    activity    -- Motion-based activity classification
    heart_rate  -- Heart-rate regime (transition) detection
    phases      -- HR-informed and motion-only phase detection
    cycles      -- Sleep cycles, phase segments, pruning
    dump        -- Per-minute CSV dump for classifier tuning
    summary     -- Totals, resting heart rate, result object
    pipeline    -- End-to-end analysis of one window
"""

from sleepcycle.analytics.window import (
    MonitoringWindow,
    extract_window,
    fill_gaps,
)
from sleepcycle.analytics.activity import (
    ActivityClass,
    ActivityClassification,
    classify_activity,
)
from sleepcycle.analytics.heart_rate import (
    HeartRateClassification,
    HeartRateRegime,
    classify_heart_rate,
)
from sleepcycle.analytics.cycles import CycleChain, SleepCycle, SleepPhase, SleepStage
from sleepcycle.analytics.phases import (
    PhaseDetection,
    PhaseStrategy,
    detect_phases_hr_informed,
    detect_phases_motion_only,
)
from sleepcycle.analytics.summary import SleepAnalysis, build_sleep_analysis
from sleepcycle.analytics.pipeline import analyze_sleep

__all__ = [
    # window
    "MonitoringWindow",
    "extract_window",
    "fill_gaps",
    # activity
    "ActivityClass",
    "ActivityClassification",
    "classify_activity",
    # heart_rate
    "HeartRateClassification",
    "HeartRateRegime",
    "classify_heart_rate",
    # cycles
    "CycleChain",
    "SleepCycle",
    "SleepPhase",
    "SleepStage",
    # phases
    "PhaseDetection",
    "PhaseStrategy",
    "detect_phases_hr_informed",
    "detect_phases_motion_only",
    # summary
    "SleepAnalysis",
    "build_sleep_analysis",
    # pipeline
    "analyze_sleep",
]
