"""Tests for sleepcycle.analytics.summary -- totals and the analysis result."""

import json
from datetime import date

from sleepcycle.analytics.cycles import SleepCycle, SleepStage
from sleepcycle.analytics.phases import PhaseStrategy
from sleepcycle.analytics.summary import (
    SleepAnalysis,
    build_sleep_analysis,
    calculate_totals,
    resting_heart_rate,
)
from sleepcycle.decoders.monitoring import ActivityType


def _cycle(start, end, stages):
    cycle = SleepCycle(zero_time=0, start_idx=start, end_idx=end)
    cycle.detect_phases(stages)
    return cycle


class TestCalculateTotals:
    def test_sums_over_cycles(self):
        stages = (
            [SleepStage.NREM1] * 10 + [SleepStage.NREM3] * 20 + [SleepStage.REM] * 5
            + [SleepStage.WAKE] * 5
            + [SleepStage.NREM2] * 15 + [SleepStage.NREM3] * 10
        )
        cycles = [_cycle(0, 34, stages), _cycle(40, 64, stages)]
        totals = calculate_totals(cycles)
        assert totals.rem_sleep == 5 * 60
        assert totals.light_sleep == 25 * 60
        assert totals.deep_sleep == 30 * 60
        assert totals.total_sleep == totals.rem_sleep + totals.light_sleep + totals.deep_sleep
        assert totals.total_sleep == sum(c.duration for c in cycles)

    def test_no_cycles(self):
        totals = calculate_totals([])
        assert totals.total_sleep == 0
        assert totals.deep_sleep == 0


class TestRestingHeartRate:
    def test_lowest_non_zero(self):
        hr = [None, 0, 60, 55, 58]
        types = [ActivityType.WALKING] * 5
        assert resting_heart_rate(hr, types) == 55

    def test_resting_minutes_included(self):
        hr = [60, 48, 55]
        types = [ActivityType.WALKING, ActivityType.RESTING, ActivityType.WALKING]
        assert resting_heart_rate(hr, types) == 48

    def test_no_heart_rate(self):
        assert resting_heart_rate([None, 0], [None, None]) is None


class TestSleepAnalysis:
    def _analysis(self):
        stages = [SleepStage.NREM3] * 20 + [SleepStage.WAKE] * 10 + [SleepStage.NREM3] * 20
        return build_sleep_analysis(
            date(2026, 3, 10),
            cycles=[_cycle(0, 19, stages), _cycle(30, 49, stages)],
            strategy=PhaseStrategy.MOTION_ONLY,
            resting_hr=52,
            utc_offset=3600,
            window_start_time=0,
            window_end_time=86400,
        )

    def test_build(self):
        analysis = self._analysis()
        assert analysis.day == "2026-03-10"
        assert analysis.deep_sleep == 40 * 60
        assert analysis.total_sleep == 40 * 60

    def test_wake_gaps(self):
        assert self._analysis().wake_gaps() == [(1200, 1800)]

    def test_to_json(self):
        data = json.loads(self._analysis().to_json())
        assert data["strategy"] == "motion_only"
        assert data["resting_heart_rate"] == 52
        assert len(data["cycles"]) == 2
        assert data["cycles"][1]["phase_durations"]["nrem3"] == 1200

    def test_empty_result(self):
        analysis = build_sleep_analysis("2026-03-10")
        assert isinstance(analysis, SleepAnalysis)
        assert analysis.cycles == []
        assert analysis.total_sleep == 0
        assert analysis.wake_gaps() == []
        assert json.loads(analysis.to_json())["strategy"] is None

    def test_repr(self):
        assert "cycles=2" in repr(self._analysis())
