"""Tests for sleepcycle.analytics.cycles -- cycles, phases and pruning."""

from sleepcycle.analytics.cycles import CycleChain, SleepCycle, SleepStage

W = SleepStage.WAKE
REM = SleepStage.REM
N1 = SleepStage.NREM1
N2 = SleepStage.NREM2
N3 = SleepStage.NREM3


def _chain(bounds, zero_time=0):
    chain = CycleChain(zero_time)
    for start, end in bounds:
        chain.open(start).end_idx = end
    return chain


def _stages(*runs):
    stages = []
    for stage, minutes in runs:
        stages.extend([stage] * minutes)
    return stages


class TestSleepCycle:
    def test_detect_phases(self):
        stages = [W, W, N1, N1, N3, N3, N3, REM, W]
        cycle = SleepCycle(zero_time=1000, start_idx=2, end_idx=7)
        cycle.detect_phases(stages)

        assert [(p.phase, p.from_time, p.to_time) for p in cycle.phases] == [
            (N1, 1120, 1240),
            (N3, 1240, 1420),
            (REM, 1420, 1480),
        ]
        assert cycle.total_seconds == {N1: 120, N3: 180, REM: 60}
        assert sum(cycle.total_seconds.values()) == cycle.duration == 360
        assert cycle.from_time == 1120
        assert cycle.to_time == 1480

    def test_detect_phases_single_minute(self):
        cycle = SleepCycle(zero_time=0, start_idx=0, end_idx=0)
        cycle.detect_phases([N2])
        assert cycle.total_seconds == {N2: 60}

    def test_detect_phases_is_repeatable(self):
        stages = [N1] * 5 + [N3] * 5
        cycle = SleepCycle(zero_time=0, start_idx=0, end_idx=9)
        cycle.detect_phases(stages)
        cycle.detect_phases(stages)
        assert len(cycle.phases) == 2
        assert cycle.total_seconds == {N1: 300, N3: 300}

    def test_deep_sleep_needs_ten_minutes(self):
        ten = SleepCycle(zero_time=0, start_idx=0, end_idx=11)
        ten.detect_phases(_stages((N1, 2), (N3, 10)))
        nine = SleepCycle(zero_time=0, start_idx=0, end_idx=11)
        nine.detect_phases(_stages((N1, 3), (N3, 9)))
        assert ten.has_deep_sleep_phase()
        assert not nine.has_deep_sleep_phase()

    def test_deep_sleep_not_summed_across_phases(self):
        cycle = SleepCycle(zero_time=0, start_idx=0, end_idx=12)
        cycle.detect_phases(_stages((N3, 6), (N2, 1), (N3, 6)))
        assert cycle.total_seconds[N3] == 720
        assert not cycle.has_deep_sleep_phase()

    def test_summary(self):
        cycle = SleepCycle(zero_time=0, start_idx=0, end_idx=2)
        cycle.detect_phases([REM, N2, N2])
        summary = cycle.summary()
        assert summary["from_time"] == 0
        assert summary["to_time"] == 180
        assert summary["phase_durations"] == {"rem": 60, "nrem1": 0, "nrem2": 120, "nrem3": 0}


class TestCycleChain:
    def test_open_links_in_order(self):
        chain = _chain([(0, 9), (10, 19), (30, 39)])
        cycles = list(chain)
        assert [c.index for c in cycles] == [0, 1, 2]
        assert cycles[1].prev_idx == 0
        assert cycles[1].next_idx == 2
        assert cycles[0].prev_idx is None
        assert cycles[2].next_idx is None

    def test_unlink_middle(self):
        chain = _chain([(0, 9), (10, 19), (30, 39)])
        chain.unlink(chain[1])
        assert [c.index for c in chain] == [0, 2]
        assert chain[0].next_idx == 2
        assert chain[2].prev_idx == 0
        assert len(chain) == 2

    def test_unlink_head_and_tail(self):
        chain = _chain([(0, 9), (10, 19), (30, 39)])
        chain.unlink(chain[0])
        chain.unlink(chain[2])
        assert [c.index for c in chain] == [1]
        assert chain[1].prev_idx is None
        assert chain[1].next_idx is None

    def test_unlink_twice_is_harmless(self):
        chain = _chain([(0, 9), (10, 19)])
        chain.unlink(chain[0])
        chain.unlink(chain[0])
        assert len(chain) == 1
        assert [c.index for c in chain] == [1]

    def test_positions_stable_after_unlink(self):
        chain = _chain([(0, 9), (10, 19)])
        chain.unlink(chain[0])
        assert chain[1].start_idx == 10

    def test_open_after_unlinking_tail(self):
        chain = _chain([(0, 9), (10, 19)])
        chain.unlink(chain[1])
        new = chain.open(40)
        assert new.prev_idx == 0
        assert [c.index for c in chain] == [0, 2]


class TestAdjustCycleBoundaries:
    def test_end_moves_to_last_rem_minute(self):
        stages = _stages((N2, 10), (REM, 5), (N2, 25))
        chain = _chain([(0, 19), (20, 39)])
        chain.adjust_cycle_boundaries(stages)
        assert chain[0].end_idx == 14
        assert chain[1].start_idx == 15

    def test_detached_successor_keeps_start(self):
        stages = _stages((N2, 10), (REM, 5), (N2, 25))
        chain = _chain([(0, 19), (25, 39)])
        chain.adjust_cycle_boundaries(stages)
        assert chain[0].end_idx == 14
        assert chain[1].start_idx == 25

    def test_cycle_without_rem_unchanged(self):
        stages = _stages((N2, 20), (N3, 20))
        chain = _chain([(0, 19), (20, 39)])
        chain.adjust_cycle_boundaries(stages)
        assert (chain[0].end_idx, chain[1].start_idx) == (19, 20)


class TestPruning:
    # A: deep sleep            [0..29]
    # B: attached after A      [30..49]
    # C: isolated, no deep     [60..79]
    # D: attached before E     [85..99]
    # E: deep sleep            [100..119]
    STAGES = _stages((N3, 20), (N1, 30), (W, 10), (N1, 20), (W, 5), (N1, 15), (N3, 20))
    BOUNDS = [(0, 29), (30, 49), (60, 79), (85, 99), (100, 119)]

    def _detected_chain(self):
        chain = _chain(self.BOUNDS)
        chain.detect_phases(self.STAGES)
        return chain

    def test_attached_cycles_survive(self):
        chain = self._detected_chain()
        assert chain.has_leading_deep_sleep_phase(chain[1])
        assert chain.has_trailing_deep_sleep_phase(chain[3])
        assert not chain.is_wake_cycle(chain[1])
        assert not chain.is_wake_cycle(chain[3])

    def test_isolated_cycle_pruned(self):
        chain = self._detected_chain()
        removed = chain.prune_wake_cycles()
        assert [c.index for c in removed] == [2]
        assert [c.index for c in chain] == [0, 1, 3, 4]
        assert chain[1].next_idx == 3

    def test_pruning_is_idempotent(self):
        chain = self._detected_chain()
        chain.prune_wake_cycles()
        assert chain.prune_wake_cycles() == []
        assert len(chain) == 4

    def test_attachment_is_transitive(self):
        stages = _stages((N1, 20), (N3, 20))
        chain = _chain([(0, 9), (10, 19), (20, 39)])
        chain.detect_phases(stages)
        assert chain.has_trailing_deep_sleep_phase(chain[0])
        assert chain.prune_wake_cycles() == []

    def test_chain_without_deep_sleep_pruned_entirely(self):
        stages = _stages((N1, 20))
        chain = _chain([(0, 9), (10, 19)])
        chain.detect_phases(stages)
        assert len(chain.prune_wake_cycles()) == 2
        assert list(chain) == []
        assert len(chain) == 0
