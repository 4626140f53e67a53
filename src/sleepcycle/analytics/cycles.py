"""Sleep cycles, their phases, and the chain that links them.

A sleep cycle is a run of minutes in the analysis window, stored as the
inclusive minute indices ``start_idx`` and ``end_idx``.  Cycles live in a
:class:`CycleChain`: an append-only list whose positions never change,
with ``prev_idx``/``next_idx`` links giving the chronological order.
Unlinking a cycle relinks its neighbours and leaves the list untouched.

A cycle only counts as sleep if it contains at least 10 minutes of deep
(NREM3) sleep, or is directly attached to a chain of cycles that does.
Everything else is pruned as a wake cycle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

logger = logging.getLogger(__name__)


class SleepStage(str, Enum):
    """Sleep phase of a minute or a phase segment."""

    WAKE = "wake"
    REM = "rem"
    NREM1 = "nrem1"
    NREM2 = "nrem2"
    NREM3 = "nrem3"


SLEEP_STAGES = (SleepStage.REM, SleepStage.NREM1, SleepStage.NREM2, SleepStage.NREM3)

DEEP_SLEEP_MIN_SECS = 10 * 60  # shorter NREM3 segments are not deep sleep


@dataclass
class SleepPhase:
    """A segment of a sleep cycle with a single stage."""

    from_time: int
    to_time: int
    phase: SleepStage

    @property
    def duration(self) -> int:
        """Duration in seconds."""
        return self.to_time - self.from_time


@dataclass(eq=False)
class SleepCycle:
    """One sleep cycle.  Times are minutes past ``zero_time``."""

    zero_time: int
    start_idx: int
    end_idx: int | None = None
    # At most one transition of each kind per cycle.
    high_low_trans_idx: int | None = None
    low_high_trans_idx: int | None = None
    index: int = -1  # position in the owning CycleChain
    prev_idx: int | None = None
    next_idx: int | None = None
    phases: list[SleepPhase] = field(default_factory=list)
    total_seconds: dict[SleepStage, int] = field(default_factory=dict)

    def idx_to_time(self, idx: int) -> int:
        return self.zero_time + 60 * idx

    @property
    def from_time(self) -> int:
        return self.idx_to_time(self.start_idx)

    @property
    def to_time(self) -> int:
        return self.idx_to_time(self.end_idx + 1)

    @property
    def duration(self) -> int:
        return self.to_time - self.from_time

    def detect_phases(self, stages: Sequence[SleepStage]) -> None:
        """Split the cycle into runs of equal stage and total them up.

        Args:
            stages: Sleep stage per minute of the whole window.
        """
        self.phases = []
        self.total_seconds = {}
        run_start = self.start_idx

        for i in range(self.start_idx + 1, self.end_idx + 2):
            if i <= self.end_idx and stages[i] == stages[run_start]:
                continue
            phase = SleepPhase(
                from_time=self.idx_to_time(run_start),
                to_time=self.idx_to_time(i),
                phase=stages[run_start],
            )
            self.phases.append(phase)
            self.total_seconds[phase.phase] = (
                self.total_seconds.get(phase.phase, 0) + phase.duration
            )
            run_start = i

    def has_deep_sleep_phase(self) -> bool:
        return any(
            p.phase == SleepStage.NREM3 and p.duration >= DEEP_SLEEP_MIN_SECS
            for p in self.phases
        )

    def has_stage(self, stage: SleepStage) -> bool:
        return self.total_seconds.get(stage, 0) > 0

    def summary(self) -> dict:
        """JSON-friendly summary of the cycle."""
        return {
            "from_time": self.from_time,
            "to_time": self.to_time,
            "phase_durations": {
                stage.value: self.total_seconds.get(stage, 0) for stage in SLEEP_STAGES
            },
        }

    def __repr__(self) -> str:
        return (
            f"SleepCycle(#{self.index}, {self.start_idx}..{self.end_idx}, "
            f"phases={len(self.phases)})"
        )


class CycleChain:
    """Sleep cycles of one window in chronological order.

    Cycles are appended with :meth:`open` and linked after the current
    last cycle.  Iterating the chain yields the linked cycles only.
    """

    def __init__(self, zero_time: int) -> None:
        self.zero_time = zero_time
        self._cycles: list[SleepCycle] = []
        self._unlinked: set[int] = set()
        self._head: int | None = None
        self._tail: int | None = None

    def open(self, start_idx: int) -> SleepCycle:
        """Create a cycle starting at *start_idx* as the new last cycle."""
        cycle = SleepCycle(
            zero_time=self.zero_time,
            start_idx=start_idx,
            index=len(self._cycles),
            prev_idx=self._tail,
        )
        if self._tail is not None:
            self._cycles[self._tail].next_idx = cycle.index
        else:
            self._head = cycle.index
        self._tail = cycle.index
        self._cycles.append(cycle)
        return cycle

    def __getitem__(self, index: int) -> SleepCycle:
        return self._cycles[index]

    def __iter__(self) -> Iterator[SleepCycle]:
        idx = self._head
        while idx is not None:
            cycle = self._cycles[idx]
            yield cycle
            idx = cycle.next_idx

    def __len__(self) -> int:
        return len(self._cycles) - len(self._unlinked)

    def prev_of(self, cycle: SleepCycle) -> SleepCycle | None:
        return self._cycles[cycle.prev_idx] if cycle.prev_idx is not None else None

    def next_of(self, cycle: SleepCycle) -> SleepCycle | None:
        return self._cycles[cycle.next_idx] if cycle.next_idx is not None else None

    def unlink(self, cycle: SleepCycle) -> None:
        """Remove *cycle* from the chain, joining its neighbours."""
        if cycle.index in self._unlinked:
            return

        if cycle.prev_idx is not None:
            self._cycles[cycle.prev_idx].next_idx = cycle.next_idx
        else:
            self._head = cycle.next_idx
        if cycle.next_idx is not None:
            self._cycles[cycle.next_idx].prev_idx = cycle.prev_idx
        else:
            self._tail = cycle.prev_idx

        cycle.prev_idx = cycle.next_idx = None
        self._unlinked.add(cycle.index)

    # -- boundaries and phases ---------------------------------------------

    def adjust_cycle_boundaries(self, stages: Sequence[SleepStage]) -> None:
        """Move each cycle end to the last minute of its REM phase.

        Cycles are first cut at the high/low heart-rate transition, but a
        sleep cycle really ends with its REM phase.  A successor that
        started right after the old end is moved along with it.
        """
        for cycle in self:
            end_of_rem_idx = None
            for i in range(cycle.start_idx, cycle.end_idx + 1):
                if stages[i] == SleepStage.REM:
                    end_of_rem_idx = i
            if end_of_rem_idx is None:
                continue

            old_end_idx = cycle.end_idx
            cycle.end_idx = end_of_rem_idx
            successor = self.next_of(cycle)
            if successor is not None and successor.start_idx == old_end_idx + 1:
                successor.start_idx = end_of_rem_idx + 1

    def detect_phases(self, stages: Sequence[SleepStage]) -> None:
        for cycle in self:
            cycle.detect_phases(stages)

    # -- pruning ------------------------------------------------------------

    def has_leading_deep_sleep_phase(self, cycle: SleepCycle) -> bool:
        """True if a directly attached predecessor has deep sleep."""
        prev = self.prev_of(cycle)
        while prev is not None and cycle.start_idx == prev.end_idx + 1:
            if prev.has_deep_sleep_phase():
                return True
            cycle, prev = prev, self.prev_of(prev)
        return False

    def has_trailing_deep_sleep_phase(self, cycle: SleepCycle) -> bool:
        """True if a directly attached successor has deep sleep."""
        nxt = self.next_of(cycle)
        while nxt is not None and cycle.end_idx + 1 == nxt.start_idx:
            if nxt.has_deep_sleep_phase():
                return True
            cycle, nxt = nxt, self.next_of(nxt)
        return False

    def is_wake_cycle(self, cycle: SleepCycle) -> bool:
        return not (
            cycle.has_deep_sleep_phase()
            or self.has_leading_deep_sleep_phase(cycle)
            or self.has_trailing_deep_sleep_phase(cycle)
        )

    def prune_wake_cycles(self) -> list[SleepCycle]:
        """Unlink every wake cycle.

        All cycles are judged on the chain as it was before pruning.

        Returns:
            The cycles that were removed.
        """
        wake_cycles = [c for c in self if self.is_wake_cycle(c)]
        for cycle in wake_cycles:
            self.unlink(cycle)
        if wake_cycles:
            logger.debug("Pruned %d wake cycles, %d left", len(wake_cycles), len(self))
        return wake_cycles

    def __repr__(self) -> str:
        return f"CycleChain(cycles={len(self)})"
