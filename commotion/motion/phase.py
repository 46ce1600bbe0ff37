"""
Contact phases of a legged motion.

A phase is a maximal time interval with unchanged contact configuration.
``PhaseInfo`` identifies a phase; ``Phase`` pairs it with a duration and is
the input from which concrete motion models build their time segments.

Id convention:
    STEP    index of the step in progress, starting at 0
    STANCE  index of the last completed step, -1 before the first step
    FLIGHT  same as STANCE
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Sequence

from commotion.logging import get_logger

log = get_logger(__name__)


class PhaseType(Enum):
    """Contact configuration of a phase."""

    STANCE = 0
    STEP = 1
    FLIGHT = 2


@dataclass(frozen=True)
class PhaseInfo:
    """Type and running id of a phase. Compared by value."""

    type: PhaseType
    id: int

    def __str__(self) -> str:
        return f"{self.type.name.lower()}[{self.id}]"


@dataclass(frozen=True)
class Phase:
    """A phase together with how long it lasts (seconds)."""

    info: PhaseInfo
    duration: float

    def __post_init__(self):
        if not self.duration >= 0.0 or not math.isfinite(self.duration):
            raise ValueError(f"Phase duration must be non-negative and finite, got {self.duration}")


PhaseInfoVec = List[PhaseInfo]


def unique_phases(infos: Iterable[PhaseInfo]) -> PhaseInfoVec:
    """Collapse runs of equal adjacent phases into a single entry."""
    phases: PhaseInfoVec = []
    for info in infos:
        if not phases or phases[-1] != info:
            phases.append(info)
    return phases


def validate_phase_sequence(infos: Sequence[PhaseInfo]) -> None:
    """
    Check the ordering invariants of a phase timeline.

    Raises:
        ValueError: on adjacent duplicates, decreasing ids or step ids that
            do not count up 0, 1, 2, ... without gaps
    """
    for i, info in enumerate(infos):
        is_step = info.type is PhaseType.STEP
        if i == 0:
            # a motion may begin mid-walk, only the id range is fixed
            if info.id < (0 if is_step else -1):
                raise ValueError(f"Invalid id {info.id} for {info.type.name} phase")
            continue

        prev = infos[i - 1]
        if info == prev:
            raise ValueError(f"Duplicate adjacent phase {info} at index {i}")
        if info.id < prev.id:
            raise ValueError(f"Phase id decreases from {prev} to {info} at index {i}")
        expected = prev.id + 1 if is_step else prev.id
        if info.id != expected:
            raise ValueError(f"Expected id {expected} for {info} at index {i}")


def build_walking_phases(
    n_steps: int,
    t_step: float,
    t_stance_initial: float,
    t_stance_final: float,
    t_stance_between: float = 0.0,
) -> List[Phase]:
    """
    Build the phase schedule of a statically stable walk.

    Initial stance, then each step optionally followed by a short all-legs
    support phase, then a final stance. Zero-length stances are left out.

    Args:
        n_steps: number of steps (swing phases)
        t_step: duration of every swing phase
        t_stance_initial: duration of the first stance
        t_stance_final: duration of the last stance
        t_stance_between: all-legs support between consecutive steps

    Returns:
        List of phases in temporal order
    """
    if n_steps < 0:
        raise ValueError(f"Number of steps must be non-negative, got {n_steps}")

    if n_steps == 0:
        # without steps both stances are one and the same phase
        return [Phase(PhaseInfo(PhaseType.STANCE, -1), t_stance_initial + t_stance_final)]

    phases: List[Phase] = []
    if t_stance_initial > 0.0:
        phases.append(Phase(PhaseInfo(PhaseType.STANCE, -1), t_stance_initial))

    for step in range(n_steps):
        phases.append(Phase(PhaseInfo(PhaseType.STEP, step), t_step))
        last = step == n_steps - 1
        if not last and t_stance_between > 0.0:
            phases.append(Phase(PhaseInfo(PhaseType.STANCE, step), t_stance_between))

    if t_stance_final > 0.0:
        phases.append(Phase(PhaseInfo(PhaseType.STANCE, n_steps - 1), t_stance_final))

    log.debug(f"Built walking schedule with {n_steps} steps and {len(phases)} phases")
    return phases
