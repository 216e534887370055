from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol, TypeAlias

import numpy as np
from numpy.typing import NDArray

FloatArray: TypeAlias = NDArray[np.float64]
PhaseArray: TypeAlias = NDArray[np.int8]


class Phase(IntEnum):
    SUSTAIN = 0
    ATTACK = 1
    DECAY = 2


class TimedNote(Protocol):
    @property
    def begin(self) -> float: ...

    @property
    def duration(self) -> float: ...

    @property
    def attack(self) -> float: ...

    @property
    def decay(self) -> float: ...


@dataclass(frozen=True, slots=True)
class NoteSpan:
    """A note's timing converted to absolute sample indices.

    ``finish`` is exclusive. ``attack_finish`` is inclusive: the sample at
    ``attack_finish`` is still classified as attack (factor 1.0).
    """

    start: int
    finish: int
    attack_duration: int
    decay_duration: int

    @property
    def attack_finish(self) -> int:
        return self.start + self.attack_duration

    @property
    def decay_start(self) -> int:
        return self.finish - self.decay_duration

    @property
    def has_attack(self) -> bool:
        return self.attack_duration > 0

    @property
    def has_decay(self) -> bool:
        return self.decay_duration > 0

    def __len__(self) -> int:
        return max(0, self.finish - self.start)


def note_span(note: TimedNote, sample_rate: int) -> NoteSpan:
    start = round(note.begin * sample_rate)
    finish = start + round(note.duration * sample_rate)
    # A positive envelope that rounds to zero samples has no ramp to walk.
    attack_duration = round(note.attack * sample_rate) if note.attack > 0 else 0
    decay_duration = round(note.decay * sample_rate) if note.decay > 0 else 0
    return NoteSpan(
        start=start,
        finish=finish,
        attack_duration=attack_duration,
        decay_duration=decay_duration,
    )


def classify(span: NoteSpan, index: int) -> tuple[Phase, float]:
    """Envelope phase and linear ramp factor for one absolute sample index.

    Attack is checked first, so when the attack and decay windows overlap every
    sample up to and including ``attack_finish`` ramps up, and only later
    samples can ramp down. Sustain returns a factor of 1.0.
    """
    if not span.start <= index < span.finish:
        raise ValueError(f"Sample {index} is outside note range [{span.start}, {span.finish})")
    if span.has_attack and index <= span.attack_finish:
        return Phase.ATTACK, (index - span.start) / span.attack_duration
    if span.has_decay and index >= span.decay_start:
        return Phase.DECAY, (span.finish - index) / span.decay_duration
    return Phase.SUSTAIN, 1.0


def classify_block(span: NoteSpan) -> tuple[PhaseArray, FloatArray]:
    """Vectorised :func:`classify` over the whole ``[start, finish)`` range."""
    indices = np.arange(span.start, span.finish, dtype=np.int64)
    phases: PhaseArray = np.full(indices.shape, Phase.SUSTAIN, dtype=np.int8)
    factors: FloatArray = np.ones(indices.shape, dtype=np.float64)

    attack_mask = np.zeros(indices.shape, dtype=bool)
    if span.has_attack:
        attack_mask = indices <= span.attack_finish
        phases[attack_mask] = Phase.ATTACK
        factors[attack_mask] = (indices[attack_mask] - span.start) / span.attack_duration

    if span.has_decay:
        decay_mask = ~attack_mask & (indices >= span.decay_start)
        phases[decay_mask] = Phase.DECAY
        factors[decay_mask] = (span.finish - indices[decay_mask]) / span.decay_duration

    return phases, factors
