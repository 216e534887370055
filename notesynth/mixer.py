from __future__ import annotations

from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

from .envelope import FloatArray, Phase, PhaseArray
from .errors import OutOfBoundsNoteError

SampleArray: TypeAlias = NDArray[np.int16]

SAMPLE_RATE = 44_100
MAX_AMPLITUDE = 32768
INT16_MIN = int(np.iinfo(np.int16).min)
INT16_MAX = int(np.iinfo(np.int16).max)

SUSTAIN_GAIN = 0.5
RAMP_GAIN = 0.95
RAMP_GAIN_SLOPE = 0.5


def clamp(value: float) -> float:
    return max(-MAX_AMPLITUDE, min(MAX_AMPLITUDE, value))


def mix(existing: float, new_sample: float, phase: Phase, factor: float) -> float:
    """Blend one rendered sample into the value already stored.

    Ramping phases scale the blend down by ``0.95 - 0.5 * factor`` to soften
    overlapping envelopes; sustain is a straight average. The result is
    clamped to ``[-MAX_AMPLITUDE, MAX_AMPLITUDE]``.
    """
    if phase == Phase.SUSTAIN:
        value = (existing + new_sample) * SUSTAIN_GAIN
    else:
        value = (existing + new_sample * factor) * (RAMP_GAIN - RAMP_GAIN_SLOPE * factor)
    return clamp(value)


def mix_block(
    existing: SampleArray | FloatArray,
    new_samples: FloatArray,
    phases: PhaseArray,
    factors: FloatArray,
) -> FloatArray:
    """Vectorised :func:`mix`; element-for-element identical to the scalar form."""
    current = np.asarray(existing, dtype=np.float64)
    ramped = (current + new_samples * factors) * (RAMP_GAIN - RAMP_GAIN_SLOPE * factors)
    averaged = (current + new_samples) * SUSTAIN_GAIN
    mixed = np.where(phases == Phase.SUSTAIN, averaged, ramped)
    return np.clip(mixed, -MAX_AMPLITUDE, MAX_AMPLITUDE)


def to_storage(values: FloatArray) -> SampleArray:
    """Round to the nearest integer and saturate into the int16 range."""
    return np.clip(np.rint(values), INT16_MIN, INT16_MAX).astype(np.int16)


class Waveform:
    """Fixed-length mono buffer of signed 16-bit samples, zero-initialised."""

    def __init__(self, length: int, sample_rate: int) -> None:
        if length < 0:
            raise ValueError(f"Waveform length must be non-negative, got {length}")
        if sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {sample_rate}")
        self.sample_rate = int(sample_rate)
        self._samples: SampleArray = np.zeros(int(length), dtype=np.int16)

    @classmethod
    def for_duration(cls, total_duration: float, sample_rate: int) -> Waveform:
        return cls(round(total_duration * sample_rate), sample_rate)

    def __len__(self) -> int:
        return int(self._samples.size)

    def __getitem__(self, index: int) -> int:
        return int(self._samples[index])

    @property
    def duration(self) -> float:
        return len(self) / self.sample_rate

    @property
    def samples(self) -> SampleArray:
        """Read-only view of the stored samples."""
        view = self._samples.view()
        view.flags.writeable = False
        return view

    def check_range(self, start: int, finish: int) -> None:
        if start < 0 or finish > len(self) or start > finish:
            raise OutOfBoundsNoteError(
                f"Sample range [{start}, {finish}) does not fit a waveform of {len(self)} samples"
            )

    def mix_sample(self, index: int, new_sample: float, phase: Phase, factor: float) -> int:
        self.check_range(index, index + 1)
        mixed = mix(float(self._samples[index]), new_sample, phase, factor)
        self._samples[index] = to_storage(np.asarray(mixed, dtype=np.float64))
        return int(self._samples[index])

    def mix_range(
        self,
        start: int,
        new_samples: FloatArray,
        phases: PhaseArray,
        factors: FloatArray,
    ) -> None:
        finish = start + int(new_samples.size)
        self.check_range(start, finish)
        window = self._samples[start:finish]
        window[:] = to_storage(mix_block(window, new_samples, phases, factors))
