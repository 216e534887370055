from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Callable, cast

import numpy as np
import soundfile as sf  # type: ignore[import]
from numpy.typing import NDArray

from .errors import InvalidConfigError
from .mixer import SAMPLE_RATE, SampleArray, Waveform, to_storage

_LOGGER = logging.getLogger("notesynth.audio")

CHANNELS = 1
SUBTYPE = "PCM_16"

AudioSamples = Waveform | NDArray[Any] | Sequence[int] | Sequence[float]


def _looks_like_samples(sequence: Sequence[object]) -> bool:
    match sequence:
        case []:
            return True
        case [int() | float() | np.integer() | np.floating(), *_]:
            return True
        case _:
            return False


def ensure_pcm_contract(audio: AudioSamples) -> SampleArray:
    """Flatten to mono int16; non-integer input is rounded and saturated."""
    match audio:
        case Waveform():
            return np.asarray(audio.samples, dtype=np.int16)
        case str() | bytes():
            raise InvalidConfigError("audio must be a waveform or a sequence of samples")
        case np.ndarray():
            mono = audio.reshape(-1)
        case Sequence() as sequence if _looks_like_samples(sequence):
            mono = np.asarray(sequence).reshape(-1)
        case _:
            raise InvalidConfigError("audio must be a waveform or a sequence of samples")

    if mono.dtype == np.int16:
        return mono
    return to_storage(np.asarray(mono, dtype=np.float64))


def write_wav(
    path: str | Path,
    audio: AudioSamples,
    *,
    sample_rate: int | None = None,
) -> Path:
    """Write 16-bit PCM mono; a :class:`Waveform` supplies its own sample rate."""
    target = Path(path)
    if sample_rate is None:
        sample_rate = audio.sample_rate if isinstance(audio, Waveform) else SAMPLE_RATE
    if sample_rate <= 0:
        raise InvalidConfigError(f"sample_rate must be positive, got {sample_rate}")

    samples = ensure_pcm_contract(audio)
    write_fn = getattr(sf, "write", None)
    assert callable(write_fn)
    write_audio = cast(Callable[..., None], write_fn)
    write_audio(target, samples, sample_rate, subtype=SUBTYPE)
    _LOGGER.debug("Wrote %d samples to %s at %d Hz", samples.size, target, sample_rate)
    return target


def read_wav(path: str | Path) -> tuple[SampleArray, int]:
    data, sample_rate = sf.read(Path(path), dtype="int16", always_2d=False)
    samples: SampleArray = np.asarray(data, dtype=np.int16)
    if samples.ndim > 1:
        samples = samples[:, 0]
    return samples, int(sample_rate)
