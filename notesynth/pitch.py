"""Equal-tempered pitch resolution anchored at A4 = 440 Hz.

Semitone offsets are counted from the A of each octave, so ``C3`` sits three
semitones above ``A3`` and the octave number changes on A rather than C.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Literal, Protocol, cast, get_args

from .errors import InvalidPitchError

Letter = Literal["A", "B", "C", "D", "E", "F", "G"]
Accidental = Literal["flat", "natural", "sharp"]

CONCERT_A = 440.0
CONCERT_OCTAVE = 4
SEMITONES_PER_OCTAVE = 12
SEMITONE_RATIO = 2.0 ** (1.0 / SEMITONES_PER_OCTAVE)

# Semitones above the octave's A.
SEMITONE_SCALE: Mapping[Letter, int] = MappingProxyType(
    {
        "A": 0,
        "B": 2,
        "C": 3,
        "D": 5,
        "E": 7,
        "F": 8,
        "G": 10,
    }
)

ACCIDENTAL_DELTAS: Mapping[Accidental, int] = MappingProxyType(
    {
        "flat": -1,
        "natural": 0,
        "sharp": 1,
    }
)

# Single-character spellings used in hand-written scores.
ACCIDENTAL_SYMBOLS: Mapping[str, Accidental] = MappingProxyType(
    {
        "b": "flat",
        "": "natural",
        " ": "natural",
        "#": "sharp",
    }
)

_PITCH_RE = re.compile(r"^\s*([A-Ga-g])([b#]?)(-?\d+)\s*$")


class PitchLike(Protocol):
    @property
    def letter(self) -> str: ...

    @property
    def accidental(self) -> str: ...

    @property
    def octave(self) -> int: ...


def normalize_letter(letter: str) -> Letter:
    candidate = letter.upper() if isinstance(letter, str) else letter
    if candidate not in SEMITONE_SCALE:
        raise InvalidPitchError(
            f"Unknown note letter: {letter!r}. Valid: {list(SEMITONE_SCALE.keys())}"
        )
    return cast(Letter, candidate)


def normalize_accidental(accidental: str) -> Accidental:
    """Accept either the spelled-out name or the ``b``/`` ``/``#`` symbol."""
    if accidental in get_args(Accidental):
        return cast(Accidental, accidental)
    if isinstance(accidental, str) and accidental in ACCIDENTAL_SYMBOLS:
        return ACCIDENTAL_SYMBOLS[accidental]
    raise InvalidPitchError(
        f"Unknown accidental: {accidental!r}. Valid: {list(ACCIDENTAL_DELTAS.keys())}"
    )


def semitone_offset(letter: str, accidental: str, octave: int) -> int:
    """Signed semitone distance from A4."""
    letter_value = normalize_letter(letter)
    accidental_value = normalize_accidental(accidental)
    return (
        (int(octave) - CONCERT_OCTAVE) * SEMITONES_PER_OCTAVE
        + SEMITONE_SCALE[letter_value]
        + ACCIDENTAL_DELTAS[accidental_value]
    )


def frequency(note: PitchLike) -> float:
    """Frequency in Hz for anything carrying letter, accidental and octave."""
    offset = semitone_offset(note.letter, note.accidental, note.octave)
    return CONCERT_A * SEMITONE_RATIO**offset


def parse_pitch(symbol: str) -> tuple[Letter, Accidental, int]:
    """Split scientific pitch notation such as ``Eb3`` or ``F#4``."""
    match = _PITCH_RE.match(symbol) if isinstance(symbol, str) else None
    if match is None:
        raise InvalidPitchError(f"Cannot parse pitch symbol: {symbol!r}")
    letter, accidental, octave = match.groups()
    return normalize_letter(letter), normalize_accidental(accidental), int(octave)


def pitch_symbol(letter: str, accidental: str, octave: int) -> str:
    suffix = {"flat": "b", "natural": "", "sharp": "#"}[normalize_accidental(accidental)]
    return f"{normalize_letter(letter)}{suffix}{octave}"
