from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import InvalidScoreError, OutOfBoundsNoteError
from .pitch import Accidental, Letter, normalize_accidental, normalize_letter, parse_pitch, pitch_symbol

_LOGGER = logging.getLogger("notesynth.score")

# Float slack when comparing note ends against the declared total duration.
END_TOLERANCE = 1e-9


class Note(BaseModel):
    """One sounding note. Times are seconds from the start of the waveform."""

    begin: float = Field(ge=0.0)
    letter: Letter
    accidental: Accidental = "natural"
    octave: int
    duration: float = Field(gt=0.0)
    attack: float = Field(default=0.0, ge=0.0)
    decay: float = Field(default=0.0, ge=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("letter", mode="before")
    @classmethod
    def _normalize_letter(cls, value: Any) -> Letter:
        return normalize_letter(value)

    @field_validator("accidental", mode="before")
    @classmethod
    def _normalize_accidental(cls, value: Any) -> Accidental:
        return normalize_accidental(value)

    @model_validator(mode="after")
    def _envelopes_fit(self) -> Note:
        if self.attack > self.duration:
            raise ValueError(f"attack {self.attack}s exceeds duration {self.duration}s")
        if self.decay > self.duration:
            raise ValueError(f"decay {self.decay}s exceeds duration {self.duration}s")
        return self

    @classmethod
    def from_symbol(cls, symbol: str, **timing: float) -> Note:
        letter, accidental, octave = parse_pitch(symbol)
        return cls(letter=letter, accidental=accidental, octave=octave, **timing)

    @property
    def end(self) -> float:
        return self.begin + self.duration

    @property
    def symbol(self) -> str:
        return pitch_symbol(self.letter, self.accidental, self.octave)


class Score(BaseModel):
    """Ordered notes; overlapping notes are mixed in this order."""

    notes: tuple[Note, ...] = ()
    total_duration: float | None = Field(default=None, gt=0.0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _notes_fit(self) -> Score:
        if self.total_duration is None:
            return self
        for position, note in enumerate(self.notes):
            if note.end > self.total_duration + END_TOLERANCE:
                raise OutOfBoundsNoteError(
                    f"Note {position} ({note.symbol}) ends at {note.end}s, "
                    f"past the total duration of {self.total_duration}s"
                )
        return self

    @property
    def duration(self) -> float:
        if self.total_duration is not None:
            return self.total_duration
        return max((note.end for note in self.notes), default=0.0)

    def __len__(self) -> int:
        return len(self.notes)

    @classmethod
    def from_dict(cls, payload: Any) -> Score:
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise InvalidScoreError(f"Invalid score: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def load_score(path: str | Path) -> Score:
    source = Path(path)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidScoreError(f"{source} is not valid JSON: {exc}") from exc
    score = Score.from_dict(payload)
    _LOGGER.debug("Loaded %d notes from %s", len(score), source)
    return score


def dump_score(score: Score, path: str | Path) -> Path:
    target = Path(path)
    target.write_text(json.dumps(score.to_dict(), indent=2) + "\n", encoding="utf-8")
    return target


def default_score() -> Score:
    """A rising C minor run followed by a staggered C-G-C chord."""
    run = (
        (0.00, "C3"),
        (0.25, "D3"),
        (0.50, "Eb3"),
        (0.75, "F3"),
        (1.00, "G3"),
        (1.25, "Ab4"),
        (1.50, "Bb4"),
        (1.75, "C4"),
    )
    chord = (
        (2.50, "C3"),
        (2.55, "G3"),
        (2.60, "C4"),
    )
    notes = [
        Note.from_symbol(symbol, begin=begin, duration=1.0, attack=0.1, decay=0.5)
        for begin, symbol in run
    ]
    notes.extend(
        Note.from_symbol(symbol, begin=begin, duration=2.0, attack=0.1, decay=1.0)
        for begin, symbol in chord
    )
    return Score(notes=tuple(notes), total_duration=5.0)
