from __future__ import annotations

from .audio import read_wav, write_wav
from .config import RenderConfig
from .envelope import NoteSpan, Phase, classify, note_span
from .errors import (
    InvalidConfigError,
    InvalidPitchError,
    InvalidScoreError,
    NoteSynthError,
    OutOfBoundsNoteError,
)
from .mixer import MAX_AMPLITUDE, SAMPLE_RATE, Waveform, mix
from .pitch import Accidental, Letter, frequency, parse_pitch
from .renderer import PEAK_VOLUME, render_note, render_score, render_score_parallel
from .score import Note, Score, default_score, dump_score, load_score

__all__ = [
    "MAX_AMPLITUDE",
    "PEAK_VOLUME",
    "SAMPLE_RATE",
    "Accidental",
    "InvalidConfigError",
    "InvalidPitchError",
    "InvalidScoreError",
    "Letter",
    "Note",
    "NoteSpan",
    "NoteSynthError",
    "OutOfBoundsNoteError",
    "Phase",
    "RenderConfig",
    "Score",
    "Waveform",
    "classify",
    "default_score",
    "dump_score",
    "frequency",
    "load_score",
    "mix",
    "note_span",
    "parse_pitch",
    "read_wav",
    "render_note",
    "render_score",
    "render_score_parallel",
    "write_wav",
]

__version__ = "0.1.0"
