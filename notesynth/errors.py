from __future__ import annotations


class NoteSynthError(Exception):
    """Base error for the notesynth library."""


class InvalidPitchError(NoteSynthError):
    """Raised when a letter, accidental or pitch symbol is not recognised."""


class OutOfBoundsNoteError(NoteSynthError):
    """Raised when a note's sample range falls outside the waveform."""


class InvalidScoreError(NoteSynthError):
    """Raised when score data cannot be parsed or validated."""


class InvalidConfigError(NoteSynthError):
    """Raised when render settings cannot be parsed or validated."""
