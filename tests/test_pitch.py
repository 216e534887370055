from types import SimpleNamespace

import pytest

from notesynth.errors import InvalidPitchError
from notesynth.pitch import (
    SEMITONE_RATIO,
    SEMITONE_SCALE,
    frequency,
    normalize_accidental,
    parse_pitch,
    pitch_symbol,
    semitone_offset,
)


def _pitch(letter: str, accidental: str, octave: int) -> SimpleNamespace:
    return SimpleNamespace(letter=letter, accidental=accidental, octave=octave)


def test_concert_a_is_440() -> None:
    assert frequency(_pitch("A", "natural", 4)) == pytest.approx(440.0)


def test_octave_up_doubles_frequency() -> None:
    assert frequency(_pitch("A", "natural", 5)) == pytest.approx(880.0)


def test_sharp_is_one_semitone_up() -> None:
    natural = frequency(_pitch("C", "natural", 3))
    sharp = frequency(_pitch("C", "sharp", 3))
    assert sharp / natural == pytest.approx(2 ** (1 / 12))
    assert SEMITONE_RATIO == pytest.approx(1.059463, abs=1e-6)


def test_octaves_are_counted_from_a() -> None:
    # C sits three semitones above the A of the same octave number.
    assert semitone_offset("C", "natural", 4) == 3
    assert frequency(_pitch("C", "natural", 4)) == pytest.approx(523.2511, rel=1e-6)
    assert semitone_offset("G", "flat", 3) == -12 + 10 - 1


def test_symbol_accidentals_are_normalized() -> None:
    assert normalize_accidental("b") == "flat"
    assert normalize_accidental(" ") == "natural"
    assert normalize_accidental("#") == "sharp"
    assert frequency(_pitch("E", "b", 3)) == pytest.approx(frequency(_pitch("E", "flat", 3)))


def test_unknown_letter_fails_fast() -> None:
    with pytest.raises(InvalidPitchError):
        frequency(_pitch("H", "natural", 4))


def test_unknown_accidental_fails_fast() -> None:
    with pytest.raises(InvalidPitchError):
        frequency(_pitch("C", "double-sharp", 4))


@pytest.mark.parametrize(
    ("symbol", "expected"),
    [
        ("Eb3", ("E", "flat", 3)),
        ("f#4", ("F", "sharp", 4)),
        ("bb4", ("B", "flat", 4)),
        ("C-1", ("C", "natural", -1)),
    ],
)
def test_parse_pitch(symbol: str, expected: tuple[str, str, int]) -> None:
    assert parse_pitch(symbol) == expected


@pytest.mark.parametrize("symbol", ["H2", "C", "Cx4", ""])
def test_parse_pitch_rejects_garbage(symbol: str) -> None:
    with pytest.raises(InvalidPitchError):
        parse_pitch(symbol)


def test_pitch_symbol_spelling() -> None:
    assert pitch_symbol("a", "flat", 4) == "Ab4"
    assert pitch_symbol("F", "sharp", 3) == "F#3"
    assert pitch_symbol("C", "natural", 4) == "C4"


def test_semitone_scale_is_read_only() -> None:
    with pytest.raises(TypeError):
        SEMITONE_SCALE["A"] = 1  # type: ignore[index]
