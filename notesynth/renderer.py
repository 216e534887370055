from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from .envelope import FloatArray, NoteSpan, PhaseArray, classify, classify_block, note_span
from .mixer import MAX_AMPLITUDE, SAMPLE_RATE, Waveform
from .pitch import frequency
from .score import END_TOLERANCE, Note, Score

_LOGGER = logging.getLogger("notesynth.renderer")

PEAK_VOLUME = 0.95 * MAX_AMPLITUDE


@dataclass(frozen=True)
class RenderedNote:
    """A note's raw sinusoid and envelope, not yet mixed into any buffer."""

    span: NoteSpan
    samples: FloatArray
    phases: PhaseArray
    factors: FloatArray


def oscillate(freq: float, span: NoteSpan, sample_rate: int) -> FloatArray:
    """Peak-volume sine over the span, phase-locked to the waveform origin."""
    t = np.arange(span.start, span.finish, dtype=np.float64) / sample_rate
    return PEAK_VOLUME * np.sin(2 * np.pi * freq * t)


def prepare_note(note: Note, freq: float, sample_rate: int) -> RenderedNote:
    span = note_span(note, sample_rate)
    phases, factors = classify_block(span)
    return RenderedNote(
        span=span,
        samples=oscillate(freq, span, sample_rate),
        phases=phases,
        factors=factors,
    )


def render_note(note: Note, freq: float, into: Waveform) -> NoteSpan:
    """Mix one note directly into the shared waveform.

    Raises :class:`OutOfBoundsNoteError` before writing anything if the note
    does not fit the buffer.
    """
    span = note_span(note, into.sample_rate)
    into.check_range(span.start, span.finish)
    prepared = prepare_note(note, freq, into.sample_rate)
    into.mix_range(span.start, prepared.samples, prepared.phases, prepared.factors)
    return span


def render_note_per_sample(note: Note, freq: float, into: Waveform) -> NoteSpan:
    """Sample-at-a-time equivalent of :func:`render_note`."""
    span = note_span(note, into.sample_rate)
    into.check_range(span.start, span.finish)
    for index in range(span.start, span.finish):
        t = index / into.sample_rate
        sample = PEAK_VOLUME * math.sin(2 * math.pi * freq * t)
        phase, factor = classify(span, index)
        into.mix_sample(index, sample, phase, factor)
    return span


def _log_note(position: int, note: Note, freq: float, span: NoteSpan) -> None:
    _LOGGER.debug(
        "Note %d %s %.3f Hz samples [%d, %d)",
        position,
        note.symbol,
        freq,
        span.start,
        span.finish,
    )


def _allocate(score: Score, sample_rate: int, total_duration: float | None) -> Waveform:
    """Buffer of ``round(duration * sample_rate)`` samples, grown to hold every
    note that ends within the duration.

    Start and length are rounded separately, so a note ending exactly at the
    total duration can reach one sample past the rounded total.
    """
    duration = score.duration if total_duration is None else total_duration
    length = round(duration * sample_rate)
    for note in score.notes:
        if note.end <= duration + END_TOLERANCE:
            length = max(length, note_span(note, sample_rate).finish)
    return Waveform(length, sample_rate)


def render_score(
    score: Score | Iterable[Note],
    *,
    sample_rate: int = SAMPLE_RATE,
    total_duration: float | None = None,
) -> Waveform:
    """Render every note in score order into a fresh waveform."""
    if not isinstance(score, Score):
        score = Score(notes=tuple(score))
    waveform = _allocate(score, sample_rate, total_duration)
    for position, note in enumerate(score.notes):
        freq = frequency(note)
        span = render_note(note, freq, waveform)
        _log_note(position, note, freq, span)
    _LOGGER.info(
        "Rendered %d notes into %d samples at %d Hz", len(score), len(waveform), sample_rate
    )
    return waveform


def render_score_parallel(
    score: Score | Iterable[Note],
    *,
    sample_rate: int = SAMPLE_RATE,
    total_duration: float | None = None,
    max_workers: int | None = None,
) -> Waveform:
    """Like :func:`render_score`, computing notes concurrently.

    Each note's sinusoid and envelope are prepared independently; the mix into
    the shared buffer still happens in score order, so the result is identical
    to the sequential render.
    """
    if not isinstance(score, Score):
        score = Score(notes=tuple(score))
    waveform = _allocate(score, sample_rate, total_duration)
    for note in score.notes:
        span = note_span(note, sample_rate)
        waveform.check_range(span.start, span.finish)

    freqs = [frequency(note) for note in score.notes]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        prepared = list(
            executor.map(
                lambda pair: prepare_note(pair[0], pair[1], sample_rate),
                zip(score.notes, freqs),
            )
        )

    for position, (note, freq, rendered) in enumerate(zip(score.notes, freqs, prepared)):
        waveform.mix_range(rendered.span.start, rendered.samples, rendered.phases, rendered.factors)
        _log_note(position, note, freq, rendered.span)
    _LOGGER.info(
        "Rendered %d notes into %d samples at %d Hz (%s workers)",
        len(score),
        len(waveform),
        sample_rate,
        max_workers or "default",
    )
    return waveform
