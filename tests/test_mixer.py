import numpy as np
import pytest

from notesynth.envelope import Phase
from notesynth.errors import OutOfBoundsNoteError
from notesynth.mixer import MAX_AMPLITUDE, Waveform, mix, mix_block, to_storage


def test_sustain_is_an_order_dependent_average() -> None:
    v = 1_000.0
    first = mix(0.0, v, Phase.SUSTAIN, 1.0)
    assert first == v * 0.5
    second = mix(first, v, Phase.SUSTAIN, 1.0)
    assert second == ((v * 0.5) + v) * 0.5


@pytest.mark.parametrize("phase", [Phase.ATTACK, Phase.DECAY])
def test_ramp_phases_scale_the_blend(phase: Phase) -> None:
    result = mix(100.0, 1_000.0, phase, 0.25)
    assert result == pytest.approx((100.0 + 1_000.0 * 0.25) * (0.95 - 0.5 * 0.25))


def test_ramp_at_zero_factor_only_scales_existing() -> None:
    assert mix(2_000.0, 30_000.0, Phase.ATTACK, 0.0) == pytest.approx(2_000.0 * 0.95)


def test_mix_saturates() -> None:
    assert mix(40_000.0, 40_000.0, Phase.SUSTAIN, 1.0) == MAX_AMPLITUDE
    assert mix(-40_000.0, -40_000.0, Phase.SUSTAIN, 1.0) == -MAX_AMPLITUDE
    assert mix(80_000.0, 0.0, Phase.DECAY, 0.0) == MAX_AMPLITUDE


def test_mix_block_matches_scalar() -> None:
    rng = np.random.default_rng(7)
    existing = rng.integers(-32_768, 32_768, size=64).astype(np.int16)
    new = rng.uniform(-40_000.0, 40_000.0, size=64)
    phases = rng.integers(0, 3, size=64).astype(np.int8)
    factors = rng.uniform(0.0, 1.0, size=64)

    block = mix_block(existing, new, phases, factors)
    scalar = [
        mix(float(e), float(n), Phase(int(p)), float(f))
        for e, n, p, f in zip(existing, new, phases, factors)
    ]
    assert np.array_equal(block, np.array(scalar))


def test_to_storage_rounds_and_fits_int16() -> None:
    stored = to_storage(np.array([32_768.0, -32_768.0, 1.4, -1.6, 0.0]))
    assert stored.dtype == np.int16
    assert stored.tolist() == [32_767, -32_768, 1, -2, 0]


def test_waveform_starts_silent() -> None:
    waveform = Waveform.for_duration(1.0, 44_100)
    assert len(waveform) == 44_100
    assert waveform.duration == pytest.approx(1.0)
    assert not waveform.samples.any()


def test_waveform_samples_view_is_read_only() -> None:
    waveform = Waveform(4, 8_000)
    with pytest.raises(ValueError):
        waveform.samples[0] = 1


def test_mix_sample_writes_in_place() -> None:
    waveform = Waveform(2, 8_000)
    assert waveform.mix_sample(0, 1_000.0, Phase.SUSTAIN, 1.0) == 500
    assert waveform.mix_sample(0, 1_000.0, Phase.SUSTAIN, 1.0) == 750
    assert waveform[1] == 0


def test_mix_range_rejects_overflowing_ranges() -> None:
    waveform = Waveform(10, 8_000)
    ones = np.ones(5)
    phases = np.zeros(5, dtype=np.int8)
    with pytest.raises(OutOfBoundsNoteError):
        waveform.mix_range(8, ones, phases, ones)
    with pytest.raises(OutOfBoundsNoteError):
        waveform.mix_range(-1, ones, phases, ones)
    assert not waveform.samples.any()


def test_waveform_rejects_bad_dimensions() -> None:
    with pytest.raises(ValueError):
        Waveform(-1, 8_000)
    with pytest.raises(ValueError):
        Waveform(10, 0)
