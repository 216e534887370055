from pathlib import Path

import pytest

from notesynth.config import RenderConfig
from notesynth.errors import InvalidConfigError


def test_defaults() -> None:
    config = RenderConfig()
    assert config.sample_rate == 44_100
    assert config.output == Path("output.wav")
    assert config.max_workers == 1


def test_from_env_reads_prefixed_variables() -> None:
    config = RenderConfig.from_env(
        {"NOTESYNTH_SAMPLE_RATE": "22050", "NOTESYNTH_OUTPUT": "song.wav", "HOME": "/tmp"}
    )
    assert config.sample_rate == 22_050
    assert config.output == Path("song.wav")


def test_overrides_beat_environment() -> None:
    config = RenderConfig.from_env(
        {"NOTESYNTH_SAMPLE_RATE": "22050", "NOTESYNTH_MAX_WORKERS": "2"},
        sample_rate=8_000,
        max_workers=None,
    )
    assert config.sample_rate == 8_000
    assert config.max_workers == 2


def test_from_env_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTESYNTH_MAX_WORKERS", "3")
    assert RenderConfig.from_env().max_workers == 3


@pytest.mark.parametrize(
    "environ",
    [
        {"NOTESYNTH_SAMPLE_RATE": "fast"},
        {"NOTESYNTH_SAMPLE_RATE": "0"},
        {"NOTESYNTH_MAX_WORKERS": "0"},
    ],
)
def test_invalid_values_raise(environ: dict[str, str]) -> None:
    with pytest.raises(InvalidConfigError):
        RenderConfig.from_env(environ)


def test_unknown_override_is_rejected() -> None:
    with pytest.raises(InvalidConfigError):
        RenderConfig.from_env({}, tempo=120)


def test_default_sample_rate_is_shared() -> None:
    from notesynth import SAMPLE_RATE, audio, renderer

    assert RenderConfig().sample_rate == SAMPLE_RATE
    assert renderer.SAMPLE_RATE is SAMPLE_RATE
    assert audio.SAMPLE_RATE is SAMPLE_RATE
