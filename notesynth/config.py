from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidConfigError
from .mixer import SAMPLE_RATE

_LOGGER = logging.getLogger("notesynth.config")

# Environment variable -> RenderConfig field
ENV_FIELDS: Mapping[str, str] = MappingProxyType(
    {
        "NOTESYNTH_SAMPLE_RATE": "sample_rate",
        "NOTESYNTH_OUTPUT": "output",
        "NOTESYNTH_MAX_WORKERS": "max_workers",
    }
)


class RenderConfig(BaseModel):
    """Settings for one render run."""

    sample_rate: int = Field(default=SAMPLE_RATE, gt=0)
    output: Path = Path("output.wav")
    max_workers: int = Field(default=1, ge=1)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> RenderConfig:
        try:
            return cls.model_validate(dict(values))
        except ValidationError as exc:
            raise InvalidConfigError(f"Invalid render config: {exc}") from exc

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> RenderConfig:
        """Build from ``NOTESYNTH_*`` variables; non-None overrides win."""
        source = os.environ if environ is None else environ
        values: dict[str, Any] = {
            field: source[name] for name, field in ENV_FIELDS.items() if source.get(name)
        }
        if values:
            _LOGGER.debug("Render config from environment: %s", values)
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls.from_mapping(values)
