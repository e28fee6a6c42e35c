from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from .constants import (
    CACHE_SIZE_DEFAULT,
    DEBOUNCE_SECONDS_DEFAULT,
    MMDC_BACKGROUND_DEFAULT,
    MMDC_COMMAND_DEFAULT,
    MMDC_SCALE_DEFAULT,
    RENDER_TIMEOUT_SECONDS_DEFAULT,
)
from .errors import ConfigError


@dataclass(frozen=True)
class EditorConfig:
    """Tunables for the generation pipeline and the Mermaid CLI."""

    cache_size: int = CACHE_SIZE_DEFAULT
    debounce_seconds: float = DEBOUNCE_SECONDS_DEFAULT
    render_timeout_seconds: float = RENDER_TIMEOUT_SECONDS_DEFAULT
    mmdc_command: str = MMDC_COMMAND_DEFAULT
    scale: int = MMDC_SCALE_DEFAULT
    background_color: str = MMDC_BACKGROUND_DEFAULT

    def __post_init__(self) -> None:
        if self.cache_size < 1:
            raise ConfigError(f"cache_size must be >= 1, got {self.cache_size}")
        if self.debounce_seconds < 0:
            raise ConfigError(f"debounce_seconds must be >= 0, got {self.debounce_seconds}")
        if self.render_timeout_seconds <= 0:
            raise ConfigError(
                f"render_timeout_seconds must be > 0, got {self.render_timeout_seconds}"
            )
        if self.scale < 1:
            raise ConfigError(f"scale must be >= 1, got {self.scale}")
        if not self.mmdc_command.strip():
            raise ConfigError("mmdc_command must not be empty")

    def with_overrides(self, **overrides: Any) -> "EditorConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values) if values else self


_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "cache_size": (int,),
    "debounce_seconds": (int, float),
    "render_timeout_seconds": (int, float),
    "mmdc_command": (str,),
    "scale": (int,),
    "background_color": (str,),
}


def config_from_mapping(data: Mapping[str, Any]) -> EditorConfig:
    """Overlay a parsed mapping on the defaults, rejecting unknown keys and bad types."""
    known = {f.name for f in fields(EditorConfig)}
    unknown = sorted(str(k) for k in set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key, value in data.items():
        expected = _FIELD_TYPES[key]
        # bool is an int subclass; never accept it for numeric fields.
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigError(
                f"Config key {key!r} must be {' or '.join(t.__name__ for t in expected)}, "
                f"got {type(value).__name__}"
            )
        values[key] = value

    return EditorConfig(**values)
