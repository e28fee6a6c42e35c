# edge_diagram/io.py
from __future__ import annotations

from pathlib import Path

import yaml

from .config import EditorConfig, config_from_mapping
from .errors import ConfigError
from .parser import split_lines


def load_edges(path: Path) -> list[str]:
    """Read an edge-list file into lines (blank lines kept for numbering)."""
    if not path.exists():
        raise FileNotFoundError(str(path))
    return split_lines(path.read_text(encoding="utf-8"))


def load_config(path: Path) -> EditorConfig:
    """Load an EditorConfig from a YAML mapping; an empty file means defaults."""
    if not path.exists():
        raise FileNotFoundError(str(path))

    raw = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML {path}: {e}") from e

    if data is None:
        return EditorConfig()
    if not isinstance(data, dict):
        raise ConfigError(
            f"Top-level YAML must be a mapping in {path}, got {type(data).__name__}"
        )

    return config_from_mapping(data)
