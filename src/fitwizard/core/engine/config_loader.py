"""
YAML → config loader.

Loads model tables from model.yaml (bundled with the package) and
optionally merges user overrides from ~/.fitwizard/model.yaml.

Usage:
    from fitwizard.core.engine.config_loader import load_model_config
    cfg = load_model_config()
    chest = cfg.get("volume_landmarks", {}).get("chest", {})

If the bundled YAML cannot be parsed, callers fall back to the Python
defaults in config.py.  If the user override file has parse errors, a
warning is issued and the file is ignored.
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def load_yaml_file(path: Path) -> Any:
    """Load a single YAML document; warn and return None if it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"fitwizard: ignoring unreadable YAML file {path} ({exc})", stacklevel=2)
        return None


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_package_dir() -> Path:
    """Return the fitwizard package directory (holds model.yaml and exercises/)."""
    # config_loader.py lives at src/fitwizard/core/engine/config_loader.py
    return Path(__file__).resolve().parent.parent.parent


def get_user_config_dir() -> Path:
    """Return ~/.fitwizard (it may not exist)."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".fitwizard"


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled model.yaml, or None if not found."""
    p = get_package_dir() / "model.yaml"
    return p if p.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.fitwizard/model.yaml if it exists, else None."""
    p = get_user_config_dir() / "model.yaml"
    return p if p.exists() else None


def load_model_config() -> dict[str, Any]:
    """
    Load and merge model configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/fitwizard/model.yaml
    2. User override at ~/.fitwizard/model.yaml

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    for path in (get_bundled_yaml_path(), get_user_yaml_path()):
        if path is None:
            continue
        data = load_yaml_file(path)
        if isinstance(data, dict):
            config = deep_merge(config, data)
        elif data is not None:
            warnings.warn(
                f"fitwizard: {path} must contain a mapping at the top level; ignored",
                stacklevel=2,
            )

    return config
