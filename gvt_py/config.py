"""
Configuration file support for GVT.

Loads settings from ``~/.config/gvt/config.yaml`` (or
``$XDG_CONFIG_HOME/gvt/config.yaml``) and exposes them as a typed
dataclass that the CLI can merge with command-line flags.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from gvt_py.store.filesystem import DEFAULT_STORAGE_NAME

logger = logging.getLogger("gvt.config")


def default_config_path() -> Path:
    """Return the default configuration file path.

    Uses ``$XDG_CONFIG_HOME/gvt/config.yaml`` when set, otherwise
    falls back to ``~/.config/gvt/config.yaml``.
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "gvt" / "config.yaml"
    return Path.home() / ".config" / "gvt" / "config.yaml"


@dataclass
class GvtConfig:
    """Top-level configuration loaded from the YAML file."""

    storage_dir: str = DEFAULT_STORAGE_NAME
    working_dir: Optional[Path] = None
    verbose: bool = False
    history_last: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GvtConfig":
        """Construct a ``GvtConfig`` from a parsed YAML dictionary."""
        if not isinstance(data, dict):
            return cls()

        storage_dir = data.get("storage_dir", DEFAULT_STORAGE_NAME)
        if not isinstance(storage_dir, str) or not storage_dir or "/" in storage_dir:
            logger.warning("Ignoring invalid storage_dir: %s", storage_dir)
            storage_dir = DEFAULT_STORAGE_NAME

        working_dir = data.get("working_dir")
        history_last = data.get("history_last")
        if history_last is not None and (
            isinstance(history_last, bool) or not isinstance(history_last, int)
        ):
            logger.warning("Ignoring invalid history_last: %s", history_last)
            history_last = None

        return cls(
            storage_dir=storage_dir,
            working_dir=Path(working_dir).expanduser() if working_dir else None,
            verbose=bool(data.get("verbose", False)),
            history_last=history_last,
        )

    @classmethod
    def from_file(cls, path: Path) -> "GvtConfig":
        """Read a YAML file and return a ``GvtConfig``.

        Returns an empty default config on any error.
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f.read())
            if data is None:
                return cls()
            return cls.from_dict(data)
        except (IOError, yaml.YAMLError) as e:
            logger.error("Failed to load config from %s: %s", path, e)
            return cls()

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "GvtConfig":
        """Main entry point: load config from *config_path* or the default location.

        Returns an empty config if the file does not exist.
        """
        path = config_path or default_config_path()
        if not path.exists():
            return cls()
        return cls.from_file(path)
