"""
Tests for the config module.
"""

import os
from pathlib import Path
from unittest.mock import patch

from gvt_py.config import GvtConfig, default_config_path


def test_default_config_path() -> None:
    """default_config_path falls back to ~/.config/gvt/config.yaml."""
    env = {"HOME": str(Path.home())}
    with patch.dict(os.environ, env, clear=True):
        result = default_config_path()
        assert result == Path.home() / ".config" / "gvt" / "config.yaml"


def test_default_config_path_xdg() -> None:
    """default_config_path respects $XDG_CONFIG_HOME."""
    with patch.dict(os.environ, {"XDG_CONFIG_HOME": "/custom/config"}):
        result = default_config_path()
        assert result == Path("/custom/config/gvt/config.yaml")


def test_missing_file_returns_defaults(tmp_path: Path) -> None:
    """Loading a non-existent file returns the default config."""
    cfg = GvtConfig.load(tmp_path / "nonexistent.yaml")
    assert cfg == GvtConfig()
    assert cfg.storage_dir == ".gvt"
    assert cfg.working_dir is None
    assert cfg.verbose is False
    assert cfg.history_last is None


def test_empty_file_returns_defaults(tmp_path: Path) -> None:
    p = tmp_path / "config.yaml"
    p.write_text("")
    assert GvtConfig.from_file(p) == GvtConfig()


def test_full_config_parsing(tmp_path: Path) -> None:
    """A fully-populated config file is parsed correctly."""
    p = tmp_path / "config.yaml"
    p.write_text("""\
storage_dir: ".versions"
working_dir: "~/notes"
verbose: true
history_last: 5
""")
    cfg = GvtConfig.from_file(p)
    assert cfg.storage_dir == ".versions"
    assert cfg.working_dir == Path.home() / "notes"
    assert cfg.verbose is True
    assert cfg.history_last == 5


def test_invalid_values_fall_back(tmp_path: Path) -> None:
    """Invalid entries are ignored in favour of the defaults."""
    p = tmp_path / "config.yaml"
    p.write_text("""\
storage_dir: "a/b"
history_last: "ten"
""")
    cfg = GvtConfig.from_file(p)
    assert cfg.storage_dir == ".gvt"
    assert cfg.history_last is None


def test_boolean_history_last_is_rejected() -> None:
    cfg = GvtConfig.from_dict({"history_last": True})
    assert cfg.history_last is None


def test_invalid_yaml_returns_defaults(tmp_path: Path) -> None:
    """Malformed YAML returns the default config instead of raising."""
    p = tmp_path / "config.yaml"
    p.write_text(": : : [invalid yaml")
    assert GvtConfig.from_file(p) == GvtConfig()


def test_from_dict_non_dict() -> None:
    """from_dict with a non-dict value returns defaults."""
    cfg = GvtConfig.from_dict("not a dict")  # type: ignore[arg-type]
    assert cfg == GvtConfig()


def test_load_uses_default_path(tmp_path: Path) -> None:
    """load() without arguments uses default_config_path()."""
    with patch("gvt_py.config.default_config_path", return_value=tmp_path / "nope.yaml"):
        cfg = GvtConfig.load()
    assert cfg == GvtConfig()
