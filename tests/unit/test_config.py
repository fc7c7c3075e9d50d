"""Tests for the TOML configuration loader."""

import pathlib
from collections.abc import Iterator

import pytest

from rasterlab.exceptions import ConfigurationError
from rasterlab.utils import config


class TestConfig:
    """Configuration loading, validation and environment overrides."""

    @pytest.fixture(autouse=True)
    @staticmethod
    def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> Iterator[pathlib.Path]:
        """Point the loader at a per-test config file and reset its cache.

        Yields:
            pathlib.Path: Location of the (not yet written) config file.
        """
        cfg_path = tmp_path / "config.toml"
        monkeypatch.delenv("RASTERLAB_CONFIG_DIR", raising=False)
        monkeypatch.setenv("RASTERLAB_CONFIG_FILE", str(cfg_path))
        config._load_config.cache_clear()  # noqa: SLF001
        yield cfg_path
        config._load_config.cache_clear()  # noqa: SLF001

    def test_defaults_when_file_missing(self) -> None:  # noqa: PLR6301
        assert config.get_logging_level() == "INFO"
        assert config.get_default_split_percent() == 50
        assert config.get_histogram_background() == "white"

    def test_values_loaded_from_file(self, isolated_config: pathlib.Path) -> None:  # noqa: PLR6301
        isolated_config.write_text(
            """
[logging]
level = "DEBUG"

[preview]
split_percent = 25

[histogram]
canvas_background = "#202020"
"""
        )

        assert config.get_logging_level() == "DEBUG"
        assert config.get_default_split_percent() == 25
        assert config.get_histogram_background() == "#202020"

    def test_partial_sections_keep_defaults(self, isolated_config: pathlib.Path) -> None:  # noqa: PLR6301
        isolated_config.write_text("[preview]\nsplit_percent = 70\n")

        assert config.get_default_split_percent() == 70
        assert config.get_logging_level() == "INFO"
        assert config.get_histogram_background() == "white"

    def test_config_is_cached(self, isolated_config: pathlib.Path) -> None:  # noqa: PLR6301
        isolated_config.write_text("[preview]\nsplit_percent = 10\n")
        assert config.get_default_split_percent() == 10

        isolated_config.write_text("[preview]\nsplit_percent = 90\n")
        assert config.get_default_split_percent() == 10

        config._load_config.cache_clear()  # noqa: SLF001
        assert config.get_default_split_percent() == 90

    def test_invalid_toml(self, isolated_config: pathlib.Path) -> None:  # noqa: PLR6301
        isolated_config.write_text("[preview\nsplit_percent = ")

        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            config.get_default_split_percent()

    @pytest.mark.parametrize(
        "content",
        [
            '[preview]\nsplit_percent = "half"\n',
            "[preview]\nsplit_percent = true\n",
            "[preview]\nsplit_percent = 150\n",
            "[logging]\nlevel = 10\n",
            '[logging]\nlevel = "LOUD"\n',
            '[histogram]\ncanvas_background = "  "\n',
            'logging = "DEBUG"\n',
        ],
    )
    def test_schema_violations(self, isolated_config: pathlib.Path, content: str) -> None:  # noqa: PLR6301
        isolated_config.write_text(content)

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            config.get_logging_level()

    def test_config_path_precedence(self, monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:  # noqa: PLR6301
        assert config.get_config_path() == tmp_path / "config.toml"

        monkeypatch.delenv("RASTERLAB_CONFIG_FILE")
        monkeypatch.setenv("RASTERLAB_CONFIG_DIR", str(tmp_path / "conf"))
        assert config.get_config_path() == tmp_path / "conf" / "config.toml"

        monkeypatch.delenv("RASTERLAB_CONFIG_DIR")
        assert config.get_config_path() == config.CONFIG_FILE

    def test_project_root(self) -> None:  # noqa: PLR6301
        root = config.get_project_root()

        assert root.name == "rasterlab"
        assert (root / "utils" / "config.py").exists()

    def test_level_is_case_insensitive(self, isolated_config: pathlib.Path) -> None:  # noqa: PLR6301
        isolated_config.write_text('[logging]\nlevel = "warning"\n')

        assert config.get_logging_level() == "WARNING"

    def test_reload_config(self, isolated_config: pathlib.Path) -> None:  # noqa: PLR6301
        assert config.get_default_split_percent() == 50

        isolated_config.write_text("[preview]\nsplit_percent = 5\n")

        assert config.reload_config()["preview"]["split_percent"] == 5
        assert config.get_default_split_percent() == 5

    def test_get_config_returns_copy(self) -> None:  # noqa: PLR6301
        snapshot = config.get_config()
        snapshot["preview"]["split_percent"] = 99

        assert config.get_default_split_percent() == 50
        assert snapshot.keys() == config.DEFAULTS.keys()

    def test_error_lists_every_problem(self, isolated_config: pathlib.Path) -> None:  # noqa: PLR6301
        isolated_config.write_text('[logging]\nlevel = "LOUD"\n[preview]\nsplit_percent = -1\n')

        with pytest.raises(ConfigurationError) as exc_info:
            config.get_config()

        message = str(exc_info.value)
        assert "'logging.level'" in message
        assert "'preview.split_percent'" in message
