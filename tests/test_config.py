"""Unit tests for Config and related Pydantic models (cpp_scaffold.config).

Tests cover:
- DefaultsConfig defaults and validation
- Config defaults, database_url, compression level bounds
- save/load round-trip
- from_env
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from cpp_scaffold.config import Config, DefaultsConfig


class TestDefaultsConfig:
    @pytest.mark.unit
    def test_defaults(self):
        defaults = DefaultsConfig()
        assert defaults.language_standard == "23"
        assert defaults.build_tool_version == "3.20"
        assert defaults.include_tests is True
        assert defaults.include_examples is False

    @pytest.mark.unit
    def test_empty_standard_rejected(self):
        with pytest.raises(ValidationError):
            DefaultsConfig(language_standard="")


class TestConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = Config()
        assert config.database_path == Path("./projects.db")
        assert config.work_dir is None
        assert config.compression_level == 6
        assert isinstance(config.defaults, DefaultsConfig)

    @pytest.mark.unit
    def test_database_url(self, tmp_path: Path):
        config = Config(database_path=tmp_path / "p.db")
        assert config.database_url == f"sqlite:///{(tmp_path / 'p.db').as_posix()}"

    @pytest.mark.unit
    @pytest.mark.parametrize("level", [-1, 10])
    def test_compression_level_bounds(self, level):
        with pytest.raises(ValidationError):
            Config(compression_level=level)

    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        config = Config(
            database_path=tmp_path / "x.db",
            compression_level=9,
            defaults=DefaultsConfig(language_standard="17"),
        )
        path = config.save(tmp_path / "conf" / "config.json")
        assert path.exists()

        loaded = Config.load(path)
        assert loaded == config


class TestFromEnv:
    @pytest.mark.unit
    def test_no_env_gives_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        assert config == Config()

    @pytest.mark.unit
    def test_env_overrides(self, tmp_path: Path):
        env = {
            "CPP_SCAFFOLD_DB": str(tmp_path / "env.db"),
            "CPP_SCAFFOLD_WORK_DIR": str(tmp_path / "work"),
            "CPP_SCAFFOLD_CPP_STANDARD": "20",
            "CPP_SCAFFOLD_CMAKE_VERSION": "3.28",
            "CPP_SCAFFOLD_COMPRESSION_LEVEL": "1",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.database_path == tmp_path / "env.db"
        assert config.work_dir == tmp_path / "work"
        assert config.defaults.language_standard == "20"
        assert config.defaults.build_tool_version == "3.28"
        assert config.compression_level == 1

    @pytest.mark.unit
    def test_invalid_level_from_env(self):
        with patch.dict(os.environ, {"CPP_SCAFFOLD_COMPRESSION_LEVEL": "11"}, clear=True):
            with pytest.raises(ValidationError):
                Config.from_env()
