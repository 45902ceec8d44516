"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from persona_sharpener.config import (
    AlignmentConfig,
    EngineConfig,
    find_config_file,
    load_config,
    save_default_config,
)


class TestDefaults:

    def test_default_values(self):
        config = EngineConfig()
        assert config.alignment.match_threshold == 70
        assert config.alignment.max_question_weight == 5
        assert config.validation_summary.misalignment_min_responses == 2
        assert config.validation_summary.max_misalignments == 3

    def test_frozen(self):
        config = EngineConfig()
        with pytest.raises(ValidationError):
            config.alignment.match_threshold = 10
        assert config.alignment.match_threshold == 70

    def test_match_threshold_bounds(self):
        with pytest.raises(ValidationError):
            AlignmentConfig(match_threshold=140)
        with pytest.raises(ValidationError):
            AlignmentConfig(max_question_weight=0)


class TestLoadConfig:
    """Tests for YAML loading and saving."""

    def test_partial_file_keeps_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("alignment:\n  match_threshold: 80\n", encoding="utf-8")

        config = load_config(path)
        assert config.alignment.match_threshold == 80
        assert config.alignment.max_question_weight == 5

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == EngineConfig()

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("alignment:\n  match_threshold: lots\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_save_default_roundtrip(self, tmp_path):
        path = tmp_path / "nested" / "persona-config.yaml"
        save_default_config(path)

        assert path.read_text(encoding="utf-8").startswith("# Persona Sharpener configuration")
        assert load_config(path) == EngineConfig()


class TestFindConfigFile:
    """Tests for the config search order."""

    @pytest.fixture(autouse=True)
    def isolated(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PERSONA_SHARPENER_CONFIG", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        monkeypatch.chdir(tmp_path)

    def test_nothing_found(self):
        assert find_config_file() is None

    def test_environment_variable_first(self, tmp_path, monkeypatch):
        env_file = tmp_path / "from-env.yaml"
        env_file.write_text("{}", encoding="utf-8")
        (tmp_path / "persona-config.yaml").write_text("{}", encoding="utf-8")
        monkeypatch.setenv("PERSONA_SHARPENER_CONFIG", str(env_file))

        assert find_config_file() == env_file

    def test_missing_environment_file_ignored(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PERSONA_SHARPENER_CONFIG", str(tmp_path / "missing.yaml"))
        (tmp_path / "persona-config.yml").write_text("{}", encoding="utf-8")

        assert find_config_file() == Path("persona-config.yml")

    def test_user_config(self, tmp_path):
        user_config = tmp_path / "home" / ".config" / "persona-sharpener" / "config.yaml"
        user_config.parent.mkdir(parents=True)
        user_config.write_text("{}", encoding="utf-8")

        assert find_config_file() == user_config

    def test_load_without_path_uses_defaults(self):
        assert load_config() == EngineConfig()

    def test_load_without_path_reads_found_file(self, tmp_path):
        (tmp_path / "persona-config.yaml").write_text(
            "validation_summary:\n  max_misalignments: 1\n", encoding="utf-8"
        )
        assert load_config().validation_summary.max_misalignments == 1
