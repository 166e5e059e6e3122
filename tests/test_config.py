"""Tests for configuration loading and validation."""

import os

import pytest

from struct_depth.config import AnalysisConfig, load_config
from struct_depth.exceptions import InvalidConfigError, StructDepthError


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """No global or project config files, no STRUCT_DEPTH_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("STRUCT_DEPTH_"):
            monkeypatch.delenv(key)
    return tmp_path


class TestDefaults:
    """Test default values and validation."""

    def test_defaults(self):
        config = load_config()
        assert config == AnalysisConfig()
        assert config.follow_submodules is True
        assert config.skip_files_with_syntax_errors is True
        assert "target" in config.exclude_dirs

    def test_max_file_size_bytes(self):
        assert AnalysisConfig(max_file_size_mb=1.0).max_file_size_bytes == 1024 * 1024

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"workers": 0},
            {"max_file_size_mb": 0},
            {"max_files": 0},
            {"clone_depth": -1},
            {"verbosity": "loud"},
            {"extra_builtin_types": ["Wrapper<T>"]},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            AnalysisConfig(**kwargs)


class TestSources:
    """Test merging of config files, environment and overrides."""

    def test_project_config(self, isolated):
        (isolated / "struct-depth.toml").write_text("workers = 3\n")
        assert load_config().workers == 3

    def test_global_config(self, isolated):
        (isolated / "home" / ".struct-depth.toml").write_text("parallel = false\n")
        assert load_config().parallel is False

    def test_section_table(self, isolated):
        path = isolated / "custom.toml"
        path.write_text('[struct-depth]\nextra_builtin_types = ["Pubkey"]\n')
        assert load_config(config_file=path).extra_builtin_types == ["Pubkey"]

    def test_explicit_file_overrides_project(self, isolated):
        (isolated / "struct-depth.toml").write_text("workers = 3\n")
        path = isolated / "custom.toml"
        path.write_text("workers = 5\n")
        assert load_config(config_file=path).workers == 5

    def test_missing_explicit_file(self, isolated):
        with pytest.raises(StructDepthError, match="not found"):
            load_config(config_file=isolated / "nope.toml")

    def test_invalid_toml(self, isolated):
        path = isolated / "broken.toml"
        path.write_text("workers = = 3\n")
        with pytest.raises(StructDepthError, match="Invalid config file"):
            load_config(config_file=path)

    def test_unknown_key(self, isolated):
        path = isolated / "unknown.toml"
        path.write_text("colour = 'blue'\n")
        with pytest.raises(StructDepthError, match="Invalid configuration"):
            load_config(config_file=path)

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("STRUCT_DEPTH_PARALLEL", "off")
        monkeypatch.setenv("STRUCT_DEPTH_MAX_FILES", "50")
        config = load_config()
        assert config.parallel is False
        assert config.max_files == 50

    def test_bad_environment_value(self, monkeypatch):
        monkeypatch.setenv("STRUCT_DEPTH_PARALLEL", "maybe")
        with pytest.raises(InvalidConfigError, match="STRUCT_DEPTH_PARALLEL"):
            load_config()

    def test_environment_overridden_by_kwargs(self, monkeypatch):
        monkeypatch.setenv("STRUCT_DEPTH_WORKERS", "2")
        assert load_config(workers=6).workers == 6

    def test_none_overrides_ignored(self, isolated):
        (isolated / "struct-depth.toml").write_text("workers = 3\n")
        assert load_config(workers=None).workers == 3

    def test_verbose_and_quiet_fold_into_verbosity(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False).verbosity == "normal"
