"""Tests for the configuration module."""

from pathlib import Path

import pytest

from reqcov._cli.config import (
    ConfigError,
    ReqcovConfig,
    find_pyproject_toml,
    get_config,
    load_config,
)


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in current directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        result = find_pyproject_toml(tmp_path)

        assert result == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in parent directory."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        subdir = tmp_path / "reports" / "nightly"
        subdir.mkdir(parents=True)

        result = find_pyproject_toml(subdir)

        assert result == pyproject


class TestLoadConfig:
    """Tests for loading [tool.reqcov]."""

    def test_full_configuration(self, tmp_path: Path) -> None:
        """Should parse full configuration with all fields."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(
            """
[tool.reqcov]
collection = "http://tfs.local:8080/tfs/DefaultCollection"
project = "Fabrikam"
snapshot = "exports/snapshot.toml"
batch_size = 50
max_workers = 4
""",
        )

        config = load_config(pyproject)

        assert config.collection == "http://tfs.local:8080/tfs/DefaultCollection"
        assert config.project == "Fabrikam"
        assert config.snapshot == tmp_path / "exports/snapshot.toml"
        assert config.batch_size == 50
        assert config.max_workers == 4
        assert config.project_root == tmp_path

    def test_absolute_snapshot_path_kept(self, tmp_path: Path) -> None:
        snapshot = tmp_path / "elsewhere" / "snapshot.toml"
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(f'[tool.reqcov]\nsnapshot = "{snapshot.as_posix()}"\n')

        config = load_config(pyproject)

        assert config.snapshot == snapshot

    def test_no_tool_reqcov_section(self, tmp_path: Path) -> None:
        """Should return empty config when no [tool.reqcov] section."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("[project]\nname = 'test'\n")

        config = load_config(pyproject)

        assert config == ReqcovConfig(project_root=tmp_path)

    def test_get_config_without_pyproject(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("reqcov._cli.config.find_pyproject_toml", lambda: None)

        assert get_config() == ReqcovConfig()


class TestLoadConfigErrors:
    """Tests for configuration error handling."""

    def test_invalid_toml_raises_error(self, tmp_path: Path) -> None:
        """Should raise ConfigError for invalid TOML."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text("invalid toml [[[")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)

    @pytest.mark.parametrize(
        ("line", "message"),
        [
            ("collection = 1", r"collection: expected non-empty string"),
            ('project = ""', r"project: expected non-empty string"),
            ("snapshot = 3", r"snapshot: expected string path"),
            ("batch_size = 0", r"batch_size: expected positive integer"),
            ('max_workers = "4"', r"max_workers: expected positive integer"),
            ("max_workers = true", r"max_workers: expected positive integer"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, line: str, message: str) -> None:
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text(f"[tool.reqcov]\n{line}\n")

        with pytest.raises(ConfigError, match=message):
            load_config(pyproject)

    def test_frozen(self) -> None:
        """Should be frozen (immutable)."""
        config = ReqcovConfig()

        with pytest.raises(AttributeError):
            config.project = "Fabrikam"  # type: ignore[misc]
