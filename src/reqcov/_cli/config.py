"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path


class ConfigError(Exception):
    """Error in reqcov configuration."""


@dataclass(slots=True, frozen=True)
class ReqcovConfig:
    """Configuration loaded from pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    collection: str | None = None
    project: str | None = None
    snapshot: Path | None = None
    batch_size: int | None = None
    max_workers: int | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _get_str(section: dict[str, object], key: str) -> str | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, str) or not value.strip():
        msg = f"Invalid [tool.reqcov].{key}: expected non-empty string"
        raise ConfigError(msg)
    return value


def _get_positive_int(section: dict[str, object], key: str) -> int | None:
    if key not in section:
        return None
    value = section[key]
    # bool is an int subclass, but `batch_size = true` is a mistake
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"Invalid [tool.reqcov].{key}: expected positive integer"
        raise ConfigError(msg)
    return value


def load_config(pyproject_path: Path) -> ReqcovConfig:
    """Load and validate [tool.reqcov] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed ReqcovConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("reqcov", {})
    if not section:
        return ReqcovConfig(project_root=project_root)

    snapshot_path: Path | None = None
    if "snapshot" in section:
        snapshot_value = section["snapshot"]
        if not isinstance(snapshot_value, str):
            msg = "Invalid [tool.reqcov].snapshot: expected string path"
            raise ConfigError(msg)
        snapshot_path = Path(snapshot_value)
        if not snapshot_path.is_absolute():
            snapshot_path = project_root / snapshot_path

    return ReqcovConfig(
        collection=_get_str(section, "collection"),
        project=_get_str(section, "project"),
        snapshot=snapshot_path,
        batch_size=_get_positive_int(section, "batch_size"),
        max_workers=_get_positive_int(section, "max_workers"),
        project_root=project_root,
    )


def get_config() -> ReqcovConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        ReqcovConfig (may be empty if no pyproject.toml or no [tool.reqcov] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return ReqcovConfig()
    return load_config(pyproject_path)
