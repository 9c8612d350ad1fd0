"""Configuration loading from db.toml."""

import tomllib
from pathlib import Path

from schema_diff.config.models import CompareSettings, DatabaseProfile, DiffConfig


def load_diff_config(config_path: Path | None = None) -> DiffConfig:
    """Load profiles and comparison settings from a TOML file.

    Args:
        config_path: Path to db.toml (default: ``db.toml`` in the current
            working directory).

    Returns:
        DiffConfig with all profiles and the ``[compare]`` settings.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config format is invalid.
    """
    if config_path is None:
        config_path = Path.cwd() / "db.toml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Database config not found: {config_path}\n"
            f"Create db.toml with [profiles.<name>] entries, or pass URLs directly."
        )

    with open(config_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

    # Parse profiles
    profiles = {}
    for name, profile_data in data.get("profiles", {}).items():
        profiles[name] = DatabaseProfile(**profile_data)

    # Parse comparison settings
    compare = CompareSettings(**data.get("compare", {}))

    return DiffConfig(profiles=profiles, compare=compare)
