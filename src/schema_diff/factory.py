"""Catalog reader factory.

Turns a catalog argument into a ``CatalogReader``.  The argument is either
a database URL (anything containing ``://``) or the name of a profile in
db.toml.
"""

from pathlib import Path
from urllib.parse import quote

from schema_diff.adapters.base import CatalogReader
from schema_diff.adapters.oracle import AsyncOracleCatalogReader
from schema_diff.adapters.postgres import AsyncPostgresCatalogReader
from schema_diff.config.loader import load_diff_config
from schema_diff.config.models import DatabaseProfile, DiffConfig, Provider


class ProfileNotFoundError(Exception):
    """Raised when a catalog argument is neither a URL nor a known profile."""

    pass


_READERS: dict[str, type] = {
    "oracle": AsyncOracleCatalogReader,
    "postgres": AsyncPostgresCatalogReader,
}


def resolve_url(profile: DatabaseProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Database profile from config

    Returns:
        Connection URL with password substituted
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


def detect_provider(url: str) -> Provider:
    """Infer the catalog provider from a URL scheme.

    Raises:
        ValueError: If the scheme is neither Oracle nor PostgreSQL.
    """
    scheme = url.split("://", 1)[0].lower()
    if scheme.startswith("oracle"):
        return "oracle"
    if scheme.startswith("postgres"):
        return "postgres"
    raise ValueError(f"Unsupported database URL scheme: {scheme!r}")


def resolve_target(target: str, config: DiffConfig | None) -> DatabaseProfile:
    """Resolve a CLI catalog argument into a profile.

    Raises:
        ProfileNotFoundError: If *target* is not a URL and names no profile.
    """
    if "://" in target:
        return DatabaseProfile(url=target)

    profiles = config.profiles if config is not None else {}
    if target not in profiles:
        available = ", ".join(profiles) or "none"
        raise ProfileNotFoundError(
            f"Profile '{target}' not found in db.toml.\n"
            f"Available profiles: {available}"
        )
    return profiles[target]


def get_reader(
    target: str,
    label: str,
    config: DiffConfig | None = None,
    pool_size: int = 8,
) -> CatalogReader:
    """Create a catalog reader for a URL or profile name.

    No connection is opened until the first query.

    Args:
        target: Database URL or db.toml profile name.
        label: Catalog name ("local" or "remote").
        config: Loaded configuration; only needed for profile names.
        pool_size: Connection pool size of the reader's engine.

    Returns:
        ``AsyncOracleCatalogReader`` or ``AsyncPostgresCatalogReader``.

    Example:
        reader = get_reader("oracle://scott:tiger@db/?service_name=ORCL", "local")
    """
    profile = resolve_target(target, config)
    url = resolve_url(profile)
    provider = profile.provider or detect_provider(url)
    reader_cls = _READERS[provider]
    return reader_cls(url, label=label, pool_size=pool_size)


def load_optional_config(config_path: Path | None = None) -> DiffConfig:
    """Load db.toml, or return defaults when it does not exist.

    An explicitly given *config_path* must exist.
    """
    try:
        return load_diff_config(config_path)
    except FileNotFoundError:
        if config_path is not None:
            raise
        return DiffConfig()
