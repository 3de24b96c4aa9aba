"""
YAML configuration for the ginkou command-line tool.

Example ``~/.ginkou.yaml``::

    database: ~/japanese/sentences.db
    limit: 100
    tagger_args: -r /etc/mecabrc -d /usr/lib/mecab/dic/ipadic
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ginkou.bank import DEFAULT_LIMIT
from ginkou.exceptions import ConfigError
from ginkou.segmenter import DEFAULT_DELIMITER, encode_delimiter

DB_FILENAME = ".ginkoudb"
CONFIG_FILENAME = ".ginkou.yaml"

_KNOWN_KEYS = {"database", "tagger_args", "limit", "delimiter"}


def default_db_path() -> Path:
    """``~/.ginkoudb``, or ``.ginkoudb`` when there is no home directory."""
    try:
        return Path.home() / DB_FILENAME
    except RuntimeError:
        return Path(DB_FILENAME)


def default_config_path() -> Optional[Path]:
    try:
        return Path.home() / CONFIG_FILENAME
    except RuntimeError:
        return None


@dataclass(frozen=True)
class Config:
    """Settings shared by the ``add`` and ``get`` commands."""

    database: Path
    tagger_args: Optional[str] = None
    limit: int = DEFAULT_LIMIT
    delimiter: str = DEFAULT_DELIMITER

    def with_overrides(self, database: Optional[Path] = None) -> Config:
        """Copy of this config with command-line values applied."""
        if database is None:
            return self
        return replace(self, database=database)


def load_config(path: Union[str, Path, None] = None) -> Config:
    """Load configuration from ``path`` or the default location.

    Args:
        path: Explicit config file. When omitted, ``~/.ginkou.yaml`` is
            used if it exists, otherwise built-in defaults apply.

    Raises:
        ConfigError: If the file is malformed or has bad values
        FileNotFoundError: If an explicit ``path`` does not exist
    """
    if path is None:
        candidate = default_config_path()
        if candidate is None or not candidate.exists():
            return Config(database=default_db_path())
        path = candidate
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    return parse_config(_load_yaml_file(path))


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load YAML from a file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: YAML root must be a mapping")
    return data


def parse_config(data: Dict[str, Any]) -> Config:
    """Build a Config from a parsed YAML mapping."""
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigError(f"Unknown config key(s): {', '.join(sorted(unknown))}")

    database = data.get("database")
    if database is None:
        db_path = default_db_path()
    elif isinstance(database, str) and database:
        db_path = Path(database).expanduser()
    else:
        raise ConfigError("Field 'database' must be a non-empty string")

    tagger_args = data.get("tagger_args")
    if tagger_args is not None and not isinstance(tagger_args, str):
        raise ConfigError("Field 'tagger_args' must be a string")

    limit = data.get("limit", DEFAULT_LIMIT)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ConfigError("Field 'limit' must be a positive integer")

    delimiter = data.get("delimiter", DEFAULT_DELIMITER)
    if not isinstance(delimiter, str):
        raise ConfigError("Field 'delimiter' must be a string")
    try:
        encode_delimiter(delimiter)
    except ValueError as e:
        raise ConfigError(f"Field 'delimiter': {e}") from e

    return Config(
        database=db_path,
        tagger_args=tagger_args,
        limit=limit,
        delimiter=delimiter,
    )
