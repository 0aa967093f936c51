# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Locating and reading schema files."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Iterator, Mapping, Optional, Union

import yaml

from ..exceptions import ConfigurationError
from ..validation.rules import Predicate
from .bundle import SchemaBundle

logger = logging.getLogger(__name__)

SCHEMA_ENV_VAR = "FORMGUARD_SCHEMA_FILE"
SCHEMA_BASENAMES = ("schema.yaml", "schema.yml", "schema.json")

PathLike = Union[str, os.PathLike]


def _config_home() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def iter_schema_candidates(cwd: Optional[Path] = None) -> Iterator[Path]:
    """Yield candidate schema paths in priority order.

    The ``FORMGUARD_SCHEMA_FILE`` override comes first, then
    ``$XDG_CONFIG_HOME/formguard/``, then the working directory.
    """

    override = os.getenv(SCHEMA_ENV_VAR)
    if override:
        yield Path(override).expanduser()

    config_dir = _config_home() / "formguard"
    for name in SCHEMA_BASENAMES:
        yield config_dir / name

    base = cwd or Path.cwd()
    for name in SCHEMA_BASENAMES:
        yield base / f"formguard.{name}"


def locate_schema_file(schema_path: Optional[PathLike] = None, *, cwd: Optional[Path] = None) -> Path:
    """Resolve the schema file to load.

    An explicit *schema_path* (or the environment override) wins. Otherwise
    exactly one default candidate must exist.
    """

    if schema_path is not None:
        path = Path(schema_path).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Schema file not found: {path}")
        return path

    override = os.getenv(SCHEMA_ENV_VAR)
    if override:
        path = Path(override).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"{SCHEMA_ENV_VAR} points to a missing file: {path}")
        return path

    found = [p for p in iter_schema_candidates(cwd) if p.is_file()]
    if not found:
        raise ConfigurationError(
            "No schema file found. Set FORMGUARD_SCHEMA_FILE or create "
            f"{_config_home() / 'formguard' / 'schema.yaml'}"
        )
    if len(found) > 1:
        raise ConfigurationError(
            "Multiple schema files found; keep exactly one: " + ", ".join(str(p) for p in found)
        )
    return found[0]


def read_schema_document(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to parse schema file {path}: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigurationError(f"Schema file {path} must contain a mapping at the top level")
    return document


def load_schema_file(
    schema_path: Optional[PathLike] = None,
    *,
    predicates: Optional[Mapping[str, Predicate]] = None,
) -> SchemaBundle:
    """Locate, parse and compile a schema file into a :class:`SchemaBundle`."""

    path = locate_schema_file(schema_path)
    logger.debug("Loading schema file %s", path)
    return SchemaBundle(read_schema_document(path), source=str(path), predicates=predicates or {})


__all__ = [
    "SCHEMA_ENV_VAR",
    "iter_schema_candidates",
    "load_schema_file",
    "locate_schema_file",
    "read_schema_document",
]
