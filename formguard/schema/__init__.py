# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Rule declarations loaded from YAML or JSON schema files."""

from .bundle import SchemaBundle, parse_rule
from .files import iter_schema_candidates, load_schema_file, locate_schema_file

__all__ = [
    "SchemaBundle",
    "iter_schema_candidates",
    "load_schema_file",
    "locate_schema_file",
    "parse_rule",
]
