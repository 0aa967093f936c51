# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Process-wide registry and validator instances."""

from __future__ import annotations

import threading
from typing import Optional

from ..validation import RuleRegistry, ValidationResult, Validator, default_registry

_LOCK = threading.Lock()
_VALIDATOR: Optional[Validator] = None


def get_registry() -> RuleRegistry:
    """Return the process-wide rule registry used by ``@validated``."""

    return default_registry


def get_validator() -> Validator:
    """Return the process-wide validator, creating it on first use.

    Creating it freezes :func:`get_registry`, so module-level declarations
    must be registered before the first validation call.
    """

    global _VALIDATOR
    if _VALIDATOR is None:
        with _LOCK:
            if _VALIDATOR is None:
                _VALIDATOR = Validator(default_registry)
    return _VALIDATOR


def format_validation_reason(target: str, validation: ValidationResult) -> str:
    """Produce a human-readable summary of validation failures."""

    lines = [f"Validation failed for '{target}':"]
    for violation in validation.violations:
        lines.append(f" - {violation.path or '<object>'}: {violation.message}")
    return "\n".join(lines)


__all__ = [
    "format_validation_reason",
    "get_registry",
    "get_validator",
]
