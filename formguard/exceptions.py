# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Exception hierarchy for formguard."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .validation.base import ValidationResult


class FormguardError(Exception):
    """Base class for every error raised by formguard."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(FormguardError):
    """A rule declaration or schema file is malformed.

    Raised at declaration/load time, never while validating input.
    """


class GraphDepthError(FormguardError):
    """Traversal went deeper than the configured limit (usually a cycle)."""

    def __init__(self, path: str, max_depth: int):
        super().__init__(
            f"Object graph exceeds maximum depth {max_depth} at '{path or '<root>'}'; "
            "cyclic graphs are not supported"
        )
        self.path = path
        self.max_depth = max_depth


class ConstraintViolationError(FormguardError):
    """Raised by opt-in helpers when a validation pass reports violations.

    The engine itself never raises for invalid input; this wraps the
    :class:`~formguard.validation.base.ValidationResult` for callers that
    prefer exceptions (the ``@validated`` decorator, ``validate_or_raise``).
    """

    def __init__(self, result: "ValidationResult", *, target: Optional[str] = None):
        self.result = result
        self.target = target
        lines = [f"Validation failed for '{target}':" if target else "Validation failed:"]
        for violation in result.violations:
            lines.append(f" - {violation.path or '<object>'}: {violation.message}")
        super().__init__("\n".join(lines))

    @property
    def violations(self):
        return self.result.violations


class NotFoundError(FormguardError):
    """An entity looked up by identifier does not exist."""

    def __init__(self, entity: str, identifier: Any):
        super().__init__(f"{entity} not found: {identifier}")
        self.entity = entity
        self.identifier = identifier


__all__ = [
    "FormguardError",
    "ConfigurationError",
    "GraphDepthError",
    "ConstraintViolationError",
    "NotFoundError",
]
