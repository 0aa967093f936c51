# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Result types shared by the evaluator, walker and validator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..groups import GroupSet

VALIDATION_FAILED_MESSAGE = "Validation failed"


@dataclass(frozen=True)
class ValidationContext:
    """Per-rule evaluation context handed to the evaluator."""

    path: str
    groups: GroupSet
    now: datetime


@dataclass(frozen=True)
class EvalResult:
    """Outcome of evaluating one rule.

    ``path`` optionally redirects the violation to a sub-path of the object
    that owns the rule (used by cross-field rules).
    """

    valid: bool
    message: str = ""
    path: Optional[str] = None

    @classmethod
    def ok(cls) -> "EvalResult":
        return _OK

    @classmethod
    def fail(cls, message: str = "", path: Optional[str] = None) -> "EvalResult":
        return cls(valid=False, message=message, path=path)


_OK = EvalResult(valid=True)


@dataclass(frozen=True)
class ValidationViolation:
    """A single failed rule, addressed by its path in the object graph."""

    path: str
    message: str
    invalid_value: Any = None
    kind: Optional[str] = None


@dataclass
class ValidationResult:
    """Ordered violations produced by one validation pass. Empty means valid."""

    violations: List[ValidationViolation] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations

    def paths(self) -> List[str]:
        return [v.path for v in self.violations]

    def error_map(self) -> Dict[str, str]:
        """Map violation paths to messages.

        When two violations share a path the later message wins; the key
        keeps the position of its first occurrence.
        """
        errors: Dict[str, str] = {}
        for violation in self.violations:
            errors[violation.path] = violation.message
        return errors

    def envelope(self) -> Dict[str, Any]:
        return {"message": VALIDATION_FAILED_MESSAGE, "errors": self.error_map()}


__all__ = [
    "VALIDATION_FAILED_MESSAGE",
    "ValidationContext",
    "EvalResult",
    "ValidationViolation",
    "ValidationResult",
]
