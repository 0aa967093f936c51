# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""formguard: group-scoped declarative validation for object graphs."""

from .decorator import validated
from .exceptions import (
    ConfigurationError,
    ConstraintViolationError,
    FormguardError,
    GraphDepthError,
    NotFoundError,
)
from .groups import DEFAULT, ON_CREATE, ON_UPDATE, effective_groups, rule_applies
from .runtime import build_error_response, build_not_found_response, get_registry, get_validator
from .schema import SchemaBundle, load_schema_file
from .validation import (
    RuleRegistry,
    ValidationResult,
    ValidationViolation,
    Validator,
    field,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT",
    "ON_CREATE",
    "ON_UPDATE",
    "ConfigurationError",
    "ConstraintViolationError",
    "FormguardError",
    "GraphDepthError",
    "NotFoundError",
    "RuleRegistry",
    "SchemaBundle",
    "ValidationResult",
    "ValidationViolation",
    "Validator",
    "build_error_response",
    "build_not_found_response",
    "effective_groups",
    "field",
    "get_registry",
    "get_validator",
    "load_schema_file",
    "rule_applies",
    "validated",
]
