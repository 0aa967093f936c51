# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Validation package - rules, registry, evaluation and graph traversal.

This package is pure: validating never mutates the input and never raises
for invalid data. Violations are returned as a ValidationResult.
"""

from .base import EvalResult, ValidationContext, ValidationResult, ValidationViolation
from .constraints import ConstraintEvaluator
from .registry import FieldSpec, RuleRegistry, TypeSchema, default_registry, field
from .rules import (
    Rule,
    RuleKind,
    Temporal,
    cross_field,
    custom,
    email,
    fields_match,
    future,
    future_or_present,
    max_,
    min_,
    no_whitespace,
    not_blank,
    not_empty,
    past,
    past_or_present,
    pattern,
    range_,
    required,
    size,
    temporal,
)
from .validator import Validator
from .walker import GraphWalker

__all__ = [
    "ConstraintEvaluator",
    "EvalResult",
    "FieldSpec",
    "GraphWalker",
    "Rule",
    "RuleKind",
    "RuleRegistry",
    "Temporal",
    "TypeSchema",
    "ValidationContext",
    "ValidationResult",
    "ValidationViolation",
    "Validator",
    "cross_field",
    "custom",
    "default_registry",
    "email",
    "field",
    "fields_match",
    "future",
    "future_or_present",
    "max_",
    "min_",
    "no_whitespace",
    "not_blank",
    "not_empty",
    "past",
    "past_or_present",
    "pattern",
    "range_",
    "required",
    "size",
    "temporal",
]
