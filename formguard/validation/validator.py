# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Entry point for validating object graphs and standalone values."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Iterable, Optional

from ..exceptions import ConfigurationError, ConstraintViolationError
from ..groups import effective_groups
from ..telemetry import get_tracer, record_validation_metrics
from .base import ValidationResult
from .constraints import ConstraintEvaluator
from .registry import RuleRegistry, SchemaKey, default_registry
from .rules import Rule, RuleKind
from .walker import DEFAULT_MAX_DEPTH, GraphWalker

logger = logging.getLogger(__name__)


def _configured_max_depth() -> int:
    raw = os.getenv("FORMGUARD_MAX_DEPTH", "")
    if not raw:
        return DEFAULT_MAX_DEPTH
    try:
        depth = int(raw)
    except ValueError:
        raise ConfigurationError(f"FORMGUARD_MAX_DEPTH must be an integer, got {raw!r}") from None
    if depth < 1:
        raise ConfigurationError(f"FORMGUARD_MAX_DEPTH must be positive, got {depth}")
    return depth


def _schema_name(obj: Any, schema: Optional[SchemaKey]) -> str:
    key = schema if schema is not None else type(obj)
    return key.__qualname__ if isinstance(key, type) else str(key)


class Validator:
    """Validates objects against a frozen :class:`RuleRegistry`.

    Constructing a validator freezes its registry and checks that every
    named custom predicate resolves, so configuration mistakes surface at
    startup rather than on the first request.
    """

    def __init__(
        self,
        registry: Optional[RuleRegistry] = None,
        *,
        evaluator: Optional[ConstraintEvaluator] = None,
        max_depth: Optional[int] = None,
    ):
        self.registry = registry if registry is not None else default_registry
        self.evaluator = evaluator or ConstraintEvaluator()
        self.registry.freeze()
        self._check_predicates()
        self._walker = GraphWalker(
            self.registry,
            self.evaluator,
            max_depth=max_depth if max_depth is not None else _configured_max_depth(),
        )

    def _check_predicates(self) -> None:
        for schema in self.registry.schemas():
            rules = list(schema.checks)
            for spec in schema.fields:
                rules.extend(spec.rules)
                rules.extend(spec.elements)
            for rule in rules:
                if rule.kind in (RuleKind.CUSTOM, RuleKind.CROSS_FIELD):
                    self.evaluator.resolve_predicate(rule)

    def validate(self, obj: Any, *groups: Any, schema: Optional[SchemaKey] = None) -> ValidationResult:
        """Validate *obj* under *groups* (Default when none are given).

        *schema* selects the declarations explicitly; otherwise they are
        resolved from the type of *obj*.
        """

        active = effective_groups(groups)
        name = _schema_name(obj, schema)
        started = time.perf_counter()
        with get_tracer().start_as_current_span(
            f"formguard.validate:{name}",
            attributes={"formguard.schema": name, "formguard.groups": sorted(str(g) for g in active)},
        ) as span:
            violations = self._walker.walk(obj, active, schema=schema)
            span.set_attribute("formguard.violations", len(violations))

        record_validation_metrics(name, violations, started)
        logger.debug(
            "Validated %s under groups %s: %d violation(s)",
            name,
            sorted(str(g) for g in active),
            len(violations),
        )
        return ValidationResult(violations)

    def validate_value(self, value: Any, rules: Iterable[Rule], *groups: Any, path: str = "") -> ValidationResult:
        """Validate a standalone value against *rules*."""

        active = effective_groups(groups)
        started = time.perf_counter()
        violations = self._walker.check_value(value, tuple(rules), active, path)
        record_validation_metrics(path or "<value>", violations, started)
        return ValidationResult(violations)

    def validate_or_raise(self, obj: Any, *groups: Any, schema: Optional[SchemaKey] = None) -> ValidationResult:
        """Like :meth:`validate` but raise :class:`ConstraintViolationError` on violations."""

        result = self.validate(obj, *groups, schema=schema)
        if not result.valid:
            raise ConstraintViolationError(result, target=_schema_name(obj, schema))
        return result


__all__ = ["Validator"]
