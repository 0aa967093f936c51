# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Depth-first traversal of an object graph applying registered rules.

For each object the walker visits declared fields in declaration order:

1. rules on the field value (path ``field``)
2. element rules for every element (``field[i]``, or ``field[key]`` for
   mappings)
3. cascade into the nested object (``field.sub``) or into every element
   (``field[i].sub``)

Type-level rules of an object run after all of its fields. Every violation
is collected; nothing short-circuits except a ``None`` cascade target.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Set as AbstractSet
from datetime import datetime
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from ..exceptions import GraphDepthError
from ..groups import GroupSet, rule_applies
from .base import ValidationContext, ValidationViolation
from .constraints import ConstraintEvaluator
from .registry import FieldSpec, RuleRegistry, SchemaKey, TypeSchema
from .rules import Rule

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32


def read_value(obj: Any, name: str) -> Any:
    """Read *name* from an object or mapping; absent values read as ``None``."""

    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def join_path(prefix: str, name: str) -> str:
    if not prefix:
        return name
    if not name:
        return prefix
    if name.startswith("["):
        return f"{prefix}{name}"
    return f"{prefix}.{name}"


def _is_collection(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (Sequence, AbstractSet, Mapping))


def iter_elements(value: Any) -> Iterator[Tuple[str, Any]]:
    """Yield ``("[index]", element)`` pairs in iteration order."""

    if isinstance(value, Mapping):
        for key, element in value.items():
            yield f"[{key}]", element
    else:
        for index, element in enumerate(value):
            yield f"[{index}]", element


class _Pass:
    """Mutable state for a single validation pass."""

    __slots__ = ("active", "now", "violations")

    def __init__(self, active: GroupSet, now: datetime):
        self.active = active
        self.now = now
        self.violations: List[ValidationViolation] = []


class GraphWalker:
    def __init__(self, registry: RuleRegistry, evaluator: ConstraintEvaluator, *, max_depth: int = DEFAULT_MAX_DEPTH):
        self._registry = registry
        self._evaluator = evaluator
        self._max_depth = max_depth

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def walk(self, root: Any, active: GroupSet, *, schema: Optional[SchemaKey] = None) -> List[ValidationViolation]:
        """Validate *root* under the *active* groups and return all violations."""

        state = _Pass(active, self._evaluator.now())
        type_schema = self._lookup(root, schema)
        if type_schema is None:
            logger.debug("No declarations for %s; nothing to validate", type(root).__name__)
            return state.violations
        self._visit(state, root, type_schema, "", 0)
        return state.violations

    def check_value(self, value: Any, rules: Sequence[Rule], active: GroupSet, path: str) -> List[ValidationViolation]:
        """Apply *rules* to a standalone value (e.g. a function argument)."""

        state = _Pass(active, self._evaluator.now())
        self._apply(state, rules, value, None, path)
        return state.violations

    # ------------------------------------------------------------------
    # traversal
    # ------------------------------------------------------------------

    def _lookup(self, obj: Any, key: Optional[SchemaKey]) -> Optional[TypeSchema]:
        if key is not None:
            return self._registry.schema_for(key)
        return self._registry.resolve(obj)

    def _visit(self, state: _Pass, obj: Any, schema: TypeSchema, prefix: str, depth: int) -> None:
        if depth > self._max_depth:
            raise GraphDepthError(prefix, self._max_depth)

        for spec in schema.fields:
            value = read_value(obj, spec.name)
            path = join_path(prefix, spec.name)
            self._apply(state, spec.rules, value, obj, path)

            if value is None:
                continue
            if spec.elements and _is_collection(value):
                for suffix, element in iter_elements(value):
                    self._apply(state, spec.elements, element, obj, join_path(path, suffix))
            if spec.cascade:
                self._cascade(state, spec, value, path, depth)

        for rule in schema.checks:
            if not rule_applies(rule.groups, state.active):
                continue
            context = ValidationContext(path=prefix, groups=state.active, now=state.now)
            result = self._evaluator.evaluate(rule, obj, obj, context)
            if not result.valid:
                state.violations.append(
                    ValidationViolation(
                        path=join_path(prefix, result.path or ""),
                        message=result.message,
                        invalid_value=obj if not result.path else read_value(obj, result.path),
                        kind=rule.kind.value,
                    )
                )

    def _cascade(self, state: _Pass, spec: FieldSpec, value: Any, path: str, depth: int) -> None:
        if _is_collection(value) and not self._has_schema(value, spec):
            for suffix, element in iter_elements(value):
                if element is None:
                    continue
                nested = self._lookup(element, spec.schema)
                if nested is not None:
                    self._visit(state, element, nested, join_path(path, suffix), depth + 1)
            return

        nested = self._lookup(value, spec.schema)
        if nested is None:
            logger.debug("Cascade at '%s' found no declarations for %s", path, type(value).__name__)
            return
        self._visit(state, value, nested, path, depth + 1)

    def _has_schema(self, value: Any, spec: FieldSpec) -> bool:
        # A mapping validated by a named schema is a nested object, not a collection.
        if spec.schema is not None:
            return isinstance(value, Mapping)
        return self._registry.resolve(value) is not None

    def _apply(self, state: _Pass, rules: Sequence[Rule], value: Any, owner: Any, path: str) -> None:
        for rule in rules:
            if not rule_applies(rule.groups, state.active):
                continue
            context = ValidationContext(path=path, groups=state.active, now=state.now)
            result = self._evaluator.evaluate(rule, value, owner, context)
            if not result.valid:
                state.violations.append(
                    ValidationViolation(
                        path=join_path(path, result.path or ""),
                        message=result.message,
                        invalid_value=value,
                        kind=rule.kind.value,
                    )
                )


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "GraphWalker",
    "iter_elements",
    "join_path",
    "read_value",
]
