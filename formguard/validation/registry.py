# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Static association of rules to types and fields.

Declarations are registered once at startup and the registry is frozen
before the first validation pass. Lookups return rules in declaration order.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, Optional, Set, Tuple

from ..exceptions import ConfigurationError
from .rules import Rule, RuleKind

logger = logging.getLogger(__name__)

SchemaKey = Hashable

_TYPE_LEVEL_KINDS = frozenset({RuleKind.CROSS_FIELD, RuleKind.CUSTOM})


@dataclass(frozen=True)
class FieldSpec:
    """Declaration for one field.

    ``rules`` apply to the field value itself, ``elements`` to every element
    of a sequence (or value of a mapping). ``cascade`` walks the nested
    object, or each element of a collection. ``schema`` names the registry
    key of the nested object when it cannot be derived from its type (e.g.
    plain mappings).
    """

    name: str
    rules: Tuple[Rule, ...] = ()
    elements: Tuple[Rule, ...] = ()
    cascade: bool = False
    schema: Optional[SchemaKey] = None


@dataclass(frozen=True)
class TypeSchema:
    key: SchemaKey
    fields: Tuple[FieldSpec, ...] = ()
    checks: Tuple[Rule, ...] = ()

    def field(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None


def field(
    name: str,
    *rules: Rule,
    elements: Iterable[Rule] = (),
    cascade: bool = False,
    schema: Optional[SchemaKey] = None,
) -> FieldSpec:
    """Declare the rules for a field."""

    return FieldSpec(
        name=name,
        rules=tuple(rule.bind(name) for rule in rules),
        elements=tuple(rule.bind(name) for rule in elements),
        cascade=cascade or schema is not None,
        schema=schema,
    )


def declared_fields(cls: type) -> Optional[Set[str]]:
    """Field names a class declares, or ``None`` if they cannot be determined."""

    if dataclasses.is_dataclass(cls):
        return {f.name for f in dataclasses.fields(cls)}

    names: Set[str] = set()
    for klass in cls.__mro__:
        names.update(getattr(klass, "__annotations__", {}) or {})
        slots = getattr(klass, "__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.update(slots)
    names.update(name for name, value in vars(cls).items() if isinstance(value, property))
    return names or None


class RuleRegistry:
    """Maps schema keys (classes or names) to their declarations."""

    def __init__(self) -> None:
        self._schemas: Dict[SchemaKey, TypeSchema] = {}
        self._frozen = False
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # registration
    # ------------------------------------------------------------------

    def register(self, key: SchemaKey, *fields: FieldSpec, checks: Iterable[Rule] = ()) -> TypeSchema:
        """Register declarations for *key*.

        *key* is a class (instances are resolved through their MRO) or any
        hashable name used for mapping payloads. Raises
        :class:`ConfigurationError` for invalid declarations.
        """

        checks = tuple(checks)
        with self._lock:
            if self._frozen:
                raise ConfigurationError(
                    f"Cannot register '{_key_name(key)}': registry is frozen once validation has started"
                )
            if key in self._schemas:
                raise ConfigurationError(f"Schema '{_key_name(key)}' is already registered")

            self._check_fields(key, fields)
            for rule in checks:
                if rule.kind not in _TYPE_LEVEL_KINDS:
                    raise ConfigurationError(
                        f"Type-level rule on '{_key_name(key)}' must be a cross-field or custom rule, "
                        f"got '{rule.kind.value}'"
                    )

            schema = TypeSchema(key=key, fields=tuple(fields), checks=tuple(rule.bind(None) for rule in checks))
            self._schemas[key] = schema

        logger.debug(
            "Registered schema '%s' with %d field(s) and %d type-level rule(s)",
            _key_name(key),
            len(schema.fields),
            len(schema.checks),
        )
        return schema

    def _check_fields(self, key: SchemaKey, fields: Tuple[FieldSpec, ...]) -> None:
        seen: Set[str] = set()
        for spec in fields:
            if not isinstance(spec, FieldSpec):
                raise ConfigurationError(
                    f"Schema '{_key_name(key)}' expects field() declarations, got {spec!r}"
                )
            if not spec.name:
                raise ConfigurationError(f"Schema '{_key_name(key)}' declares a rule without a target field")
            if spec.name in seen:
                raise ConfigurationError(f"Field '{spec.name}' is declared twice on '{_key_name(key)}'")
            seen.add(spec.name)
            for rule in spec.rules + spec.elements:
                if rule.kind is RuleKind.CROSS_FIELD:
                    raise ConfigurationError(
                        f"Cross-field rule on '{_key_name(key)}.{spec.name}' must be declared at type level"
                    )

        if isinstance(key, type):
            known = declared_fields(key)
            if known is not None:
                unknown = sorted(seen - known)
                if unknown:
                    logger.error(
                        "Declarations for '%s' reference unknown fields: %s",
                        key.__qualname__,
                        ", ".join(unknown),
                    )
                    raise ConfigurationError(
                        f"Declarations for '{key.__qualname__}' reference undefined field(s): {unknown}"
                    )

    def freeze(self) -> None:
        with self._lock:
            if not self._frozen:
                logger.debug("Freezing rule registry with %d schema(s)", len(self._schemas))
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # lookups
    # ------------------------------------------------------------------

    def __contains__(self, key: SchemaKey) -> bool:
        return key in self._schemas

    def keys(self) -> Tuple[SchemaKey, ...]:
        return tuple(self._schemas)

    def schemas(self) -> Tuple[TypeSchema, ...]:
        return tuple(self._schemas.values())

    def schema_for(self, key: SchemaKey) -> Optional[TypeSchema]:
        return self._schemas.get(key)

    def resolve(self, obj: Any) -> Optional[TypeSchema]:
        """Schema registered for the type of *obj* or its closest base class."""

        for klass in type(obj).__mro__:
            schema = self._schemas.get(klass)
            if schema is not None:
                return schema
        return None

    def rules_for(self, key: SchemaKey, field_name: str) -> Tuple[Rule, ...]:
        schema = self._schemas.get(key)
        spec = schema.field(field_name) if schema else None
        return spec.rules if spec else ()

    def element_rules_for(self, key: SchemaKey, field_name: str) -> Tuple[Rule, ...]:
        schema = self._schemas.get(key)
        spec = schema.field(field_name) if schema else None
        return spec.elements if spec else ()

    def type_rules_for(self, key: SchemaKey) -> Tuple[Rule, ...]:
        schema = self._schemas.get(key)
        return schema.checks if schema else ()


def _key_name(key: SchemaKey) -> str:
    if isinstance(key, type):
        return key.__qualname__
    return str(key)


default_registry = RuleRegistry()


__all__ = [
    "FieldSpec",
    "TypeSchema",
    "RuleRegistry",
    "SchemaKey",
    "field",
    "declared_fields",
    "default_registry",
]
