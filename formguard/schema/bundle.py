# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Schema bundle: rule declarations described as data (YAML/JSON).

Example::

    schemas:
      Address:
        fields:
          city:
            - {kind: notBlank, groups: [OnCreate], message: city is required}
            - {kind: size, max: 50, groups: [OnCreate, OnUpdate]}
      User:
        fields:
          address:
            rules: [{kind: required, groups: [OnCreate]}]
            schema: Address
          roles:
            elements: [{kind: notBlank, message: role cannot be blank}]
        checks:
          - {kind: fieldsMatch, first: password, second: confirmPassword}

Schemas are registered under their names, so payloads are validated with
``validator.validate(payload, "OnCreate", schema="User")``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..exceptions import ConfigurationError
from ..validation import rules as r
from ..validation.constraints import DEFAULT_PREDICATES, ConstraintEvaluator
from ..validation.registry import FieldSpec, RuleRegistry
from ..validation.registry import field as declare_field
from ..validation.rules import Predicate, Rule
from ..validation.validator import Validator

logger = logging.getLogger(__name__)

_COMMON_KEYS = frozenset({"kind", "groups", "message"})
_FIELD_KEYS = frozenset({"rules", "elements", "cascade", "schema"})
_SCHEMA_KEYS = frozenset({"fields", "checks"})


def _no_params(factory: Callable[..., Rule]) -> Callable[..., Rule]:
    return lambda groups, message, _predicates: factory(groups=groups, message=message)


_FACTORIES: Dict[str, tuple] = {
    "required": (frozenset(), _no_params(r.required)),
    "notEmpty": (frozenset(), _no_params(r.not_empty)),
    "notBlank": (frozenset(), _no_params(r.not_blank)),
    "email": (frozenset(), _no_params(r.email)),
    "past": (frozenset(), _no_params(r.past)),
    "future": (frozenset(), _no_params(r.future)),
    "pastOrPresent": (frozenset(), _no_params(r.past_or_present)),
    "futureOrPresent": (frozenset(), _no_params(r.future_or_present)),
    "size": (
        frozenset({"min", "max"}),
        lambda groups, message, _p, min=0, max=None: r.size(min, max, groups=groups, message=message),
    ),
    "range": (
        frozenset({"min", "max"}),
        lambda groups, message, _p, min=None, max=None: r.range_(min, max, groups=groups, message=message),
    ),
    "min": (
        frozenset({"value"}),
        lambda groups, message, _p, value=None: r.min_(value, groups=groups, message=message),
    ),
    "max": (
        frozenset({"value"}),
        lambda groups, message, _p, value=None: r.max_(value, groups=groups, message=message),
    ),
    "pattern": (
        frozenset({"regexp"}),
        lambda groups, message, _p, regexp=None: r.pattern(regexp, groups=groups, message=message),
    ),
    "custom": (
        frozenset({"predicate"}),
        lambda groups, message, predicates, predicate=None: r.custom(
            _lookup_predicate(predicates, predicate), name=predicate, groups=groups, message=message
        ),
    ),
    "fieldsMatch": (
        frozenset({"first", "second", "reportOn"}),
        lambda groups, message, _p, first=None, second=None, reportOn=None: r.fields_match(
            first, second, report_on=reportOn, groups=groups, message=message
        ),
    ),
}

_REQUIRED_PARAMS = {
    "min": ("value",),
    "max": ("value",),
    "pattern": ("regexp",),
    "custom": ("predicate",),
    "fieldsMatch": ("first", "second"),
}


def _lookup_predicate(predicates: Mapping[str, Predicate], name: Any) -> Predicate:
    try:
        return predicates[name]
    except (KeyError, TypeError):
        raise ConfigurationError(
            f"Unknown custom predicate {name!r}. Known predicates: {sorted(predicates)}"
        ) from None


def parse_rule(entry: Any, where: str, predicates: Mapping[str, Predicate]) -> Rule:
    """Build a :class:`Rule` from its data description."""

    if isinstance(entry, str):
        entry = {"kind": entry}
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"{where}: rule must be a mapping or a kind name, got {entry!r}")

    kind = entry.get("kind")
    if kind not in _FACTORIES:
        raise ConfigurationError(
            f"{where}: unknown rule kind {kind!r}. Valid kinds: {sorted(_FACTORIES)}"
        )

    allowed, factory = _FACTORIES[kind]
    params = {k: v for k, v in entry.items() if k not in _COMMON_KEYS}
    unknown = sorted(set(params) - allowed)
    if unknown:
        raise ConfigurationError(
            f"{where}: unknown operator(s) {unknown} for rule '{kind}'. "
            f"Valid parameters: {sorted(allowed) or 'none'}"
        )
    missing = [name for name in _REQUIRED_PARAMS.get(kind, ()) if params.get(name) is None]
    if missing:
        raise ConfigurationError(f"{where}: rule '{kind}' requires parameter(s) {missing}")

    try:
        return factory(entry.get("groups"), entry.get("message"), predicates, **params)
    except ConfigurationError as exc:
        raise ConfigurationError(f"{where}: {exc.message}") from exc


def _parse_rules(entries: Any, where: str, predicates: Mapping[str, Predicate]) -> List[Rule]:
    if entries is None:
        return []
    if not isinstance(entries, list):
        entries = [entries]
    return [parse_rule(entry, f"{where}[{index}]", predicates) for index, entry in enumerate(entries)]


@dataclass
class SchemaBundle:
    """A structured representation of a schema document."""

    raw_bundle: Dict[str, Any]
    source: str = "<memory>"
    predicates: Mapping[str, Predicate] = field(default_factory=dict, repr=False)
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    registry: RuleRegistry = field(default_factory=RuleRegistry, repr=False)

    def __post_init__(self):
        """Parse the raw document into the registry."""

        if not isinstance(self.raw_bundle, Mapping):
            raise ConfigurationError(f"{self.source}: schema document must be a mapping")
        self.predicates = {**DEFAULT_PREDICATES, **dict(self.predicates)}

        schemas = self.raw_bundle.get("schemas")
        if not isinstance(schemas, Mapping) or not schemas:
            raise ConfigurationError(f"{self.source}: 'schemas' must be a non-empty mapping")
        logger.debug("Processing %d schema(s) from %s", len(schemas), self.source)

        references: List[tuple] = []
        for name, body in schemas.items():
            body = body or {}
            if not isinstance(body, Mapping):
                raise ConfigurationError(f"{self.source}: schema '{name}' must be a mapping")
            unknown = sorted(set(body) - _SCHEMA_KEYS)
            if unknown:
                raise ConfigurationError(f"{self.source}: schema '{name}' has unknown key(s) {unknown}")

            fields = []
            for field_name, spec in (body.get("fields") or {}).items():
                fields.append(self._parse_field(name, str(field_name), spec))
                if fields[-1].schema is not None:
                    references.append((name, field_name, fields[-1].schema))

            checks = _parse_rules(body.get("checks"), f"{self.source}: {name}.checks", self.predicates)
            self.registry.register(name, *fields, checks=checks)

        for owner, field_name, target in references:
            if target not in self.registry:
                logger.error("Schema '%s.%s' cascades into undeclared schema '%s'", owner, field_name, target)
                raise ConfigurationError(
                    f"{self.source}: '{owner}.{field_name}' references undeclared schema '{target}'"
                )

    def _parse_field(self, schema_name: str, field_name: str, spec: Any) -> FieldSpec:
        where = f"{self.source}: {schema_name}.{field_name}"
        if not isinstance(spec, Mapping):
            return declare_field(field_name, *_parse_rules(spec, where, self.predicates))

        unknown = sorted(set(spec) - _FIELD_KEYS)
        if unknown:
            raise ConfigurationError(f"{where}: unknown key(s) {unknown}. Valid keys: {sorted(_FIELD_KEYS)}")
        if spec.get("cascade") and spec.get("schema") is None:
            raise ConfigurationError(f"{where}: 'cascade' requires a 'schema' name")

        return declare_field(
            field_name,
            *_parse_rules(spec.get("rules"), where, self.predicates),
            elements=_parse_rules(spec.get("elements"), f"{where}.elements", self.predicates),
            cascade=bool(spec.get("cascade")),
            schema=spec.get("schema"),
        )

    @property
    def schema_names(self) -> List[str]:
        return [str(key) for key in self.registry.keys()]

    def validator(self, *, evaluator: Optional[ConstraintEvaluator] = None, max_depth: Optional[int] = None) -> Validator:
        """Build a :class:`Validator` over this bundle's registry."""

        if evaluator is None:
            evaluator = ConstraintEvaluator(predicates=self.predicates)
        return Validator(self.registry, evaluator=evaluator, max_depth=max_depth)


__all__ = ["SchemaBundle", "parse_rule"]
