# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Declarative rules and the factories used to declare them.

Rules are immutable. A factory returns an unbound rule (``target`` is
``None``); the registry binds it to a field or type when it is registered.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from numbers import Real
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

from ..exceptions import ConfigurationError
from ..groups import GroupSet, normalize_groups
from .base import EvalResult


class RuleKind(str, Enum):
    REQUIRED = "required"
    NOT_EMPTY = "notEmpty"
    NOT_BLANK = "notBlank"
    SIZE = "size"
    RANGE = "range"
    PATTERN = "pattern"
    TEMPORAL = "temporal"
    EMAIL = "email"
    CROSS_FIELD = "crossField"
    CUSTOM = "custom"


class Temporal(str, Enum):
    PAST = "past"
    FUTURE = "future"
    PAST_OR_PRESENT = "pastOrPresent"
    FUTURE_OR_PRESENT = "futureOrPresent"


# Kinds that reject a missing value; every other kind ignores ``None``.
NULL_REJECTING_KINDS = frozenset({RuleKind.REQUIRED, RuleKind.NOT_EMPTY, RuleKind.NOT_BLANK})


@dataclass(frozen=True)
class Rule:
    """A single declarative constraint."""

    kind: RuleKind
    target: Optional[str] = None
    groups: GroupSet = frozenset()
    params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    message: str = ""

    def bind(self, target: Optional[str]) -> "Rule":
        """Return a copy of this rule attached to *target*."""
        return replace(self, target=target)

    def __repr__(self) -> str:
        groups = sorted(str(g) for g in self.groups)
        return f"Rule(kind={self.kind.value!r}, target={self.target!r}, groups={groups})"


def _make(kind: RuleKind, groups: Any, message: Optional[str], **params: Any) -> Rule:
    return Rule(
        kind=kind,
        groups=normalize_groups(groups),
        params=MappingProxyType(dict(params)),
        message=message or "",
    )


def _check_bounds(kind: str, low: Any, high: Any) -> None:
    for name, bound in (("min", low), ("max", high)):
        if bound is not None and (isinstance(bound, bool) or not isinstance(bound, Real)):
            raise ConfigurationError(f"{kind}: '{name}' must be a number, got {bound!r}")
    if low is not None and high is not None and low > high:
        raise ConfigurationError(f"{kind}: min ({low}) is greater than max ({high})")


# ---------------------------------------------------------------------------
# Presence rules
# ---------------------------------------------------------------------------


def required(*, groups: Any = None, message: Optional[str] = None) -> Rule:
    """Value must not be ``None``."""
    return _make(RuleKind.REQUIRED, groups, message)


def not_empty(*, groups: Any = None, message: Optional[str] = None) -> Rule:
    """Value must not be ``None`` and must have a non-zero length."""
    return _make(RuleKind.NOT_EMPTY, groups, message)


def not_blank(*, groups: Any = None, message: Optional[str] = None) -> Rule:
    """Value must not be ``None`` and must contain a non-whitespace character."""
    return _make(RuleKind.NOT_BLANK, groups, message)


# ---------------------------------------------------------------------------
# Format / shape rules (ignore ``None``)
# ---------------------------------------------------------------------------


def size(min: int = 0, max: Optional[int] = None, *, groups: Any = None, message: Optional[str] = None) -> Rule:
    """Length of a string or collection must fall within ``[min, max]``."""
    _check_bounds("size", min, max)
    if min < 0:
        raise ConfigurationError(f"size: min must not be negative, got {min}")
    return _make(RuleKind.SIZE, groups, message, min=min, max=max)


def range_(min: Optional[Real] = None, max: Optional[Real] = None, *, groups: Any = None,
           message: Optional[str] = None) -> Rule:
    """Numeric value must fall within ``[min, max]``; either bound may be omitted."""
    if min is None and max is None:
        raise ConfigurationError("range: at least one of 'min' or 'max' is required")
    _check_bounds("range", min, max)
    return _make(RuleKind.RANGE, groups, message, min=min, max=max)


def min_(value: Real, *, groups: Any = None, message: Optional[str] = None) -> Rule:
    return range_(min=value, groups=groups, message=message)


def max_(value: Real, *, groups: Any = None, message: Optional[str] = None) -> Rule:
    return range_(max=value, groups=groups, message=message)


def pattern(regexp: str, *, flags: int = 0, groups: Any = None, message: Optional[str] = None) -> Rule:
    """String value must match *regexp* in full."""
    try:
        compiled = re.compile(regexp, flags)
    except (re.error, TypeError) as exc:
        raise ConfigurationError(f"Invalid regex pattern {regexp!r}: {exc}") from exc
    return _make(RuleKind.PATTERN, groups, message, regexp=regexp, compiled=compiled)


def email(*, groups: Any = None, message: Optional[str] = None) -> Rule:
    return _make(RuleKind.EMAIL, groups, message)


def temporal(mode: Union[Temporal, str], *, groups: Any = None, message: Optional[str] = None) -> Rule:
    try:
        mode = Temporal(mode)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown temporal mode {mode!r}") from exc
    return _make(RuleKind.TEMPORAL, groups, message, mode=mode)


def past(*, groups: Any = None, message: Optional[str] = None) -> Rule:
    return temporal(Temporal.PAST, groups=groups, message=message)


def future(*, groups: Any = None, message: Optional[str] = None) -> Rule:
    return temporal(Temporal.FUTURE, groups=groups, message=message)


def past_or_present(*, groups: Any = None, message: Optional[str] = None) -> Rule:
    return temporal(Temporal.PAST_OR_PRESENT, groups=groups, message=message)


def future_or_present(*, groups: Any = None, message: Optional[str] = None) -> Rule:
    return temporal(Temporal.FUTURE_OR_PRESENT, groups=groups, message=message)


# ---------------------------------------------------------------------------
# Predicate rules
# ---------------------------------------------------------------------------

Predicate = Callable[[Any], Union[bool, EvalResult]]


def custom(predicate: Union[Predicate, str], *, name: Optional[str] = None, groups: Any = None,
           message: Optional[str] = None) -> Rule:
    """Field rule backed by a predicate over the field value.

    *predicate* is either a callable or the name of a predicate registered
    with the evaluator. ``None`` is passed through to the predicate; by
    convention predicates return ``True`` for ``None`` and leave presence
    to a :func:`required`-style rule.
    """
    if isinstance(predicate, str):
        return _make(RuleKind.CUSTOM, groups, message, name=predicate, predicate=None)
    if not callable(predicate):
        raise ConfigurationError(f"custom: predicate must be callable or a name, got {predicate!r}")
    return _make(
        RuleKind.CUSTOM,
        groups,
        message,
        name=name or getattr(predicate, "__name__", "custom"),
        predicate=predicate,
    )


def cross_field(predicate: Predicate, *, name: Optional[str] = None, groups: Any = None,
                message: Optional[str] = None) -> Rule:
    """Type-level rule backed by a predicate over the whole owner object.

    The predicate may return an :class:`EvalResult` with ``path`` set to
    report the violation against a specific field instead of the object.
    """
    if not callable(predicate):
        raise ConfigurationError(f"cross_field: predicate must be callable, got {predicate!r}")
    return _make(
        RuleKind.CROSS_FIELD,
        groups,
        message,
        name=name or getattr(predicate, "__name__", "crossField"),
        predicate=predicate,
    )


def no_whitespace(value: Any) -> bool:
    """True unless *value* is a string containing whitespace."""
    if value is None:
        return True
    return not any(ch.isspace() for ch in str(value))


def _read(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def fields_match(first: str, second: str, *, report_on: Optional[str] = None, groups: Any = None,
                 message: Optional[str] = None) -> Rule:
    """Cross-field rule requiring two fields of the same object to be equal.

    Missing values on either side pass; presence belongs to other rules.
    A mismatch is reported against *report_on* (defaults to *second*).
    """
    report_path = report_on or second
    text = message or f"{second} must match {first}"

    def _match(owner: Any) -> EvalResult:
        left, right = _read(owner, first), _read(owner, second)
        if left is None or right is None or left == right:
            return EvalResult.ok()
        return EvalResult(valid=False, message=text, path=report_path)

    rule = cross_field(_match, name="fieldsMatch", groups=groups, message=text)
    return replace(rule, params=MappingProxyType({**rule.params, "first": first, "second": second}))


__all__ = [
    "Rule",
    "RuleKind",
    "Temporal",
    "NULL_REJECTING_KINDS",
    "Predicate",
    "required",
    "not_empty",
    "not_blank",
    "size",
    "range_",
    "min_",
    "max_",
    "pattern",
    "email",
    "temporal",
    "past",
    "future",
    "past_or_present",
    "future_or_present",
    "custom",
    "cross_field",
    "no_whitespace",
    "fields_match",
]
