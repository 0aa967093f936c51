# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Constraint evaluation for individual rules.

Null policy: format and shape rules (size, range, pattern, email, temporal)
pass when the value is ``None``. Only ``required``, ``not_empty`` and
``not_blank`` reject a missing value. Custom predicates receive ``None``
unchanged and are expected to pass it.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sized
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from numbers import Real
from typing import Any, Callable, Dict, Mapping, Optional

from ..exceptions import ConfigurationError
from .base import EvalResult, ValidationContext
from .rules import Predicate, Rule, RuleKind, Temporal, no_whitespace

logger = logging.getLogger(__name__)

_EMAIL_LOCAL = r"[a-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[a-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
_EMAIL_DOMAIN = r"[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?(?:\.[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?)*"
EMAIL_PATTERN = re.compile(rf"{_EMAIL_LOCAL}@{_EMAIL_DOMAIN}", re.IGNORECASE)

_TEMPORAL_MESSAGES = {
    Temporal.PAST: "must be a past date",
    Temporal.FUTURE: "must be a future date",
    Temporal.PAST_OR_PRESENT: "must be a date in the past or in the present",
    Temporal.FUTURE_OR_PRESENT: "must be a date in the present or in the future",
}

DEFAULT_PREDICATES: Mapping[str, Predicate] = {
    "noWhitespace": no_whitespace,
}


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _as_number(value: Any) -> Optional[Any]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (Real, Decimal)):
        return value
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            return None
    return None


class ConstraintEvaluator:
    """Evaluates one rule against one value.

    ``clock`` returns the current time for temporal rules; ``predicates``
    extends the table of named custom predicates.
    """

    def __init__(
        self,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        predicates: Optional[Mapping[str, Predicate]] = None,
    ):
        self._clock = clock or _local_now
        self._predicates: Dict[str, Predicate] = dict(DEFAULT_PREDICATES)
        if predicates:
            self._predicates.update(predicates)
        self._dispatch = {
            RuleKind.REQUIRED: self._required,
            RuleKind.NOT_EMPTY: self._not_empty,
            RuleKind.NOT_BLANK: self._not_blank,
            RuleKind.SIZE: self._size,
            RuleKind.RANGE: self._range,
            RuleKind.PATTERN: self._pattern,
            RuleKind.TEMPORAL: self._temporal,
            RuleKind.EMAIL: self._email,
        }

    def now(self) -> datetime:
        return self._clock()

    def resolve_predicate(self, rule: Rule) -> Predicate:
        """Return the callable behind a custom or cross-field rule."""

        predicate = rule.params.get("predicate")
        if predicate is not None:
            return predicate
        name = rule.params.get("name")
        try:
            return self._predicates[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown custom predicate '{name}' for '{rule.target or '<type>'}'. "
                f"Known predicates: {sorted(self._predicates)}"
            ) from None

    def evaluate(self, rule: Rule, value: Any, owner: Any, context: ValidationContext) -> EvalResult:
        if rule.kind is RuleKind.CROSS_FIELD:
            return self._predicate_result(rule, self.resolve_predicate(rule)(owner))
        if rule.kind is RuleKind.CUSTOM:
            return self._predicate_result(rule, self.resolve_predicate(rule)(value))
        return self._dispatch[rule.kind](rule, value, context)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _fail(rule: Rule, default: str) -> EvalResult:
        return EvalResult(valid=False, message=rule.message or default)

    def _predicate_result(self, rule: Rule, outcome: Any) -> EvalResult:
        if isinstance(outcome, EvalResult):
            if outcome.valid or outcome.message:
                return outcome
            return EvalResult(valid=False, message=rule.message or "is invalid", path=outcome.path)
        if outcome:
            return EvalResult.ok()
        return self._fail(rule, "is invalid")

    # ------------------------------------------------------------------
    # presence
    # ------------------------------------------------------------------

    def _required(self, rule: Rule, value: Any, _context: ValidationContext) -> EvalResult:
        if value is None:
            return self._fail(rule, "must not be null")
        return EvalResult.ok()

    def _not_empty(self, rule: Rule, value: Any, _context: ValidationContext) -> EvalResult:
        if value is None or (isinstance(value, Sized) and len(value) == 0):
            return self._fail(rule, "must not be empty")
        return EvalResult.ok()

    def _not_blank(self, rule: Rule, value: Any, _context: ValidationContext) -> EvalResult:
        if value is None or (isinstance(value, str) and not value.strip()):
            return self._fail(rule, "must not be blank")
        return EvalResult.ok()

    # ------------------------------------------------------------------
    # format / shape
    # ------------------------------------------------------------------

    def _size(self, rule: Rule, value: Any, _context: ValidationContext) -> EvalResult:
        if value is None:
            return EvalResult.ok()
        low, high = rule.params.get("min", 0), rule.params.get("max")
        if high is None:
            default = f"size must be at least {low}"
        else:
            default = f"size must be between {low} and {high}"
        if not isinstance(value, Sized):
            return self._fail(rule, default)
        length = len(value)
        if length < low or (high is not None and length > high):
            return self._fail(rule, default)
        return EvalResult.ok()

    def _range(self, rule: Rule, value: Any, _context: ValidationContext) -> EvalResult:
        if value is None:
            return EvalResult.ok()
        number = _as_number(value)
        if number is None:
            return self._fail(rule, "must be a number")
        low, high = rule.params.get("min"), rule.params.get("max")
        if low is not None and number < low:
            return self._fail(rule, f"must be >= {low}")
        if high is not None and number > high:
            return self._fail(rule, f"must be <= {high}")
        return EvalResult.ok()

    def _pattern(self, rule: Rule, value: Any, _context: ValidationContext) -> EvalResult:
        if value is None:
            return EvalResult.ok()
        if rule.params["compiled"].fullmatch(str(value)) is None:
            return self._fail(rule, f'must match "{rule.params["regexp"]}"')
        return EvalResult.ok()

    def _email(self, rule: Rule, value: Any, _context: ValidationContext) -> EvalResult:
        if value is None:
            return EvalResult.ok()
        text = str(value)
        if text and EMAIL_PATTERN.fullmatch(text) is None:
            return self._fail(rule, "must be a well-formed email address")
        return EvalResult.ok()

    def _temporal(self, rule: Rule, value: Any, context: ValidationContext) -> EvalResult:
        if value is None:
            return EvalResult.ok()
        mode: Temporal = rule.params["mode"]
        now = context.now
        # datetime is a subclass of date; check it first
        if isinstance(value, datetime):
            if value.tzinfo is None:
                reference = now.replace(tzinfo=None)
            elif now.tzinfo is None:
                # naive clock readings are local time
                reference = now.astimezone()
            else:
                reference = now
        elif isinstance(value, date):
            reference = now.date()
        else:
            return self._fail(rule, _TEMPORAL_MESSAGES[mode])

        if mode is Temporal.PAST:
            ok = value < reference
        elif mode is Temporal.FUTURE:
            ok = value > reference
        elif mode is Temporal.PAST_OR_PRESENT:
            ok = value <= reference
        else:
            ok = value >= reference
        return EvalResult.ok() if ok else self._fail(rule, _TEMPORAL_MESSAGES[mode])


__all__ = [
    "ConstraintEvaluator",
    "DEFAULT_PREDICATES",
    "EMAIL_PATTERN",
]
