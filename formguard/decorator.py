# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

# formguard/decorator.py

import asyncio
import functools
import inspect
import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence, Union

import anyio

from .exceptions import ConfigurationError, ConstraintViolationError, FormguardError
from .runtime import get_validator
from .validation import ConstraintEvaluator, Rule, RuleKind, ValidationResult, Validator

logger = logging.getLogger(__name__)

# Sentinel object to detect if a parameter was provided by the user
_sentinel = object()


def _normalize_cascade(cascade: Union[str, Iterable[str], Mapping[str, Any], None]) -> Dict[str, Any]:
    if not cascade:
        return {}
    if isinstance(cascade, str):
        return {cascade: None}
    if isinstance(cascade, Mapping):
        return dict(cascade)
    return {name: None for name in cascade}


def _accepts_argument(handler: Callable) -> bool:
    try:
        params = inspect.signature(handler).parameters.values()
    except (TypeError, ValueError):
        return True
    for param in params:
        if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.POSITIONAL_ONLY,
                          inspect.Parameter.POSITIONAL_OR_KEYWORD):
            return True
    return False


def validated(
    *groups: Any,
    params: Optional[Mapping[str, Sequence[Rule]]] = None,
    cascade: Union[str, Iterable[str], Mapping[str, Any], None] = None,
    on_violation: Any = _sentinel,
    validator: Optional[Validator] = None,
):
    """
    Validate a function's arguments before it runs.

    :param groups: Validation groups used for cascaded arguments. When none
                   are given the Default group applies.
    :param params: Maps parameter names to rules checked against the raw
                   argument value. Violations are reported at
                   ``"<function>.<parameter>"``. These rules run under the
                   Default group.
    :param cascade: Parameter name(s) whose objects are validated against
                    their registered declarations under ``groups``.
                    Violation paths are the object's own field paths. A
                    mapping of parameter name to schema key selects the
                    declarations explicitly (for dict payloads). ``None``
                    arguments are skipped; pair with a ``required()``
                    parameter rule to reject them.
    :param on_violation: Optional. If omitted, a
                         :class:`ConstraintViolationError` is raised. A
                         callable is invoked (with the error if it accepts
                         an argument) and its result returned; any other
                         value is returned directly.
    :param validator: Optional. Defaults to the process-wide validator.

    .. code-block:: python

        from formguard import ON_CREATE, validated
        from formguard.validation import min_

        @validated(ON_CREATE, cascade="dto")
        def create(dto): ...

        @validated(params={"user_id": [min_(1)]}, on_violation=None)
        def get(user_id): ...
    """

    param_rules = {name: tuple(rules) for name, rules in (params or {}).items()}
    cascades = _normalize_cascade(cascade)

    def decorator(func: Callable):
        signature = inspect.signature(func)
        has_var_kwargs = any(
            param.kind == inspect.Parameter.VAR_KEYWORD
            for param in signature.parameters.values()
        )
        referenced = set(param_rules) | set(cascades)
        invalid = set() if has_var_kwargs else referenced - set(signature.parameters)
        if invalid:
            logger.error(
                "Validation for '%s' references unknown parameters: %s",
                func.__qualname__,
                ", ".join(sorted(invalid)),
            )
            raise ConfigurationError(
                f"@validated on '{func.__qualname__}' references undefined parameter(s): {sorted(invalid)}"
            )

        target = func.__qualname__

        # Without an explicit validator, predicates resolve against the default table.
        resolver = validator.evaluator if validator is not None else ConstraintEvaluator()
        for name, rules in param_rules.items():
            for rule in rules:
                if rule.kind not in (RuleKind.CUSTOM, RuleKind.CROSS_FIELD):
                    continue
                try:
                    resolver.resolve_predicate(rule)
                except ConfigurationError:
                    logger.error("Validation for '%s' parameter '%s' uses an unknown predicate", target, name)
                    raise

        def _check(args, kwargs) -> Optional[ConstraintViolationError]:
            active_validator = validator or get_validator()
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            arguments = dict(bound.arguments)
            if has_var_kwargs:
                for param in signature.parameters.values():
                    if param.kind == inspect.Parameter.VAR_KEYWORD:
                        arguments.update(arguments.pop(param.name, {}))

            violations = []
            for name, rules in param_rules.items():
                result = active_validator.validate_value(
                    arguments.get(name), rules, path=f"{func.__name__}.{name}"
                )
                violations.extend(result.violations)
            for name, schema in cascades.items():
                value = arguments.get(name)
                if value is None:
                    continue
                violations.extend(active_validator.validate(value, *groups, schema=schema).violations)

            if not violations:
                return None
            logger.debug("Rejected call to %s with %d violation(s)", target, len(violations))
            return ConstraintViolationError(ValidationResult(violations), target=target)

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            """Wrapper for synchronous functions."""
            error = _check(args, kwargs)
            if error is not None:
                return _handle_violation_sync(error)
            return func(*args, **kwargs)

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            """Wrapper for asynchronous functions."""
            error = _check(args, kwargs)
            if error is not None:
                return await _handle_violation_async(error)
            return await func(*args, **kwargs)

        def _handle_violation_sync(error: ConstraintViolationError):
            if on_violation is _sentinel:
                raise error
            if not callable(on_violation):
                return on_violation
            call_args = (error,) if _accepts_argument(on_violation) else ()
            if not inspect.iscoroutinefunction(on_violation):
                return on_violation(*call_args)

            # Async handler on a sync function: run it on a private event loop.
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                return anyio.run(on_violation, *call_args)
            raise FormguardError(
                f"Cannot await async on_violation handler for sync function '{target}' "
                "from a running event loop; use a sync handler or decorate an async function."
            )

        async def _handle_violation_async(error: ConstraintViolationError):
            if on_violation is _sentinel:
                raise error
            if not callable(on_violation):
                return on_violation
            call_args = (error,) if _accepts_argument(on_violation) else ()
            if inspect.iscoroutinefunction(on_violation):
                return await on_violation(*call_args)
            return on_violation(*call_args)

        if inspect.iscoroutinefunction(func):
            wrapper = async_wrapper
        else:
            wrapper = sync_wrapper

        # Attach the declaration for introspection
        wrapper.__formguard_groups__ = groups
        return wrapper

    return decorator


__all__ = ["validated"]
