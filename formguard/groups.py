# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Validation groups and active-group resolution.

A group is an opaque, hashable token. Rules declared without groups belong
to the implicit :data:`DEFAULT` group. Group identity is plain equality;
there is no hierarchy between groups.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Set as AbstractSet
from typing import Any, FrozenSet

from .exceptions import ConfigurationError

DEFAULT = "Default"
ON_CREATE = "OnCreate"
ON_UPDATE = "OnUpdate"

GroupSet = FrozenSet[Hashable]


def normalize_groups(groups: Any) -> GroupSet:
    """Coerce a group declaration into a frozenset of tokens.

    Accepts ``None``, a single token, or an iterable of tokens. Strings are
    single tokens, not iterables of characters. A set among the tokens is
    expanded into its members, so ``validate(obj, {ON_CREATE})`` and
    ``validate(obj, ON_CREATE)`` request the same groups.
    """

    if groups is None:
        return frozenset()
    if isinstance(groups, (str, bytes)) or not isinstance(groups, Iterable):
        groups = (groups,)

    tokens = []
    for token in groups:
        members = token if isinstance(token, AbstractSet) else (token,)
        for member in members:
            if member is None or not isinstance(member, Hashable):
                raise ConfigurationError(f"Invalid validation group {member!r}: groups must be hashable tokens")
            tokens.append(member)
    return frozenset(tokens)


def effective_groups(requested: Any = None) -> GroupSet:
    """Return the active group set for a validation request.

    An empty request means ``{DEFAULT}``. A non-empty request is used as-is:
    ``DEFAULT`` is not added next to explicit groups.
    """

    groups = normalize_groups(requested)
    if not groups:
        return frozenset({DEFAULT})
    return groups


def rule_applies(rule_groups: GroupSet, active: GroupSet) -> bool:
    """Whether a rule tagged with *rule_groups* runs under *active*."""

    if not rule_groups:
        return DEFAULT in active
    return not rule_groups.isdisjoint(active)


__all__ = [
    "DEFAULT",
    "ON_CREATE",
    "ON_UPDATE",
    "GroupSet",
    "normalize_groups",
    "effective_groups",
    "rule_applies",
]
