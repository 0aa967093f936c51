# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Unit tests for rule factories and declaration-time errors."""

from __future__ import annotations

import dataclasses

import pytest

from formguard.exceptions import ConfigurationError
from formguard.groups import ON_CREATE, ON_UPDATE
from formguard.validation import (
    RuleKind,
    Temporal,
    cross_field,
    custom,
    fields_match,
    min_,
    pattern,
    range_,
    required,
    size,
    temporal,
)


def test_factory_returns_unbound_rule_with_groups_and_message():
    rule = required(groups=[ON_CREATE, ON_UPDATE], message="id is required")

    assert rule.kind is RuleKind.REQUIRED
    assert rule.target is None
    assert rule.groups == frozenset({ON_CREATE, ON_UPDATE})
    assert rule.message == "id is required"


def test_rules_are_immutable():
    rule = size(2, 50)

    with pytest.raises(dataclasses.FrozenInstanceError):
        rule.message = "changed"  # type: ignore[misc]
    with pytest.raises(TypeError):
        rule.params["max"] = 10  # type: ignore[index]


def test_bind_returns_copy_with_target():
    rule = min_(1)
    bound = rule.bind("id")

    assert bound.target == "id"
    assert rule.target is None
    assert bound.params["min"] == 1


def test_invalid_regex_rejected_at_declaration():
    with pytest.raises(ConfigurationError, match="Invalid regex pattern"):
        pattern("[unclosed(")


@pytest.mark.parametrize(
    "factory",
    [
        lambda: size(5, 2),
        lambda: size(-1),
        lambda: range_(10, 1),
        lambda: range_(),
        lambda: range_("1", 5),
        lambda: min_(True),
    ],
)
def test_inconsistent_bounds_rejected(factory):
    with pytest.raises(ConfigurationError):
        factory()


def test_unknown_temporal_mode_rejected():
    with pytest.raises(ConfigurationError, match="Unknown temporal mode"):
        temporal("yesterday")


def test_temporal_accepts_mode_names():
    assert temporal("pastOrPresent").params["mode"] is Temporal.PAST_OR_PRESENT


def test_custom_requires_callable_or_name():
    with pytest.raises(ConfigurationError):
        custom(42)  # type: ignore[arg-type]

    named = custom("noWhitespace")
    assert named.params["name"] == "noWhitespace"
    assert named.params["predicate"] is None


def test_cross_field_requires_callable():
    with pytest.raises(ConfigurationError):
        cross_field("not callable")  # type: ignore[arg-type]


def test_fields_match_records_compared_fields():
    rule = fields_match("password", "confirm_password", groups=ON_CREATE)

    assert rule.kind is RuleKind.CROSS_FIELD
    assert rule.params["first"] == "password"
    assert rule.params["second"] == "confirm_password"
    assert rule.message == "confirm_password must match password"
