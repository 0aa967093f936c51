# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Tests for translating validation outcomes into transport error bodies."""

from __future__ import annotations

import pytest

from formguard.exceptions import ConstraintViolationError, NotFoundError
from formguard.runtime import (
    build_error_response,
    build_not_found_response,
    format_validation_reason,
    get_registry,
    get_validator,
)
from formguard.runtime import input_validation
from formguard.validation import ValidationResult, ValidationViolation, default_registry


def _result(*pairs):
    return ValidationResult([ValidationViolation(path=p, message=m) for p, m in pairs])


def test_error_map_last_wins_and_keeps_first_position():
    result = _result(("name", "first"), ("email", "bad email"), ("name", "second"))

    errors = result.error_map()

    assert errors == {"name": "second", "email": "bad email"}
    assert list(errors) == ["name", "email"]


def test_build_error_response_from_result():
    status, body = build_error_response(_result(("age", "must be >= 18")))

    assert status == 400
    assert body == {"message": "Validation failed", "errors": {"age": "must be >= 18"}}


def test_build_error_response_from_exception():
    error = ConstraintViolationError(_result(("get.id", "must be >= 1")), target="UserService.get")

    status, body = build_error_response(error)

    assert status == 400
    assert body["errors"] == {"get.id": "must be >= 1"}


def test_build_error_response_rejects_valid_result():
    with pytest.raises(ValueError):
        build_error_response(ValidationResult())


def test_not_found_response():
    status, body = build_not_found_response(NotFoundError("User", 42))

    assert status == 404
    assert body == {"message": "User not found: 42"}


def test_constraint_violation_error_message_lists_paths():
    error = ConstraintViolationError(_result(("", "object invalid"), ("name", "required")), target="create")

    text = str(error)
    assert text.startswith("Validation failed for 'create':")
    assert " - <object>: object invalid" in text
    assert " - name: required" in text
    assert error.violations == error.result.violations


def test_format_validation_reason():
    reason = format_validation_reason("UserService.create", _result(("email", "must be valid")))

    assert reason == "Validation failed for 'UserService.create':\n - email: must be valid"


def test_get_validator_is_a_process_wide_singleton(monkeypatch):
    monkeypatch.setattr(input_validation, "_VALIDATOR", None)

    first = get_validator()

    assert first is get_validator()
    assert first.registry is get_registry() is default_registry
    assert default_registry.frozen is True
