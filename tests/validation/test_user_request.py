# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""End-to-end validation of the user request declarations.

Create and update share the format rules; presence rules only apply on
create, the id is only required on update.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from formguard.groups import DEFAULT, ON_CREATE, ON_UPDATE
from formguard.validation import RuleRegistry, Validator, email, field, not_blank, range_


# ------------------------------------------------------------------
# Small DTO scenarios
# ------------------------------------------------------------------


@dataclass
class Signup:
    name: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None


def _signup_validator(evaluator):
    registry = RuleRegistry()
    registry.register(
        Signup,
        field("name", not_blank(groups=ON_CREATE, message="required")),
        field("email", email(groups=ON_CREATE, message="must be valid")),
        field("age", range_(18, 120, groups=ON_CREATE)),
    )
    return Validator(registry, evaluator=evaluator)


def test_create_group_reports_every_field(evaluator):
    result = _signup_validator(evaluator).validate(Signup(name="", email="bad", age=10), ON_CREATE)

    assert result.error_map() == {
        "name": "required",
        "email": "must be valid",
        "age": "must be >= 18",
    }


def test_create_only_rules_do_not_run_under_default(evaluator):
    result = _signup_validator(evaluator).validate(Signup(name="", email="bad", age=10))

    assert result.valid is True
    assert result.violations == []


def test_format_rule_on_missing_value_is_not_a_violation(evaluator):
    result = _signup_validator(evaluator).validate(Signup(name="Bob", email=None, age=None), ON_CREATE)

    assert result.valid is True


# ------------------------------------------------------------------
# Full user request
# ------------------------------------------------------------------


def test_valid_user_passes_create_and_update(users):
    dto = users.make(id=7)

    assert users.validator.validate(dto, ON_CREATE).valid is True
    assert users.validator.validate(dto, ON_UPDATE).valid is True


def test_empty_create_reports_all_required_fields(users):
    result = users.validator.validate(users.UserRequest(), ON_CREATE)

    assert result.error_map() == {
        "name": "name is required",
        "email": "email is required",
        "username": "username is required",
        "age": "age is required",
        "date_of_birth": "dateOfBirth is required",
        "address": "address is required",
        "roles": "roles cannot be empty on create",
        "password": "password is required",
        "confirm_password": "confirmPassword is required",
    }


def test_update_requires_id_but_not_create_fields(users):
    result = users.validator.validate(users.UserRequest(), ON_UPDATE)

    assert result.error_map() == {"id": "id is required for update"}


def test_update_rejects_non_positive_id(users):
    result = users.validator.validate(users.UserRequest(id=0), ON_UPDATE)

    assert result.error_map() == {"id": "id must be >= 1"}


def test_nothing_runs_under_default_group(users):
    assert users.validator.validate(users.UserRequest(name="x", email="bad"), DEFAULT).valid is True


def test_update_still_checks_formats(users):
    result = users.validator.validate(users.UserRequest(id=3, email="broken@", age=200), ON_UPDATE)

    assert result.error_map() == {"email": "email must be valid", "age": "age must be <= 120"}


def test_nested_address_paths(users):
    dto = users.make(address=users.Address(line1="", city="x" * 51, pincode="12ab"))

    result = users.validator.validate(dto, ON_CREATE)

    assert result.error_map() == {
        "address.line1": "line1 is required",
        "address.city": "city must be <= 50 chars",
        "address.pincode": "pincode must be 6 digits",
    }


def test_optional_pincode_may_be_absent(users):
    dto = users.make(address=users.Address(line1="1 Main St", city="Pune"))

    assert users.validator.validate(dto, ON_CREATE).valid is True


def test_blank_role_reported_by_index(users):
    result = users.validator.validate(users.make(roles=["admin", " ", "user"]), ON_CREATE)

    assert result.error_map() == {"roles[1]": "role cannot be blank"}


def test_password_mismatch_reported_on_confirmation_field(users):
    result = users.validator.validate(users.make(confirm_password="secret124"), ON_CREATE)

    [violation] = result.violations
    assert violation.path == "confirm_password"
    assert violation.message == "confirmPassword must match password"
    assert violation.invalid_value == "secret124"


def test_password_mismatch_ignored_on_update(users):
    dto = users.make(id=1, confirm_password="different1")

    assert users.validator.validate(dto, ON_UPDATE).valid is True


def test_username_rules_all_report(users):
    result = users.validator.validate(users.make(username="a b"), ON_CREATE)

    messages = [v.message for v in result.violations if v.path == "username"]
    assert messages == [
        "username cannot contain spaces",
        "username can contain only letters, digits, underscore",
    ]
    # the error map keeps the last message for a shared path
    assert result.error_map()["username"] == "username can contain only letters, digits, underscore"


def test_future_birth_date_rejected(users):
    result = users.validator.validate(users.make(date_of_birth=date(2030, 1, 1)), ON_CREATE)

    assert result.error_map() == {"date_of_birth": "dateOfBirth must be in the past"}


def test_report_order_follows_declaration_order(users):
    dto = users.make(
        name="A",
        email="bad",
        address=users.Address(line1="", city="Pune"),
        roles=[""],
        confirm_password="nope1234",
    )

    result = users.validator.validate(dto, ON_CREATE)

    assert result.paths() == ["name", "email", "address.line1", "roles[0]", "confirm_password"]


def test_envelope_shape(users):
    result = users.validator.validate(users.make(email="bad"), ON_CREATE)

    assert result.envelope() == {
        "message": "Validation failed",
        "errors": {"email": "email must be valid"},
    }
