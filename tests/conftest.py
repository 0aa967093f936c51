"""Pytest fixtures for the formguard test-suite.

The user/address declarations mirror the demo API: create (OnCreate) and
update (OnUpdate) share format rules, presence rules only run on create,
the address is validated in cascade, roles are validated per element and
the password confirmation is a type-level cross-field rule.
"""
from __future__ import annotations

from dataclasses import dataclass, field as dc_field
from datetime import date, datetime, timezone
from types import SimpleNamespace
from typing import List, Optional

import pytest

from formguard.groups import ON_CREATE, ON_UPDATE
from formguard.validation import (
    ConstraintEvaluator,
    RuleRegistry,
    Validator,
    custom,
    email,
    field,
    fields_match,
    max_,
    min_,
    no_whitespace,
    not_blank,
    not_empty,
    past,
    pattern,
    required,
    size,
)

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
BOTH = (ON_CREATE, ON_UPDATE)


@dataclass
class Address:
    line1: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None


@dataclass
class UserRequest:
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None
    age: Optional[int] = None
    date_of_birth: Optional[date] = None
    address: Optional[Address] = None
    roles: List[str] = dc_field(default_factory=list)
    password: Optional[str] = None
    confirm_password: Optional[str] = None


def register_users(registry: RuleRegistry) -> RuleRegistry:
    registry.register(
        Address,
        field(
            "line1",
            not_blank(groups=ON_CREATE, message="line1 is required"),
            size(max=100, groups=BOTH, message="line1 must be <= 100 chars"),
        ),
        field(
            "city",
            not_blank(groups=ON_CREATE, message="city is required"),
            size(max=50, groups=BOTH, message="city must be <= 50 chars"),
        ),
        field("pincode", pattern(r"^[0-9]{6}$", groups=BOTH, message="pincode must be 6 digits")),
    )
    registry.register(
        UserRequest,
        field(
            "id",
            required(groups=ON_UPDATE, message="id is required for update"),
            min_(1, groups=ON_UPDATE, message="id must be >= 1"),
        ),
        field(
            "name",
            not_blank(groups=ON_CREATE, message="name is required"),
            size(2, 50, groups=BOTH, message="name must be 2..50 characters"),
        ),
        field(
            "email",
            not_blank(groups=ON_CREATE, message="email is required"),
            email(groups=BOTH, message="email must be valid"),
        ),
        field(
            "username",
            not_blank(groups=ON_CREATE, message="username is required"),
            custom(no_whitespace, groups=BOTH, message="username cannot contain spaces"),
            size(3, 20, groups=BOTH, message="username must be 3..20 characters"),
            pattern(r"^[A-Za-z0-9_]+$", groups=BOTH, message="username can contain only letters, digits, underscore"),
        ),
        field(
            "age",
            required(groups=ON_CREATE, message="age is required"),
            min_(18, groups=BOTH, message="age must be at least 18"),
            max_(120, groups=BOTH, message="age must be <= 120"),
        ),
        field(
            "date_of_birth",
            required(groups=ON_CREATE, message="dateOfBirth is required"),
            past(groups=BOTH, message="dateOfBirth must be in the past"),
        ),
        field("address", required(groups=ON_CREATE, message="address is required"), cascade=True),
        field(
            "roles",
            not_empty(groups=ON_CREATE, message="roles cannot be empty on create"),
            elements=[not_blank(groups=BOTH, message="role cannot be blank")],
        ),
        field(
            "password",
            not_blank(groups=ON_CREATE, message="password is required"),
            size(min=8, groups=ON_CREATE, message="password must be at least 8 characters"),
        ),
        field("confirm_password", not_blank(groups=ON_CREATE, message="confirmPassword is required")),
        checks=[
            fields_match(
                "password",
                "confirm_password",
                groups=ON_CREATE,
                message="confirmPassword must match password",
            ),
        ],
    )
    return registry


def make_valid_user(**overrides) -> UserRequest:
    values = dict(
        name="Alice",
        email="alice@example.com",
        username="alice_1",
        age=30,
        date_of_birth=date(1994, 5, 17),
        address=Address(line1="1 Main St", city="Pune", pincode="411001"),
        roles=["user"],
        password="secret123",
        confirm_password="secret123",
    )
    values.update(overrides)
    return UserRequest(**values)


@pytest.fixture()
def evaluator() -> ConstraintEvaluator:
    """Evaluator with a frozen clock (2024-06-15 12:00 UTC)."""
    return ConstraintEvaluator(clock=lambda: FIXED_NOW)


@pytest.fixture()
def registry() -> RuleRegistry:
    return RuleRegistry()


@pytest.fixture()
def users(evaluator) -> SimpleNamespace:
    """User/address declarations with a ready validator."""
    user_registry = register_users(RuleRegistry())
    return SimpleNamespace(
        UserRequest=UserRequest,
        Address=Address,
        registry=user_registry,
        validator=Validator(user_registry, evaluator=evaluator),
        make=make_valid_user,
    )


@pytest.fixture(autouse=True)
def _silence_logging(caplog):  # noqa: D401
    """Reduce noise – most tests assert behaviour, not log output."""
    caplog.set_level("WARNING")
    yield


@pytest.fixture()
def anyio_backend():  # noqa: D401
    """Force *anyio* tests to use the standard asyncio backend only."""
    return "asyncio"
