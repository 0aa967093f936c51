# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""User Validation Demo: create/update groups, nested and cross-field rules.

This demo declares a user request with an address, a list of roles and a
password confirmation, then validates it the way a create (POST) and an
update (PUT) endpoint would. Failures are printed as the 400 envelope an
HTTP layer would return; unknown users become 404 bodies.

Run with:
    python examples/user_validation_demo.py
"""

import itertools
import json
from dataclasses import dataclass, field as dc_field
from datetime import date
from typing import Dict, List, Optional

from formguard import (
    ON_CREATE,
    ON_UPDATE,
    ConstraintViolationError,
    NotFoundError,
    build_error_response,
    build_not_found_response,
    field,
    get_registry,
    validated,
)
from formguard.validation import (
    custom,
    email,
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


registry = get_registry()

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


class UserService:
    """In-memory user store; validation happens at the method boundary."""

    def __init__(self):
        self._store: Dict[int, UserRequest] = {}
        self._ids = itertools.count(101)

    @validated(ON_CREATE, params={"dto": [required()]}, cascade="dto")
    def create(self, dto: UserRequest) -> int:
        user_id = next(self._ids)
        dto.id = user_id
        self._store[user_id] = dto
        return user_id

    @validated(params={"user_id": [required(), min_(1)]})
    def get(self, user_id: int) -> UserRequest:
        try:
            return self._store[user_id]
        except KeyError:
            raise NotFoundError("User", user_id) from None

    @validated(params={"limit": [min_(1), max_(100)], "q": [not_blank(message="q is required")]})
    def search(self, q: str, limit: int = 10) -> List[UserRequest]:
        return list(self._store.values())[:limit]

    @validated(ON_UPDATE, params={"user_id": [required(), min_(1)], "dto": [required()]}, cascade="dto")
    def update(self, user_id: int, dto: UserRequest) -> None:
        if user_id not in self._store:
            raise NotFoundError("User", user_id)
        dto.id = user_id
        self._store[user_id] = dto

    @validated(params={"user_id": [required(), min_(1)]})
    def delete(self, user_id: int) -> None:
        if self._store.pop(user_id, None) is None:
            raise NotFoundError("User", user_id)


def _print_response(status, body):
    print(f"  HTTP {status}")
    print("  " + json.dumps(body, indent=2).replace("\n", "\n  "))


def demo_create():
    print("\n" + "=" * 70)
    print("DEMO 1: Create with an invalid payload (OnCreate group)")
    print("=" * 70)

    service = UserService()
    dto = UserRequest(
        name="A",
        email="not-an-email",
        username="bad name",
        age=15,
        date_of_birth=date(2090, 1, 1),
        address=Address(line1="", city="Pune", pincode="12ab"),
        roles=["admin", " "],
        password="secret123",
        confirm_password="secret124",
    )
    try:
        service.create(dto)
    except ConstraintViolationError as error:
        _print_response(*build_error_response(error))


def demo_update():
    print("\n" + "=" * 70)
    print("DEMO 2: Update only checks OnUpdate rules")
    print("=" * 70)

    service = UserService()
    created = service.create(
        UserRequest(
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
    )
    print(f"  created id={created}")

    # Missing password and address are fine on update; the bad email is not.
    try:
        service.update(created, UserRequest(id=created, email="broken@"))
    except ConstraintViolationError as error:
        _print_response(*build_error_response(error))

    service.update(created, UserRequest(id=created, name="Alice B"))
    print(f"  updated id={created}")


def demo_lookup_failures():
    print("\n" + "=" * 70)
    print("DEMO 3: Parameter validation and missing users")
    print("=" * 70)

    service = UserService()
    try:
        service.get(0)
    except ConstraintViolationError as error:
        _print_response(*build_error_response(error))

    try:
        service.delete(999)
    except NotFoundError as error:
        _print_response(*build_not_found_response(error))


if __name__ == "__main__":
    demo_create()
    demo_update()
    demo_lookup_failures()
