# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Schema File Demo: declarations from YAML, payloads as plain dicts.

Loads ``users_schema.yaml`` next to this script and validates JSON-like
payloads under the OnCreate and OnUpdate groups.

Run with:
    python examples/schema_file_demo.py
"""

import json
from pathlib import Path

from formguard import ON_CREATE, ON_UPDATE, load_schema_file

SCHEMA_PATH = Path(__file__).with_name("users_schema.yaml")


def main():
    bundle = load_schema_file(SCHEMA_PATH)
    validator = bundle.validator()
    print(f"Loaded schemas {bundle.schema_names} from {bundle.source}")

    payload = {
        "name": "",
        "email": "bad",
        "username": "has space",
        "age": 10,
        "address": {"line1": "1 Main St", "pincode": "12"},
        "roles": ["admin", ""],
        "password": "secret123",
        "confirmPassword": "secret999",
    }

    for group in (ON_CREATE, ON_UPDATE):
        print("\n" + "=" * 70)
        print(f"Validating under {group}")
        print("=" * 70)
        result = validator.validate(payload, group, schema="User")
        if result.valid:
            print("  valid")
        else:
            print("  " + json.dumps(result.envelope(), indent=2).replace("\n", "\n  "))


if __name__ == "__main__":
    main()
