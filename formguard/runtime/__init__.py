# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Runtime helpers used by the decorator and by host applications."""

from .errors import build_error_response, build_not_found_response
from .input_validation import format_validation_reason, get_registry, get_validator

__all__ = [
    "build_error_response",
    "build_not_found_response",
    "format_validation_reason",
    "get_registry",
    "get_validator",
]
