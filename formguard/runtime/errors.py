# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Translation of validation outcomes into transport-level error bodies.

HTTP frameworks stay outside formguard; these helpers return
``(status, body)`` pairs that a handler can serialize as-is.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Tuple, Union

from ..exceptions import ConstraintViolationError, NotFoundError
from ..validation.base import ValidationResult

logger = logging.getLogger(__name__)

BAD_REQUEST = 400
NOT_FOUND = 404

ErrorResponse = Tuple[int, Dict[str, Any]]


def build_error_response(source: Union[ValidationResult, ConstraintViolationError]) -> ErrorResponse:
    """``(400, {"message": "Validation failed", "errors": {path: message}})``."""

    result = source.result if isinstance(source, ConstraintViolationError) else source
    if result.valid:
        raise ValueError("Cannot build an error response from a valid result")
    logger.debug("Translating %d violation(s) into a %d response", len(result.violations), BAD_REQUEST)
    return BAD_REQUEST, result.envelope()


def build_not_found_response(error: NotFoundError) -> ErrorResponse:
    return NOT_FOUND, {"message": error.message}


__all__ = [
    "BAD_REQUEST",
    "NOT_FOUND",
    "ErrorResponse",
    "build_error_response",
    "build_not_found_response",
]
