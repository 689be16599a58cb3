"""Utilities for serialising calculation responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Response, jsonify


def build_calculation_response(
    payload: Mapping[str, Any], *, status: int = 200
) -> tuple[Response, int]:
    """Return a non-cacheable Flask JSON response for the calculation ``payload``.

    Results depend on personal income figures, so intermediaries must not
    store them.
    """

    response = jsonify(payload)
    response.headers["Cache-Control"] = "no-store"
    return response, status
