"""Unit tests for the shared problem payload helper."""

from __future__ import annotations

from http import HTTPStatus

import pytest
from flask import Flask

from payetax.backend.app.http import problem_response


def test_problem_payload_carries_code_status_and_title() -> None:
    problem = problem_response(
        "validation_error", status=400, message="gross_amount: value cannot be negative"
    )

    assert problem.as_dict() == {
        "error": "validation_error",
        "status": 400,
        "title": "Bad Request",
        "message": "gross_amount: value cannot be negative",
    }


def test_problem_payload_merges_extra_fields_and_omits_empty_message() -> None:
    problem = problem_response("not_found", status=404, year=1999)

    assert problem.as_dict() == {
        "error": "not_found",
        "status": 404,
        "title": "Not Found",
        "year": 1999,
    }


def test_problem_response_is_not_cacheable(app: Flask) -> None:
    with app.app_context():
        response, status = problem_response(
            "configuration_error", status=500
        ).to_response()

    assert status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert response.headers["Cache-Control"] == "no-store"
    assert response.get_json()["title"] == "Internal Server Error"


def test_unknown_status_codes_are_rejected() -> None:
    with pytest.raises(ValueError):
        problem_response("teapot_overflow", status=799)
