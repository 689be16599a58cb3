"""JSON problem payloads returned by the error handlers and blueprints."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Mapping

from flask import jsonify


@dataclass(frozen=True)
class ProblemResponse:
    """Error body of the form ``{"error", "status", "title", "message"?}``.

    ``error`` is a stable machine-readable code (``validation_error``,
    ``configuration_error`` ...); ``title`` is the HTTP reason phrase.
    """

    error: str
    status: HTTPStatus
    message: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return self.status.phrase

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": self.error,
            "status": self.status.value,
            "title": self.title,
        }
        if self.message:
            payload["message"] = self.message
        payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        response = jsonify(self.as_dict())
        # Problem bodies can echo submitted figures back to the client.
        response.headers["Cache-Control"] = "no-store"
        return response, self.status.value


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Build a ``ProblemResponse``; ``status`` must be a known HTTP status code."""

    return ProblemResponse(
        error=error, status=HTTPStatus(status), message=message, extra=extra
    )


__all__ = ["ProblemResponse", "problem_response"]
