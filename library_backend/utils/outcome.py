"""
Operation outcomes for Library API handlers

Handler operations return one of these instead of building API Gateway
responses inline. The entry point maps each variant to a status code in one
place (see utils.response.outcome_response).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Ok:
    payload: Any = None

    status_code = 200


@dataclass(frozen=True)
class BadRequest:
    message: str

    status_code = 400


@dataclass(frozen=True)
class Unauthorized:
    message: str = "Unauthorized"

    status_code = 401


@dataclass(frozen=True)
class Forbidden:
    message: str

    status_code = 403


@dataclass(frozen=True)
class NotFound:
    message: str

    status_code = 404


Outcome = Union[Ok, BadRequest, Unauthorized, Forbidden, NotFound]


class UnsupportedMethodError(Exception):
    """Raised when a handler receives an HTTP method it does not route."""
