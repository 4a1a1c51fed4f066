"""HTTP error mapping, response results and the JSON user handler."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from werkzeug.wrappers import Request, Response

from lica.domain import User
from lica.errors import LicaError, NotFoundError, ValidationError

log = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Either you don't have access or the thing you're looking for doesn't exist"


class BadRequestError(LicaError):
    """The request was malformed."""

    default_message = "Bad Request"


class InternalServerError(LicaError):
    """Something failed on the server side."""

    default_message = "Internal Server Error"


class HttpNotFoundError(LicaError):
    """The resource was not found."""

    default_message = "Not Found"


class ForbiddenError(LicaError):
    """The user may not see the resource."""

    default_message = "Forbidden"


@dataclass(frozen=True)
class Result:
    """Outcome of a handler's work: a body and status, or an error."""

    data: str = ""
    error: BaseException | None = None
    status_code: int = 200


def handle_error(error: BaseException) -> Response:
    """Turn an error into a plain-text HTTP response."""
    if isinstance(error, BadRequestError):
        return Response("Bad Request", status=400)
    if isinstance(error, (HttpNotFoundError, ForbiddenError)):
        return Response(NOT_FOUND_MESSAGE, status=404)
    return Response("Internal Server Error", status=500)


def is_htmx_request(request: Request) -> bool:
    """True when the request was sent by htmx."""
    return bool(request.headers.get("HX-Request", ""))


def run_handler(worker: Callable[[], Result]) -> Response:
    """Run a worker and turn its result, or the error it raised, into a response."""
    try:
        result = worker()
    except Exception as exc:  # noqa: BLE001 - every failure becomes an HTTP error
        result = Result(error=exc)

    error = result.error
    if error is None:
        return Response(result.data, status=result.status_code)

    log.error("error: %s", error)
    if isinstance(error, ValidationError):
        return handle_error(BadRequestError(str(error)))
    if isinstance(error, NotFoundError):
        return handle_error(HttpNotFoundError(str(error)))
    return handle_error(InternalServerError(str(error)))


def _user_json(user: User) -> str:
    return json.dumps({"Id": str(user.id), "Email": str(user.email)})


class UserHandler:
    """JSON endpoints for the signed-in user."""

    def __init__(self, user_service: Any) -> None:
        self._users = user_service

    def create(self, request: Request, user: User) -> Response:
        """Create a user with the signed-in e-mail."""
        return run_handler(
            lambda: Result(data=_user_json(self._users.create(user.email)), status_code=201)
        )

    def get(self, request: Request, user: User) -> Response:
        """Return the user with the signed-in e-mail."""
        return run_handler(
            lambda: Result(data=_user_json(self._users.get(user.email)), status_code=200)
        )