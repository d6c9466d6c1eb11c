"""Error handlers - exceptions to structured JSON responses."""

import logging

import falcon
import falcon.asgi
import pydantic

from rolegate.domain.exceptions import (
    AuthenticationRequired,
    Conflict,
    HasDependents,
    NotFound,
    NotInTrash,
    PermissionDenied,
    ProtectedResource,
    RoleGateError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[RoleGateError], int] = {
    AuthenticationRequired: 401,
    PermissionDenied: 403,
    ProtectedResource: 403,
    NotFound: 404,
    NotInTrash: 400,
    HasDependents: 409,
    Conflict: 409,
    ValidationError: 400,
}


def _error_body(status_code: int, message: str, errors: list | None = None) -> dict:
    body = {"statusCode": status_code, "success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body


def _status_for(ex: RoleGateError) -> int:
    for cls in type(ex).__mro__:
        if cls in _STATUS_CODES:
            return _STATUS_CODES[cls]
    return 400


async def handle_domain_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: RoleGateError, params
) -> None:
    """RoleGateError -> 4xx with the exception message."""
    status_code = _status_for(ex)
    if isinstance(ex, ProtectedResource):
        logger.info("Refused %s %s: %s", req.method, req.path, ex)
    errors = None
    identifiers = getattr(ex, "identifiers", None)
    if identifiers:
        errors = [{"kind": ex.kind, "ids": identifiers}]
    resp.status = falcon.code_to_http_status(status_code)
    resp.media = _error_body(status_code, str(ex), errors)


async def handle_request_validation(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: pydantic.ValidationError, params
) -> None:
    """Malformed request body -> 400 listing every field error."""
    errors = [
        {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
        for e in ex.errors()
    ]
    resp.status = falcon.HTTP_400
    resp.media = _error_body(400, "Invalid request body", errors)


async def handle_http_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: falcon.HTTPError, params
) -> None:
    """Falcon HTTP errors (404 route, bad JSON, ...) in the same shape."""
    status_code = ex.status_code
    resp.status = falcon.code_to_http_status(status_code)
    resp.media = _error_body(status_code, ex.description or ex.title or "Error")


class UnexpectedErrorHandler:
    """Anything else -> logged 500. Details are hidden in production."""

    def __init__(self, production: bool) -> None:
        self._production = production

    async def __call__(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params
    ) -> None:
        logger.exception("Unhandled error on %s %s", req.method, req.path)
        message = "Internal server error" if self._production else str(ex) or type(ex).__name__
        resp.status = falcon.HTTP_500
        resp.media = _error_body(500, message)


def register_error_handlers(app: falcon.asgi.App, *, production: bool) -> None:
    """Install every handler on app. Falcon picks the most specific match."""
    app.add_error_handler(Exception, UnexpectedErrorHandler(production))
    app.add_error_handler(falcon.HTTPError, handle_http_error)
    app.add_error_handler(pydantic.ValidationError, handle_request_validation)
    app.add_error_handler(RoleGateError, handle_domain_error)
