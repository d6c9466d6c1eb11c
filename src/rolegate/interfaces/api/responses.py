"""Success response envelope."""

from typing import Any

import falcon
import falcon.asgi


def respond(
    resp: falcon.asgi.Response,
    message: str,
    status_code: int = 200,
    **payload: Any,
) -> None:
    """Set {"statusCode", "success": true, "message", ...payload} on resp."""
    resp.status = falcon.code_to_http_status(status_code)
    resp.media = {"statusCode": status_code, "success": True, "message": message, **payload}


def actor_from(req: falcon.asgi.Request):
    """Resolved actor or None (resources let the use case raise 401)."""
    return getattr(req.context, "user", None)
