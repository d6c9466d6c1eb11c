"""Auth middleware - resolves the request actor from a Bearer token."""

import logging
from uuid import UUID

import falcon.asgi

from rolegate.infrastructure.auth.keycloak_provider import KeycloakProvider
from rolegate.infrastructure.auth.session_resolver import SessionResolver

logger = logging.getLogger(__name__)


class AuthMiddleware:
    """Middleware that validates the token and sets req.context.user.

    req.context.user is an Actor, or None when the token is missing,
    invalid, revoked or belongs to an unknown user.
    """

    def __init__(
        self,
        keycloak_provider: KeycloakProvider | None,
        session_resolver: SessionResolver,
    ) -> None:
        self._keycloak = keycloak_provider
        self._sessions = session_resolver

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """Extract actor from Authorization header."""
        req.context.user = None
        auth = req.get_header("Authorization")
        if not auth or not auth.startswith("Bearer ") or not self._keycloak:
            return
        token_user = await self._keycloak.decode_token(auth[7:])
        if token_user is None:
            return
        try:
            user_id = UUID(token_user.user_id)
        except ValueError:
            logger.info("Token subject is not a UUID: %r", token_user.user_id)
            return
        req.context.user = await self._sessions.resolve(user_id, token_user.issued_at)
