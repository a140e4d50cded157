from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

from unidirectory.core.exceptions import InvalidTokenError
from unidirectory.core.logging_config import bind_log_context, logger
from unidirectory.core.security import TokenClaims, TokenIssuer

# auto_error=False so a missing header reaches our own 401 body
security = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> TokenIssuer:
    """Dependency returning the application's TokenIssuer"""
    return request.app.state.token_issuer


async def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """Reject the request with a generic 401 unless it carries a valid bearer token"""
    if credentials is None:
        logger.log_auth_event(event="token", success=False, reason="Missing bearer token")
        raise InvalidTokenError()

    claims = token_issuer.verify(credentials.credentials)
    if claims is None:
        logger.log_auth_event(event="token", success=False, reason="Invalid bearer token")
        raise InvalidTokenError()

    bind_log_context(user_id=claims.user_id)
    return claims
