from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from unidirectory.core.config import settings
from unidirectory.core.database import get_db
from unidirectory.core.exceptions import InternalError, InvalidCredentialsError, ValidationError
from unidirectory.core.logging_config import bind_log_context, logger
from unidirectory.core.rate_limiter import limiter
from unidirectory.core.security import TokenIssuer
from unidirectory.modules.auth.dependencies import get_token_issuer
from unidirectory.schemas.auth import UserLogin, LoginResponse
from unidirectory.services.auth_service import verify_credentials

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    credentials: Optional[UserLogin] = Body(None),
    db: AsyncSession = Depends(get_db),
    token_issuer: TokenIssuer = Depends(get_token_issuer)
):
    """Exchange email and password for a bearer token (rate limited)"""
    client_ip = request.client.host if request.client else "unknown"

    if credentials is None or not credentials.email or not credentials.password:
        raise ValidationError("email and password are required")

    try:
        user = await verify_credentials(db, credentials.email, credentials.password)
        token = token_issuer.issue(user.id, user.email)
    except InvalidCredentialsError:
        logger.log_auth_event(
            event="login",
            success=False,
            user_email=credentials.email,
            reason="Invalid credentials",
            client_ip=client_ip
        )
        raise
    except Exception as e:
        logger.log_error_with_context(e, "login", client_ip=client_ip)
        # Never echo the underlying failure on the login route
        raise InternalError("Internal server error") from e

    bind_log_context(user_id=user.id)
    logger.log_auth_event(event="login", success=True, user_email=user.email, client_ip=client_ip)

    return LoginResponse(statusCode=200, token=token)
