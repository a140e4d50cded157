from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from unidirectory.core.exceptions import InvalidCredentialsError
from unidirectory.core.security import verify_password
from unidirectory.models.user import User


async def verify_credentials(db: AsyncSession, email: str, password: str) -> User:
    """
    Look up a user by exact email and check the password.

    Unknown email and wrong password both raise InvalidCredentialsError so
    the two cases cannot be told apart by the caller.
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(password, user.password):
        raise InvalidCredentialsError()

    return user
