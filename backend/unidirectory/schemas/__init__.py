# Pydantic schemas
from unidirectory.schemas.university import UniversityResponse
from unidirectory.schemas.favorite import (
    FavoriteCreate,
    FavoriteResponse,
    FavoriteWithUniversity,
)
from unidirectory.schemas.auth import UserLogin, LoginResponse

__all__ = [
    "UniversityResponse",
    "FavoriteCreate",
    "FavoriteResponse",
    "FavoriteWithUniversity",
    "UserLogin",
    "LoginResponse",
]
