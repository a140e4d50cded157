from unidirectory.services.university_service import UniversityService
from unidirectory.services.favorite_service import FavoriteService
from unidirectory.services.auth_service import verify_credentials

__all__ = [
    "UniversityService",
    "FavoriteService",
    "verify_credentials",
]
