from unidirectory.models.university import University
from unidirectory.models.favorite import Favorite
from unidirectory.models.user import User

__all__ = [
    "University",
    "Favorite",
    "User",
]
