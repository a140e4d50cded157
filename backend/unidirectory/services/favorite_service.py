from typing import List, Tuple
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from unidirectory.core.database import fits_integer_column
from unidirectory.core.exceptions import FavoriteNotFoundError, UniversityNotFoundError
from unidirectory.core.logging_config import logger
from unidirectory.models.favorite import Favorite
from unidirectory.models.university import University
from unidirectory.utils.pagination import ListQuery, PaginationParams


class FavoriteService:
    """Create, list and delete favorites"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_favorites(self, pagination: PaginationParams) -> Tuple[List[Favorite], int]:
        """One page of favorites with their universities loaded, plus the total count"""
        query = ListQuery(Favorite, pagination, options=[selectinload(Favorite.university)])
        return await query.execute(self.db)

    async def create_favorite(self, university_id: int) -> Favorite:
        if not fits_integer_column(university_id):
            raise UniversityNotFoundError(university_id)

        university = await self.db.get(University, university_id)
        if university is None:
            raise UniversityNotFoundError(university_id)

        favorite = Favorite(university_id=university_id)
        self.db.add(favorite)
        await self.db.commit()
        await self.db.refresh(favorite)

        logger.info(f"[Favorites] Created favorite {favorite.id} for university {university_id}")
        return favorite

    async def delete_favorite(self, favorite_id: int) -> Favorite:
        """
        Delete by id in a single statement.

        Zero rows affected means the favorite does not exist (or a concurrent
        request removed it first), reported as FavoriteNotFoundError.
        """
        if not fits_integer_column(favorite_id):
            raise FavoriteNotFoundError(favorite_id)

        stmt = (
            delete(Favorite)
            .where(Favorite.id == favorite_id)
            .returning(Favorite)
        )
        result = await self.db.execute(stmt)
        deleted = result.scalar_one_or_none()
        if deleted is None:
            raise FavoriteNotFoundError(favorite_id)

        await self.db.commit()
        logger.info(f"[Favorites] Deleted favorite {favorite_id}")
        return deleted
