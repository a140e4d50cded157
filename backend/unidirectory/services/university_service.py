from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from unidirectory.core.logging_config import logger
from unidirectory.models.university import University
from unidirectory.utils.pagination import ContainsFilter, ListQuery, PaginationParams


class UniversityService:
    """Read-only access to the university directory"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def build_filter(country: Optional[str] = None, name: Optional[str] = None) -> ContainsFilter:
        return ContainsFilter(University, country=country, name=name)

    async def search(
        self,
        pagination: PaginationParams,
        country: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Tuple[List[University], int]:
        """Return one page of universities matching the filter, plus the total match count"""
        filters = self.build_filter(country=country, name=name)
        logger.debug(
            f"[Universities] search where={filters.where} "
            f"skip={pagination.skip} take={pagination.take}"
        )
        query = ListQuery(University, pagination, conditions=filters.conditions)
        return await query.execute(self.db)
