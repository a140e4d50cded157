"""
University search endpoint
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import time

from unidirectory.core.database import get_db
from unidirectory.core.exceptions import InternalError
from unidirectory.core.logging_config import bind_log_context, logger
from unidirectory.schemas.university import UniversityResponse
from unidirectory.services.university_service import UniversityService
from unidirectory.utils.pagination import parse_pagination, create_paginated_response

router = APIRouter(prefix="/universities", tags=["universities"])


@router.get("")
async def search_universities(
    country: Optional[str] = Query(None, description="Case-insensitive substring of the country"),
    name: Optional[str] = Query(None, description="Case-insensitive substring of the name"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    db: AsyncSession = Depends(get_db)
):
    """
    Search universities by country and name, one page at a time.

    responseTime is the wall-clock time spent in the database, in ms.
    """
    pagination = parse_pagination(page, page_size)
    bind_log_context(
        country=country, name_filter=name, page=pagination.page, page_size=pagination.page_size
    )
    start_time = time.perf_counter()

    try:
        universities, total = await UniversityService(db).search(
            pagination, country=country, name=name
        )
    except Exception as e:
        logger.log_error_with_context(e, "universities.search")
        raise InternalError(str(e), public_message="Internal Server Error") from e

    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.log_db_query("search", "universities", duration_ms, rows=len(universities), total=total)

    return {
        "statusCode": 200,
        "responseTime": int(round(duration_ms)),
        "data": [
            UniversityResponse.model_validate(u).model_dump(by_alias=True, mode="json")
            for u in universities
        ],
        **create_paginated_response(total, pagination),
    }
