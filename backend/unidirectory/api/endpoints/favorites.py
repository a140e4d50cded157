"""
Favorites endpoints - all routes require a bearer token
"""
from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from unidirectory.core.database import get_db
from unidirectory.core.exceptions import InternalError, UniDirectoryError, ValidationError
from unidirectory.core.logging_config import bind_log_context, logger
from unidirectory.modules.auth.dependencies import require_auth
from unidirectory.schemas.favorite import FavoriteCreate, FavoriteResponse, FavoriteWithUniversity
from unidirectory.services.favorite_service import FavoriteService
from unidirectory.utils.pagination import parse_pagination, create_paginated_response

router = APIRouter(prefix="/favorites", tags=["favorites"], dependencies=[Depends(require_auth)])


@router.get("")
async def list_favorites(
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    db: AsyncSession = Depends(get_db)
):
    """List favorites with their universities, one page at a time"""
    pagination = parse_pagination(page, page_size)

    try:
        favorites, total = await FavoriteService(db).list_favorites(pagination)
    except Exception as e:
        logger.log_error_with_context(e, "favorites.list")
        raise InternalError(str(e)) from e

    return {
        "statusCode": 200,
        "data": [
            FavoriteWithUniversity.model_validate(f).model_dump(by_alias=True, mode="json")
            for f in favorites
        ],
        **create_paginated_response(total, pagination),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_favorite(
    payload: Optional[FavoriteCreate] = Body(None),
    db: AsyncSession = Depends(get_db)
):
    """Bookmark a university"""
    if payload is None or not payload.university_id:
        raise ValidationError("universityId is required", field="universityId")
    bind_log_context(university_id=payload.university_id)

    try:
        favorite = await FavoriteService(db).create_favorite(payload.university_id)
        bind_log_context(favorite_id=favorite.id)
    except UniDirectoryError:
        raise
    except Exception as e:
        logger.log_error_with_context(e, "favorites.create")
        raise InternalError(str(e)) from e

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "statusCode": 201,
            "data": FavoriteResponse.model_validate(favorite).model_dump(by_alias=True, mode="json"),
        },
    )


@router.delete("")
async def delete_favorite(
    favorite_id: Optional[str] = Query(None, alias="id"),
    db: AsyncSession = Depends(get_db)
):
    """Remove a favorite by id"""
    if not favorite_id:
        raise ValidationError("id parameter is required", field="id")
    try:
        parsed_id = int(favorite_id)
    except ValueError:
        raise ValidationError("id parameter must be an integer", field="id")
    bind_log_context(favorite_id=parsed_id)

    try:
        deleted = await FavoriteService(db).delete_favorite(parsed_id)
    except UniDirectoryError:
        raise
    except Exception as e:
        logger.log_error_with_context(e, "favorites.delete")
        raise InternalError(str(e)) from e

    return {
        "statusCode": 200,
        "data": FavoriteResponse.model_validate(deleted).model_dump(by_alias=True, mode="json"),
    }
