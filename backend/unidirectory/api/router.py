from fastapi import APIRouter
from unidirectory.api.endpoints import auth, favorites, health, universities

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(universities.router)
api_router.include_router(favorites.router)
api_router.include_router(auth.router)
