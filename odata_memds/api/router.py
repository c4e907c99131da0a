from fastapi import APIRouter

from odata_memds.api.routers import entity_sets

api_router = APIRouter()

api_router.include_router(entity_sets.router)
