"""API v1 router."""
from fastapi import APIRouter

from hoa_intake.api.v1 import associations, imports

api_router: APIRouter = APIRouter()
api_router.include_router(imports.router, tags=["imports"])
api_router.include_router(associations.router, tags=["associations"])
