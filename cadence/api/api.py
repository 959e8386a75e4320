# cadence/api/api.py

from fastapi import APIRouter

from cadence.api.endpoints import occurrences, recurrences

api_router = APIRouter()

api_router.include_router(occurrences.router, prefix="/occurrences", tags=["Occurrences"])
api_router.include_router(recurrences.router, prefix="/recurrences", tags=["Recurrences"])
