from fastapi import APIRouter
from planner.api.routes import transcripts, plans

api_router = APIRouter()

api_router.include_router(transcripts.router, prefix="/transcripts", tags=["transcripts"])
api_router.include_router(plans.router, prefix="/plans", tags=["plans"])
