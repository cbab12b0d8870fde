from fastapi import APIRouter
from app.api.v1.endpoints import auth, users, events, programs, surveys, milestones, donations

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
api_router.include_router(events.templates_router, prefix="/event-templates", tags=["events"])
api_router.include_router(programs.router, prefix="/programs", tags=["programs"])
api_router.include_router(surveys.router, prefix="/surveys", tags=["surveys"])
api_router.include_router(milestones.router, prefix="/milestones", tags=["milestones"])
api_router.include_router(donations.router, prefix="/donations", tags=["donations"])
