from fastapi import APIRouter

from sysviz.api.http import auth, designs, teams, activity, health
from sysviz.api.ws import relay

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(designs.router)
api_router.include_router(teams.router)
api_router.include_router(activity.router)
api_router.include_router(relay.router)
