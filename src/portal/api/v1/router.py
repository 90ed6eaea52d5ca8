from fastapi import APIRouter

from src.portal.api.v1 import admin_events, admin_users, audit, events, registrations, users

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(users.router)
api_router.include_router(events.router)
api_router.include_router(registrations.router)
api_router.include_router(admin_events.router)
api_router.include_router(admin_users.router)
api_router.include_router(audit.router)
