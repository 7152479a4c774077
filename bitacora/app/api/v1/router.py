# bitacora/app/api/v1/router.py
from fastapi import APIRouter

from bitacora.app.api.v1.endpoints import activities, auth, health, images, posts, site_settings, users

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(activities.router, prefix="/activities", tags=["activities"])
api_router.include_router(images.router, prefix="/images", tags=["images"])
api_router.include_router(site_settings.router, prefix="/site-settings", tags=["site-settings"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
