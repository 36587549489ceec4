"""API routes"""
from fastapi import APIRouter

from app.api.routers import video_router

app = APIRouter()

app.include_router(
    video_router.router,
    tags=["Videos"],
    prefix="/v1",
)
