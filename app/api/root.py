from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()

@router.get("/")
def root():
    return {
        "name": "HR Records Service",
        "environment": settings.APP_ENV,
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
    }
