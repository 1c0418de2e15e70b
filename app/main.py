from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging

from app.api.health import router as health_router
from app.api.root import router as root_router
from app.api.employees import router as employees_router
from app.api.leave import router as leave_router
from app.api.masters import router as masters_router

setup_logging()

app = FastAPI(title="HR Records Service")

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag"],
)

register_exception_handlers(app)

app.include_router(root_router)
app.include_router(health_router)
app.include_router(employees_router)
app.include_router(leave_router)
app.include_router(masters_router)
