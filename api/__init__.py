"""API module - REST endpoints."""
from api.system import router as system_router

__all__ = [
    "system_router",
]
