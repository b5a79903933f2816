from fastapi import APIRouter

from bookshelf.api.v1.endpoints import (
    auth,
    books,
    migrate,
    reading_sessions,
    stats,
    user_settings,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(books.router, prefix="/books", tags=["books"])
api_router.include_router(
    reading_sessions.router, prefix="/reading-sessions", tags=["reading-sessions"]
)
api_router.include_router(user_settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
api_router.include_router(migrate.router, prefix="/migrate", tags=["migration"])
