from fastapi import APIRouter

from .endpoints import (
    chat_router,
    course_router,
    progress_router,
    stats_router,
    study_router,
    user_router,
)

api_router = APIRouter()

api_router.include_router(user_router.router, prefix="/users", tags=["Users"])
api_router.include_router(course_router.router, prefix="/courses", tags=["Courses"])
api_router.include_router(progress_router.router, prefix="/progress", tags=["Progress"])
api_router.include_router(chat_router.router, prefix="/chat", tags=["Chat"])
api_router.include_router(study_router.router, prefix="/study", tags=["Study"])
api_router.include_router(stats_router.router, prefix="/stats", tags=["Stats"])
