"""API v1 router -- aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from stackit.api.v1 import answers, auth, health, profile, questions

api_v1_router = APIRouter()

api_v1_router.include_router(health.router, tags=["health"])
api_v1_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_v1_router.include_router(questions.router, prefix="/questions", tags=["questions"])
api_v1_router.include_router(answers.router, prefix="/answers", tags=["answers"])
api_v1_router.include_router(profile.router, prefix="/profile", tags=["profile"])
