from fastapi import APIRouter

from skillcorpus.api.v1.endpoints import health, skills

v1_router = APIRouter()
v1_router.include_router(health.router, tags=["health"])
v1_router.include_router(skills.router, tags=["skills"])
