"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import account_deletion, auth, health, password_shares

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(
    password_shares.router, prefix="/password-shares", tags=["password-shares"]
)
api_router.include_router(
    account_deletion.router, prefix="/accounts", tags=["account-deletion"]
)
