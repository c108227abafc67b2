"""Password share API: one-time reveal of a new password handed to the partner."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import get_secret_handoff_service
from app.application.services.secret_handoff_service import SecretHandoffService
from app.core.limiter import limit_links
from app.schemas.password_reset import PasswordShareResponse

router = APIRouter()


@router.get("/{token}", response_model=PasswordShareResponse)
@limit_links
async def reveal_password_share(
    request: Request,
    token: str,
    service: Annotated[SecretHandoffService, Depends(get_secret_handoff_service)],
):
    """Return the shared password once; any later request for the same token fails."""
    return PasswordShareResponse(password=await service.reveal(token))
