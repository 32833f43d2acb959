from fastapi import APIRouter
from pydantic import BaseModel, Field

from furniboard.common.exceptions import ConfigurationError, UnauthorizedError
from furniboard.common.logging import get_logger
from furniboard.common.security import create_access_token, verify_shared_password
from furniboard.config import settings

router = APIRouter(prefix="/auth", tags=["Authentication"])

logger = get_logger("api.auth")


# ---------- Schemas ----------


class ValidateRequest(BaseModel):
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


# ---------- Endpoints ----------


@router.post("/validate", response_model=TokenResponse)
async def validate(body: ValidateRequest):
    if not settings.AUTH_PASSWORD:
        logger.error("AUTH_PASSWORD is not configured")
        raise ConfigurationError("Authentication is not configured")

    if not verify_shared_password(body.password, settings.AUTH_PASSWORD):
        logger.warning("Rejected admin login attempt")
        raise UnauthorizedError("Invalid password")

    return TokenResponse(token=create_access_token({"authenticated": True}))
