"""Authentication endpoints."""
from fastapi import APIRouter, HTTPException, Request, Response

from eventsync.schemas import AdminLoginRequest, SuccessResponse
from eventsync.core.security import verify_admin_credentials, create_access_token
from eventsync.core.rate_limit import limiter, RATE_LIMITS
from eventsync.core.logging_config import get_logger
from eventsync.core import config

logger = get_logger(__name__)
router = APIRouter()


@router.post("/admin/login", response_model=SuccessResponse)
@limiter.limit(RATE_LIMITS["admin_login"])
async def admin_login(request: Request, login: AdminLoginRequest, response: Response) -> SuccessResponse:
    """
    Authenticate the admin and set a JWT in an httpOnly cookie.

    Example:
        Request:
            POST /api/v1/auth/admin/login
            {
                "username": "admin",
                "password": "your-secure-password"
            }

        Response (200):
            {
                "success": true,
                "message": "Logged in successfully"
            }
            Set-Cookie: admin_token=eyJhbGc...; HttpOnly; SameSite=Lax

        Response (401):
            {
                "detail": "Invalid credentials"
            }
    """
    if not verify_admin_credentials(login.username, login.password):
        logger.warning("admin_login_failed", username=login.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    access_token = create_access_token(data={"is_admin": True, "sub": login.username})

    response.set_cookie(
        key="admin_token",
        value=access_token,
        httponly=True,
        secure=config.settings.ENVIRONMENT == "production",
        samesite="lax",
        max_age=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

    logger.info("admin_logged_in", username=login.username)
    return SuccessResponse(success=True, message="Logged in successfully")


@router.post("/admin/logout", response_model=SuccessResponse)
async def admin_logout(response: Response) -> SuccessResponse:
    """Clear the admin cookie. Safe to call when not logged in."""
    response.delete_cookie(key="admin_token")
    return SuccessResponse(success=True, message="Logged out successfully")
