# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /api/auth/login           - Get a session token
#   GET  /api/auth/verify          - Current session user
#   POST /api/auth/logout          - Drop the session (token optional)
#   POST /api/auth/change-password - New password, new token
#   POST /api/auth/forgot-password - Issue a reset code
#   POST /api/auth/reset-password  - Set a password with a reset code
#
# =============================================================================

from __future__ import annotations

from fastapi import APIRouter, Depends

from qadash.auth.context import AuthContext
from qadash.auth.policies import get_token, require_auth
from qadash.core.models import RequestModel
from qadash.services import Services, get_services

router = APIRouter(prefix="/api/auth", tags=["auth"])


# =============================================================================
# Request Models
# =============================================================================


class LoginRequest(RequestModel):
    email: str | None = None
    password: str | None = None


class ChangePasswordRequest(RequestModel):
    current_password: str | None = None
    new_password: str | None = None


class ForgotPasswordRequest(RequestModel):
    email: str | None = None


class ResetPasswordRequest(RequestModel):
    email: str | None = None
    reset_code: str | None = None
    new_password: str | None = None


# =============================================================================
# Public Endpoints
# =============================================================================


@router.post("/login")
async def login(data: LoginRequest, services: Services = Depends(get_services)):
    session = await services.accounts.login(data.email, data.password)
    return {
        "success": True,
        "token": session.token,
        "user": session.user.to_public(),
        "message": "Login successful",
    }


@router.post("/logout")
async def logout(
    token: str | None = Depends(get_token),
    services: Services = Depends(get_services),
):
    """Always succeeds; the token is dropped if one was sent."""
    await services.accounts.logout(token)
    return {"success": True, "message": "Logged out successfully"}


@router.post("/forgot-password")
async def forgot_password(data: ForgotPasswordRequest, services: Services = Depends(get_services)):
    """
    Issue a reset code.

    There is no mail delivery, so the code is part of the response.
    """
    code = await services.accounts.forgot_password(data.email)
    return {
        "success": True,
        "message": "Password reset instructions sent to your email",
        "tempResetCode": code,
        "note": "Demo: Use this code to reset your password",
    }


@router.post("/reset-password")
async def reset_password(data: ResetPasswordRequest, services: Services = Depends(get_services)):
    await services.accounts.reset_password(data.email, data.reset_code, data.new_password)
    return {
        "success": True,
        "message": "Password reset successfully. Please login with your new password.",
    }


# =============================================================================
# Authenticated Endpoints
# =============================================================================


@router.get("/verify")
async def verify(ctx: AuthContext = Depends(require_auth(allow_pending_reset=True))):
    return {"success": True, "user": ctx.user.to_public()}


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    ctx: AuthContext = Depends(require_auth(allow_pending_reset=True)),
    services: Services = Depends(get_services),
):
    """Works while a password change is pending; that is what clears it."""
    session = await services.accounts.change_password(
        ctx.user,
        data.current_password,
        data.new_password,
    )
    return {
        "success": True,
        "token": session.token,
        "user": session.user.to_public(),
        "message": "Password updated successfully",
    }
