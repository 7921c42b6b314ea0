# ============================================================================
# FILE: app/api/v1/endpoints/auth.py
# ============================================================================
from fastapi import APIRouter, Depends, Request, Response, status
from app.api.dependencies import get_authenticator
from app.core.cookies import clear_session_cookie, read_session_token, set_session_cookie
from app.schemas.user import LoginRequest, MessageResponse, SignupRequest, UserEnvelope
from app.services.auth_service import Authenticator
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/signup", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    response: Response,
    auth: Authenticator = Depends(get_authenticator)
):
    """
    Register a new user account and start a session
    """
    user, token = await auth.signup(payload.username, payload.email, payload.password)
    set_session_cookie(response, token, auth.codec.max_age_seconds)
    return {"user": user}

@router.post("/login", response_model=UserEnvelope)
async def login(
    payload: LoginRequest,
    response: Response,
    auth: Authenticator = Depends(get_authenticator)
):
    """
    Login with username and password
    The session token is delivered as an HTTP-only cookie
    """
    user, token = await auth.login(payload.username, payload.password)
    set_session_cookie(response, token, auth.codec.max_age_seconds)
    return {"user": user}

@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    auth: Authenticator = Depends(get_authenticator)
):
    """
    Clear the session cookie, whether or not a valid session existed
    """
    await auth.logout()
    clear_session_cookie(response)
    return {"message": "Logged out successfully"}

@router.get("/me", response_model=UserEnvelope)
async def get_current_user_info(
    request: Request,
    auth: Authenticator = Depends(get_authenticator)
):
    """
    Get current user information from the session cookie
    """
    user = await auth.get_current_user(read_session_token(request))
    return {"user": user}
