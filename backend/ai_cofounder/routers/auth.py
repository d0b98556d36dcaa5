import logging

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from ai_cofounder.api_models import RegisterRequest, RegisterResponse, RegisteredUser
from ai_cofounder.dependencies import get_supabase_client
from ai_cofounder.exceptions import StorageError
from ai_cofounder.services.database import CofounderDatabase

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=RegisterResponse)
async def register(
    body: RegisterRequest,
    supabase: Client = Depends(get_supabase_client),
):
    """Signs the user up with Supabase Auth and creates their profile row."""
    email = body.email.strip()
    if not email or not body.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email and password are required")

    try:
        auth_response = supabase.auth.sign_up({"email": email, "password": body.password})
    except Exception as e:
        # Supabase Auth errors (weak password, already registered ...) carry a readable message.
        log.warning("Sign-up failed for %s: %s", email, e)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=getattr(e, "message", None) or str(e))

    auth_user = getattr(auth_response, "user", None)
    if auth_user is None:
        return RegisterResponse(message="Check your email to confirm the registration")

    try:
        CofounderDatabase(supabase).create_user(auth_user.id, auth_user.email or email, body.name)
    except StorageError as e:
        log.error("Failed to create user profile for %s: %s", auth_user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create user profile")

    return RegisterResponse(user=RegisteredUser(id=str(auth_user.id), email=auth_user.email or email))
