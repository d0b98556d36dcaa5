import hmac
import logging
from types import SimpleNamespace

from fastapi import Depends, HTTPException, Request, status

from ai_cofounder.dependencies import Settings, get_settings, get_supabase_client

log = logging.getLogger(__name__)


def _bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization")
    if not header or not header.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing or invalid Authorization header")
    token = header.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing or invalid Authorization header")
    return token


def _verify_demo(token: str, settings: Settings):
    if not settings.demo_auth_token or not hmac.compare_digest(token.encode(), settings.demo_auth_token.encode()):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return SimpleNamespace(id=settings.demo_user_id, email=None)


def _verify_supabase(token: str, request: Request):
    supabase = get_supabase_client(request)
    try:
        user_response = supabase.auth.get_user(token)
    except Exception as e:
        log.warning("Token verification failed: %s", e)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials")
    user = getattr(user_response, "user", None)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    return user


async def verify_token(request: Request, settings: Settings = Depends(get_settings)):
    """Dependency authenticating the caller with the configured strategy.

    ``supabase`` validates the bearer JWT against Supabase Auth; ``demo``
    accepts only ``DEMO_AUTH_TOKEN`` and maps it to ``DEMO_USER_ID``. The user
    object (with at least ``.id``) is attached to ``request.state.user``.
    """
    token = _bearer_token(request)
    if settings.auth_strategy == "demo":
        user = _verify_demo(token, settings)
    else:
        user = _verify_supabase(token, request)
    request.state.user = user
    return user
