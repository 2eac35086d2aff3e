"""
Core dependencies for resolving the signed-in user's session
"""

from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.database.supabase_client import create_anon_client, get_supabase
from app.modules.auth.schemas import SessionContext
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase, session_client_factory=create_anon_client)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    user_data = auth_service.get_current_user(token)
    return user_data


def get_api_session(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> SessionContext:
    """Session for JSON API routes; a missing or invalid Bearer token is a 401"""
    token = credentials.credentials
    user_data = auth_service.get_current_user(token)
    return SessionContext.from_user_data(user_data, token)


def get_optional_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[SessionContext]:
    """Session for HTML pages: cookie first, then Bearer header. Invalid tokens yield None."""
    token = request.cookies.get(settings.auth_cookie_name)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        return None
    try:
        user_data = auth_service.get_current_user(token)
    except HTTPException as e:
        logger.info(f"Discarding unusable session token: {e.detail}")
        return None
    return SessionContext.from_user_data(user_data, token)
