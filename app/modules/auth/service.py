import hashlib
import logging
import threading
import time
from supabase import Client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from fastapi import HTTPException
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

# Short-lived cache for get_current_user; every page load and submit resolves the same cookie token
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500
_AUTH_CACHE_LOCK = threading.Lock()


def _token_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def _cache_get(cache_key: str, now: float) -> Optional[Dict[str, Any]]:
    with _AUTH_CACHE_LOCK:
        entry = _AUTH_USER_CACHE.get(cache_key)
        if entry is None:
            return None
        user_data, expiry = entry
        if now < expiry:
            return user_data
        del _AUTH_USER_CACHE[cache_key]
        return None


def _cache_put(cache_key: str, user_data: Dict[str, Any], now: float) -> None:
    with _AUTH_CACHE_LOCK:
        if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
            expired = [k for k, (_, expiry) in _AUTH_USER_CACHE.items() if expiry <= now]
            for k in expired:
                del _AUTH_USER_CACHE[k]
        if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
            _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)


def _cache_evict(cache_key: str) -> None:
    with _AUTH_CACHE_LOCK:
        _AUTH_USER_CACHE.pop(cache_key, None)


def clear_auth_cache() -> None:
    with _AUTH_CACHE_LOCK:
        _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client, session_client_factory: Optional[Callable[[], Client]] = None):
        self.supabase = supabase
        # sign_up / sign_in store a session on the client they run on
        self.session_client_factory = session_client_factory

    def _session_client(self) -> Client:
        if self.session_client_factory is None:
            return self.supabase
        return self.session_client_factory()

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth"""
        try:
            user_metadata = {}
            if register_data.full_name:
                user_metadata["full_name"] = register_data.full_name

            auth_response = self._session_client().auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                message="User registered successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            logger.error(f"Registration failed: {error_message}")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self._session_client().auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            logger.error(f"Login failed: {error_message}")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve an access token to the Supabase Auth user. Uses a short TTL cache."""
        try:
            cache_key = _token_key(token)
            now = time.monotonic()
            cached = _cache_get(cache_key, now)
            if cached is not None:
                return cached
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
            }
            _cache_put(cache_key, user_data, now)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth and drop the cached identity for the token"""
        _cache_evict(_token_key(token))
        try:
            # Tokens are stateless JWTs; sign_out only ends the client-side session
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Supabase sign_out failed: {e}")
            return False
