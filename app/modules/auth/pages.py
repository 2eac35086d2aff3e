import logging
from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from app.config import settings
from app.core.dependencies import get_auth_service
from app.core.templates import templates
from app.modules.auth.schemas import LoginRequest
from app.modules.auth.service import AuthService
from typing import Optional

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth-pages"], include_in_schema=False)

DEFAULT_NEXT = "/dashboard/profile"


def safe_next(next_path: Optional[str]) -> str:
    """Only same-site absolute paths are followed after sign-in."""
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return DEFAULT_NEXT
    return next_path


@router.get(settings.auth_redirect_path)
async def auth_page(request: Request, next: Optional[str] = None):
    return templates.TemplateResponse(
        request, "auth.html", {"next": safe_next(next), "error": None, "email": ""}
    )


@router.post(settings.auth_redirect_path)
def auth_submit(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    next: str = Form(DEFAULT_NEXT),
    service: AuthService = Depends(get_auth_service),
):
    target = safe_next(next)
    try:
        token = service.login(LoginRequest(email=email, password=password))
    except (HTTPException, ValidationError) as e:
        detail = e.detail if isinstance(e, HTTPException) else "Invalid email or password"
        return templates.TemplateResponse(
            request,
            "auth.html",
            {"next": target, "error": detail, "email": email},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    logger.info(f"User {token.user_id} signed in")
    response = RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        settings.auth_cookie_name,
        token.access_token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return response


@router.post(f"{settings.auth_redirect_path}/logout")
def auth_logout(request: Request, service: AuthService = Depends(get_auth_service)):
    token = request.cookies.get(settings.auth_cookie_name)
    if token:
        service.logout(token)
    response = RedirectResponse(settings.auth_redirect_path, status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.auth_cookie_name)
    return response
