import logging
from urllib.parse import urlencode
from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from app.core.dependencies import get_optional_session
from app.core.templates import templates
from app.modules.auth.schemas import SessionContext
from app.modules.profiles.form import ProfileForm, SAVE_SUCCESS_MESSAGE
from app.modules.profiles.routes import get_optional_profile_service, status_for
from app.modules.profiles.schemas import ProfileUpdate
from app.modules.profiles.service import ProfileService
from typing import Optional

logger = logging.getLogger(__name__)

PROFILE_PAGE_PATH = "/dashboard/profile"

router = APIRouter(tags=["profile-pages"], include_in_schema=False)


def _redirect_to_auth(form: ProfileForm) -> RedirectResponse:
    query = urlencode({"next": PROFILE_PAGE_PATH})
    return RedirectResponse(f"{form.redirect_to}?{query}", status_code=status.HTTP_303_SEE_OTHER)


def _render(request: Request, form: ProfileForm, status_code: int = status.HTTP_200_OK):
    return templates.TemplateResponse(
        request,
        "profile.html",
        {
            "profile": form.profile,
            "error": form.error,
            "success_message": form.success_message,
            "is_saving": form.is_saving,
        },
        status_code=status_code,
    )


@router.get(PROFILE_PAGE_PATH)
def profile_page(
    request: Request,
    saved: bool = False,
    session: Optional[SessionContext] = Depends(get_optional_session),
    service: Optional[ProfileService] = Depends(get_optional_profile_service),
):
    form = ProfileForm(service, session)
    result = form.load()
    if form.redirect_to:
        return _redirect_to_auth(form)
    if saved and result.ok:
        form.success_message = SAVE_SUCCESS_MESSAGE
    return _render(request, form)


@router.post(PROFILE_PAGE_PATH)
def profile_submit(
    request: Request,
    full_name: str = Form(""),
    username: str = Form(""),
    website: str = Form(""),
    bio: str = Form(""),
    session: Optional[SessionContext] = Depends(get_optional_session),
    service: Optional[ProfileService] = Depends(get_optional_profile_service),
):
    form = ProfileForm(service, session)
    result = form.load()
    if form.redirect_to:
        return _redirect_to_auth(form)
    if not result.ok:
        return _render(request, form, status_for(result))

    form.apply_changes(ProfileUpdate(full_name=full_name, username=username, website=website, bio=bio))
    result = form.save()
    if result.ok and form.refresh_requested:
        # Post/redirect/get so the page re-renders from the stored row
        return RedirectResponse(f"{PROFILE_PAGE_PATH}?saved=1", status_code=status.HTTP_303_SEE_OTHER)
    return _render(request, form, status_for(result))
