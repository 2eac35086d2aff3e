from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from app.database.supabase_client import create_user_client
from app.modules.auth.schemas import SessionContext
from app.modules.profiles.form import ErrorKind, FormResult, ProfileForm
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse, ProfileErrorResponse
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_api_session, get_optional_session
from supabase import Client
from typing import Callable, Optional

router = APIRouter(prefix="/profile", tags=["profile"])

STATUS_BY_KIND = {
    ErrorKind.AUTH_MISSING: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.LOAD_FAILURE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.NOT_LOADED: status.HTTP_409_CONFLICT,
    ErrorKind.BUSY: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.SAVE_FAILURE: status.HTTP_502_BAD_GATEWAY,
}

ERROR_RESPONSES = {
    code: {"model": ProfileErrorResponse}
    for code in sorted(set(STATUS_BY_KIND.values()))
}


def get_user_client_factory() -> Callable[[str], Client]:
    return create_user_client


def get_profile_service(
    session: SessionContext = Depends(get_api_session),
    client_factory: Callable[[str], Client] = Depends(get_user_client_factory)
) -> ProfileService:
    """Profile store acting as the session user"""
    return ProfileService(client_factory(session.access_token))


def get_optional_profile_service(
    session: Optional[SessionContext] = Depends(get_optional_session),
    client_factory: Callable[[str], Client] = Depends(get_user_client_factory)
) -> Optional[ProfileService]:
    """Same as get_profile_service for pages; None when nobody is signed in"""
    if session is None:
        return None
    return ProfileService(client_factory(session.access_token))


def status_for(result: FormResult) -> int:
    return STATUS_BY_KIND.get(result.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_response(result: FormResult) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(result),
        content={"detail": result.message or "", "kind": result.kind.value},
    )


@router.get("", response_model=ProfileResponse, responses=ERROR_RESPONSES)
def get_profile(
    session: SessionContext = Depends(get_api_session),
    service: ProfileService = Depends(get_profile_service)
):
    """Current user's profile; a user without a saved row gets {id} only"""
    form = ProfileForm(service, session)
    result = form.load()
    if not result.ok:
        return error_response(result)
    return form.profile


@router.put("", response_model=ProfileResponse, responses=ERROR_RESPONSES)
def update_profile(
    profile_data: ProfileUpdate,
    session: SessionContext = Depends(get_api_session),
    service: ProfileService = Depends(get_profile_service)
):
    """Upsert the current user's profile. Fields omitted from the body keep their stored values."""
    form = ProfileForm(service, session)
    result = form.load()
    if not result.ok:
        return error_response(result)
    form.apply_changes(profile_data)
    result = form.save()
    if not result.ok:
        return error_response(result)
    return form.profile
