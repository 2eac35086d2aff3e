"""
Profile form workflow: load the signed-in user's profile, apply edits, save.

One ProfileForm lives for one request. Every failure is turned into form state
(error / success_message) plus a FormResult; nothing raises out of load() or save().
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional
from pydantic import BaseModel
from app.config import settings
from app.modules.auth.schemas import SessionContext
from app.modules.profiles import save_guard
from app.modules.profiles.schemas import ProfileResponse, ProfileUpdate
from app.modules.profiles.service import ProfileService, ProfileStoreError

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load profile"
SAVE_FAILED_MESSAGE = "Failed to update profile"
SAVE_SUCCESS_MESSAGE = "Profile updated successfully"
USERNAME_TAKEN_MESSAGE = "Username is already taken"
SAVE_BUSY_MESSAGE = "A save is already in progress"

EDITABLE_FIELDS = ("full_name", "username", "website", "bio")


class FormStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    LOAD_ERROR = "load_error"
    SAVING = "saving"
    REDIRECTED = "redirected"


class ErrorKind(str, Enum):
    AUTH_MISSING = "auth_missing"
    LOAD_FAILURE = "load_failure"
    NOT_LOADED = "not_loaded"
    BUSY = "busy"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    SAVE_FAILURE = "save_failure"


class FormResult(BaseModel):
    ok: bool
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def username_error(username: Optional[str], min_length: int) -> Optional[str]:
    """Validation message for a username, or None when it is acceptable."""
    if username and len(username) < min_length:
        return f"Username must be at least {min_length} characters long"
    return None


class ProfileForm:
    def __init__(
        self,
        service: Optional[ProfileService],
        session: Optional[SessionContext],
        clock: Callable[[], datetime] = utcnow,
        username_min_length: Optional[int] = None,
    ):
        self.service = service
        self.session = session
        self.clock = clock
        if username_min_length is None:
            username_min_length = settings.username_min_length
        self.username_min_length = username_min_length

        self.status = FormStatus.IDLE
        self.profile: Optional[ProfileResponse] = None
        self.is_loading = False
        self.is_saving = False
        self.error: Optional[str] = None
        self.success_message: Optional[str] = None
        self.redirect_to: Optional[str] = None
        self.refresh_requested = False

    def load(self) -> FormResult:
        """Fetch the session user's profile into the form, or seed {id} when no row exists"""
        self.status = FormStatus.LOADING
        self.is_loading = True
        try:
            if self.session is None:
                self.redirect_to = settings.auth_redirect_path
                self.status = FormStatus.REDIRECTED
                return FormResult(ok=False, kind=ErrorKind.AUTH_MISSING)

            user_id = self.session.user_id
            row = self.service.get_profile(user_id)
            self.profile = row or ProfileResponse(id=user_id)
            self.status = FormStatus.READY
            return FormResult(ok=True)
        except Exception as e:
            logger.error(f"Error fetching profile: {e}", exc_info=True)
            self.error = LOAD_FAILED_MESSAGE
            self.status = FormStatus.LOAD_ERROR
            return FormResult(ok=False, kind=ErrorKind.LOAD_FAILURE, message=LOAD_FAILED_MESSAGE)
        finally:
            self.is_loading = False

    def apply_changes(self, changes: ProfileUpdate) -> None:
        """Copy the fields set on changes into the loaded profile; the id is never touched"""
        if self.profile is None:
            return
        updates = changes.model_dump(exclude_unset=True, include=set(EDITABLE_FIELDS))
        self.profile = self.profile.model_copy(update=updates)

    def save(self) -> FormResult:
        """Validate and upsert the current field values"""
        if self.profile is None or not self.profile.id:
            return FormResult(ok=False, kind=ErrorKind.NOT_LOADED)

        user_id = self.profile.id
        if self.is_saving or not save_guard.acquire(user_id):
            logger.warning(f"Rejected concurrent profile save for user {user_id}")
            if not self.is_saving:
                self.error = SAVE_BUSY_MESSAGE
            return FormResult(ok=False, kind=ErrorKind.BUSY, message=SAVE_BUSY_MESSAGE)

        self.is_saving = True
        self.status = FormStatus.SAVING
        self.error = None
        self.success_message = None
        self.refresh_requested = False
        try:
            invalid = username_error(self.profile.username, self.username_min_length)
            if invalid:
                logger.info(f"Profile save for user {user_id} failed validation")
                return self._fail(ErrorKind.VALIDATION, invalid)

            record = {
                "id": user_id,
                "full_name": self.profile.full_name,
                "username": self.profile.username,
                "website": self.profile.website,
                "bio": self.profile.bio,
                "updated_at": self.clock().isoformat(),
            }
            self.profile = self.service.upsert_profile(record)
            self.success_message = SAVE_SUCCESS_MESSAGE
            self.refresh_requested = True
            logger.info(f"Profile saved for user {user_id}")
            return FormResult(ok=True, message=SAVE_SUCCESS_MESSAGE)
        except ProfileStoreError as e:
            if e.is_unique_violation:
                logger.info(f"Username conflict for user {user_id}")
                return self._fail(ErrorKind.CONFLICT, USERNAME_TAKEN_MESSAGE)
            logger.error(f"Profile save failed for user {user_id}: code={e.code} {e}")
            return self._fail(ErrorKind.SAVE_FAILURE, e.message or SAVE_FAILED_MESSAGE)
        except Exception as e:
            logger.exception(f"Unexpected error saving profile for user {user_id}")
            return self._fail(ErrorKind.SAVE_FAILURE, str(e) or SAVE_FAILED_MESSAGE)
        finally:
            self.is_saving = False
            self.status = FormStatus.READY
            save_guard.release(user_id)

    def _fail(self, kind: ErrorKind, message: str) -> FormResult:
        self.error = message
        return FormResult(ok=False, kind=kind, message=message)
