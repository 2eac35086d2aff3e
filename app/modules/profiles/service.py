import logging
from postgrest.exceptions import APIError
from supabase import Client
from app.config import settings
from app.modules.profiles.schemas import ProfileResponse
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# PostgreSQL unique_violation
UNIQUE_VIOLATION = "23505"


class ProfileStoreError(Exception):
    """A failed read or write against the profiles table."""

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message or "Profile store request failed")
        self.message = message
        self.code = code

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION


class ProfileService:
    def __init__(self, supabase: Client, table: Optional[str] = None):
        self.supabase = supabase
        self.table = table or settings.profiles_table

    def get_profile(self, user_id: str) -> Optional[ProfileResponse]:
        """Fetch the profile row for user_id, or None when the user has not saved one yet"""
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise ProfileStoreError(e.message, e.code) from e
        except Exception as e:
            raise ProfileStoreError(str(e) or None) from e

        if not result.data:
            return None
        return ProfileResponse(**result.data[0])

    def upsert_profile(self, record: Dict[str, Any]) -> ProfileResponse:
        """Insert or update the row keyed by record["id"]"""
        try:
            result = self.supabase.table(self.table)\
                .upsert(record, on_conflict="id")\
                .execute()
        except APIError as e:
            raise ProfileStoreError(e.message, e.code) from e
        except Exception as e:
            raise ProfileStoreError(str(e) or None) from e

        if not result.data:
            # Store accepted the write but returned no representation
            logger.debug(f"Upsert for profile {record['id']} returned no rows")
            return ProfileResponse(**record)
        return ProfileResponse(**result.data[0])
