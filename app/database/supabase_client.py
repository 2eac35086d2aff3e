from supabase import create_client, Client
from app.config import settings


class SupabaseClient:
    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        """Shared anon-key client; only used for stateless auth.get_user() lookups."""
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def reset_client(cls):
        cls._client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def create_anon_client() -> Client:
    """Fresh anon-key client. Sign-in stores a session on the client, so it must not be shared."""
    return create_client(settings.supabase_url, settings.supabase_key)


def create_user_client(access_token: str) -> Client:
    """Client whose table queries run as the user owning access_token, so RLS applies."""
    client = create_anon_client()
    client.postgrest.auth(access_token)
    return client
