from fastapi import Request
from supabase import create_client, Client, ClientOptions
from pushdeploy.config.settings import Settings
from pushdeploy.core.errors import ConfigError


def create_supabase(settings: Settings) -> Client:
    """Build the Supabase client. Prefers the service_role key (bypasses RLS) when it is set."""
    key = settings.supabase_service_role_key or settings.supabase_key
    if not settings.supabase_url or not key:
        raise ConfigError("Supabase is not configured")
    options = ClientOptions(postgrest_client_timeout=settings.supabase_timeout_seconds)
    return create_client(settings.supabase_url, key, options=options)


def get_supabase(request: Request) -> Client:
    client = getattr(request.app.state, "supabase", None)
    if client is None:
        raise ConfigError("Supabase is not configured")
    return client
