"""
Request dependencies. Long-lived clients are owned by the application
lifespan and read from app.state; nothing here is created at import time.
"""

from fastapi import Depends, Request
from supabase import Client
import httpx

from pushdeploy.config.settings import Settings
from pushdeploy.core.errors import ConfigError
from pushdeploy.database.supabase_client import get_supabase
from pushdeploy.modules.deployments.dispatch import DispatchGateway
from pushdeploy.modules.deployments.service import DeploymentStatusStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        raise ConfigError("HTTP client is not initialised")
    return client


def get_status_store(supabase: Client = Depends(get_supabase)) -> DeploymentStatusStore:
    return DeploymentStatusStore(supabase)


def get_dispatch_gateway(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> DispatchGateway:
    return DispatchGateway(
        http_client,
        token=settings.github_token,
        api_url=settings.github_api_url,
        workflow_file=settings.github_workflow_file,
        default_ref=settings.default_ref,
    )
