"""GitHub Actions workflow dispatch for the deploy button."""

from typing import Optional
import logging

import httpx

from pushdeploy.core.errors import ClientInputError, ConfigError
from pushdeploy.modules.deployments.schemas import DispatchResult

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Deployment triggered successfully"
FAILURE_MESSAGE = "Failed to trigger deployment"
MISSING_OWNER_OR_REPO = "Missing owner or repo"


class DispatchGateway:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token: Optional[str],
        api_url: str = "https://api.github.com",
        workflow_file: str = "deploy.yml",
        default_ref: str = "main",
    ):
        self.http_client = http_client
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.workflow_file = workflow_file
        self.default_ref = default_ref

    def _headers(self) -> dict:
        if not self.token:
            raise ConfigError("GitHub token not configured")
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def trigger(self, owner: Optional[str], repo: Optional[str], ref: Optional[str] = None) -> DispatchResult:
        """Start the deploy workflow for owner/repo at ref. Never retries."""
        if not owner or not repo:
            raise ClientInputError(MISSING_OWNER_OR_REPO)
        headers = self._headers()
        ref = ref or self.default_ref
        url = f"{self.api_url}/repos/{owner}/{repo}/actions/workflows/{self.workflow_file}/dispatches"

        try:
            resp = await self.http_client.post(url, headers=headers, json={"ref": ref})
        except httpx.HTTPError as e:
            logger.error(f"Dispatch request for {owner}/{repo} failed: {str(e)}")
            return DispatchResult(ok=False, status_code=500, error=str(e) or FAILURE_MESSAGE)

        if resp.status_code == 204:
            logger.info(f"Dispatched {self.workflow_file} for {owner}/{repo}@{ref}")
            return DispatchResult(ok=True, status_code=200, message=SUCCESS_MESSAGE)

        error = _provider_message(resp) or FAILURE_MESSAGE
        logger.warning(f"GitHub rejected dispatch for {owner}/{repo}: {resp.status_code} {error}")
        return DispatchResult(ok=False, status_code=resp.status_code, error=error)


def _provider_message(resp: httpx.Response) -> Optional[str]:
    """GitHub errors look like {"message": "...", "documentation_url": "..."}"""
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None
