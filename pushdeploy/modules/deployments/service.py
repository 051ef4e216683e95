from supabase import Client
from pushdeploy.modules.deployments.schemas import DeploymentStatus, DeploymentStatusResponse
from pushdeploy.core.errors import NotFoundError, UpstreamError
from typing import List
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

TABLE = "deployments"


class DeploymentStatusStore:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def upsert(self, record: DeploymentStatus) -> DeploymentStatus:
        """Insert or replace the status row for record.repository_name (last write wins)"""
        try:
            # Single statement so status and preview_url are never written separately
            self.supabase.table(TABLE).upsert({
                "repository_name": record.repository_name,
                "status": record.status,
                "preview_url": record.preview_url,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }, on_conflict="repository_name").execute()
        except Exception as e:
            logger.error(f"Error saving deployment status for {record.repository_name}: {str(e)}")
            raise UpstreamError(f"Failed to save deployment status: {str(e)}")

        logger.info(f"Deployment status for {record.repository_name} set to {record.status}")
        return record

    def list_statuses(self) -> List[DeploymentStatusResponse]:
        """List the current status of every repository"""
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .order("repository_name")\
                .execute()
        except Exception as e:
            logger.error(f"Error listing deployment statuses: {str(e)}")
            raise UpstreamError(f"Failed to list deployment statuses: {str(e)}")

        return [DeploymentStatusResponse(**row) for row in result.data or []]

    def get_status(self, repository_name: str) -> DeploymentStatusResponse:
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("repository_name", repository_name)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error getting deployment status: {str(e)}")
            raise UpstreamError(f"Failed to get deployment status: {str(e)}")

        # maybe_single() yields no response at all for a missing row on some client versions
        if result is None or not result.data:
            raise NotFoundError(f"No deployment status for {repository_name}")
        return DeploymentStatusResponse(**result.data)
