from pydantic import ValidationError
from pushdeploy.core.errors import PayloadError
from pushdeploy.modules.deployments.models import UNKNOWN_STATUS
from pushdeploy.modules.deployments.schemas import DeploymentStatus
from pushdeploy.modules.webhooks.schemas import WorkflowRunEvent
from typing import Optional
import logging
import re

logger = logging.getLogger(__name__)

_LABEL_INVALID = re.compile(r"[^a-z0-9]+")


def parse_event(raw: bytes) -> WorkflowRunEvent:
    """Validate a verified webhook body. Only repository.full_name is required."""
    try:
        event = WorkflowRunEvent.model_validate_json(raw)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "body" for err in e.errors())
        logger.warning(f"Rejected webhook payload, invalid fields: {fields}")
        raise PayloadError(f"Invalid webhook payload: {fields}")

    if not event.repository.full_name.strip():
        raise PayloadError("Invalid webhook payload: repository.full_name is empty")
    return event


def branch_label(branch: Optional[str]) -> Optional[str]:
    """
    Hostname label for a branch: lowercase, runs of anything outside [a-z0-9]
    collapsed to "-", at most 63 characters. None when nothing usable is left.
    """
    if not branch:
        return None
    label = _LABEL_INVALID.sub("-", branch.strip().lower())[:63].strip("-")
    return label or None


def preview_url_for(branch: Optional[str], preview_domain: str) -> Optional[str]:
    label = branch_label(branch)
    if label is None:
        return None
    return f"https://{label}.{preview_domain}"


def normalize(event: WorkflowRunEvent, preview_domain: str) -> DeploymentStatus:
    """Map a workflow_run event to the row stored for its repository"""
    run = event.workflow_run
    status = None
    branch = None
    if run is not None:
        # conclusion is only set once the run has finished
        status = run.conclusion or run.status
        branch = run.head_branch

    return DeploymentStatus(
        repository_name=event.repository.full_name,
        status=status or UNKNOWN_STATUS,
        preview_url=preview_url_for(branch, preview_domain),
    )
