from pydantic import BaseModel, ConfigDict
from typing import Optional


class Repository(BaseModel):
    model_config = ConfigDict(extra="ignore")

    full_name: str


class WorkflowRun(BaseModel):
    model_config = ConfigDict(extra="ignore")

    conclusion: Optional[str] = None  # success, failure, cancelled, ... once the run finishes
    status: Optional[str] = None  # queued, in_progress, completed
    head_branch: Optional[str] = None


class WorkflowRunEvent(BaseModel):
    """The subset of a GitHub workflow_run delivery the status pipeline reads"""
    model_config = ConfigDict(extra="ignore")

    action: Optional[str] = None
    repository: Repository
    workflow_run: Optional[WorkflowRun] = None
