from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class DeploymentStatus(BaseModel):
    repository_name: str
    status: str
    preview_url: Optional[str] = None


class DeploymentStatusResponse(DeploymentStatus):
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DeployRequest(BaseModel):
    # Optional so that a missing field reaches the gateway and yields the uniform 400 error
    owner: Optional[str] = None
    repo: Optional[str] = None
    ref: Optional[str] = None


class DispatchResult(BaseModel):
    ok: bool
    status_code: int
    message: Optional[str] = None
    error: Optional[str] = None

    def body(self) -> dict:
        if self.ok:
            return {"message": self.message}
        return {"error": self.error}
