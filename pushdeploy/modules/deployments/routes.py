from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pushdeploy.core.dependencies import get_dispatch_gateway, get_status_store
from pushdeploy.modules.deployments.dispatch import DispatchGateway
from pushdeploy.modules.deployments.schemas import DeployRequest, DeploymentStatusResponse
from pushdeploy.modules.deployments.service import DeploymentStatusStore
from typing import List

router = APIRouter(tags=["deployments"])


@router.post("/deploy")
async def trigger_deployment(
    deploy_request: DeployRequest,
    gateway: DispatchGateway = Depends(get_dispatch_gateway)
):
    """Trigger the deploy workflow for a repository. Returns once GitHub accepts or rejects it."""
    result = await gateway.trigger(deploy_request.owner, deploy_request.repo, deploy_request.ref)
    return JSONResponse(status_code=result.status_code, content=result.body())


@router.get("/deployments", response_model=List[DeploymentStatusResponse])
def list_deployments(store: DeploymentStatusStore = Depends(get_status_store)):
    """Current status of every repository, polled by the dashboard"""
    return store.list_statuses()


@router.get("/deployments/{owner}/{repo}", response_model=DeploymentStatusResponse)
def get_deployment(
    owner: str,
    repo: str,
    store: DeploymentStatusStore = Depends(get_status_store)
):
    return store.get_status(f"{owner}/{repo}")
