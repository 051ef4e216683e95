from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse
from pushdeploy.config.settings import Settings
from pushdeploy.core.dependencies import get_settings, get_status_store
from pushdeploy.core.errors import AuthError, PayloadError, UpstreamError
from pushdeploy.database.supabase_client import get_supabase
from pushdeploy.modules.webhooks.normalizer import normalize, parse_event
from pushdeploy.modules.webhooks.signature import SIGNATURE_HEADER, verify_signature
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])

EVENT_HEADER = "X-GitHub-Event"


@router.post("/webhook")
async def receive_webhook(
    request: Request,
    settings: Settings = Depends(get_settings)
):
    """
    GitHub workflow_run deliveries.
    The signature is checked against the raw body before anything is parsed;
    a non-2xx answer makes GitHub redeliver.
    """
    body = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    if not verify_signature(body, signature, settings.github_webhook_secret):
        if not settings.github_webhook_secret:
            logger.warning("GITHUB_WEBHOOK_SECRET not set, rejecting webhook")
        else:
            logger.warning(f"Rejected webhook with {'invalid' if signature else 'missing'} signature")
        raise AuthError()

    if request.headers.get(EVENT_HEADER) == "ping":
        return PlainTextResponse("Pong")

    try:
        record = normalize(parse_event(body), settings.preview_domain)
    except PayloadError:
        return PlainTextResponse("Bad Request", status_code=400)

    # Supabase is only looked up for deliveries that passed the signature check
    store = get_status_store(get_supabase(request))
    try:
        await run_in_threadpool(store.upsert, record)
    except UpstreamError:
        return PlainTextResponse("Internal Server Error", status_code=500)

    return PlainTextResponse("Webhook received")
