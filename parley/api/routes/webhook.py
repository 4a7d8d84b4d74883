"""Inbound transport webhook."""

from fastapi import APIRouter, Request

from parley.api.dependencies import EventDispatcherDep, SettingsDep
from parley.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/webhook")
async def receive_webhook(
    request: Request,
    settings: SettingsDep,
    dispatcher: EventDispatcherDep,
) -> dict[str, object]:
    """Receive one transport event.

    The body is read raw because the signature covers the exact bytes sent.

    Returns:
        {"status": "ok"}, or {"status": "ok", "deduped": true} for a
        suppressed chat-message redelivery
    """
    body = await request.body()
    result = await dispatcher.dispatch(
        body,
        signature=request.headers.get(settings.webhook.signature_header),
        api_key=request.headers.get(settings.webhook.api_key_header),
    )
    return result.to_body()
