from fastapi import APIRouter, HTTPException, BackgroundTasks, Request

from config.logging_config import get_endpoint_logger
from discord_relay.models.api_models import DiscordMessageEvent, DiscordMessageEventBatch
from discord_relay.models.event_models import SUPPORTED_EVENT_KINDS

logger = get_endpoint_logger()
router = APIRouter()


def get_relay_bot(request: Request):
    relay_bot = getattr(request.app.state, "relay_bot", None)
    if relay_bot is None:
        raise HTTPException(status_code=503, detail="Relay is not running")
    return relay_bot


def _check_kind(event: DiscordMessageEvent) -> None:
    if event.kind not in SUPPORTED_EVENT_KINDS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported event kind '{event.kind}', expected one of {SUPPORTED_EVENT_KINDS}"
        )


async def process_event_background(relay_bot, event: DiscordMessageEvent):
    """Relay one event in the background."""
    try:
        role_names = {role.id: role.name for role in event.roles}
        result = await relay_bot.handle_event(event.message.to_event(event.kind, role_names))
        logger.info(f"Event {event.message.id} processed: {result['status']} ({result['message']})")
    except Exception as e:
        logger.error(f"Error processing event {event.message.id} in background: {str(e)}", exc_info=True)


@router.post("/discord/events")
async def receive_event(event: DiscordMessageEvent, request: Request, background_tasks: BackgroundTasks):
    """
    Receive a single Discord message event.

    Args:
        event: The message event envelope
        background_tasks: FastAPI background tasks

    Returns:
        Dict containing the queueing status
    """
    _check_kind(event)
    relay_bot = get_relay_bot(request)
    background_tasks.add_task(process_event_background, relay_bot, event)

    return {
        "status": "success",
        "message": "Event received and queued for relaying"
    }


@router.post("/discord/events/batch")
async def receive_events(batch: DiscordMessageEventBatch, request: Request, background_tasks: BackgroundTasks):
    """Receive several Discord message events. Each one is relayed independently."""
    for event in batch.events:
        _check_kind(event)
    relay_bot = get_relay_bot(request)

    for event in batch.events:
        background_tasks.add_task(process_event_background, relay_bot, event)

    return {
        "status": "success",
        "message": f"{len(batch.events)} events received and queued for relaying"
    }
