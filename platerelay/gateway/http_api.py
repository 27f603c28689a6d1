"""HTTP adapter — multipart image upload in, response envelope out."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable
from typing import TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from platerelay.errors import ContentRejected, RelayError
from platerelay.gateway.auth import require_api_key
from platerelay.models import ImageUpload, ResponseEnvelope
from platerelay.relay import Relay

logger = logging.getLogger(__name__)

router = APIRouter(tags=["relay"])

IMAGE_FIELD = "image"
NO_IMAGE = "No image file received"
PROCESSING_FAILED = "Error processing image"
DISCONNECT_POLL_SECONDS = 0.25

T = TypeVar("T")


class ClientDisconnected(Exception):
    """The caller went away before the pipeline finished."""


def get_relay(request: Request) -> Relay:
    relay = getattr(request.app.state, "relay", None)
    if relay is None:
        raise HTTPException(503, "Relay not initialized")
    return relay


def _respond(status_code: int, envelope: ResponseEnvelope) -> JSONResponse:
    return JSONResponse(envelope.to_wire(), status_code=status_code)


async def _wait_for_disconnect(request: Request, interval: float) -> None:
    while not await request.is_disconnected():
        await asyncio.sleep(interval)


async def run_until_disconnect(
    request: Request, work: Awaitable[T], interval: float = DISCONNECT_POLL_SECONDS,
) -> T:
    """Await ``work``, cancelling it if the client disconnects first."""
    task = asyncio.ensure_future(work)
    watcher = asyncio.ensure_future(_wait_for_disconnect(request, interval))
    try:
        await asyncio.wait({task, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for pending in (watcher, task):
            if not pending.done():
                pending.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.gather(watcher, task, return_exceptions=True)

    if task.cancelled():
        raise ClientDisconnected()
    return task.result()


@router.post("/process-image", dependencies=[Depends(require_api_key)])
async def process_image(request: Request, relay: Relay = Depends(get_relay)) -> JSONResponse:
    form = await request.form()
    try:
        image = form.get(IMAGE_FIELD)
        if not isinstance(image, UploadFile):
            return _respond(400, ResponseEnvelope.fail(NO_IMAGE))

        upload = ImageUpload(
            data=await image.read(),
            content_type=image.content_type or "",
            filename=image.filename or "",
        )
    finally:
        await form.close()

    logger.info("Received file: %s size=%d", upload.filename or "<unnamed>", upload.size)

    # Single exit per outcome; nothing is sent before the pipeline settles.
    try:
        formatted = await run_until_disconnect(request, relay.process(upload))
    except ContentRejected as e:
        return _respond(400, ResponseEnvelope.fail(str(e)))
    except RelayError as e:
        return _respond(500, ResponseEnvelope.fail(PROCESSING_FAILED, str(e)))
    except ClientDisconnected:
        logger.info("Client disconnected, aborted processing of %s", upload.filename or "<unnamed>")
        return _respond(499, ResponseEnvelope.fail(PROCESSING_FAILED, "Client disconnected"))
    except Exception as e:
        logger.exception("Unexpected failure processing %s", upload.filename or "<unnamed>")
        return _respond(500, ResponseEnvelope.fail(PROCESSING_FAILED, str(e)))

    return _respond(200, ResponseEnvelope.ok(formatted))
