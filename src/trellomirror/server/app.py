"""FastAPI transport for webhook deliveries and manual sweeps."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from trellomirror.contracts.events import WebhookPayload
from trellomirror.contracts.exceptions import MirrorError
from trellomirror.sdk import TrelloMirror
from trellomirror.server.signature import SIGNATURE_HEADER, verify_signature

logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/webhook/card-moved"


def create_app(
    mirror: TrelloMirror,
    *,
    api_secret: str | None = None,
    callback_url: str | None = None,
    run_scheduler: bool = True,
) -> FastAPI:
    """Build the HTTP app around *mirror*.

    The lifespan opens the client, builds the list mapping and, when *run_scheduler*
    is set, runs the periodic due-date sweep until shutdown.
    """
    secret = api_secret if api_secret is not None else (mirror.credentials.api_secret if mirror.credentials else None)
    url = callback_url or mirror.config.callback_url

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with mirror:
            try:
                await mirror.initialize()
            except MirrorError:
                logger.exception("Initialization failed, list mapping is incomplete")
            sweeper = asyncio.create_task(mirror.run_periodic_sweeps(), name="periodic-sweep") if run_scheduler else None
            try:
                yield
            finally:
                if sweeper is not None:
                    sweeper.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await sweeper

    app = FastAPI(title="trellomirror", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "HEAD", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Trello mirror service is running"

    @app.api_route(WEBHOOK_PATH, methods=["GET", "HEAD", "OPTIONS", "POST"])
    async def card_moved(request: Request) -> Response:
        if request.method != "POST":
            return Response(status_code=status.HTTP_200_OK)

        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            logger.error("No webhook signature found")
            return PlainTextResponse("Unauthorized: Missing webhook signature", status_code=401)
        if not secret or not url:
            logger.error("API secret or callback URL is not configured")
            return PlainTextResponse("Internal Server Error: Missing API Secret", status_code=500)

        body = await request.body()
        if not body:
            return PlainTextResponse("Bad Request: Empty body", status_code=400)
        if not verify_signature(secret, body, url, signature):
            logger.error("Webhook signature validation failed")
            return PlainTextResponse("Unauthorized: Invalid webhook signature", status_code=401)

        try:
            payload = WebhookPayload.model_validate_json(body)
        except ValidationError:
            logger.warning("Malformed webhook payload")
            return PlainTextResponse("Bad Request: Malformed payload", status_code=400)

        if payload.action is not None:
            logger.debug("Action %s (%s) accepted", payload.action.id, payload.action.type)
            mirror.submit(payload.action)
        return Response(status_code=status.HTTP_200_OK)

    @app.post("/sweep")
    async def trigger_sweep() -> JSONResponse:
        mirror.submit_sweep()
        return JSONResponse({"status": "accepted"})

    return app
