"""FastAPI application factory — wires everything together."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from platerelay import __version__
from platerelay.config import RelayConfig
from platerelay.formatter import StructuredFormatter
from platerelay.gateway.http_api import router as relay_router
from platerelay.llm.providers.openai import OpenAIProvider
from platerelay.relay import Relay
from platerelay.vision.client import AnnotationClient
from platerelay.vision.providers.google import GoogleVisionProvider

logger = logging.getLogger(__name__)


def build_relay(
    config: RelayConfig,
    annotator: AnnotationClient | None = None,
    formatter: StructuredFormatter | None = None,
) -> Relay:
    """Assemble the pipeline; collaborators not passed in are built from config."""
    if annotator is None:
        annotator = AnnotationClient(GoogleVisionProvider(config.google_credentials_file))
    if formatter is None:
        provider = OpenAIProvider(config.openai_api_key, config.openai_model, config.openai_base_url)
        if not provider.is_available():
            logger.warning("OPENAI_API_KEY is not set; formatting calls will fail")
        formatter = StructuredFormatter(provider, record_format=config.record_format)

    return Relay(
        annotator,
        formatter,
        evidence_labels=config.evidence_labels,
        annotate_timeout=config.annotate_timeout,
        format_timeout=config.format_timeout,
    )


def create_app(
    config: RelayConfig | None = None,
    annotator: AnnotationClient | None = None,
    formatter: StructuredFormatter | None = None,
) -> FastAPI:
    """Build and return the FastAPI application."""
    if config is None:
        config = RelayConfig.from_yaml()

    app = FastAPI(title="platerelay", version=__version__, docs_url="/docs")
    app.add_middleware(
        CORSMiddleware, allow_origins=config.cors_origins, allow_methods=["*"], allow_headers=["*"],
    )

    relay = build_relay(config, annotator=annotator, formatter=formatter)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    app.include_router(relay_router)

    # -- Health endpoint --
    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/")
    async def root():
        return {
            "name": "platerelay",
            "version": __version__,
            "ocr_provider": relay.annotator.provider.name(),
            "llm_provider": relay.formatter.provider.name(),
            "record_format": config.record_format.value,
        }

    # -- Lifecycle --
    @app.on_event("startup")
    async def startup():
        logger.info("platerelay %s started on %s:%d", __version__, config.host, config.port)
        logger.info(
            "OCR provider: %s, LLM provider: %s (%s)",
            relay.annotator.provider.name(), relay.formatter.provider.name(), config.openai_model,
        )

    @app.on_event("shutdown")
    async def shutdown():
        await relay.close()

    # Store references for testing
    app.state.config = config
    app.state.relay = relay

    return app
