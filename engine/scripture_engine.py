"""
scripture_engine.py -- FastAPI application for verse matching and Pi provisioning.

Runs on ENGINE_PORT (default 3002). Configuration is read once at startup
and held on app.state; handlers never read the environment themselves.
Matching never fails: unmatched input gets a fallback verse, and AI
explanation failures fall back to the template explanation.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from engine.ai_explainer import AIExplainer
from engine.cache import ResponseCache, cache_key
from engine.classifier import build_user_request
from engine.config import AppConfig, get_environment_info, load_config, validate_configuration
from engine.errors import AppError, ErrorCode, ScripturePalError, make_error
from engine.logging_setup import configure_logging
from engine.models import VerseMatchRequest
from engine.verse_index import list_categories
from engine.verse_matcher import VerseMatcher
from provisioning.config_sender import SEND_DELAY_SECONDS, get_method_info, send_configuration
from provisioning.models import BluetoothTransport, QRCodeTransport, Transport, WifiCredentials
from provisioning.qr_payload import InvalidQRPayload, parse_qr_payload
from provisioning.scanners import (
    SCAN_DELAY_SECONDS,
    NotAPiDevice,
    scan_bluetooth_devices,
    scan_wifi_networks,
    select_pi_device,
)

load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

logger = logging.getLogger("scripture_engine")

ENGINE_PORT: int = int(os.getenv("ENGINE_PORT", "3002"))
VERSION: str = "1.0.0"


class ClassifyRequest(BaseModel):
    """Request body for the /classify endpoint."""
    text: str = Field(..., description="Free text to classify")


class QRScanRequest(BaseModel):
    """Request body for the /provision/qr endpoint."""
    data: str = Field(..., description="Raw text decoded from the QR code")


class SendConfigRequest(BaseModel):
    """Request body for the /provision/send endpoint."""
    transport: Transport
    credentials: WifiCredentials


class EngineResponse(BaseModel):
    """Standard engine API response envelope."""
    success: bool
    data: Optional[dict[str, Any]] = None
    error: Optional[AppError] = None


class HealthResponse(BaseModel):
    """Health check response."""
    success: bool
    version: str = VERSION


def _failure(code: ErrorCode, message: str, details: Optional[str] = None) -> EngineResponse:
    return EngineResponse(success=False, data=None, error=make_error(code, message, details))


def create_app(
    config: Optional[AppConfig] = None,
    ai_client: Any = None,
    scan_delay: float = SCAN_DELAY_SECONDS,
    send_delay: float = SEND_DELAY_SECONDS,
) -> FastAPI:
    """Build the application around one AppConfig."""
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Manage logging, the shared HTTP client and the AI explainer."""
        app.state.log_buffer = configure_logging(config.logging)
        validation = validate_configuration(config)
        if not validation.is_valid:
            logger.warning("Starting with %d configuration errors", len(validation.errors))
        http_client = httpx.AsyncClient(timeout=config.api.timeout_ms / 1000.0)
        app.state.explainer = AIExplainer(config, http_client=http_client, client=ai_client)
        logger.info(
            "Scripture engine started (model=%s, openai=%s, cache=%s)",
            config.api.model,
            app.state.explainer.enabled,
            config.performance.cache_enabled,
        )
        yield
        await http_client.aclose()
        logger.info("Scripture engine shut down")

    app = FastAPI(
        title="Scripture Pal Engine",
        description="Emotion-aware verse matching and Raspberry Pi WiFi provisioning",
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.matcher = VerseMatcher(fallback_verses=config.app.fallback_verses)
    app.state.cache = (
        ResponseCache(config.performance.cache_ttl_ms, config.performance.max_cache_size)
        if config.performance.cache_enabled
        else None
    )
    app.state.explainer = None
    app.state.log_buffer = None
    app.state.scan_delay = scan_delay
    app.state.send_delay = send_delay

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(success=True)

    @app.get("/categories", response_model=EngineResponse)
    async def categories(request: Request) -> EngineResponse:
        """List the emotion categories with their verses, plus the fallback list."""
        items = list_categories()
        return EngineResponse(
            success=True,
            data={
                "categories": items,
                "fallbackVerses": list(request.app.state.matcher.fallback_verses),
                "total": len(items),
            },
        )

    @app.post("/classify", response_model=EngineResponse)
    async def classify_text(body: ClassifyRequest, request: Request) -> EngineResponse:
        """Classify text without choosing verses."""
        user_request = build_user_request(body.text)
        analysis = request.app.state.matcher.classify(user_request.processed_text)
        return EngineResponse(
            success=True,
            data={
                "request": user_request.model_dump(mode="json"),
                "analysis": analysis.model_dump(mode="json", by_alias=True),
            },
        )

    @app.post("/match", response_model=EngineResponse)
    async def match(body: VerseMatchRequest, request: Request) -> EngineResponse:
        """Match free text to verses."""
        state = request.app.state
        user_request = build_user_request(body.text, body.source)
        key = cache_key(user_request.processed_text, body.preferences)

        if state.cache is not None:
            cached = state.cache.get(key)
            if cached is not None:
                logger.info("Cache hit for '%s'", user_request.processed_text)
                return EngineResponse(
                    success=True,
                    data={"match": cached.model_dump(mode="json", by_alias=True), "cached": True},
                )

        response = state.matcher.match(body)

        explainer: Optional[AIExplainer] = state.explainer
        if body.preferences.include_explanation and explainer is not None and explainer.enabled:
            try:
                ai_text = await explainer.explain(user_request.original_text, response)
                if ai_text:
                    response = response.model_copy(update={"explanation": ai_text})
            except ScripturePalError as exc:
                logger.warning("AI explanation failed, keeping template (%s): %s", exc.code.value, exc)

        if state.cache is not None:
            state.cache.put(key, response)

        logger.info(
            "Verse delivered: category=%s, verse=%s, alternatives=%d",
            response.category.value if response.category else "fallback",
            response.primary_verse,
            len(response.alternative_verses),
        )
        return EngineResponse(
            success=True,
            data={"match": response.model_dump(mode="json", by_alias=True), "cached": False},
        )

    @app.get("/config/validate", response_model=EngineResponse)
    async def config_validate(request: Request) -> EngineResponse:
        """Report configuration range violations."""
        result = validate_configuration(request.app.state.config)
        return EngineResponse(success=True, data={"isValid": result.is_valid, "errors": result.errors})

    @app.get("/info", response_model=EngineResponse)
    async def info(request: Request) -> EngineResponse:
        """Describe the running configuration."""
        return EngineResponse(success=True, data=get_environment_info(request.app.state.config))

    @app.get("/debug/logs", response_model=EngineResponse)
    async def debug_logs(request: Request, limit: int = Query(default=50, ge=1, le=1000)) -> EngineResponse:
        """Return the most recent log entries."""
        buffer = request.app.state.log_buffer
        entries = buffer.entries(limit) if buffer is not None else []
        return EngineResponse(success=True, data={"entries": entries, "total": len(entries)})

    @app.post("/provision/qr", response_model=EngineResponse)
    async def provision_qr(body: QRScanRequest) -> EngineResponse:
        """Parse a scanned Pi configuration QR code."""
        try:
            payload = parse_qr_payload(body.data)
        except InvalidQRPayload as exc:
            return _failure(ErrorCode.INVALID_CONFIG, str(exc))
        transport = QRCodeTransport(payload=payload)
        return EngineResponse(
            success=True,
            data={
                "transport": transport.model_dump(mode="json"),
                "methodInfo": get_method_info(transport).model_dump(),
            },
        )

    @app.get("/provision/wifi/scan", response_model=EngineResponse)
    async def provision_wifi_scan(request: Request) -> EngineResponse:
        """List nearby WiFi networks (simulated)."""
        networks = await scan_wifi_networks(request.app.state.scan_delay)
        return EngineResponse(
            success=True,
            data={"networks": [n.model_dump() for n in networks], "total": len(networks)},
        )

    @app.get("/provision/bluetooth/scan", response_model=EngineResponse)
    async def provision_bluetooth_scan(request: Request) -> EngineResponse:
        """List nearby Bluetooth devices (simulated)."""
        devices = await scan_bluetooth_devices(request.app.state.scan_delay)
        return EngineResponse(
            success=True,
            data={"devices": [d.model_dump() for d in devices], "total": len(devices)},
        )

    @app.post("/provision/send", response_model=EngineResponse)
    async def provision_send(body: SendConfigRequest, request: Request) -> EngineResponse:
        """Send WiFi credentials to the Pi over the chosen transport (simulated)."""
        if isinstance(body.transport, BluetoothTransport):
            try:
                select_pi_device(body.transport.device)
            except NotAPiDevice as exc:
                return _failure(ErrorCode.INVALID_CONFIG, str(exc))

        result = await send_configuration(body.transport, body.credentials, request.app.state.send_delay)
        if not result.success:
            return EngineResponse(
                success=False,
                data={"result": result.model_dump(mode="json")},
                error=make_error(ErrorCode.INVALID_CONFIG, result.message, recoverable=True),
            )
        return EngineResponse(success=True, data={"result": result.model_dump(mode="json")})

    return app


app = create_app()


def main() -> None:
    import uvicorn
    uvicorn.run("engine.scripture_engine:app", host="0.0.0.0", port=ENGINE_PORT)


if __name__ == "__main__":
    main()
