from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import Body, FastAPI, Request, status
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import Settings
from ..errors import NotFoundError, StoreError, ValidationError
from ..factory import build_akin_store
from ..kinds import COLLECTION_KINDS
from ..state.collection_store import CollectionStore
from ..state.service import AkinService


logger = logging.getLogger("akin_state")


def _service(request: Request) -> AkinService:
    return request.app.state.service


def _collection(request: Request, kind: str) -> CollectionStore[Any]:
    if kind not in COLLECTION_KINDS:
        raise StarletteHTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown collection: {kind}")
    return _service(request).collection(kind)


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": str(exc),
                "missing_fields": exc.missing_fields,
                "invalid_fields": exc.invalid_fields,
            },
        )

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)})

    @app.exception_handler(StoreError)
    async def _store_error(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


def create_app(settings: Settings | None = None, *, service: AkinService | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        current = service
        if current is None:
            current_settings = settings or Settings.from_env()
            current = AkinService(build_akin_store(current_settings), current_settings.profile_id)
        await current.ensure_ready()
        app.state.service = current
        try:
            yield
        finally:
            await current.close()

    app = FastAPI(title="AKIN Character State API", version=__version__, lifespan=lifespan)
    _install_error_handlers(app)

    @app.get("/")
    async def index() -> Dict[str, Any]:
        return {
            "message": "AKIN Character State API",
            "version": __version__,
            "endpoints": {"akin": "/api/akin", "health": "/api/health"},
        }

    @app.get("/api/health")
    async def health(request: Request) -> JSONResponse:
        backend = _service(request).backend
        timestamp = datetime.now(timezone.utc).isoformat()
        try:
            await backend.ping()
        except StoreError as exc:
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "ERROR", "backend": backend.backend_name, "error": str(exc), "timestamp": timestamp},
            )
        return JSONResponse(content={"status": "OK", "backend": backend.backend_name, "timestamp": timestamp})

    @app.get("/api/akin")
    async def get_akin(request: Request) -> Dict[str, Any]:
        state = await _service(request).read_state()
        return state.to_dict()

    @app.put("/api/akin")
    async def put_akin(request: Request, payload: Optional[Dict[str, Any]] = Body(default=None)) -> Dict[str, Any]:
        profile = await _service(request).upsert_profile(payload)
        return profile.to_dict()

    @app.post("/api/akin/{kind}", status_code=status.HTTP_201_CREATED)
    async def create_item(
        request: Request,
        kind: str,
        payload: Optional[Dict[str, Any]] = Body(default=None),
    ) -> Dict[str, Any]:
        item = await _collection(request, kind).create(payload)
        return item.to_dict()

    @app.put("/api/akin/{kind}/{item_id}")
    async def update_item(
        request: Request,
        kind: str,
        item_id: str,
        payload: Optional[Dict[str, Any]] = Body(default=None),
    ) -> Dict[str, Any]:
        item = await _collection(request, kind).update(item_id, payload)
        return item.to_dict()

    @app.delete("/api/akin/{kind}/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_item(request: Request, kind: str, item_id: str) -> Response:
        await _collection(request, kind).delete(item_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app
