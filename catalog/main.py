from __future__ import annotations

import logging
import uuid

from fastapi import Body, FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from catalog.config import CatalogSettings
from catalog.errors import ApiError
from catalog.item_catalog import ItemCatalog
from catalog.paginator import coerce_limit, coerce_offset
from catalog.schemas import (
    ItemsPageResponse,
    StateReplaceRequest,
    StateReplaceResponse,
    StateResponse,
    error_envelope,
    success_envelope,
)
from catalog.state_store import StateStore, create_state_store_from_env

logger = logging.getLogger(__name__)

STATE_VERSION_HEADER = "x-state-version"


def _trace_id_from_request(request: Request) -> str:
    trace_id = getattr(request.state, "trace_id", None)
    if trace_id:
        return trace_id
    return uuid.uuid4().hex


def _request_id_from_request(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return request_id
    return f"req_{uuid.uuid4().hex[:12]}"


def _error_response(
    request: Request,
    *,
    code: str,
    message: str,
    error_class: str,
    retryable: bool,
    status_code: int,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_envelope(
            code=code,
            message=message,
            error_class=error_class,
            retryable=retryable,
            trace_id=_trace_id_from_request(request),
        ),
    )


def create_app(
    *,
    store: StateStore | None = None,
    settings: CatalogSettings | None = None,
) -> FastAPI:
    cfg = settings or CatalogSettings.from_env()
    state_store = store if store is not None else create_state_store_from_env()
    catalog = ItemCatalog(state_store)

    app = FastAPI(title="Ordered Item Catalog API", version="0.1.0")
    app.state.settings = cfg
    app.state.catalog = catalog
    if cfg.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cfg.cors_allow_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def add_trace_id(request: Request, call_next):
        incoming_trace_id = request.headers.get("x-trace-id", "").strip()
        request.state.trace_id = incoming_trace_id or uuid.uuid4().hex
        request.state.request_id = request.headers.get("x-request-id", f"req_{uuid.uuid4().hex[:12]}")
        response = await call_next(request)
        response.headers["x-trace-id"] = _trace_id_from_request(request)
        response.headers["x-request-id"] = _request_id_from_request(request)
        return response

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        logger.warning(
            "api_error code=%s status=%s trace_id=%s",
            exc.code,
            exc.http_status,
            _trace_id_from_request(request),
        )
        return _error_response(
            request,
            code=exc.code,
            message=exc.message,
            error_class=exc.error_class,
            retryable=exc.retryable,
            status_code=exc.http_status,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return _error_response(
            request,
            code="REQ_VALIDATION_FAILED",
            message="invalid payload",
            error_class="validation",
            retryable=False,
            status_code=400,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error_response(
                request,
                code="REQ_NOT_FOUND",
                message="resource not found",
                error_class="validation",
                retryable=False,
                status_code=404,
            )
        return _error_response(
            request,
            code="REQ_HTTP_ERROR",
            message=str(exc.detail),
            error_class="validation",
            retryable=False,
            status_code=exc.status_code,
        )

    @app.get("/healthz")
    def healthz(request: Request) -> dict[str, object]:
        return success_envelope({"status": "ok"}, _trace_id_from_request(request))

    # Query params arrive as raw strings so malformed numbers can fall back
    # to defaults instead of failing validation.
    @app.get("/api/items", response_model=ItemsPageResponse)
    def list_items(
        query: str = Query(default=""),
        offset: str | None = Query(default=None),
        limit: str | None = Query(default=None),
    ) -> ItemsPageResponse:
        page = catalog.list_items(
            query=query,
            offset=coerce_offset(offset),
            limit=coerce_limit(limit, max_limit=cfg.max_page_limit),
        )
        return ItemsPageResponse(items=page.items, has_more=page.has_more)

    @app.get("/api/state", response_model=StateResponse)
    def read_state(response: Response) -> StateResponse:
        snapshot = catalog.store.read()
        response.headers[STATE_VERSION_HEADER] = str(snapshot.version)
        return StateResponse(
            selected_ids=list(snapshot.selected_ids),
            sorted_order=list(snapshot.sorted_order),
        )

    @app.post("/api/state", response_model=StateReplaceResponse)
    def replace_state(
        response: Response,
        payload: StateReplaceRequest | None = Body(default=None),
    ) -> StateReplaceResponse:
        body = payload or StateReplaceRequest()
        snapshot = catalog.store.replace(
            selected_ids=body.selected_ids,
            sorted_order=body.sorted_order,
            expected_version=body.expected_version,
        )
        response.headers[STATE_VERSION_HEADER] = str(snapshot.version)
        return StateReplaceResponse(success=True)

    return app
