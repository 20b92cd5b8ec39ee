"""ASGI application for Cesta."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field

from cesta import __version__, metrics
from cesta.config import Settings, get_settings
from cesta.logging_utils import configure_logging as configure_app_logging
from cesta.models.ingredients import AggregatedIngredient
from cesta.models.planning import Period, PlannedMeal
from cesta.models.shopping import GroupKey, GroupState, ShoppingGroup, ShoppingItem
from cesta.shopping.aggregator import aggregate
from cesta.shopping.errors import (
    DuplicateGroupNameError,
    GroupConcludedError,
    GroupNotFoundError,
    InvalidGroupNameError,
    ItemNotFoundError,
    NoItemsSelectedError,
    NotAllPurchasedError,
    NothingToAggregateError,
    ShoppingError,
)
from cesta.shopping.groups import ShoppingGroupManager
from cesta.shopping.period import PeriodSelector
from cesta.server import deps

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[ShoppingError], int] = {
    NothingToAggregateError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NoItemsSelectedError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidGroupNameError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    DuplicateGroupNameError: status.HTTP_409_CONFLICT,
    GroupConcludedError: status.HTTP_409_CONFLICT,
    NotAllPurchasedError: status.HTTP_409_CONFLICT,
    GroupNotFoundError: status.HTTP_404_NOT_FOUND,
    ItemNotFoundError: status.HTTP_404_NOT_FOUND,
}


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _normalize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Ensure validation error payloads can be serialized to JSON."""

    return [{key: _json_safe(value) for key, value in error.items()} for error in errors]


def shopping_error_payload(exc: ShoppingError) -> dict[str, Any]:
    """Machine-readable body for a domain error; ``code`` drives the client's reaction."""

    payload: dict[str, Any] = {"detail": str(exc), "code": exc.code}
    if isinstance(exc, DuplicateGroupNameError):
        payload["name"] = exc.name
        payload["existing"] = exc.existing
    if isinstance(exc, NotAllPurchasedError):
        payload["pending"] = exc.pending
    if isinstance(exc, (GroupConcludedError, NotAllPurchasedError, GroupNotFoundError, ItemNotFoundError)):
        payload["group_key"] = exc.group_key
    return payload


def _route_path(request: Request) -> str:
    # Group keys are user text; label metrics by route template instead.
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def _configure_logging(settings: Settings) -> None:
    configure_app_logging(settings.log_level, settings.log_format, [settings.api_token or ""])


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="Cesta Shopping Lists", version=__version__)
    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("cesta.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details without leaking sensitive data."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            method = request.method
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    request.url.path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                path = _route_path(request)
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(
                    duration_ms / 1000.0
                )
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            path = _route_path(request)
            metrics.REQUEST_COUNT.labels(
                method=method,
                path=path,
                status=str(response.status_code),
            ).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        log_kwargs: dict[str, Any] = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            log_kwargs["extra"] = {"request_id": request_id}

        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": _normalize_validation_errors(exc.errors())},
        )

    @application.exception_handler(ShoppingError)
    async def shopping_error_handler(request: Request, exc: ShoppingError):
        status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
        logger.info(
            "Rejected %s %s: %s (%s)",
            request.method,
            request.url.path,
            exc.code,
            exc,
            extra={"request_id": getattr(request.state, "request_id", None)},
        )
        return JSONResponse(status_code=status_code, content=shopping_error_payload(exc))

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    # ------------------------------------------------------------------ meals

    @application.get(
        "/meals",
        response_model=list[PlannedMeal],
        summary="List planned meals",
    )
    def meals_list(
        day: Optional[str] = Query(default=None, min_length=1, max_length=32),
        provider: deps.PlannedMealsProvider = Depends(deps.get_planned_meals_provider),
    ) -> list[PlannedMeal]:
        return provider(day)

    @application.post(
        "/meals",
        response_model=PlannedMeal,
        status_code=status.HTTP_201_CREATED,
        summary="Schedule a recipe on a weekday",
    )
    def meals_create(
        payload: PlannedMealCreateRequest,
        auth: None = Depends(deps.require_api_token),
        creator: deps.PlannedMealCreator = Depends(deps.get_planned_meal_creator),
    ) -> PlannedMeal:
        return creator(payload.model_dump())

    @application.delete(
        "/meals/{meal_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove a planned meal",
    )
    def meals_delete(
        meal_id: int,
        auth: None = Depends(deps.require_api_token),
        deleter: deps.PlannedMealDeleter = Depends(deps.get_planned_meal_deleter),
    ) -> None:
        try:
            deleter(meal_id)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    # --------------------------------------------------------------- shopping

    @application.post(
        "/shopping/aggregate",
        response_model=list[AggregatedIngredient],
        summary="Aggregate the planned meals of a period into a checklist",
    )
    def shopping_aggregate(
        payload: AggregateRequest,
        provider: deps.PlannedMealsProvider = Depends(deps.get_planned_meals_provider),
        selector: PeriodSelector = Depends(deps.get_period_selector),
    ) -> list[AggregatedIngredient]:
        triples = selector.collect(provider(None), payload.period, payload.day)
        return aggregate(triples)

    @application.get(
        "/shopping/groups",
        response_model=list[ShoppingGroup],
        summary="List active shopping lists",
    )
    def groups_list(
        manager: ShoppingGroupManager = Depends(deps.get_group_manager),
    ) -> list[ShoppingGroup]:
        return manager.list_active_groups()

    @application.get(
        "/shopping/groups/history",
        response_model=list[ShoppingGroup],
        summary="List concluded shopping lists, newest first",
    )
    def groups_history(
        manager: ShoppingGroupManager = Depends(deps.get_group_manager),
    ) -> list[ShoppingGroup]:
        return manager.list_history()

    @application.post(
        "/shopping/groups",
        response_model=ShoppingGroup,
        status_code=status.HTTP_201_CREATED,
        summary="Save checked ingredients as a new shopping list",
    )
    def groups_create(
        payload: GroupCreateRequest,
        auth: None = Depends(deps.require_api_token),
        manager: ShoppingGroupManager = Depends(deps.get_group_manager),
    ) -> ShoppingGroup:
        key = manager.create_group(
            payload.name,
            payload.items,
            confirm_duplicate=payload.confirm_duplicate,
        )
        return manager.get_group(key)

    @application.post(
        "/shopping/groups/drafts",
        response_model=ShoppingGroup,
        status_code=status.HTTP_201_CREATED,
        summary="Reserve a key for a manual shopping list",
    )
    def groups_draft(
        payload: GroupNameRequest,
        auth: None = Depends(deps.require_api_token),
        manager: ShoppingGroupManager = Depends(deps.get_group_manager),
    ) -> ShoppingGroup:
        return manager.start_draft(payload.name, confirm_duplicate=payload.confirm_duplicate)

    # Keys may contain "/", so they are matched as paths. More specific routes
    # are registered first.

    @application.patch(
        "/shopping/groups/{group_key:path}/items/{item_id}",
        response_model=ShoppingItem,
        summary="Edit a shopping list item",
    )
    def groups_item_update(
        group_key: str,
        item_id: int,
        payload: ItemUpdateRequest,
        auth: None = Depends(deps.require_api_token),
        manager: ShoppingGroupManager = Depends(deps.get_group_manager),
    ) -> ShoppingItem:
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field == "price"
        }
        return manager.update_item(group_key, item_id, **changes)

    @application.delete(
        "/shopping/groups/{group_key:path}/items/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove a shopping list item",
    )
    def groups_item_delete(
        group_key: str,
        item_id: int,
        auth: None = Depends(deps.require_api_token),
        manager: ShoppingGroupManager = Depends(deps.get_group_manager),
    ) -> None:
        manager.remove_item(group_key, item_id)

    @application.post(
        "/shopping/groups/{group_key:path}/items",
        response_model=ShoppingGroup,
        status_code=status.HTTP_201_CREATED,
        summary="Add an item to a shopping list",
    )
    def groups_item_create(
        group_key: str,
        payload: ItemCreateRequest,
        auth: None = Depends(deps.require_api_token),
        manager: ShoppingGroupManager = Depends(deps.get_group_manager),
    ) -> ShoppingGroup:
        try:
            target = manager.get_group(group_key)
        except GroupNotFoundError:
            # First item of a draft reserved through /shopping/groups/drafts.
            target = ShoppingGroup(key=_parse_key(group_key), state=GroupState.DRAFT)
        return manager.add_item(
            target,
            payload.name,
            quantity=payload.quantity,
            unit=payload.unit,
            price=payload.price,
            confirm_duplicate=payload.confirm_duplicate,
        )

    @application.put(
        "/shopping/groups/{group_key:path}/name",
        response_model=ShoppingGroup,
        summary="Rename a shopping list",
    )
    def groups_rename(
        group_key: str,
        payload: GroupNameRequest,
        auth: None = Depends(deps.require_api_token),
        manager: ShoppingGroupManager = Depends(deps.get_group_manager),
    ) -> ShoppingGroup:
        new_key = manager.rename_group(
            group_key,
            payload.name,
            confirm_duplicate=payload.confirm_duplicate,
        )
        return manager.get_group(new_key)

    @application.post(
        "/shopping/groups/{group_key:path}/complete",
        response_model=ShoppingGroup,
        summary="Conclude a fully purchased shopping list",
    )
    def groups_complete(
        group_key: str,
        auth: None = Depends(deps.require_api_token),
        manager: ShoppingGroupManager = Depends(deps.get_group_manager),
    ) -> ShoppingGroup:
        return manager.complete_group(group_key)

    @application.get(
        "/shopping/groups/{group_key:path}",
        response_model=ShoppingGroup,
        summary="Fetch one shopping list",
    )
    def groups_get(
        group_key: str,
        manager: ShoppingGroupManager = Depends(deps.get_group_manager),
    ) -> ShoppingGroup:
        return manager.get_group(group_key)

    @application.delete(
        "/shopping/groups/{group_key:path}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete a shopping list",
    )
    def groups_delete(
        group_key: str,
        auth: None = Depends(deps.require_api_token),
        manager: ShoppingGroupManager = Depends(deps.get_group_manager),
    ) -> None:
        manager.delete_group(group_key)

    return application


def _parse_key(raw: str) -> GroupKey:
    try:
        return GroupKey.parse(raw)
    except ValueError as exc:
        raise GroupNotFoundError(raw) from exc


class PlannedMealCreateRequest(BaseModel):
    day_name: str = Field(min_length=1, max_length=32)
    recipe_id: str = Field(min_length=1, max_length=64)
    meal_type: str = Field(default="Almoço", min_length=1, max_length=64)


class AggregateRequest(BaseModel):
    period: Period = Field(default=Period.WEEKLY)
    day: Optional[str] = Field(default=None, max_length=32)


class GroupCreateRequest(BaseModel):
    name: str = Field(max_length=255)
    items: list[AggregatedIngredient] = Field(default_factory=list)
    confirm_duplicate: bool = False


class GroupNameRequest(BaseModel):
    name: str = Field(max_length=255)
    confirm_duplicate: bool = False


class ItemCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    quantity: float = Field(default=1.0, gt=0)
    unit: str = Field(default="un", max_length=64)
    price: Optional[float] = Field(default=None, ge=0)
    confirm_duplicate: bool = False


class ItemUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    quantity: Optional[float] = Field(default=None, gt=0)
    unit: Optional[str] = Field(default=None, min_length=1, max_length=64)
    purchased: Optional[bool] = None
    price: Optional[float] = Field(default=None, ge=0)


app = create_app()

__all__ = ["app", "create_app", "shopping_error_payload"]
