from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from catalog.domain_filter import DOMAIN_MAX, DOMAIN_MIN

ItemId = Annotated[int, Field(ge=DOMAIN_MIN, le=DOMAIN_MAX)]


class StateReplaceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selected_ids: list[ItemId] = Field(default_factory=list, alias="selectedIds")
    sorted_order: list[ItemId] = Field(default_factory=list, alias="sortedOrder")
    expected_version: int | None = Field(default=None, ge=0, alias="expectedVersion")

    @field_validator("selected_ids", "sorted_order", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ItemsPageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: list[int]
    has_more: bool = Field(alias="hasMore")


class StateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    selected_ids: list[int] = Field(alias="selectedIds")
    sorted_order: list[int] = Field(alias="sortedOrder")


class StateReplaceResponse(BaseModel):
    success: bool = True


def success_envelope(data: Any, trace_id: str, message: str = "ok") -> dict[str, Any]:
    return {
        "success": True,
        "data": data,
        "message": message,
        "meta": {
            "trace_id": trace_id,
        },
    }


def error_envelope(
    *,
    code: str,
    message: str,
    error_class: str,
    retryable: bool,
    trace_id: str,
) -> dict[str, Any]:
    return {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "retryable": retryable,
            "class": error_class,
        },
        "meta": {
            "trace_id": trace_id,
        },
    }
