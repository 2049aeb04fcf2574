"""Pydantic models for process inputs and API responses."""

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from timedim_api.catalog import Presentation


class Status(StrEnum):
    HEALTHY = "healthy"


class HealthStatus(BaseModel):
    status: Status


class Link(BaseModel):
    href: str
    rel: str
    title: str | None = None


class RootResponse(BaseModel):
    message: str
    links: list[Link]


class AppInfo(BaseModel):
    app_version: str
    python_version: str
    pygeoapi_version: str
    uvicorn_version: str


class TimeDimensionInput(BaseModel):
    """Inputs of the time-dimension process."""

    model_config = ConfigDict(populate_by_name=True)

    layer_name: str = Field(
        ...,
        alias="layerName",
        min_length=1,
        description="Qualified name (namespace:localName) of the layer to read the time values from",
    )


class TimeDimensionResult(BaseModel):
    presentation: Presentation
    data: list[str]


class ErrorEnvelope(BaseModel):
    success: Literal[False] = False
    message: str


class ExecuteRequest(BaseModel):
    inputs: dict[str, Any]
