"""Root API endpoints."""

import sys
from importlib.metadata import version

from fastapi import APIRouter, Request

from timedim_api.schemas import AppInfo, HealthStatus, Link, RootResponse, Status

router = APIRouter(tags=["System"])


@router.get("/")
def read_index(request: Request) -> RootResponse:
    """Return a welcome message with navigation links."""
    base = str(request.base_url).rstrip("/")
    return RootResponse(
        message="Welcome to the time dimension API",
        links=[
            Link(href=f"{base}/processes", rel="processes", title="Processes"),
            Link(href=f"{base}/docs", rel="docs", title="API Docs"),
        ],
    )


@router.get("/health")
def health() -> HealthStatus:
    """Return health status for container health checks."""
    return HealthStatus(status=Status.HEALTHY)


@router.get("/info")
def info() -> AppInfo:
    """Return application version and environment info."""
    return AppInfo(
        app_version=version("timedim-api"),
        python_version=sys.version,
        pygeoapi_version=version("pygeoapi"),
        uvicorn_version=version("uvicorn"),
    )
