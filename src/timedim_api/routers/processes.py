"""OGC API - Processes style endpoints for the time-dimension process."""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from timedim_api.plugins.processes.time_dimension import PROCESS_METADATA
from timedim_api.routers.errors import invalid_parameter, no_such_process
from timedim_api.schemas import ErrorEnvelope, ExecuteRequest, TimeDimensionInput, TimeDimensionResult
from timedim_api.service import get_time_dimension

router = APIRouter(tags=["Processes"])
logger = logging.getLogger(__name__)

TIME_DIMENSION_PROCESS_ID = PROCESS_METADATA["id"]

TimeDimensionOperation = Callable[[str], dict[str, Any]]


def get_time_dimension_operation() -> TimeDimensionOperation:
    """Dependency providing the operation that answers execution requests."""
    return get_time_dimension


def _base_url(request: Request) -> str:
    return str(request.base_url).rstrip("/")


def _process_summary(request: Request) -> dict[str, Any]:
    base = _base_url(request)
    return {
        "id": PROCESS_METADATA["id"],
        "title": PROCESS_METADATA["title"],
        "description": PROCESS_METADATA["description"],
        "version": PROCESS_METADATA["version"],
        "keywords": PROCESS_METADATA["keywords"],
        "jobControlOptions": PROCESS_METADATA["jobControlOptions"],
        "links": [
            {"href": f"{base}/processes/{TIME_DIMENSION_PROCESS_ID}", "rel": "self", "type": "application/json"},
            {
                "href": f"{base}/processes/{TIME_DIMENSION_PROCESS_ID}/execution",
                "rel": "http://www.opengis.net/def/rel/ogc/1.0/execute",
                "type": "application/json",
            },
        ],
    }


@router.get("/processes")
def list_processes(request: Request) -> dict[str, Any]:
    return {
        "processes": [_process_summary(request)],
        "links": [{"href": f"{_base_url(request)}/processes", "rel": "self", "type": "application/json"}],
    }


@router.get("/processes/{process_id}")
def describe_process(process_id: str, request: Request) -> dict[str, Any]:
    if process_id != TIME_DIMENSION_PROCESS_ID:
        raise no_such_process(process_id)

    return {
        **_process_summary(request),
        "inputs": PROCESS_METADATA["inputs"],
        "outputs": PROCESS_METADATA["outputs"],
    }


@router.post("/processes/{process_id}/execution", response_model=TimeDimensionResult | ErrorEnvelope)
def execute_process(
    process_id: str,
    payload: ExecuteRequest,
    operation: TimeDimensionOperation = Depends(get_time_dimension_operation),
) -> dict[str, Any]:
    if process_id != TIME_DIMENSION_PROCESS_ID:
        raise no_such_process(process_id)

    try:
        inputs = TimeDimensionInput.model_validate(payload.inputs)
    except ValidationError as err:
        raise invalid_parameter(f"Invalid inputs: {err.errors()[0]['msg']}") from err

    logger.info("Executing %s for layer %s", process_id, inputs.layer_name)
    return operation(inputs.layer_name)
