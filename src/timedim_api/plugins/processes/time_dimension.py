'''Time dimension process plugin.

Register the processor in the pygeoapi configuration::

    resources:
      time-dimension:
        type: process
        processor:
          name: timedim_api.plugins.processes.time_dimension.TimeDimensionProcessor

Importing the plugin loads ``.env`` and configures the ``timedim_api`` logger,
the same start-up the HTTP application runs.

Example invocation with curl:

curl -X POST "http://localhost:8000/processes/time-dimension/execution" \
-H "Content-Type: application/json" \
-d '{"inputs": {"layerName": "test:stations"}}'
'''

from __future__ import annotations

import timedim_api.startup  # noqa: F401

import logging  # noqa: E402
from typing import Any  # noqa: E402

from pydantic import ValidationError  # noqa: E402
from pygeoapi.process.base import BaseProcessor, ProcessorExecuteError  # noqa: E402

from timedim_api.schemas import TimeDimensionInput  # noqa: E402
from timedim_api.service import get_time_dimension  # noqa: E402

logger = logging.getLogger(__name__)


PROCESS_METADATA = {
    "version": "0.1.0",
    "id": "time-dimension",
    "title": "timeDimension",
    "description": "Gets the time dimension of a layer.",
    "jobControlOptions": ["sync-execute"],
    "keywords": ["time", "dimension", "layer", "wms-t"],
    "inputs": {
        "layerName": {
            "title": "Layer name",
            "description": (
                "The qualified name of the layer to retrieve the values from. The layer must be based on a "
                "PostGIS table named like the layer, on a shapefile or on an image mosaic with a time attribute."
            ),
            "schema": {"type": "string"},
            "minOccurs": 1,
            "maxOccurs": 1,
        },
    },
    "outputs": {
        "result": {
            "title": "Time dimension",
            "description": (
                'A json object containing two keys: "presentation" -> The presentation chosen for the layer. '
                '"data" -> Contains the date values.'
            ),
            "schema": {"type": "object", "contentMediaType": "application/json"},
        }
    },
    "example": {"inputs": {"layerName": "test:stations"}},
}


class TimeDimensionProcessor(BaseProcessor):
    """Processor returning the time values of a catalogued layer."""

    def __init__(self, processor_def: dict[str, Any]) -> None:
        super().__init__(processor_def, PROCESS_METADATA)

    def execute(self, data: dict[str, Any], outputs: Any = None) -> tuple[str, dict[str, Any]]:
        try:
            inputs = TimeDimensionInput.model_validate(data)
        except ValidationError as err:
            raise ProcessorExecuteError(str(err)) from err

        logger.info("Process inputs: %s", inputs.model_dump(by_alias=True))
        return "application/json", get_time_dimension(inputs.layer_name)

    def __repr__(self) -> str:
        return "<TimeDimensionProcessor>"
