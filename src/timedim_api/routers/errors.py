"""OGC API exception payloads."""

from fastapi import HTTPException

NO_SUCH_PROCESS = "http://www.opengis.net/def/exceptions/ogcapi-processes-1/1.0/no-such-process"


def no_such_process(process_id: str) -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={
            "code": "NotFound",
            "type": NO_SUCH_PROCESS,
            "description": f"Process '{process_id}' not found",
        },
    )


def invalid_parameter(description: str) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"code": "InvalidParameterValue", "description": description},
    )
