"""Render service results as HTTP responses."""
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from services.results import ServiceResult


def to_json_response(result: ServiceResult) -> JSONResponse:
    """Body is {"response": ...}; the result status becomes the HTTP status."""
    return JSONResponse(
        status_code=result.status,
        content=jsonable_encoder({"response": result.response}),
    )
