"""
Turning action results into HTTP responses.
"""

from fastapi import status
from fastapi.responses import JSONResponse

from fastbreak.schemas.result import ActionResult


def respond(result: ActionResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    status_code = success_status if result.success else result.status_code
    return JSONResponse(status_code=status_code, content=result.to_payload())
