"""Map service results onto HTTP responses."""

from fastapi.responses import JSONResponse

from hr_admin.core.errors import ErrorCode
from hr_admin.schemas.common import Result


STATUS_BY_CODE = {
    ErrorCode.NOT_AUTHENTICATED: 401,
    ErrorCode.NO_ACTIVE_COMPANY: 409,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.VALIDATION_FAILED: 422,
    ErrorCode.CONFLICT: 409,
    ErrorCode.UNAUTHORIZED: 403,
    ErrorCode.ALREADY_LINKED: 409,
}


def result_response(result: Result, success_status: int = 200) -> JSONResponse:
    """
    Render a Result envelope.

    Successful results (including an empty page flagged NO_ACTIVE_COMPANY)
    use success_status; failures use the status mapped from their code.
    """
    if result.success:
        status_code = success_status
    else:
        status_code = STATUS_BY_CODE.get(result.code, 400)
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(mode="json"),
    )
