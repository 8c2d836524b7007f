"""JSON error responses shared by the routers."""

from typing import Optional

from fastapi.responses import JSONResponse

SHORT_NOT_FOUND = "short not found on database"
CANNOT_CONNECT_TO_DB = "cannot connect to DB"
CANNOT_PARSE_JSON = "cannot parse JSON"
SHORT_IN_USE = "short already in use"


def error_response(status_code: int, error: str, detail: Optional[str] = None) -> JSONResponse:
    """Build an {"error": ...} body; "detail" is only present when given."""
    content = {"error": error}
    if detail:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)
