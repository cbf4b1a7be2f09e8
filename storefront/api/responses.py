# storefront/api/responses.py
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

_UNSET = object()


def envelope(message: str, data: Any = _UNSET, status_code: int = 200, **extra) -> JSONResponse:
    """Wspolna koperta odpowiedzi: {success, error, message, data?, ...}."""
    body = {"success": status_code < 400, "error": status_code >= 400, "message": message}
    if data is not _UNSET:
        body["data"] = data
    body.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
