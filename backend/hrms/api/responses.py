from typing import Any, Optional

from fastapi.encoders import jsonable_encoder


def ok(data: Any = None, message: Optional[str] = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = jsonable_encoder(data)
    return body
