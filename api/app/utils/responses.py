from typing import Any, Dict


def ok(**fields: Any) -> Dict[str, Any]:
    """Return a success envelope."""
    return {"success": True, **fields}


def err(message: str, **fields: Any) -> Dict[str, Any]:
    """Return an error envelope."""
    from ..middlewares.request_id import request_id_ctx

    body: Dict[str, Any] = {"success": False, "error": message}
    body.update(fields)
    request_id = request_id_ctx.get(None)
    if request_id:
        body["request_id"] = request_id
    return body
