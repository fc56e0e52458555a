from __future__ import annotations

from typing import Any, Dict, Optional


# PUBLIC_INTERFACE
def success_envelope(message: str, **fields: Any) -> Dict[str, Any]:
    """
    Build the standard success body for HTTP responses.

    Args:
        message: Human-readable summary of the result.
        fields: Machine-readable payload entries (e.g. data, count, total).

    Returns:
        Dict with key ``message`` plus the given fields.
    """
    return {"message": message, **fields}


# PUBLIC_INTERFACE
def error_envelope(error: str, message: str, detail: Optional[Any] = None) -> Dict[str, Any]:
    """
    Build the standard error body for HTTP responses.

    Args:
        error: Error class name, e.g. "UseCaseError" or "ValidationError".
        message: Human-readable error message.
        detail: Optional structured detail (validation errors).
    """
    body: Dict[str, Any] = {"error": error, "message": message}
    if detail is not None:
        body["detail"] = detail
    return body
