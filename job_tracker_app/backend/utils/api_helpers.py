"""
Common API utilities shared by the routers and exception handlers.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import JobNotFoundError

logger = logging.getLogger(__name__)

# Envelope keys that never name a field
_LOCATION_PREFIXES = {"body", "query", "path"}


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Flatten pydantic error dicts into ``{"field", "message"}`` pairs.

    Args:
        errors: Output of ``ValidationError.errors()`` or ``RequestValidationError.errors()``

    Returns:
        One entry per violation, in the order pydantic reported them
    """
    formatted = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        formatted.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return formatted


def check_resource_exists(resource: Optional[object], resource_id: Any) -> object:
    """
    Raise JobNotFoundError when a scoped lookup came back empty.

    Args:
        resource: The record returned by the store, or None
        resource_id: Identifier the caller asked for (logged only)
    """
    if resource is None:
        logger.debug("Job %s not found for caller", resource_id)
        raise JobNotFoundError()
    return resource
