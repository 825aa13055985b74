"""JSON merge patch (RFC 7386) for the open JSON payload columns."""

from copy import deepcopy
from typing import Any


def merge_patch(target: Any, patch: Any) -> Any:
    """
    Apply a JSON merge patch to a document.

    Objects merge recursively, a null value removes the key, and any other
    value (including a list) replaces what was there. A patch that is not
    an object replaces the whole target.

    Args:
        target: Current document (not modified)
        patch: Merge patch to apply

    Returns:
        The patched document
    """
    if not isinstance(patch, dict):
        return deepcopy(patch)

    result = deepcopy(target) if isinstance(target, dict) else {}
    for key, value in patch.items():
        if value is None:
            result.pop(key, None)
        else:
            result[key] = merge_patch(result.get(key), value)
    return result
