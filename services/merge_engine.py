"""
Merge of validated field values onto an existing record.
"""

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel

R = TypeVar("R", bound=BaseModel)


def apply(existing: R, allowed: Mapping[str, Any]) -> R:
    """
    Return a new record equal to ``existing`` with ``allowed`` overwritten.

    ``allowed`` is keyed by wire names (aliases). Fields missing from it keep
    their current value; there is no nested merging. ``existing`` is never
    modified and the result shares no mutable state with it.
    """
    data = existing.model_dump(by_alias=True)
    for key, value in allowed.items():
        data[key] = value
    return type(existing).model_validate(data)


class MergeEngine:
    """Stateless wrapper so the merge can be injected alongside other services."""

    def apply(self, existing: R, allowed: Mapping[str, Any]) -> R:
        return apply(existing, allowed)
