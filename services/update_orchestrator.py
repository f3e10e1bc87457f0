"""
Partial update orchestration: lookup, allow-list validation, merge, save.
"""

from typing import Any, List, Mapping

from pydantic import ValidationError

from entities.update_result import NotFound, Rejected, RejectedKey, RejectionReason, Updated, UpdateResult
from policies.field_policy import FieldPolicy
from repositories.base import BaseRepository
from services import merge_engine
from services.update_validator import validate
from common.logging import get_logger

logger = get_logger("update_orchestrator")


class UpdateOrchestrator:
    """
    Applies client-supplied partial updates to stored records.

    Every call ends in exactly one of NotFound, Rejected or Updated.
    Lookup happens before validation, so an unknown id is NotFound whatever
    the payload. A rejected payload never reaches the repository, including
    one the record model itself refuses while merging. The whole
    read-modify-write cycle runs under ``repository.locked(record_id)``.
    """

    def __init__(self, repository: BaseRepository, policy: FieldPolicy):
        self.repository = repository
        self.policy = policy

    async def update(self, record_id: str, payload: Mapping[str, Any]) -> UpdateResult:
        async with self.repository.locked(record_id):
            existing = await self.repository.get_by_id(record_id)
            if existing is None:
                logger.info(f"Update target not found (ID: {record_id})")
                return NotFound(record_id=record_id)

            outcome = validate(self.policy, payload)
            if isinstance(outcome, Rejected):
                logger.info(
                    f"Update rejected (ID: {record_id})",
                    extra={"offending_keys": outcome.offending_keys},
                )
                return outcome

            try:
                updated = merge_engine.apply(existing, outcome.values)
            except ValidationError as e:
                if not outcome.values:
                    raise
                rejected = _rejected_by_record(outcome.values, e)
                logger.info(
                    f"Update rejected by record validation (ID: {record_id})",
                    extra={"offending_keys": rejected.offending_keys},
                )
                return rejected

            saved = await self.repository.save(updated)
            return Updated(record=saved)


def _rejected_by_record(values: Mapping[str, Any], error: ValidationError) -> Rejected:
    """Turn a record-level validation failure into a Rejected for the supplied keys."""
    messages = {}
    for item in error.errors():
        if item["loc"]:
            messages.setdefault(str(item["loc"][0]), item["msg"])
    # model validators carry no field location; blame every supplied key
    keys = [key for key in values if key in messages] or list(values)
    fallback = error.errors()[0]["msg"]
    rejections: List[RejectedKey] = [
        RejectedKey(
            key=key,
            reason=RejectionReason.TYPE_MISMATCH,
            message=messages.get(key, fallback),
        )
        for key in keys
    ]
    return Rejected(rejections=rejections)


# Factory function
def create_update_orchestrator(repository: BaseRepository, policy: FieldPolicy) -> UpdateOrchestrator:
    """Factory function to create UpdateOrchestrator instance."""
    return UpdateOrchestrator(repository, policy)
