"""
Allow-list validation of partial update payloads.
"""

from typing import Any, Dict, List, Mapping

from entities.update_result import Allowed, Rejected, RejectedKey, RejectionReason, ValidationOutcome
from policies.field_policy import FieldPolicy


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__


def validate(policy: FieldPolicy, payload: Mapping[str, Any]) -> ValidationOutcome:
    """
    Classify every payload key against ``policy``.

    Keys outside the policy are rejected as not allowed; allowed keys whose
    value does not match the declared type, or breaks a constraint on the
    record field (``ge``, ``max_length``, ...), are rejected as type mismatches.
    A single offending key rejects the whole payload, and every offending
    key is reported in payload order. Key presence alone decides whether a
    field is supplied: ``""``, ``0`` and ``False`` are real values.
    """
    if not isinstance(payload, Mapping):
        raise ValueError(f"Update payload must be a mapping, got {_type_name(payload)}")

    allowed = policy.fields()
    rejections: List[RejectedKey] = []
    values: Dict[str, Any] = {}

    for key, value in payload.items():
        if not isinstance(key, str) or key not in allowed:
            rejections.append(RejectedKey(
                key=str(key),
                reason=RejectionReason.NOT_ALLOWED,
                message="Field is not allowed to be updated",
            ))
            continue

        spec = policy.type_of(key)
        if not spec.accepts(value):
            rejections.append(RejectedKey(
                key=key,
                reason=RejectionReason.TYPE_MISMATCH,
                message=f"Expected {spec.describe()}, got {_type_name(value)}",
            ))
            continue

        error = policy.constraint_error(key, value)
        if error is not None:
            rejections.append(RejectedKey(
                key=key,
                reason=RejectionReason.TYPE_MISMATCH,
                message=error,
            ))
            continue

        values[key] = value

    if rejections:
        return Rejected(rejections=rejections)
    return Allowed(values=values)


class UpdateValidator:
    """Validator bound to a single field policy."""

    def __init__(self, policy: FieldPolicy):
        self.policy = policy

    def validate(self, payload: Mapping[str, Any]) -> ValidationOutcome:
        return validate(self.policy, payload)
