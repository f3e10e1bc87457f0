"""
Field policies: the declared allow-list of mutable fields for a record type.

A policy maps each updatable field name (the record's wire name, i.e. the
pydantic alias when one is set) to a FieldSpec describing which values are
acceptable. Policies are built once at startup and checked against the record
model so that a policy can never reference an unknown or protected field.
"""

import types
from enum import Enum
from typing import Annotated, Any, Dict, FrozenSet, Mapping, Optional, Tuple, Type, Union, get_args, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo

from common.logging import get_logger

logger = get_logger("field_policy")


class FieldPolicyConfigurationError(Exception):
    """Raised when a policy does not match the record schema it guards."""


class UnknownFieldError(KeyError):
    """Raised when a field outside the policy is looked up."""


class FieldType(str, Enum):
    """Value-type descriptors accepted by a field policy."""
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"

    @property
    def annotation(self) -> type:
        """Python type a record field must be annotated with to carry this type."""
        return _ANNOTATIONS[self]

    def accepts(self, value: Any) -> bool:
        # bool is an int subclass; keep booleans out of numeric fields
        if self is FieldType.BOOLEAN:
            return isinstance(value, bool)
        if isinstance(value, bool):
            return False
        if self is FieldType.STRING:
            return isinstance(value, str)
        if self is FieldType.INTEGER:
            return isinstance(value, int)
        return isinstance(value, (int, float))


_ANNOTATIONS: Dict[FieldType, type] = {
    FieldType.STRING: str,
    FieldType.INTEGER: int,
    FieldType.NUMBER: float,
    FieldType.BOOLEAN: bool,
}


class FieldSpec(BaseModel):
    """Expected value shape for one mutable field."""
    type: FieldType
    nullable: bool = False

    class Config:
        frozen = True

    def accepts(self, value: Any) -> bool:
        if value is None:
            return self.nullable
        return self.type.accepts(value)

    def describe(self) -> str:
        return f"{self.type.value} or null" if self.nullable else self.type.value


def _unwrap_optional(annotation: Any) -> Tuple[Any, bool]:
    """Split ``Optional[X]`` into ``(X, True)``; anything else into ``(annotation, False)``."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1 and len(get_args(annotation)) == 2:
            return args[0], True
    return annotation, False


def _constrained_annotation(info: FieldInfo) -> Any:
    """Field annotation with its constraint metadata (ge, max_length, ...) reattached."""
    if info.metadata:
        return Annotated[(info.annotation, *info.metadata)]
    return info.annotation


def record_field_names(record_type: Type[BaseModel]) -> Dict[str, str]:
    """Map wire names (alias or attribute name) to attribute names."""
    return {
        (info.alias or name): name
        for name, info in record_type.model_fields.items()
    }


def record_protected_fields(record_type: Type[BaseModel], identifier: str = "id") -> FrozenSet[str]:
    """Wire names of the identifier plus every field flagged ``protected`` on the model."""
    protected = set()
    for name, info in record_type.model_fields.items():
        wire_name = info.alias or name
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        if name == identifier or wire_name == identifier or extra.get("protected"):
            protected.add(wire_name)
    return frozenset(protected)


class FieldPolicy:
    """
    Immutable allow-list of updatable fields for one record type.

    Construction validates the declaration against ``record_type``:
    every field must exist on the record, must not be protected and must
    declare a FieldType matching the record's annotation. Any mismatch
    raises FieldPolicyConfigurationError.

    Values that pass the FieldType check are also run through the record
    field's own constraints, so an allowed value can always be merged.
    """

    def __init__(
        self,
        record_type: Type[BaseModel],
        fields: Mapping[str, Union[FieldSpec, FieldType]],
        identifier: str = "id",
    ):
        self.record_type = record_type
        self.identifier = identifier
        self._protected = record_protected_fields(record_type, identifier)

        specs: Dict[str, FieldSpec] = {}
        for name, spec in fields.items():
            if isinstance(spec, FieldType):
                spec = FieldSpec(type=spec)
            specs[name] = spec

        self._check_against_schema(specs)
        self._specs = types.MappingProxyType(specs)
        self._names = frozenset(specs)
        schema = record_field_names(record_type)
        self._adapters: Dict[str, TypeAdapter] = {
            name: TypeAdapter(_constrained_annotation(record_type.model_fields[schema[name]]))
            for name in specs
        }

        logger.debug(
            f"Field policy for {record_type.__name__}: {sorted(self._names)}"
        )

    def _check_against_schema(self, specs: Mapping[str, FieldSpec]) -> None:
        schema = record_field_names(self.record_type)
        record_name = self.record_type.__name__

        unknown = [name for name in specs if name not in schema]
        if unknown:
            raise FieldPolicyConfigurationError(
                f"Policy for {record_name} references fields missing from the record: {unknown}"
            )

        protected = [name for name in specs if name in self._protected]
        if protected:
            raise FieldPolicyConfigurationError(
                f"Policy for {record_name} allows protected fields: {protected}"
            )

        for name, spec in specs.items():
            annotation = self.record_type.model_fields[schema[name]].annotation
            inner, optional = _unwrap_optional(annotation)
            if inner is not spec.type.annotation:
                raise FieldPolicyConfigurationError(
                    f"Policy for {record_name} declares '{name}' as {spec.type.value}, "
                    f"but the record annotates it as {annotation!r}"
                )
            if spec.nullable and not optional:
                raise FieldPolicyConfigurationError(
                    f"Policy for {record_name} declares '{name}' nullable, "
                    f"but the record field does not accept None"
                )

    @classmethod
    def from_update_model(
        cls,
        record_type: Type[BaseModel],
        update_model: Type[BaseModel],
        identifier: str = "id",
    ) -> "FieldPolicy":
        """
        Derive a policy from an update DTO model.

        Every field of ``update_model`` becomes an allowed field, keyed by its
        alias when one is set. ``Optional[X]`` on the DTO only marks the field
        as omittable; nullability follows the record's own annotation.
        """
        annotation_types = {t.annotation: t for t in FieldType}
        record_schema = record_field_names(record_type)
        specs: Dict[str, FieldSpec] = {}

        for name, info in update_model.model_fields.items():
            wire_name = info.alias or name
            inner, _ = _unwrap_optional(info.annotation)
            field_type: Optional[FieldType] = annotation_types.get(inner)
            if field_type is None:
                raise FieldPolicyConfigurationError(
                    f"Cannot derive a field type for '{wire_name}' from {info.annotation!r}"
                )
            nullable = False
            if wire_name in record_schema:
                record_annotation = record_type.model_fields[record_schema[wire_name]].annotation
                nullable = _unwrap_optional(record_annotation)[1]
            specs[wire_name] = FieldSpec(type=field_type, nullable=nullable)

        return cls(record_type, specs, identifier=identifier)

    def fields(self) -> FrozenSet[str]:
        return self._names

    def type_of(self, name: str) -> FieldSpec:
        try:
            return self._specs[name]
        except KeyError:
            raise UnknownFieldError(name) from None

    def protected_fields(self) -> FrozenSet[str]:
        return self._protected

    def constraint_error(self, name: str, value: Any) -> Optional[str]:
        """First message from the record field's constraints for ``value``, or None."""
        if name not in self._adapters:
            raise UnknownFieldError(name)
        try:
            self._adapters[name].validate_python(value)
        except ValidationError as e:
            return e.errors()[0]["msg"]
        return None

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __repr__(self) -> str:
        return f"FieldPolicy({self.record_type.__name__}, fields={sorted(self._names)})"
