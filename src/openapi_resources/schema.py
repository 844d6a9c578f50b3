"""Schema definition model for API resources.

A resource description is represented as a tree: a ``SchemaDefinition`` owns
an ordered list of ``SchemaProperty`` and object (or list of object)
properties own a nested ``SchemaDefinition``. The trees are populated by the
description loader and are read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Set, Tuple

from .errors import (
    CyclicSchemaError,
    InvalidPropertyError,
    NoIdentifierFoundError,
    NoStatusFoundError,
    PropertyNotFoundError,
)
from .naming import to_compliant_name


ID_PROPERTY_NAME = "id"
STATUS_PROPERTY_NAME = "status"


class PropertyType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    LIST = "list"
    OBJECT = "object"


PRIMITIVE_TYPES = (
    PropertyType.STRING,
    PropertyType.INTEGER,
    PropertyType.NUMBER,
    PropertyType.BOOLEAN,
)


@dataclass(frozen=True)
class SchemaProperty:
    name: str
    type: str
    array_items_type: Optional[str] = None
    nested_definition: Optional["SchemaDefinition"] = field(default=None, repr=False)
    required: bool = False
    read_only: bool = False
    computed: bool = False
    sensitive: bool = False
    force_new: bool = False
    immutable: bool = False
    is_identifier: bool = False
    is_status_identifier: bool = False
    is_parent_property: bool = False
    default: Any = None
    preferred_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.required and self.read_only:
            raise InvalidPropertyError(
                f"property '{self.name}' cannot be required and read only at the same time"
            )

    @property
    def compliant_name(self) -> str:
        return self.preferred_name or to_compliant_name(self.name)

    def is_optional(self) -> bool:
        return not self.required

    def is_computed(self) -> bool:
        return self.read_only or (self.is_optional() and self.computed)

    def is_object(self) -> bool:
        return self.type == PropertyType.OBJECT

    def is_list_of_objects(self) -> bool:
        return self.type == PropertyType.LIST and self.array_items_type == PropertyType.OBJECT

    def is_primitive(self) -> bool:
        return self.type in PRIMITIVE_TYPES


# Rules are evaluated in order; the first rule matching any property wins.
PropertyRule = Callable[[SchemaProperty], bool]

IDENTIFIER_RULES: Tuple[PropertyRule, ...] = (
    lambda prop: prop.compliant_name == ID_PROPERTY_NAME,
    lambda prop: prop.is_identifier,
)

STATUS_RULES: Tuple[PropertyRule, ...] = (
    lambda prop: prop.is_status_identifier,
    lambda prop: prop.compliant_name == STATUS_PROPERTY_NAME,
)


def first_match(
    properties: List[SchemaProperty], rules: Tuple[PropertyRule, ...]
) -> Optional[SchemaProperty]:
    for rule in rules:
        for prop in properties:
            if rule(prop):
                return prop
    return None


@dataclass(eq=False)
class SchemaDefinition:
    properties: List[SchemaProperty] = field(default_factory=list)

    def __post_init__(self) -> None:
        seen: Set[str] = set()
        for prop in self.properties:
            if prop.name in seen:
                raise InvalidPropertyError(
                    f"property '{prop.name}' is declared more than once in the schema definition"
                )
            seen.add(prop.name)

    def get_property(self, name: str) -> SchemaProperty:
        for prop in self.properties:
            if prop.name == name:
                return prop
        raise PropertyNotFoundError(name)

    def get_property_by_compliant_name(self, name: str) -> SchemaProperty:
        for prop in self.properties:
            if prop.compliant_name == name:
                return prop
        raise PropertyNotFoundError(name, kind="compliant name")

    def resolve_identifier(self) -> str:
        """Return the name of the root property identifying a resource instance.

        A property named ``id`` takes precedence over one flagged as identifier.
        Nested object properties are never considered.
        """
        prop = first_match(self.properties, IDENTIFIER_RULES)
        if prop is None:
            raise NoIdentifierFoundError()
        return prop.name

    def resolve_status(self) -> List[str]:
        """Return the property path holding the resource status.

        The path has more than one element when the status lives inside a
        status object, e.g. ``["status", "actualStatus"]``. Only the root
        level candidate has to be read only.
        """
        return _resolve_status(self, enforce_read_only=True, ancestors=[], path=[])

    def immutable_properties(self) -> List[str]:
        return [
            prop.name
            for prop in self.properties
            if prop.immutable and prop.compliant_name != ID_PROPERTY_NAME
        ]

    def parent_properties(self) -> List[SchemaProperty]:
        return [prop for prop in self.properties if prop.is_parent_property]


def _resolve_status(
    definition: SchemaDefinition,
    enforce_read_only: bool,
    ancestors: List[int],
    path: List[str],
) -> List[str]:
    if id(definition) in ancestors:
        raise CyclicSchemaError(path)

    candidate = first_match(definition.properties, STATUS_RULES)
    if candidate is None:
        raise NoStatusFoundError()
    if enforce_read_only and not candidate.read_only:
        raise NoStatusFoundError(
            f"schema definition status property '{candidate.name}' must be readOnly"
        )

    status_path = [*path, candidate.name]
    if candidate.is_object() and candidate.nested_definition is not None:
        return _resolve_status(
            candidate.nested_definition,
            enforce_read_only=False,
            ancestors=[*ancestors, id(definition)],
            path=status_path,
        )
    return status_path
