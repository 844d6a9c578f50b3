"""Derived views of a schema definition.

The resource view is what a user creates and updates; the data source view is
the read-only projection used for lookups. Both are keyed by compliant field
name and mirror the nesting of the schema definition.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from .errors import CyclicSchemaError, NoIdentifierFoundError, UnsupportedTypeError
from .schema import PRIMITIVE_TYPES, PropertyType, SchemaDefinition, SchemaProperty


class FieldType(str, Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    LIST = "list"
    MAP = "map"


_PRIMITIVE_FIELD_TYPES = {
    PropertyType.STRING: FieldType.STRING,
    PropertyType.INTEGER: FieldType.INT,
    PropertyType.NUMBER: FieldType.FLOAT,
    PropertyType.BOOLEAN: FieldType.BOOL,
}


@dataclass(frozen=True)
class ViewField:
    type: FieldType
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    force_new: bool = False
    default: Any = None
    elem: Union[FieldType, "SchemaView", None] = None
    max_items: Optional[int] = None


class SchemaView(Mapping):
    """Read-only mapping of compliant field name to ``ViewField``.

    ``identifier`` names the schema property backing the reserved ``id`` key,
    it is only set on root views.
    """

    def __init__(self, fields: Dict[str, ViewField], identifier: Optional[str] = None) -> None:
        self._fields = dict(fields)
        self.identifier = identifier

    def __getitem__(self, key: str) -> ViewField:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"SchemaView({self._fields!r}, identifier={self.identifier!r})"


FlagRule = Callable[[SchemaProperty], Dict[str, Any]]


def _resource_flags(prop: SchemaProperty) -> Dict[str, Any]:
    computed = prop.is_computed()
    return {
        "required": prop.required,
        "optional": not prop.required and not prop.read_only,
        "computed": computed,
        "sensitive": prop.sensitive,
        "force_new": prop.force_new,
        "default": prop.default if prop.is_primitive() and not computed else None,
    }


def _data_source_flags(prop: SchemaProperty) -> Dict[str, Any]:
    # Parent properties stay as inputs so sub-resources can be looked up.
    if prop.is_parent_property:
        return {"required": True, "optional": False, "computed": False, "sensitive": prop.sensitive}
    return {"required": False, "optional": False, "computed": True, "sensitive": prop.sensitive}


def derive_resource_view(definition: SchemaDefinition) -> SchemaView:
    identifier = _identifier_or_none(definition)
    fields = _derive_fields(definition, _resource_flags, identifier, [id(definition)], [])
    return SchemaView(fields, identifier=identifier)


def derive_data_source_view(definition: SchemaDefinition) -> SchemaView:
    identifier = _identifier_or_none(definition)
    fields = _derive_fields(definition, _data_source_flags, identifier, [id(definition)], [])
    return SchemaView(fields, identifier=identifier)


def _identifier_or_none(definition: SchemaDefinition) -> Optional[str]:
    try:
        return definition.resolve_identifier()
    except NoIdentifierFoundError:
        return None


def _derive_fields(
    definition: SchemaDefinition,
    flags: FlagRule,
    excluded: Optional[str],
    ancestors: List[int],
    path: List[str],
) -> Dict[str, ViewField]:
    fields: Dict[str, ViewField] = {}
    for prop in definition.properties:
        if excluded is not None and prop.name == excluded:
            continue
        fields[prop.compliant_name] = _derive_field(prop, flags, ancestors, [*path, prop.name])
    return fields


def _derive_field(
    prop: SchemaProperty, flags: FlagRule, ancestors: List[int], path: List[str]
) -> ViewField:
    kind = _property_type(prop.name, prop.type)
    elem: Union[FieldType, SchemaView, None] = None
    max_items: Optional[int] = None

    if kind in PRIMITIVE_TYPES:
        field_type = _PRIMITIVE_FIELD_TYPES[kind]
    elif kind is PropertyType.LIST:
        field_type = FieldType.LIST
        items = _property_type(prop.name, prop.array_items_type)
        if items is PropertyType.OBJECT:
            elem = _derive_nested(prop, flags, ancestors, path)
        elif items is PropertyType.LIST:
            raise UnsupportedTypeError(prop.name, "list of list")
        else:
            elem = _PRIMITIVE_FIELD_TYPES[items]
    elif kind is PropertyType.OBJECT:
        if prop.nested_definition is None:
            # Free form object, exposed as a map of strings.
            field_type, elem = FieldType.MAP, FieldType.STRING
        elif all(nested.is_primitive() for nested in prop.nested_definition.properties):
            field_type = FieldType.MAP
            elem = _derive_nested(prop, flags, ancestors, path)
        else:
            field_type, max_items = FieldType.LIST, 1
            elem = _derive_nested(prop, flags, ancestors, path)
    else:
        raise UnsupportedTypeError(prop.name, prop.type)

    return ViewField(type=field_type, elem=elem, max_items=max_items, **flags(prop))


def _derive_nested(
    prop: SchemaProperty, flags: FlagRule, ancestors: List[int], path: List[str]
) -> SchemaView:
    nested = prop.nested_definition
    if nested is None:
        return SchemaView({})
    if id(nested) in ancestors:
        raise CyclicSchemaError(path)
    return SchemaView(_derive_fields(nested, flags, None, [*ancestors, id(nested)], path))


def _property_type(name: str, value: Optional[str]) -> PropertyType:
    try:
        return PropertyType(value)
    except ValueError:
        raise UnsupportedTypeError(name, value if value is not None else "") from None
