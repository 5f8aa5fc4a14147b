# Copyright 2026-present Kensho Technologies, LLC.
"""Typed view of the response to a GraphQL schema introspection query.

The classes mirror the shape of the JSON returned by a server for the `__schema` introspection
query, e.g. the one produced by graphql-core's `get_introspection_query`. They are plain
mutable dataclasses: decoding and encoding live in the codec module, and the only mutation ever
applied after decoding is the reordering of sibling collections by the canonicalization module.

Introspection payloads are diffed against previously saved snapshots, so the model has to be
precise about which keys were present in the input. Every attribute whose key may be missing
from the payload is typed Omittable[...], and holds the ABSENT marker when the key was missing.
ABSENT and None are never interchangeable: None represents a key that was present with a JSON
null value.
"""
from dataclasses import dataclass, field
from enum import Enum, unique
from typing import Any, Dict, Iterator, List, Literal, Optional, TypeVar, Union

from graphql import DirectiveLocation, TypeKind


@unique
class Presence(Enum):
    """Marker type for keys that were not present in the decoded payload."""

    ABSENT = "absent"

    def __repr__(self) -> str:
        """Print the marker the same way it is referenced in code."""
        return "ABSENT"


ABSENT = Presence.ABSENT

T = TypeVar("T")

# A value for a key that may be missing from the payload altogether.
Omittable = Union[T, Literal[Presence.ABSENT]]

# A JSON object whose contents are carried through verbatim, e.g. GraphQL errors.
OpaqueJson = Dict[str, Any]


def is_present(value: Any) -> bool:
    """Return True if the value came from a key that was present in the payload, even if null."""
    return value is not ABSENT


def iter_present(collection: Omittable[Optional[List[T]]]) -> Iterator[T]:
    """Iterate over a collection attribute, treating an absent or null collection as empty."""
    if isinstance(collection, list):
        yield from collection


@dataclass
class InputValue:
    """An argument of a field or directive, or a field of an input object."""

    name: str
    type: "IntrospectionType"
    description: Omittable[Optional[str]] = ABSENT
    # GraphQL literal of the default value, printed as a string, e.g. '"foo"' or '[1, 2]'.
    default_value: Omittable[Optional[str]] = ABSENT
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class EnumValue:
    """One of the possible values of an enum type."""

    name: str
    description: Omittable[Optional[str]] = ABSENT
    is_deprecated: Omittable[Optional[bool]] = ABSENT
    deprecation_reason: Omittable[Optional[str]] = ABSENT
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Field:
    """A field of an object or interface type."""

    name: str
    type: "IntrospectionType"
    description: Omittable[Optional[str]] = ABSENT
    args: Omittable[Optional[List[InputValue]]] = ABSENT
    is_deprecated: Omittable[Optional[bool]] = ABSENT
    deprecation_reason: Omittable[Optional[str]] = ABSENT
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class IntrospectionType:
    """A GraphQL type, either as a named schema type or as a reference to a (wrapped) type.

    The same structure plays two roles, distinguished only by where it appears in the document:
    - entries of the schema's "types" list are named types, which are never wrapped and so
      never have an of_type;
    - everywhere else (field, argument and input field types, interfaces, possible types) it is
      a type reference. A reference with kind LIST or NON_NULL wraps exactly one other reference
      in of_type, e.g. [String!]! is NON_NULL(LIST(NON_NULL(String))). The of_type chain encodes
      the wrapping order and is never reordered.

    Which collections are populated depends on the kind: fields for OBJECT and INTERFACE,
    interfaces for OBJECT (and INTERFACE in newer servers), possible_types for INTERFACE and
    UNION, enum_values for ENUM, input_fields for INPUT_OBJECT. Servers usually send null for
    collections that do not apply to the kind.
    """

    kind: TypeKind
    name: Omittable[Optional[str]] = ABSENT
    description: Omittable[Optional[str]] = ABSENT
    fields: Omittable[Optional[List[Field]]] = ABSENT
    input_fields: Omittable[Optional[List[InputValue]]] = ABSENT
    interfaces: Omittable[Optional[List["IntrospectionType"]]] = ABSENT
    enum_values: Omittable[Optional[List[EnumValue]]] = ABSENT
    possible_types: Omittable[Optional[List["IntrospectionType"]]] = ABSENT
    of_type: Omittable[Optional["IntrospectionType"]] = ABSENT
    extras: Dict[str, Any] = field(default_factory=dict)


# Names for the two roles an IntrospectionType plays, see its docstring.
NamedType = IntrospectionType
WrappedType = IntrospectionType


@dataclass
class Directive:
    """A directive supported by the server, e.g. @deprecated."""

    name: str
    description: Omittable[Optional[str]] = ABSENT
    locations: Omittable[Optional[List[DirectiveLocation]]] = ABSENT
    args: Omittable[Optional[List[InputValue]]] = ABSENT
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RootOperationType:
    """A bare reference to a root operation type, like {"name": "RootSchemaQuery"}.

    Newer servers also send the kind of the referenced type.
    """

    name: Omittable[Optional[str]] = ABSENT
    kind: Omittable[Optional[TypeKind]] = ABSENT
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class IntrospectionSchema:
    """The value of the "__schema" introspection meta-field."""

    query_type: Omittable[Optional[RootOperationType]] = ABSENT
    mutation_type: Omittable[Optional[RootOperationType]] = ABSENT
    subscription_type: Omittable[Optional[RootOperationType]] = ABSENT
    types: Omittable[Optional[List[NamedType]]] = ABSENT
    directives: Omittable[Optional[List[Directive]]] = ABSENT
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ServiceDescriptor:
    """The value of the "_service" field exposed by Apollo Federation services."""

    sdl: Omittable[Optional[str]] = ABSENT
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ResponseData:
    """The "data" member of an introspection response."""

    schema: Omittable[Optional[IntrospectionSchema]] = ABSENT
    service: Omittable[Optional[ServiceDescriptor]] = ABSENT
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class IntrospectionResponse:
    """A complete response to an introspection query, as sent by a GraphQL server."""

    # Errors keep the order in which the server reported them.
    errors: Omittable[Optional[List[OpaqueJson]]] = ABSENT
    data: Omittable[Optional[ResponseData]] = ABSENT
    # Server-specific metadata such as Apollo tracing, carried through untouched.
    extensions: Omittable[Any] = ABSENT
    extras: Dict[str, Any] = field(default_factory=dict)
