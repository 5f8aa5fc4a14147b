# Copyright 2026-present Kensho Technologies, LLC.
"""Reorder the collections of an introspection response into a canonical order.

GraphQL servers are free to list types, fields, arguments, directives and enum values in any
order, and some of them change that order between runs even when the schema did not change.
Canonicalizing the response before saving it makes the saved snapshot depend only on the schema.

Every sibling collection is sorted by name, comparing names by code point. The sort is stable,
so elements with equal names keep their relative order; such duplicates are not expected in a
valid schema and are reported with a warning. Nothing else is modified: no element is added,
removed or changed, and the of_type chain of wrapped type references keeps its nesting order,
since reordering it would change the meaning of the type.

Canonicalization happens in place, and touches no state outside of the given response.
"""
import logging
from typing import Callable, List, Optional, TypeVar

from funcy import count_by
from graphql import DirectiveLocation

from .model import (
    Directive,
    EnumValue,
    Field,
    InputValue,
    IntrospectionResponse,
    IntrospectionSchema,
    IntrospectionType,
    Omittable,
    ResponseData,
    iter_present,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

NamedElement = TypeVar("NamedElement", Directive, EnumValue, Field, InputValue, IntrospectionType)


def _get_name_sort_key(element: NamedElement) -> str:
    """Return the sort key of an element of a collection: its name, or "" if it has none."""
    name = element.name
    return name if isinstance(name, str) else ""


def _get_location_sort_key(location: DirectiveLocation) -> str:
    """Return the sort key of a directive location: its token, e.g. "FIELD_DEFINITION"."""
    return location.name


def _sort_in_place(
    collection: Omittable[Optional[List[T]]],
    get_sort_key: Callable[[T], str],
    collection_description: str,
) -> None:
    """Stably sort the collection by the given key, if there is a collection to sort."""
    if not isinstance(collection, list):
        return

    collection.sort(key=get_sort_key)

    duplicate_keys = sorted(
        key for key, count in count_by(get_sort_key, collection).items() if count > 1
    )
    if duplicate_keys:
        logger.warning(
            "Found duplicate names %s in %s. Their relative order in the input was preserved, "
            "but it may not be stable across introspections of the same schema.",
            duplicate_keys,
            collection_description,
        )


def _describe_type(type_: IntrospectionType) -> str:
    """Name a type for log messages."""
    name = type_.name
    return f"type {name}" if isinstance(name, str) else f"unnamed {type_.kind.name} type"


def _canonicalize_args(args: Omittable[Optional[List[InputValue]]], owner_description: str) -> None:
    """Sort the arguments of a field or directive, and canonicalize the type of each one."""
    _sort_in_place(args, _get_name_sort_key, f"arguments of {owner_description}")
    for arg in iter_present(args):
        canonicalize_type(arg.type)


def _canonicalize_type_members(type_: IntrospectionType) -> None:
    """Sort the collections that belong directly to the type, and canonicalize their elements."""
    type_description = _describe_type(type_)

    _sort_in_place(type_.fields, _get_name_sort_key, f"fields of {type_description}")
    for field in iter_present(type_.fields):
        _canonicalize_args(field.args, f"field {field.name} of {type_description}")
        canonicalize_type(field.type)

    _sort_in_place(type_.interfaces, _get_name_sort_key, f"interfaces of {type_description}")
    for interface in iter_present(type_.interfaces):
        canonicalize_type(interface)

    _sort_in_place(
        type_.possible_types, _get_name_sort_key, f"possible types of {type_description}"
    )
    for possible_type in iter_present(type_.possible_types):
        canonicalize_type(possible_type)

    _sort_in_place(type_.enum_values, _get_name_sort_key, f"enum values of {type_description}")

    _sort_in_place(type_.input_fields, _get_name_sort_key, f"input fields of {type_description}")
    for input_field in iter_present(type_.input_fields):
        canonicalize_type(input_field.type)


def canonicalize_type(type_: IntrospectionType) -> None:
    """Canonicalize a named type or a type reference, in place.

    A type reference wrapped in LIST or NON_NULL is walked down through its of_type chain, and
    the collections found at every level of the chain are canonicalized. The chain itself is
    left untouched: NON_NULL(LIST(String)) stays NON_NULL(LIST(String)).

    Args:
        type_: the type to canonicalize. Collections that are absent or null are left as they are.
    """
    current_type: Omittable[Optional[IntrospectionType]] = type_
    while isinstance(current_type, IntrospectionType):
        _canonicalize_type_members(current_type)
        current_type = current_type.of_type


def _canonicalize_directive(directive: Directive) -> None:
    """Sort the arguments and locations of a directive."""
    directive_description = f"directive @{directive.name}"
    _canonicalize_args(directive.args, directive_description)
    _sort_in_place(
        directive.locations, _get_location_sort_key, f"locations of {directive_description}"
    )


def canonicalize_schema(schema: IntrospectionSchema) -> IntrospectionSchema:
    """Canonicalize the value of the __schema introspection meta-field, in place.

    Directives and types are sorted by name, and every collection reachable from them is
    canonicalized in turn. The root operation types are single references and stay as they are.

    Args:
        schema: the schema to canonicalize.

    Returns:
        the same schema object, for convenience.
    """
    _sort_in_place(schema.directives, _get_name_sort_key, "schema directives")
    for directive in iter_present(schema.directives):
        _canonicalize_directive(directive)

    _sort_in_place(schema.types, _get_name_sort_key, "schema types")
    for type_ in iter_present(schema.types):
        canonicalize_type(type_)

    return schema


def canonicalize_introspection_response(response: IntrospectionResponse) -> IntrospectionResponse:
    """Canonicalize an introspection response, in place.

    Only the schema part of the response has collections to sort. The errors keep the order in
    which the server reported them, and the extensions and the federation _service descriptor
    are left untouched.

    Args:
        response: the decoded introspection response.

    Returns:
        the same response object, for convenience.
    """
    data = response.data
    if not isinstance(data, ResponseData) or not isinstance(data.schema, IntrospectionSchema):
        logger.debug("Introspection response has no __schema, leaving it unchanged.")
        return response

    canonicalize_schema(data.schema)
    logger.debug(
        "Canonicalized introspection response with %d types and %d directives.",
        len(list(iter_present(data.schema.types))),
        len(list(iter_present(data.schema.directives))),
    )
    return response
