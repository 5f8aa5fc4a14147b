# Copyright 2026-present Kensho Technologies, LLC.
"""Commonly-used functions and data types from this package."""
from typing import Optional, Union

from .canonicalization import (  # noqa
    canonicalize_introspection_response,
    canonicalize_schema,
    canonicalize_type,
)
from .codec import (  # noqa
    decode_introspection_response,
    encode_introspection_response,
    introspection_response_from_dict,
    introspection_response_to_dict,
)
from .exceptions import (  # noqa
    IntrospectionDecodeError,
    IntrospectionEncodeError,
    IntrospectionSorterError,
)
from .fingerprint import compute_introspection_fingerprint  # noqa
from .model import (  # noqa
    ABSENT,
    Directive,
    EnumValue,
    Field,
    InputValue,
    IntrospectionResponse,
    IntrospectionSchema,
    IntrospectionType,
    NamedType,
    ResponseData,
    RootOperationType,
    ServiceDescriptor,
    WrappedType,
)


__package_name__ = "graphql-introspection-sorter"
__version__ = "1.0.0"


def sort_introspection_payload(
    raw_payload: Union[bytes, str], indent: Optional[int] = None
) -> bytes:
    """Canonicalize the raw JSON response to an introspection query.

    Repeated introspection of an unchanged schema always produces the same bytes, whatever
    order the server listed its types, fields, arguments, directives and enum values in.

    Args:
        raw_payload: the response body as sent by the GraphQL server.
        indent: if None, the output is compact. Otherwise, it is pretty-printed with the given
                number of spaces per nesting level.

    Returns:
        the canonical JSON of the same response, UTF-8 encoded. Keys absent from the input are
        absent from the output, and no value is changed.

    Raises:
        IntrospectionDecodeError: if the payload is not a valid introspection response.
        IntrospectionEncodeError: if the response could not be serialized back to JSON.
    """
    response = decode_introspection_response(raw_payload)
    canonicalize_introspection_response(response)
    return encode_introspection_response(response, indent=indent)
