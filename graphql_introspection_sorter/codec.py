# Copyright 2026-present Kensho Technologies, LLC.
"""Convert introspection responses between JSON and the introspection document model.

Decoding keeps track of which keys were present: a key missing from the payload is decoded as
ABSENT and omitted again on encoding, while a key holding null is decoded as None and encoded as
null. Keys unknown to the model are kept in the "extras" of the object they appear in.

Encoding emits the known keys of every object in a fixed order, the one used by graphql-core's
introspection query, followed by the extras sorted by key. Two payloads describing the same
schema therefore encode identically once canonicalized, even when their servers order object keys
differently. Opaque values such as errors and extensions are written exactly as they were read.
"""
import json
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar, Union

from graphql import DirectiveLocation, TypeKind

from .exceptions import IntrospectionDecodeError, IntrospectionEncodeError
from .model import (
    ABSENT,
    Directive,
    EnumValue,
    Field,
    InputValue,
    IntrospectionResponse,
    IntrospectionSchema,
    IntrospectionType,
    Omittable,
    ResponseData,
    RootOperationType,
    ServiceDescriptor,
)


T = TypeVar("T")

# Decoders take the JSON value and its path in the payload, e.g. "data.__schema.types[2]".
Decoder = Callable[[Any, str], T]
Encoder = Callable[[T], Any]

_RESPONSE_KEYS = ("errors", "data", "extensions")
_DATA_KEYS = ("__schema", "_service")
_SERVICE_KEYS = ("sdl",)
_ROOT_OPERATION_TYPE_KEYS = ("name", "kind")
_SCHEMA_KEYS = ("queryType", "mutationType", "subscriptionType", "types", "directives")
_TYPE_KEYS = (
    "kind",
    "name",
    "description",
    "fields",
    "inputFields",
    "interfaces",
    "enumValues",
    "possibleTypes",
    "ofType",
)
_FIELD_KEYS = ("name", "description", "args", "type", "isDeprecated", "deprecationReason")
_INPUT_VALUE_KEYS = ("name", "description", "type", "defaultValue")
_ENUM_VALUE_KEYS = ("name", "description", "isDeprecated", "deprecationReason")
_DIRECTIVE_KEYS = ("name", "description", "locations", "args")


def _describe_json_value(value: Any) -> str:
    """Return a short human-readable description of a JSON value, for error messages."""
    text = json.dumps(value, ensure_ascii=False, default=repr)
    if len(text) > 60:
        text = text[:57] + "..."
    return f"{type(value).__name__} {text}"


def _reject_non_finite_constant(constant: str) -> Any:
    """Refuse the NaN and Infinity extensions to JSON that the json module accepts by default."""
    raise ValueError(f"Non-standard JSON constant {constant} is not allowed.")


# #####################
# Decoding primitives #
# #####################


def _as_object(value: Any, path: str) -> Dict[str, Any]:
    """Return the value if it is a JSON object, raising IntrospectionDecodeError otherwise."""
    if not isinstance(value, dict):
        raise IntrospectionDecodeError(
            f"Expected a JSON object at {path}, but got {_describe_json_value(value)}."
        )
    return value


def _as_string(value: Any, path: str) -> str:
    """Return the value if it is a JSON string, raising IntrospectionDecodeError otherwise."""
    if not isinstance(value, str):
        raise IntrospectionDecodeError(
            f"Expected a string at {path}, but got {_describe_json_value(value)}."
        )
    return value


def _as_boolean(value: Any, path: str) -> bool:
    """Return the value if it is a JSON boolean, raising IntrospectionDecodeError otherwise."""
    if not isinstance(value, bool):
        raise IntrospectionDecodeError(
            f"Expected a boolean at {path}, but got {_describe_json_value(value)}."
        )
    return value


def _as_list_of(decode_element: Decoder[T]) -> Decoder[List[T]]:
    """Return a decoder for a JSON array whose elements are decoded with the given decoder."""

    def decode_list(value: Any, path: str) -> List[T]:
        if not isinstance(value, list):
            raise IntrospectionDecodeError(
                f"Expected an array at {path}, but got {_describe_json_value(value)}."
            )
        return [decode_element(element, f"{path}[{index}]") for index, element in enumerate(value)]

    return decode_list


def _as_type_kind(value: Any, path: str) -> TypeKind:
    """Decode a __TypeKind token such as "NON_NULL"."""
    kind = TypeKind.__members__.get(_as_string(value, path))
    if kind is None:
        raise IntrospectionDecodeError(
            f"Unknown type kind {value!r} at {path}. Expected one of: "
            f"{list(TypeKind.__members__)}."
        )
    return kind


def _as_directive_location(value: Any, path: str) -> DirectiveLocation:
    """Decode a __DirectiveLocation token such as "FIELD_DEFINITION"."""
    location = DirectiveLocation.__members__.get(_as_string(value, path))
    if location is None:
        raise IntrospectionDecodeError(
            f"Unknown directive location {value!r} at {path}. Expected one of: "
            f"{list(DirectiveLocation.__members__)}."
        )
    return location


def _opaque(value: Any, path: str) -> Any:
    """Return any JSON value unchanged."""
    return value


def _read_optional(
    payload: Dict[str, Any], key: str, path: str, decode: Decoder[T]
) -> Omittable[Optional[T]]:
    """Decode the value of an optional, nullable key, or return ABSENT if the key is missing."""
    if key not in payload:
        return ABSENT
    value = payload[key]
    if value is None:
        return None
    return decode(value, f"{path}.{key}")


def _read_required(payload: Dict[str, Any], key: str, path: str, decode: Decoder[T]) -> T:
    """Decode the value of a key that must be present and not null."""
    if payload.get(key) is None:
        raise IntrospectionDecodeError(
            f'Missing required key "{key}" in the JSON object at {path}. '
            f"Present keys: {list(payload)}."
        )
    return decode(payload[key], f"{path}.{key}")


def _read_extras(payload: Dict[str, Any], known_keys: Iterable[str]) -> Dict[str, Any]:
    """Collect the keys the model does not know about, preserving their order."""
    known = frozenset(known_keys)
    return {key: value for key, value in payload.items() if key not in known}


# ################
# Model decoders #
# ################


def _decode_type(value: Any, path: str) -> IntrospectionType:
    """Decode a named type or a type reference."""
    payload = _as_object(value, path)
    return IntrospectionType(
        kind=_read_required(payload, "kind", path, _as_type_kind),
        name=_read_optional(payload, "name", path, _as_string),
        description=_read_optional(payload, "description", path, _as_string),
        fields=_read_optional(payload, "fields", path, _as_list_of(_decode_field)),
        input_fields=_read_optional(payload, "inputFields", path, _as_list_of(_decode_input_value)),
        interfaces=_read_optional(payload, "interfaces", path, _as_list_of(_decode_type)),
        enum_values=_read_optional(payload, "enumValues", path, _as_list_of(_decode_enum_value)),
        possible_types=_read_optional(payload, "possibleTypes", path, _as_list_of(_decode_type)),
        of_type=_read_optional(payload, "ofType", path, _decode_type),
        extras=_read_extras(payload, _TYPE_KEYS),
    )


def _decode_field(value: Any, path: str) -> Field:
    """Decode a field of an object or interface type."""
    payload = _as_object(value, path)
    return Field(
        name=_read_required(payload, "name", path, _as_string),
        description=_read_optional(payload, "description", path, _as_string),
        args=_read_optional(payload, "args", path, _as_list_of(_decode_input_value)),
        type=_read_required(payload, "type", path, _decode_type),
        is_deprecated=_read_optional(payload, "isDeprecated", path, _as_boolean),
        deprecation_reason=_read_optional(payload, "deprecationReason", path, _as_string),
        extras=_read_extras(payload, _FIELD_KEYS),
    )


def _decode_input_value(value: Any, path: str) -> InputValue:
    """Decode an argument or an input field."""
    payload = _as_object(value, path)
    return InputValue(
        name=_read_required(payload, "name", path, _as_string),
        description=_read_optional(payload, "description", path, _as_string),
        type=_read_required(payload, "type", path, _decode_type),
        default_value=_read_optional(payload, "defaultValue", path, _as_string),
        extras=_read_extras(payload, _INPUT_VALUE_KEYS),
    )


def _decode_enum_value(value: Any, path: str) -> EnumValue:
    """Decode one value of an enum type."""
    payload = _as_object(value, path)
    return EnumValue(
        name=_read_required(payload, "name", path, _as_string),
        description=_read_optional(payload, "description", path, _as_string),
        is_deprecated=_read_optional(payload, "isDeprecated", path, _as_boolean),
        deprecation_reason=_read_optional(payload, "deprecationReason", path, _as_string),
        extras=_read_extras(payload, _ENUM_VALUE_KEYS),
    )


def _decode_directive(value: Any, path: str) -> Directive:
    """Decode a directive definition."""
    payload = _as_object(value, path)
    return Directive(
        name=_read_required(payload, "name", path, _as_string),
        description=_read_optional(payload, "description", path, _as_string),
        locations=_read_optional(payload, "locations", path, _as_list_of(_as_directive_location)),
        args=_read_optional(payload, "args", path, _as_list_of(_decode_input_value)),
        extras=_read_extras(payload, _DIRECTIVE_KEYS),
    )


def _decode_root_operation_type(value: Any, path: str) -> RootOperationType:
    """Decode the reference to a root operation type, e.g. the queryType of the schema."""
    payload = _as_object(value, path)
    return RootOperationType(
        name=_read_optional(payload, "name", path, _as_string),
        kind=_read_optional(payload, "kind", path, _as_type_kind),
        extras=_read_extras(payload, _ROOT_OPERATION_TYPE_KEYS),
    )


def _decode_schema(value: Any, path: str) -> IntrospectionSchema:
    """Decode the value of the __schema meta-field."""
    payload = _as_object(value, path)
    return IntrospectionSchema(
        query_type=_read_optional(payload, "queryType", path, _decode_root_operation_type),
        mutation_type=_read_optional(payload, "mutationType", path, _decode_root_operation_type),
        subscription_type=_read_optional(
            payload, "subscriptionType", path, _decode_root_operation_type
        ),
        types=_read_optional(payload, "types", path, _as_list_of(_decode_type)),
        directives=_read_optional(payload, "directives", path, _as_list_of(_decode_directive)),
        extras=_read_extras(payload, _SCHEMA_KEYS),
    )


def _decode_service(value: Any, path: str) -> ServiceDescriptor:
    """Decode the value of the federation _service field."""
    payload = _as_object(value, path)
    return ServiceDescriptor(
        sdl=_read_optional(payload, "sdl", path, _as_string),
        extras=_read_extras(payload, _SERVICE_KEYS),
    )


def _decode_data(value: Any, path: str) -> ResponseData:
    """Decode the data member of the response."""
    payload = _as_object(value, path)
    return ResponseData(
        schema=_read_optional(payload, "__schema", path, _decode_schema),
        service=_read_optional(payload, "_service", path, _decode_service),
        extras=_read_extras(payload, _DATA_KEYS),
    )


def introspection_response_from_dict(payload: Any) -> IntrospectionResponse:
    """Build an IntrospectionResponse from an already-parsed JSON value.

    Args:
        payload: the parsed JSON response, normally a dict with "data" and optionally "errors"
                 and "extensions" keys.

    Returns:
        IntrospectionResponse describing the payload. The payload itself is not modified, though
        opaque values (errors, extensions, unknown keys) are shared with it.

    Raises:
        IntrospectionDecodeError: if the payload does not have the shape of an introspection
                                  response.
    """
    path = "<response>"
    response_payload = _as_object(payload, path)
    return IntrospectionResponse(
        errors=_read_optional(response_payload, "errors", path, _as_list_of(_as_object)),
        data=_read_optional(response_payload, "data", path, _decode_data),
        extensions=_read_optional(response_payload, "extensions", path, _opaque),
        extras=_read_extras(response_payload, _RESPONSE_KEYS),
    )


def decode_introspection_response(raw_payload: Union[bytes, str]) -> IntrospectionResponse:
    """Parse the raw JSON payload of an introspection response.

    Args:
        raw_payload: the response body as sent by the server. Bytes may be in any of the UTF
                     encodings allowed by JSON.

    Returns:
        IntrospectionResponse describing the payload.

    Raises:
        IntrospectionDecodeError: if the payload is not valid JSON, or does not have the shape of
                                  an introspection response.
    """
    try:
        payload = json.loads(raw_payload, parse_constant=_reject_non_finite_constant)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both subclasses of ValueError.
        raise IntrospectionDecodeError(f"Payload is not valid JSON: {e}") from e
    return introspection_response_from_dict(payload)


# ##########
# Encoding #
# ##########


def _write(
    result: Dict[str, Any],
    key: str,
    value: Omittable[Optional[T]],
    encode: Optional[Encoder[T]] = None,
) -> None:
    """Add the encoded value under the given key, unless the value is ABSENT."""
    if value is ABSENT:
        return
    if value is None or encode is None:
        result[key] = value
    else:
        result[key] = encode(value)


def _write_extras(result: Dict[str, Any], extras: Dict[str, Any]) -> None:
    """Add the unknown keys after the known ones, sorted by key, never overwriting a known key."""
    for key, value in sorted(extras.items()):
        if key in result:
            raise AssertionError(
                f'Unknown key "{key}" collides with a known key of the same object: {result}'
            )
        result[key] = value


def _list_of(encode_element: Encoder[T]) -> Encoder[List[T]]:
    """Return an encoder for a list whose elements are encoded with the given encoder."""

    def encode_list(values: List[T]) -> List[Any]:
        return [encode_element(value) for value in values]

    return encode_list


def _enum_token(value: Union[TypeKind, DirectiveLocation]) -> str:
    """Return the wire token of an introspection enum value, e.g. "NON_NULL"."""
    return value.name


def _encode_type(type_: IntrospectionType) -> Dict[str, Any]:
    """Encode a named type or a type reference."""
    result: Dict[str, Any] = {"kind": _enum_token(type_.kind)}
    _write(result, "name", type_.name)
    _write(result, "description", type_.description)
    _write(result, "fields", type_.fields, _list_of(_encode_field))
    _write(result, "inputFields", type_.input_fields, _list_of(_encode_input_value))
    _write(result, "interfaces", type_.interfaces, _list_of(_encode_type))
    _write(result, "enumValues", type_.enum_values, _list_of(_encode_enum_value))
    _write(result, "possibleTypes", type_.possible_types, _list_of(_encode_type))
    _write(result, "ofType", type_.of_type, _encode_type)
    _write_extras(result, type_.extras)
    return result


def _encode_field(field: Field) -> Dict[str, Any]:
    """Encode a field of an object or interface type."""
    result: Dict[str, Any] = {"name": field.name}
    _write(result, "description", field.description)
    _write(result, "args", field.args, _list_of(_encode_input_value))
    result["type"] = _encode_type(field.type)
    _write(result, "isDeprecated", field.is_deprecated)
    _write(result, "deprecationReason", field.deprecation_reason)
    _write_extras(result, field.extras)
    return result


def _encode_input_value(input_value: InputValue) -> Dict[str, Any]:
    """Encode an argument or an input field."""
    result: Dict[str, Any] = {"name": input_value.name}
    _write(result, "description", input_value.description)
    result["type"] = _encode_type(input_value.type)
    _write(result, "defaultValue", input_value.default_value)
    _write_extras(result, input_value.extras)
    return result


def _encode_enum_value(enum_value: EnumValue) -> Dict[str, Any]:
    """Encode one value of an enum type."""
    result: Dict[str, Any] = {"name": enum_value.name}
    _write(result, "description", enum_value.description)
    _write(result, "isDeprecated", enum_value.is_deprecated)
    _write(result, "deprecationReason", enum_value.deprecation_reason)
    _write_extras(result, enum_value.extras)
    return result


def _encode_directive(directive: Directive) -> Dict[str, Any]:
    """Encode a directive definition."""
    result: Dict[str, Any] = {"name": directive.name}
    _write(result, "description", directive.description)
    _write(result, "locations", directive.locations, _list_of(_enum_token))
    _write(result, "args", directive.args, _list_of(_encode_input_value))
    _write_extras(result, directive.extras)
    return result


def _encode_root_operation_type(root_operation_type: RootOperationType) -> Dict[str, Any]:
    """Encode the reference to a root operation type."""
    result: Dict[str, Any] = {}
    _write(result, "name", root_operation_type.name)
    _write(result, "kind", root_operation_type.kind, _enum_token)
    _write_extras(result, root_operation_type.extras)
    return result


def _encode_schema(schema: IntrospectionSchema) -> Dict[str, Any]:
    """Encode the value of the __schema meta-field."""
    result: Dict[str, Any] = {}
    _write(result, "queryType", schema.query_type, _encode_root_operation_type)
    _write(result, "mutationType", schema.mutation_type, _encode_root_operation_type)
    _write(result, "subscriptionType", schema.subscription_type, _encode_root_operation_type)
    _write(result, "types", schema.types, _list_of(_encode_type))
    _write(result, "directives", schema.directives, _list_of(_encode_directive))
    _write_extras(result, schema.extras)
    return result


def _encode_service(service: ServiceDescriptor) -> Dict[str, Any]:
    """Encode the value of the federation _service field."""
    result: Dict[str, Any] = {}
    _write(result, "sdl", service.sdl)
    _write_extras(result, service.extras)
    return result


def _encode_data(data: ResponseData) -> Dict[str, Any]:
    """Encode the data member of the response."""
    result: Dict[str, Any] = {}
    _write(result, "__schema", data.schema, _encode_schema)
    _write(result, "_service", data.service, _encode_service)
    _write_extras(result, data.extras)
    return result


def introspection_response_to_dict(response: IntrospectionResponse) -> Dict[str, Any]:
    """Convert an IntrospectionResponse into the JSON-compatible dict it was decoded from."""
    result: Dict[str, Any] = {}
    _write(result, "errors", response.errors)
    _write(result, "data", response.data, _encode_data)
    _write(result, "extensions", response.extensions)
    _write_extras(result, response.extras)
    return result


def encode_json_value(value: Any, indent: Optional[int] = None) -> bytes:
    """Serialize a JSON-compatible value as UTF-8 bytes, compactly unless an indent is given."""
    separators = (",", ":") if indent is None else (",", ": ")
    try:
        text = json.dumps(
            value, ensure_ascii=False, allow_nan=False, indent=indent, separators=separators
        )
        # Lone surrogates such as "\ud800" are valid JSON escapes but cannot be encoded.
        return text.encode("utf-8")
    except (TypeError, ValueError) as e:
        raise IntrospectionEncodeError(f"Could not serialize the value to JSON: {e}") from e


def encode_introspection_response(
    response: IntrospectionResponse, indent: Optional[int] = None
) -> bytes:
    """Serialize an IntrospectionResponse to JSON.

    Args:
        response: the response to serialize.
        indent: if None, the output is compact. Otherwise, the output is pretty-printed with
                the given number of spaces per nesting level, which is friendlier to line-based
                diffing tools.

    Returns:
        the UTF-8 encoded JSON, with non-ASCII characters written as-is.

    Raises:
        IntrospectionEncodeError: if the response contains values that cannot be represented
                                  in strict JSON.
    """
    return encode_json_value(introspection_response_to_dict(response), indent=indent)
